"""IR tests: shape, re-serialization and invariants."""

import dataclasses

import pytest

from pycomp2iter import parse
from pycomp2iter._ir import Expression, ForIfClause, Name, Pattern

FRAGMENTS = [
    "x * 2 for x in xs if x > 0",
    "x / y for x, y in mylist if y != 0",
    "x + y for x in [1,2] for y in [10,20]",
    "(a, b, c) for a, b in s1 if a if b for c in s2 for d in s3 if d",
]


class TestShape:
    def test_single_clause(self):
        assert parse("x * 2 for x in xs if x > 0").shape() == ((1, 1),)

    def test_multiple_clauses(self):
        c = parse("(a, b, c) for a, b in s1 if a if b for c in s2 for d in s3 if d")
        assert c.shape() == ((2, 2), (1, 0), (1, 1))

    @pytest.mark.parametrize("fragment", FRAGMENTS)
    def test_never_empty(self, fragment):
        assert len(parse(fragment).clauses) >= 1


class TestToSource:
    def test_canonical_form(self):
        c = parse("x/y   for x,y in  mylist if y != 0")
        assert c.to_source() == "x/y for x, y in mylist if y != 0"

    @pytest.mark.parametrize("fragment", FRAGMENTS)
    def test_reparse_gives_equal_ir(self, fragment):
        c = parse(fragment)
        again = parse(c.to_source())
        assert again == c
        assert again.shape() == c.shape()

    def test_clause_to_source(self):
        clause = ForIfClause(
            pattern=Pattern((Name("k"), Name("v"))),
            sequence=Expression("d.items()"),
            filters=(Expression("v"),),
        )
        assert clause.to_source() == "for k, v in d.items() if v"


class TestImmutability:
    def test_nodes_are_frozen(self):
        c = parse("x for x in xs")
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.mapping = Expression("y")

    def test_collections_are_tuples(self):
        c = parse("x for x in xs if x")
        assert isinstance(c.clauses, tuple)
        assert isinstance(c.clauses[0].filters, tuple)
        assert isinstance(c.clauses[0].pattern.names, tuple)
