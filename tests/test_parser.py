"""Parser tests: fragment -> Comprehension IR."""

import pytest

from pycomp2iter import parse
from pycomp2iter._ir import (
    Comprehension,
    Expression,
    ForIfClause,
    Name,
    Pattern,
    SourcePosition,
)


class TestSingleClause:
    def test_mapping_filter_and_sequence(self):
        c = parse("x * 2 for x in xs if x > 0")
        assert c == Comprehension(
            mapping=Expression("x * 2"),
            clauses=(
                ForIfClause(
                    pattern=Pattern((Name("x"),)),
                    sequence=Expression("xs"),
                    filters=(Expression("x > 0"),),
                ),
            ),
        )

    def test_no_filters(self):
        c = parse("x for x in xs")
        assert c.clauses[0].filters == ()

    def test_multiple_filters_keep_order(self):
        c = parse("x for x in xs if a if b if c")
        assert [f.text for f in c.clauses[0].filters] == ["a", "b", "c"]

    def test_destructuring_pattern(self):
        c = parse("x / y for x, y in mylist if y != 0")
        pattern = c.clauses[0].pattern
        assert [n.value for n in pattern.names] == ["x", "y"]
        assert pattern.arity == 2
        assert pattern.is_destructuring

    def test_single_name_pattern_is_not_destructuring(self):
        assert not parse("x for x in xs").clauses[0].pattern.is_destructuring

    def test_three_name_pattern(self):
        c = parse("a + b + c for a, b, c in triples")
        assert c.clauses[0].pattern.arity == 3


class TestMultipleClauses:
    def test_clause_order(self):
        c = parse("x + y for x in [1,2] for y in [10,20]")
        assert [cl.pattern.names[0].value for cl in c.clauses] == ["x", "y"]
        assert [cl.sequence.text for cl in c.clauses] == ["[1,2]", "[10,20]"]

    def test_filters_attach_to_their_clause(self):
        c = parse("(x, y) for x in xs if x for y in ys if y if x != y")
        assert [f.text for f in c.clauses[0].filters] == ["x"]
        assert [f.text for f in c.clauses[1].filters] == ["y", "x != y"]

    def test_inner_sequence_may_use_outer_binding(self):
        c = parse("y for row in rows for y in row")
        assert c.clauses[1].sequence.text == "row"


class TestOpaqueExpressions:
    def test_text_is_verbatim(self):
        c = parse("f( a ,b )  for x in  g(xs)[1:]  if  x.ok")
        assert c.mapping.text == "f( a ,b )"
        assert c.clauses[0].sequence.text == "g(xs)[1:]"
        assert c.clauses[0].filters[0].text == "x.ok"

    def test_conditional_expression_in_mapping(self):
        c = parse("a if x else b for x in xs")
        assert c.mapping.text == "a if x else b"

    def test_membership_test_in_filter(self):
        c = parse("x for x in xs if x in allowed")
        assert c.clauses[0].filters[0].text == "x in allowed"

    def test_membership_test_in_sequence(self):
        c = parse("x for x in a in b")
        assert c.clauses[0].sequence.text == "a in b"

    def test_keywords_inside_brackets_are_opaque(self):
        c = parse("[y for y in x if y] for x in (a if c else b)")
        assert c.mapping.text == "[y for y in x if y]"
        assert c.clauses[0].sequence.text == "(a if c else b)"
        assert len(c.clauses) == 1

    def test_keywords_inside_strings_are_opaque(self):
        c = parse("'for x in y' for x in xs if x != \"if\"")
        assert c.mapping.text == "'for x in y'"
        assert c.clauses[0].filters[0].text == 'x != "if"'

    def test_multiline_fragment(self):
        c = parse("(x\n + 1)\nfor x in xs\nif x")
        assert c.mapping.text == "(x\n + 1)"
        assert c.clauses[0].filters[0].text == "x"

    def test_lambda_in_mapping(self):
        c = parse("lambda: x for x in xs")
        assert c.mapping.text == "lambda: x"

    def test_names_starting_with_keywords(self):
        c = parse("format for format in inputs if iffy")
        assert c.mapping.text == "format"
        assert c.clauses[0].pattern.names[0].value == "format"
        assert c.clauses[0].sequence.text == "inputs"
        assert c.clauses[0].filters[0].text == "iffy"


class TestPositions:
    def test_expression_positions(self):
        c = parse("x * 2 for x in xs if x > 0")
        assert c.mapping.position == SourcePosition(0, 1, 1)
        assert c.clauses[0].sequence.position == SourcePosition(15, 1, 16)
        assert c.clauses[0].filters[0].position == SourcePosition(21, 1, 22)

    def test_name_positions(self):
        c = parse("x for a, b in xs")
        assert [n.position.column for n in c.clauses[0].pattern.names] == [7, 10]

    def test_positions_across_lines(self):
        c = parse("x\nfor x in xs")
        assert c.clauses[0].sequence.position == SourcePosition(11, 2, 10)

    def test_positions_do_not_affect_equality(self):
        assert parse("x for x in xs") == parse("x   for   x   in   xs")


class TestTargets:
    def test_rust_expressions_are_not_checked_as_python(self):
        c = parse("x as f64 for x in xs.iter() if *x > 0", target="rust")
        assert c.mapping.text == "x as f64"
        assert c.clauses[0].filters[0].text == "*x > 0"

    def test_javascript_target_by_instance(self, js_target):
        c = parse("x ?? 0 for x in xs", target=js_target)
        assert c.mapping.text == "x ?? 0"

    def test_python_soft_keywords_are_names(self):
        c = parse("match for match, case in pairs")
        assert [n.value for n in c.clauses[0].pattern.names] == ["match", "case"]
