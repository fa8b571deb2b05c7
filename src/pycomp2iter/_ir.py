"""Intermediate representation of a parsed comprehension.

The IR is a pure tree of frozen dataclasses. Source positions are carried
for diagnostics but excluded from equality, so two fragments with the same
structure and the same sub-expression text compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pycomp2iter._constants import KEYWORD_FOR, KEYWORD_IF, KEYWORD_IN


@dataclass(frozen=True)
class SourcePosition:
    """Location inside a fragment: 0-based offset, 1-based line and column."""

    offset: int = 0
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class Name:
    """A binding identifier, pasted verbatim into emitted code."""

    value: str
    position: SourcePosition = field(default_factory=SourcePosition, compare=False)

    def to_source(self) -> str:
        return self.value


@dataclass(frozen=True)
class Expression:
    """An opaque sub-expression in the target language."""

    text: str
    position: SourcePosition = field(default_factory=SourcePosition, compare=False)

    def to_source(self) -> str:
        return self.text


@dataclass(frozen=True)
class Pattern:
    """Binding target for one iteration step."""

    names: tuple[Name, ...]

    @property
    def arity(self) -> int:
        return len(self.names)

    @property
    def is_destructuring(self) -> bool:
        """True when each element is decomposed positionally."""
        return len(self.names) > 1

    def to_source(self) -> str:
        return ", ".join(name.value for name in self.names)


@dataclass(frozen=True)
class ForIfClause:
    """One generator stage: pattern, iterated sequence and filter predicates."""

    pattern: Pattern
    sequence: Expression
    filters: tuple[Expression, ...] = ()

    def to_source(self) -> str:
        parts = [
            KEYWORD_FOR,
            self.pattern.to_source(),
            KEYWORD_IN,
            self.sequence.to_source(),
        ]
        for condition in self.filters:
            parts.append(KEYWORD_IF)
            parts.append(condition.to_source())
        return " ".join(parts)


@dataclass(frozen=True)
class Comprehension:
    """Root node: a mapping expression plus one or more for-if clauses.

    Clause order is significant; the leftmost clause is the outermost loop.
    """

    mapping: Expression
    clauses: tuple[ForIfClause, ...]

    def shape(self) -> tuple[tuple[int, int], ...]:
        """Return ``(pattern arity, filter count)`` for each clause."""
        return tuple((c.pattern.arity, len(c.filters)) for c in self.clauses)

    def to_source(self) -> str:
        return " ".join(
            [self.mapping.to_source()] + [c.to_source() for c in self.clauses]
        )
