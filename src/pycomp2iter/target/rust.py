"""Rust target: ``IntoIterator`` + ``flat_map`` + ``bool::then``."""

from __future__ import annotations

import re
from io import StringIO

from pycomp2iter._ir import Expression, ForIfClause, Pattern
from pycomp2iter.target._base import Target, TargetName

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RESERVED_RUST_KEYWORDS: set[str] = {
    "abstract", "as", "async", "await", "become", "box", "break", "const",
    "continue", "crate", "do", "dyn", "else", "enum", "extern", "false",
    "final", "fn", "for", "gen", "if", "impl", "in", "let", "loop", "macro",
    "match", "mod", "move", "mut", "override", "priv", "pub", "ref",
    "return", "self", "Self", "static", "struct", "super", "trait", "true",
    "try", "type", "typeof", "unsafe", "unsized", "use", "virtual", "where",
    "while", "yield",
}


class RustTarget(Target):
    """Rust code generation target.

    Innermost stages flat-map over ``Option`` (the value of ``guard.then``);
    outer stages flatten the optional inner iterator.
    """

    name = TargetName.RUST
    char_literals = True

    def is_valid_name(self, name: str) -> bool:
        return bool(IDENTIFIER_RE.match(name)) and name not in RESERVED_RUST_KEYWORDS

    def write_pattern(self, w: StringIO, pattern: Pattern) -> None:
        names = ", ".join(name.value for name in pattern.names)
        if pattern.is_destructuring:
            w.write(f"({names})")
        else:
            w.write(names)

    def write_guard(self, w: StringIO, filters: tuple[Expression, ...]) -> None:
        if not filters:
            w.write("true")
        elif len(filters) == 1:
            w.write(f"({filters[0].text})")
        else:
            w.write("(" + " && ".join(f"({f.text})" for f in filters) + ")")

    def write_stage(
        self, w: StringIO, clause: ForIfClause, body: str, *, innermost: bool
    ) -> None:
        w.write(f"::core::iter::IntoIterator::into_iter({clause.sequence.text})")
        w.write(".flat_map(move |")
        self.write_pattern(w, clause.pattern)
        w.write("| ")
        self.write_guard(w, clause.filters)
        w.write(f".then(|| {{ {body} }})")
        if not innermost:
            w.write(".into_iter().flatten()")
        w.write(")")
