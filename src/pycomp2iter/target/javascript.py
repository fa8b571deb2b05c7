"""JavaScript target: ES2025 iterator helpers.

``Iterator.from`` wraps any iterable and ``flatMap`` stays lazy, so the
emitted pipeline never materializes an intermediate array.
"""

from __future__ import annotations

import re
from io import StringIO

from pycomp2iter._ir import Expression, ForIfClause, Pattern
from pycomp2iter.target._base import Target, TargetName

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

RESERVED_JS_WORDS: set[str] = {
    "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "enum", "export",
    "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null",
    "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var",
    "void", "while", "with", "yield",
}


class JavaScriptTarget(Target):
    """JavaScript code generation target."""

    name = TargetName.JAVASCRIPT

    def is_valid_name(self, name: str) -> bool:
        return bool(IDENTIFIER_RE.match(name)) and name not in RESERVED_JS_WORDS

    def write_pattern(self, w: StringIO, pattern: Pattern) -> None:
        names = ", ".join(name.value for name in pattern.names)
        if pattern.is_destructuring:
            w.write(f"([{names}])")
        else:
            w.write(f"({names})")

    def write_guard(self, w: StringIO, filters: tuple[Expression, ...]) -> None:
        if not filters:
            w.write("true")
            return
        w.write(" && ".join(f"({f.text})" for f in filters))

    def write_stage(
        self, w: StringIO, clause: ForIfClause, body: str, *, innermost: bool
    ) -> None:
        w.write(f"Iterator.from({clause.sequence.text}).flatMap(")
        self.write_pattern(w, clause.pattern)
        w.write(" => ")
        inner = f"[({body})]" if innermost else body
        if clause.filters:
            self.write_guard(w, clause.filters)
            w.write(f" ? {inner} : []")
        else:
            w.write(inner)
        w.write(")")
