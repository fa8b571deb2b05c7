"""Python target: a lazy itertools pipeline.

``x * 2 for x in xs if x > 0`` becomes::

    (lambda __comp_chain, __comp_map, __comp_starmap:
        __comp_chain(__comp_map(lambda x: ((x * 2),) if (x > 0) else (), (xs)))
    )(itertools.chain.from_iterable, map, itertools.starmap)

The stages call the pipeline functions through the wrapper's parameters, so a
pattern or a mapping that binds ``map`` or ``itertools`` cannot shadow them.
Multi-name patterns bind through ``itertools.starmap``, which unpacks each
element positionally into the lambda's parameters.
"""

from __future__ import annotations

import ast
import keyword
from io import StringIO

from pycomp2iter._ir import Expression, ForIfClause, Pattern
from pycomp2iter.target._base import Target, TargetName

RESERVED_PREFIX = "__comp_"

_CHAIN = RESERVED_PREFIX + "chain"
_MAP = RESERVED_PREFIX + "map"
_STARMAP = RESERVED_PREFIX + "starmap"


class PythonTarget(Target):
    """Python code generation target.

    Args:
        itertools_name: Expression naming the ``itertools`` module where the
            pipeline is evaluated.
        builtins_name: Expression naming the ``builtins`` module. When unset,
            ``map`` is looked up by its bare name.
    """

    name = TargetName.PYTHON

    def __init__(
        self, itertools_name: str = "itertools", builtins_name: str | None = None
    ) -> None:
        self.itertools_name = itertools_name
        self.builtins_name = builtins_name

    def is_valid_name(self, name: str) -> bool:
        return (
            name.isidentifier()
            and not keyword.iskeyword(name)
            and not name.startswith(RESERVED_PREFIX)
        )

    def check_expression(self, source: str) -> None:
        # Emitted code always parenthesizes sub-expressions, so line breaks
        # inside the fragment are legal.
        ast.parse(f"({source})", mode="eval")

    def write_pattern(self, w: StringIO, pattern: Pattern) -> None:
        w.write(", ".join(name.value for name in pattern.names))

    def write_guard(self, w: StringIO, filters: tuple[Expression, ...]) -> None:
        if not filters:
            w.write("True")
            return
        w.write(" and ".join(f"({f.text})" for f in filters))

    def write_stage(
        self, w: StringIO, clause: ForIfClause, body: str, *, innermost: bool
    ) -> None:
        w.write(f"{_CHAIN}(")
        w.write(f"{_STARMAP}(" if clause.pattern.is_destructuring else f"{_MAP}(")
        w.write("lambda ")
        self.write_pattern(w, clause.pattern)
        w.write(": ")
        if innermost:
            w.write(f"(({body}),)")
        else:
            w.write(f"({body})")
        if clause.filters:
            w.write(" if ")
            self.write_guard(w, clause.filters)
            w.write(" else ()")
        w.write(f", ({clause.sequence.text})))")

    def wrap_pipeline(self, w: StringIO, pipeline: str) -> None:
        it = self.itertools_name
        map_ref = "map" if self.builtins_name is None else f"{self.builtins_name}.map"
        w.write(f"(lambda {_CHAIN}, {_MAP}, {_STARMAP}: {pipeline})")
        w.write(f"({it}.chain.from_iterable, {map_ref}, {it}.starmap)")
