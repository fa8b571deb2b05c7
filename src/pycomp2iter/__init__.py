"""pycomp2iter - Translate comprehension syntax into lazy iterator pipelines."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycomp2iter")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0.dev0"

import builtins
import itertools
import sys
from collections.abc import Iterator
from typing import Any

from pycomp2iter._emitter import Emitter
from pycomp2iter._errors import (
    ComprehensionSyntaxError,
    InputTooLongError,
    InvalidTokenError,
    MalformedClause,
    MalformedComprehension,
    MalformedPattern,
    MaxClausesExceededError,
    MissingForClause,
    TrailingInput,
    TranslationError,
)
from pycomp2iter._ir import (
    Comprehension,
    Expression,
    ForIfClause,
    Name,
    Pattern,
    SourcePosition,
)
from pycomp2iter._parser import Parser
from pycomp2iter.target import (
    JavaScriptTarget,
    PythonTarget,
    RustTarget,
    Target,
    get_target,
)

__all__ = [
    "comp",
    "emit",
    "get_target",
    "parse",
    "translate",
    "Comprehension",
    "Expression",
    "ForIfClause",
    "Name",
    "Pattern",
    "SourcePosition",
    "ComprehensionSyntaxError",
    "InputTooLongError",
    "InvalidTokenError",
    "MalformedClause",
    "MalformedComprehension",
    "MalformedPattern",
    "MaxClausesExceededError",
    "MissingForClause",
    "TrailingInput",
    "TranslationError",
    "Target",
    "JavaScriptTarget",
    "PythonTarget",
    "RustTarget",
]

_ITERTOOLS_ALIAS = "__pycomp2iter_itertools__"
_BUILTINS_ALIAS = "__pycomp2iter_builtins__"


def _resolve_target(target: Target | str | None) -> Target:
    if target is None:
        return PythonTarget()
    if isinstance(target, str):
        return get_target(target)
    return target


def parse(
    fragment: str,
    *,
    target: Target | str | None = None,
    max_clauses: int | None = None,
    max_input_length: int | None = None,
) -> Comprehension:
    """Parse a comprehension fragment into its IR.

    Args:
        fragment: The text between the comprehension's delimiters, e.g.
            ``"x * 2 for x in xs if x > 0"``.
        target: Target language of the sub-expressions. Defaults to Python.
        max_clauses: Maximum number of for-if clauses. Defaults to 64.
        max_input_length: Maximum fragment length. Defaults to 100000.

    Returns:
        The Comprehension IR.

    Raises:
        ComprehensionSyntaxError: If the fragment is not a valid comprehension.
        TranslationError: If a resource limit is exceeded.
    """
    kwargs: dict[str, Any] = {}
    if max_clauses is not None:
        kwargs["max_clauses"] = max_clauses
    if max_input_length is not None:
        kwargs["max_input_length"] = max_input_length

    parser = Parser(_resolve_target(target), **kwargs)
    return parser.parse(fragment)


def emit(comprehension: Comprehension, *, target: Target | str | None = None) -> str:
    """Generate a target iterator-pipeline expression from a Comprehension."""
    return Emitter(_resolve_target(target)).emit(comprehension)


def translate(
    fragment: str,
    *,
    target: Target | str | None = None,
    max_clauses: int | None = None,
    max_input_length: int | None = None,
) -> str:
    """Translate a comprehension fragment into a target expression.

    Args:
        fragment: The text between the comprehension's delimiters.
        target: Target language. Defaults to Python.
        max_clauses: Maximum number of for-if clauses. Defaults to 64.
        max_input_length: Maximum fragment length. Defaults to 100000.

    Returns:
        A single expression in the target language that lazily yields the
        mapped values in nested-loop order.

    Raises:
        ComprehensionSyntaxError: If the fragment is not a valid comprehension.
        TranslationError: If a resource limit is exceeded.
    """
    resolved = _resolve_target(target)
    comprehension = parse(
        fragment,
        target=resolved,
        max_clauses=max_clauses,
        max_input_length=max_input_length,
    )
    return Emitter(resolved).emit(comprehension)


def comp(
    fragment: str, namespace: dict[str, Any] | None = None, /, **names: Any
) -> Iterator[Any]:
    """Translate a fragment to Python and evaluate the resulting pipeline.

    Names are resolved in ``namespace`` when given, otherwise in the
    caller's globals and locals; keyword arguments override both.

    The caller's scope is copied into one mapping when ``comp`` is called,
    with locals taking precedence over globals. The pipeline is lazy, but
    it reads that snapshot: assignments the caller makes afterwards are not
    seen, while mutations of objects already bound are. ``itertools`` and
    ``map`` are bound under private aliases, so user names never shadow
    them.

    Example:
        >>> list(comp("x * 2 for x in xs if x > 0", xs=[-1, 2, -3, 4]))
        [4, 8]

    Raises:
        ComprehensionSyntaxError: If the fragment is not a valid comprehension.
    """
    code = translate(
        fragment,
        target=PythonTarget(
            itertools_name=_ITERTOOLS_ALIAS, builtins_name=_BUILTINS_ALIAS
        ),
    )
    if namespace is None:
        frame = sys._getframe(1)
        try:
            scope = {**frame.f_globals, **frame.f_locals}
        finally:
            del frame
    else:
        scope = dict(namespace)
    scope.update(names)
    scope[_ITERTOOLS_ALIAS] = itertools
    scope[_BUILTINS_ALIAS] = builtins
    return eval(compile(code, "<comprehension>", "eval"), scope)
