"""Abstract base class for code generation targets."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from io import StringIO

from pycomp2iter._ir import Expression, ForIfClause, Pattern


class TargetName(enum.StrEnum):
    PYTHON = "python"
    RUST = "rust"
    JAVASCRIPT = "javascript"


class Target(ABC):
    """Abstract base class defining the target language interface.

    All target-syntax-specific code lives behind this interface. The parser
    asks a target whether names and opaque expressions are acceptable; the
    emitter asks it to write one iterator stage per for-if clause.
    """

    name: TargetName

    char_literals = False
    """Whether single quotes delimit char literals and lifetimes, not strings."""

    # --- Host expression grammar ---

    @abstractmethod
    def is_valid_name(self, name: str) -> bool:
        """Whether ``name`` can be bound by a pattern in this language."""

    def check_expression(self, source: str) -> None:
        """Validate an opaque sub-expression.

        The default accepts any bracket-balanced token run and leaves
        validation to the downstream compiler.

        Raises:
            SyntaxError: If the text is not a valid expression.
            ValueError: If the text cannot be handed to the checker at all.
        """

    # --- Stages ---

    @abstractmethod
    def write_pattern(self, w: StringIO, pattern: Pattern) -> None: ...

    @abstractmethod
    def write_guard(self, w: StringIO, filters: tuple[Expression, ...]) -> None: ...

    @abstractmethod
    def write_stage(
        self, w: StringIO, clause: ForIfClause, body: str, *, innermost: bool
    ) -> None:
        """Write one flat-mapping stage over ``clause.sequence``.

        ``body`` is the mapping expression when ``innermost`` is true, and
        the already emitted inner stage otherwise. Elements whose guard fails
        contribute nothing; the others contribute ``body`` (innermost) or
        every item ``body`` yields.
        """

    def wrap_pipeline(self, w: StringIO, pipeline: str) -> None:
        """Write the complete pipeline once all stages are emitted.

        Targets that bind helper names around the stages override this; the
        default writes ``pipeline`` unchanged.
        """
        w.write(pipeline)
