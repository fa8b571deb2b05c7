"""Emitter: Comprehension IR -> one target iterator-pipeline expression."""

from __future__ import annotations

import logging
from io import StringIO

from pycomp2iter._ir import Comprehension
from pycomp2iter.target._base import Target

logger = logging.getLogger(__name__)


class Emitter:
    """Lowers a Comprehension into nested flat-mapping stages.

    The clauses are folded from the innermost (rightmost) to the outermost
    with an explicit accumulator, so the call depth does not grow with the
    number of clauses.
    """

    def __init__(self, target: Target) -> None:
        self._target = target

    def emit(self, comprehension: Comprehension) -> str:
        body = comprehension.mapping.text
        innermost = True
        for clause in reversed(comprehension.clauses):
            w = StringIO()
            self._target.write_stage(w, clause, body, innermost=innermost)
            body = w.getvalue()
            innermost = False
        w = StringIO()
        self._target.wrap_pipeline(w, body)
        body = w.getvalue()
        logger.debug(
            "emitted %d stage(s) for target %s (%d characters)",
            len(comprehension.clauses),
            self._target.name,
            len(body),
        )
        return body
