"""Exception hierarchy for comprehension translation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pycomp2iter._ir import SourcePosition


class TranslationError(Exception):
    """Base exception for comprehension translation errors.

    Provides dual messaging: a short user-facing message and internal
    details (offending token text, expression checker output) for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
        position: SourcePosition | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped
        self.position = position

    def internal(self) -> str:
        return self.internal_details


class ComprehensionSyntaxError(TranslationError):
    """Base class for errors raised while recognizing a fragment."""


class MalformedComprehension(ComprehensionSyntaxError):
    """Raised when the mapping expression is missing or unparsable."""


class MissingForClause(ComprehensionSyntaxError):
    """Raised when no for-if clause follows the mapping."""


class MalformedPattern(ComprehensionSyntaxError):
    """Raised when 'for' is not followed by a comma-separated name list."""


class MalformedClause(ComprehensionSyntaxError):
    """Raised when 'in', the sequence, or an 'if' predicate is missing or invalid."""


class TrailingInput(ComprehensionSyntaxError):
    """Raised when input remains after a complete comprehension."""


class InvalidTokenError(ComprehensionSyntaxError):
    """Raised when the fragment contains a character no token accepts."""


class InputTooLongError(TranslationError):
    """Raised when the fragment exceeds the input length limit."""


class MaxClausesExceededError(TranslationError):
    """Raised when a comprehension chains too many for-if clauses."""


# Sanitized user-facing error message constants
ERR_MSG_MISSING_MAPPING = "expected a mapping expression"
ERR_MSG_INVALID_MAPPING = "invalid mapping expression"
ERR_MSG_MISSING_FOR = "expected at least one 'for' clause"
ERR_MSG_UNEXPECTED_AFTER_MAPPING = "unexpected token after mapping expression"
ERR_MSG_INVALID_PATTERN = "expected a name in 'for' pattern"
ERR_MSG_MISSING_IN = "expected 'in' after 'for' pattern"
ERR_MSG_MISSING_SEQUENCE = "expected a sequence expression after 'in'"
ERR_MSG_INVALID_SEQUENCE = "invalid sequence expression"
ERR_MSG_MISSING_CONDITION = "expected a condition after 'if'"
ERR_MSG_INVALID_CONDITION = "invalid condition expression"
ERR_MSG_UNBALANCED_BRACKETS = "unbalanced brackets"
ERR_MSG_TRAILING_INPUT = "unexpected input after comprehension"
ERR_MSG_INVALID_TOKEN = "invalid token"
ERR_MSG_INPUT_TOO_LONG = "comprehension fragment too long"
ERR_MSG_TOO_MANY_CLAUSES = "too many 'for' clauses"
