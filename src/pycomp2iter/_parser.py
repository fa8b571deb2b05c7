"""Parser: comprehension fragment -> Comprehension IR.

Grammar::

    comprehension  := mapping for_if_clause+
    mapping        := expression
    for_if_clause  := 'for' pattern 'in' sequence ('if' expression)*
    pattern        := name (',' name)*
    sequence       := expression

Expressions are opaque. Their extent is found by bracket-aware scanning: the
mapping runs up to the first top-level ``for``, a sequence or condition up to
the next top-level ``for`` or ``if``. The text is then handed to the
target's expression checker.
"""

from __future__ import annotations

import logging

from lark import Token

from pycomp2iter._constants import (
    BRACKET_PAIRS,
    DEFAULT_MAX_CLAUSES,
    DEFAULT_MAX_INPUT_LENGTH,
    GRAMMAR_KEYWORDS,
    KEYWORD_FOR,
    KEYWORD_IF,
    KEYWORD_IN,
)
from pycomp2iter._errors import (
    ERR_MSG_INPUT_TOO_LONG,
    ERR_MSG_INVALID_CONDITION,
    ERR_MSG_INVALID_MAPPING,
    ERR_MSG_INVALID_PATTERN,
    ERR_MSG_INVALID_SEQUENCE,
    ERR_MSG_MISSING_CONDITION,
    ERR_MSG_MISSING_FOR,
    ERR_MSG_MISSING_IN,
    ERR_MSG_MISSING_MAPPING,
    ERR_MSG_MISSING_SEQUENCE,
    ERR_MSG_TOO_MANY_CLAUSES,
    ERR_MSG_TRAILING_INPUT,
    ERR_MSG_UNBALANCED_BRACKETS,
    ERR_MSG_UNEXPECTED_AFTER_MAPPING,
    ComprehensionSyntaxError,
    InputTooLongError,
    MalformedClause,
    MalformedComprehension,
    MalformedPattern,
    MaxClausesExceededError,
    MissingForClause,
    TrailingInput,
)
from pycomp2iter._ir import Comprehension, Expression, ForIfClause, Name, Pattern
from pycomp2iter._lexer import TokenStream, token_position, tokenize
from pycomp2iter.target._base import Target

logger = logging.getLogger(__name__)


def _describe(token: Token | None) -> str:
    return "end of input" if token is None else repr(token.value)


class Parser:
    """Recognizes the comprehension grammar for one target language."""

    def __init__(
        self,
        target: Target,
        max_clauses: int = DEFAULT_MAX_CLAUSES,
        max_input_length: int = DEFAULT_MAX_INPUT_LENGTH,
    ) -> None:
        self._target = target
        self._max_clauses = max_clauses
        self._max_input_length = max_input_length

    def parse(self, source: str) -> Comprehension:
        """Parse a fragment (without its enclosing delimiters).

        Raises:
            ComprehensionSyntaxError: If the fragment is not a comprehension.
            InputTooLongError: If the fragment exceeds ``max_input_length``.
            MaxClausesExceededError: If it has more than ``max_clauses`` clauses.
        """
        if len(source) > self._max_input_length:
            raise InputTooLongError(
                ERR_MSG_INPUT_TOO_LONG,
                f"fragment length {len(source)} exceeds limit {self._max_input_length}",
            )
        stream = TokenStream(source, tokenize(source, char_literals=self._target.char_literals))

        mapping = self._parse_mapping(stream)
        if not stream.at_keyword(KEYWORD_FOR):
            if stream.exhausted:
                raise MissingForClause(
                    ERR_MSG_MISSING_FOR,
                    f"no 'for' clause after mapping {mapping.text!r}",
                    position=stream.position(),
                )
            raise MalformedComprehension(
                ERR_MSG_UNEXPECTED_AFTER_MAPPING,
                f"expected 'for' at {stream.position()}, found {_describe(stream.peek())}",
                position=stream.position(),
            )

        clauses: list[ForIfClause] = []
        while stream.at_keyword(KEYWORD_FOR):
            if len(clauses) >= self._max_clauses:
                raise MaxClausesExceededError(
                    ERR_MSG_TOO_MANY_CLAUSES,
                    f"clause count exceeds limit {self._max_clauses}",
                    position=stream.position(),
                )
            clauses.append(self._parse_for_if_clause(stream))

        if not stream.exhausted:
            raise TrailingInput(
                ERR_MSG_TRAILING_INPUT,
                f"unexpected {_describe(stream.peek())} at {stream.position()}",
                position=stream.position(),
            )

        logger.debug("parsed comprehension with %d clause(s)", len(clauses))
        return Comprehension(mapping=mapping, clauses=tuple(clauses))

    def _parse_mapping(self, stream: TokenStream) -> Expression:
        return self._parse_expression(
            stream,
            stops=(KEYWORD_FOR,),
            error_cls=MalformedComprehension,
            missing_message=ERR_MSG_MISSING_MAPPING,
            invalid_message=ERR_MSG_INVALID_MAPPING,
        )

    def _parse_for_if_clause(self, stream: TokenStream) -> ForIfClause:
        stream.advance()  # 'for'
        pattern = self._parse_pattern(stream)

        if not stream.at_keyword(KEYWORD_IN):
            raise MalformedClause(
                ERR_MSG_MISSING_IN,
                f"expected 'in' at {stream.position()}, found {_describe(stream.peek())}",
                position=stream.position(),
            )
        stream.advance()

        sequence = self._parse_expression(
            stream,
            stops=(KEYWORD_FOR, KEYWORD_IF),
            error_cls=MalformedClause,
            missing_message=ERR_MSG_MISSING_SEQUENCE,
            invalid_message=ERR_MSG_INVALID_SEQUENCE,
        )

        filters: list[Expression] = []
        while stream.at_keyword(KEYWORD_IF):
            stream.advance()
            filters.append(
                self._parse_expression(
                    stream,
                    stops=(KEYWORD_FOR, KEYWORD_IF),
                    error_cls=MalformedClause,
                    missing_message=ERR_MSG_MISSING_CONDITION,
                    invalid_message=ERR_MSG_INVALID_CONDITION,
                )
            )

        logger.debug(
            "parsed clause 'for %s in %s' with %d filter(s)",
            pattern.to_source(),
            sequence.text,
            len(filters),
        )
        return ForIfClause(pattern=pattern, sequence=sequence, filters=tuple(filters))

    def _parse_pattern(self, stream: TokenStream) -> Pattern:
        names = [self._parse_name(stream)]
        while stream.at_comma():
            stream.advance()
            names.append(self._parse_name(stream))
        return Pattern(names=tuple(names))

    def _parse_name(self, stream: TokenStream) -> Name:
        token = stream.peek()
        if (
            token is None
            or token.type != "NAME"
            or token.value in GRAMMAR_KEYWORDS
            or not self._target.is_valid_name(token.value)
        ):
            raise MalformedPattern(
                ERR_MSG_INVALID_PATTERN,
                f"expected a {self._target.name} name at {stream.position()}, "
                f"found {_describe(token)}",
                position=stream.position(),
            )
        stream.advance()
        return Name(value=token.value, position=token_position(token))

    def _parse_expression(
        self,
        stream: TokenStream,
        stops: tuple[str, ...],
        error_cls: type[ComprehensionSyntaxError],
        missing_message: str,
        invalid_message: str,
    ) -> Expression:
        """Consume one opaque expression up to a top-level stop keyword."""
        start = stream.position()
        first: Token | None = None
        last: Token | None = None
        open_brackets: list[Token] = []

        while not stream.exhausted:
            if not open_brackets and stream.at_keyword(*stops):
                break
            token = stream.peek()
            if token.type == "OPEN":
                open_brackets.append(token)
            elif token.type == "CLOSE":
                if not open_brackets:
                    # Belongs to no bracket in this expression; the caller
                    # reports it as unexpected input.
                    break
                opener = open_brackets.pop()
                if BRACKET_PAIRS[opener.value] != token.value:
                    raise error_cls(
                        ERR_MSG_UNBALANCED_BRACKETS,
                        f"{token.value!r} at {token_position(token)} does not close "
                        f"{opener.value!r} at {token_position(opener)}",
                        position=token_position(token),
                    )
            stream.advance()
            if first is None:
                first = token
            last = token

        if open_brackets:
            opener = open_brackets[-1]
            raise error_cls(
                ERR_MSG_UNBALANCED_BRACKETS,
                f"{opener.value!r} at {token_position(opener)} is never closed",
                position=token_position(opener),
            )
        if first is None or last is None:
            raise error_cls(
                missing_message,
                f"{missing_message} at {start}, found {_describe(stream.peek())}",
                position=start,
            )

        text = stream.slice(first, last)
        try:
            self._target.check_expression(text)
        except (SyntaxError, ValueError) as e:
            raise error_cls(
                invalid_message,
                f"{invalid_message} {text!r} at {start}: {e}",
                wrapped=e,
                position=start,
            ) from e
        return Expression(text=text, position=start)
