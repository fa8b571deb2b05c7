"""Tokenizer for comprehension fragments.

Only enough lexical structure is recognized to find the boundaries of the
comprehension grammar: names (keywords included), numbers, quoted strings,
brackets and commas. Everything else is an opaque operator run. Expression
text is always sliced verbatim from the source, never rebuilt from tokens.

Two lexicons exist. The default one treats ``'...'`` as a string. The char
literal lexicon (Rust) only accepts a single character or escape between
single quotes, and reads any other ``'name`` as a lifetime or loop label.
"""

from __future__ import annotations

import logging

from lark import Lark, Token
from lark.exceptions import UnexpectedInput

from pycomp2iter._errors import ERR_MSG_INVALID_TOKEN, InvalidTokenError
from pycomp2iter._ir import SourcePosition

logger = logging.getLogger(__name__)

# Terminals are only kept when a rule references them, hence the start rule.
_GRAMMAR_TEMPLATE = r"""
start: (NAME | NUMBER | STRING | OPEN | CLOSE | COMMA | OP @EXTRA_TERMINALS@)*

STRING.2: /[rRbBuUfF]{0,2}("{3}[\s\S]*?"{3}|'{3}[\s\S]*?'{3}|"(?:[^"\\\n]|\\.)*"|@SINGLE_QUOTED@)/
        | /`[^`]*`/
NAME: /[^\W\d]\w*/
NUMBER: /\d\w*/
OPEN: /[(\[{]/
CLOSE: /[)\]}]/
COMMA: ","
OP: /[^\w\s()\[\]{},'"`]+/
@EXTRA_DEFINITIONS@

%import common.WS
%ignore WS
"""

_STRING_QUOTED = r"'(?:[^'\\\n]|\\.)*'"
_CHAR_QUOTED = r"'(?:[^'\\\n]|\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]{1,6}\}|.))'"


def _build(single_quoted: str, extra_terminals: str, extra_definitions: str) -> Lark:
    grammar = (
        _GRAMMAR_TEMPLATE.replace("@SINGLE_QUOTED@", single_quoted)
        .replace("@EXTRA_TERMINALS@", extra_terminals)
        .replace("@EXTRA_DEFINITIONS@", extra_definitions)
    )
    return Lark(grammar, parser="lalr", lexer="basic")


_lexers: dict[bool, Lark] = {
    False: _build(_STRING_QUOTED, "", ""),
    True: _build(_CHAR_QUOTED, "| LIFETIME", r"LIFETIME: /'[^\W\d]\w*(?!')/"),
}


def tokenize(source: str, char_literals: bool = False) -> list[Token]:
    """Split a fragment into tokens.

    Args:
        source: The fragment text.
        char_literals: Read single quotes as char literals and lifetimes
            instead of strings.

    Raises:
        InvalidTokenError: If a character cannot start any token, e.g. the
            opening quote of an unterminated string.
    """
    try:
        tokens = list(_lexers[char_literals].lex(source))
    except UnexpectedInput as e:
        position = SourcePosition(e.pos_in_stream or 0, e.line, e.column)
        raise InvalidTokenError(
            ERR_MSG_INVALID_TOKEN,
            f"cannot tokenize input at {position}: {e}",
            wrapped=e,
            position=position,
        ) from e
    logger.debug("tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens


def token_position(token: Token) -> SourcePosition:
    return SourcePosition(token.start_pos, token.line, token.column)


class TokenStream:
    """Linear cursor over the tokens of one fragment."""

    def __init__(self, source: str, tokens: list[Token]) -> None:
        self.source = source
        self._tokens = tokens
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._tokens)

    def peek(self) -> Token | None:
        if self.exhausted:
            return None
        return self._tokens[self._index]

    def advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def at_keyword(self, *words: str) -> bool:
        token = self.peek()
        return token is not None and token.type == "NAME" and token.value in words

    def at_comma(self) -> bool:
        token = self.peek()
        return token is not None and token.type == "COMMA"

    def position(self) -> SourcePosition:
        """Position of the next token, or of the end of input."""
        token = self.peek()
        if token is not None:
            return token_position(token)
        line_start = self.source.rfind("\n") + 1
        return SourcePosition(
            len(self.source),
            self.source.count("\n") + 1,
            len(self.source) - line_start + 1,
        )

    def slice(self, first: Token, last: Token) -> str:
        """Return the verbatim source text spanning two tokens."""
        return self.source[first.start_pos:last.end_pos]
