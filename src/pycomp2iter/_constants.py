"""Resource limits and grammar keywords for comprehension translation."""

DEFAULT_MAX_CLAUSES = 64
"""Maximum number of chained for-if clauses in one comprehension."""

DEFAULT_MAX_INPUT_LENGTH = 100000
"""Maximum length of a comprehension fragment, in characters."""

KEYWORD_FOR = "for"
KEYWORD_IN = "in"
KEYWORD_IF = "if"

GRAMMAR_KEYWORDS = frozenset({KEYWORD_FOR, KEYWORD_IN, KEYWORD_IF})
"""Words that may never be used as pattern names."""

BRACKET_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}
