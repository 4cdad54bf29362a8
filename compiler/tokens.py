"""
TclScript Token Definitions

Defines all token types and the Token class for lexical analysis.
"""

from enum import Enum, auto
from dataclasses import dataclass, replace


class TokenType(Enum):
    """All token types in TclScript."""

    # Literals
    NUMBER = auto()
    NAME = auto()

    # Operators
    PLUS = auto()           # +
    MINUS = auto()          # -
    MUL = auto()            # *
    DIV = auto()            # /

    # Delimiters
    LEFT_PAREN = auto()     # (
    RIGHT_PAREN = auto()    # )
    LEFT_BRACKET = auto()   # [
    RIGHT_BRACKET = auto()  # ]
    LEFT_QUOTE = auto()     # "
    RIGHT_QUOTE = auto()    # "
    LEFT_BRACE = auto()     # {
    RIGHT_BRACE = auto()    # }
    DOLLAR = auto()         # $

    # Commands
    PUTS = auto()
    EXPR = auto()
    UNSET = auto()
    SET = auto()

    # Separators
    SEMICOLON = auto()
    END_OF_LINE = auto()
    END_OF_FILE = auto()

    @property
    def description(self) -> str:
        """Human readable name used in diagnostics."""
        return DESCRIPTIONS[self]

    @property
    def has_text(self) -> bool:
        """Whether tokens of this kind carry their own lexeme."""
        return self in (TokenType.NUMBER, TokenType.NAME)


# Canonical lexeme of every fixed-text kind
FIXED_TEXT = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.MUL: '*',
    TokenType.DIV: '/',
    TokenType.LEFT_PAREN: '(',
    TokenType.RIGHT_PAREN: ')',
    TokenType.LEFT_BRACKET: '[',
    TokenType.RIGHT_BRACKET: ']',
    TokenType.LEFT_QUOTE: '"',
    TokenType.RIGHT_QUOTE: '"',
    TokenType.LEFT_BRACE: '{',
    TokenType.RIGHT_BRACE: '}',
    TokenType.DOLLAR: '$',
    TokenType.PUTS: 'puts',
    TokenType.EXPR: 'expr',
    TokenType.UNSET: 'unset',
    TokenType.SET: 'set',
    TokenType.SEMICOLON: ';',
    TokenType.END_OF_LINE: '\n',
    TokenType.END_OF_FILE: '',
}

DESCRIPTIONS = {
    TokenType.NUMBER: 'number',
    TokenType.NAME: 'id',
    TokenType.PLUS: 'plus',
    TokenType.MINUS: 'minus',
    TokenType.MUL: 'product',
    TokenType.DIV: 'division',
    TokenType.LEFT_PAREN: 'left parenthesis',
    TokenType.RIGHT_PAREN: 'right parenthesis',
    TokenType.LEFT_BRACKET: 'left bracket',
    TokenType.RIGHT_BRACKET: 'right bracket',
    TokenType.LEFT_QUOTE: 'left quote',
    TokenType.RIGHT_QUOTE: 'right quote',
    TokenType.LEFT_BRACE: 'left curly bracket',
    TokenType.RIGHT_BRACE: 'right curly bracket',
    TokenType.DOLLAR: 'dollar',
    TokenType.PUTS: 'output',
    TokenType.EXPR: 'expression',
    TokenType.UNSET: 'delete',
    TokenType.SET: 'assign',
    TokenType.SEMICOLON: 'semicolon',
    TokenType.END_OF_LINE: 'end of line',
    TokenType.END_OF_FILE: 'eof',
}


# Keyword mapping
KEYWORDS = {
    'puts': TokenType.PUTS,
    'expr': TokenType.EXPR,
    'unset': TokenType.UNSET,
    'set': TokenType.SET,
}

SEPARATORS = (TokenType.SEMICOLON, TokenType.END_OF_LINE)


@dataclass(frozen=True)
class Token:
    """Represents a single token from the source code."""

    type: TokenType
    text: str
    line: int = 0
    column: int = 0

    def __post_init__(self):
        # Fixed kinds always carry their canonical lexeme
        if not self.type.has_text:
            object.__setattr__(self, 'text', FIXED_TEXT[self.type])

    @classmethod
    def fixed(cls, type: TokenType, line: int = 0, column: int = 0) -> 'Token':
        """Create a token of a fixed-text kind."""
        return cls(type, FIXED_TEXT[type], line, column)

    def with_text(self, text: str) -> 'Token':
        """
        Return a copy carrying a new lexeme.

        Only NUMBER and NAME tokens have a variable lexeme; for every other
        kind the token is returned unchanged.
        """
        if not self.type.has_text:
            return self
        return replace(self, text=text)

    def __repr__(self) -> str:
        if self.type.has_text:
            return f"Token({self.type.name}, {self.text!r}, line={self.line})"
        return f"Token({self.type.name}, line={self.line})"

    def is_keyword(self) -> bool:
        """Check if this token is a command keyword."""
        return self.type in KEYWORDS.values()

    def is_separator(self) -> bool:
        """Check if this token ends a statement."""
        return self.type in SEPARATORS

