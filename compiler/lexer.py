"""
TclScript Lexer

Tokenizes TclScript source code into a lazy stream of tokens.

Quoted text and brace blocks are not re-lexed for operators: a quoted
string becomes LEFT_QUOTE, literal NAME segments interleaved with
``$name`` and ``[...]`` substitutions, and RIGHT_QUOTE; a brace block
becomes LEFT_BRACE, one NAME token holding the verbatim body, and
RIGHT_BRACE.
"""

import logging
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, KEYWORDS
from .errors import LexError

log = logging.getLogger("tclscript.lexer")

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MUL,
    '/': TokenType.DIV,
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    ']': TokenType.RIGHT_BRACKET,
    '}': TokenType.RIGHT_BRACE,
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
}


def is_name_start(c: str) -> bool:
    return c.isalpha() or c == '_'


def is_name_char(c: str) -> bool:
    return c.isalnum() or c == '_'


class Lexer:
    """Lexical analyzer for TclScript source code."""

    def __init__(self, source: str, line: int = 1, column: int = 1):
        """
        Initialize the lexer.

        Args:
            source: TclScript source code to tokenize
            line: Line number of the first character (for nested blocks)
            column: Column number of the first character
        """
        self.source = source
        self.start = 0              # Start of current token
        self.current = 0            # Current position
        self.line = line            # Current line number
        self.column = column        # Current column number
        self.start_line = line      # Position of the token being scanned
        self.start_column = column
        self.command_start = True   # Next word would begin a command
        self.count = 0
        self._stream: Optional[Iterator[Token]] = None

    def __iter__(self) -> Iterator[Token]:
        # A lexer is a one-shot stream; iterating twice continues it
        if self._stream is None:
            self._stream = self._generate()
        return self._stream

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens ending with END_OF_FILE
        """
        return list(self)

    def _generate(self) -> Iterator[Token]:
        for token in self.scan(in_brackets=False):
            self.count += 1
            yield token

        self.mark()
        self.count += 1
        log.debug("lexed %d tokens over %d lines", self.count, self.line)
        yield self.make_token(TokenType.END_OF_FILE)

    def scan(self, in_brackets: bool) -> Iterator[Token]:
        """Scan tokens until end of input, or a closing bracket when nested."""
        while not self.is_at_end():
            c = self.peek()
            if in_brackets and c == ']':
                return

            self.mark()
            self.advance()

            # Skip whitespace
            if c in ' \t\r':
                continue

            # Line continuation
            if c == '\\' and self.peek() == '\n':
                self.advance()
                continue

            # Separators
            if c == '\n':
                self.command_start = True
                yield self.make_token(TokenType.END_OF_LINE)
                continue
            if c == ';':
                self.command_start = True
                yield self.make_token(TokenType.SEMICOLON)
                continue

            # Comments are only recognized where a command may begin
            if c == '#' and self.command_start:
                self.comment()
                continue

            self.command_start = False

            if c in SINGLE_CHAR_TOKENS:
                yield self.make_token(SINGLE_CHAR_TOKENS[c])
            elif c == '$':
                yield from self.variable()
            elif c == '[':
                yield from self.substitution()
            elif c == '"':
                yield from self.quoted()
            elif c == '{':
                yield from self.block()
            elif c.isdigit():
                yield self.number()
            elif is_name_start(c):
                yield self.word()
            else:
                raise LexError(f"Unexpected character: {c!r}",
                               self.start_line, self.start_column)

    # =========================================================================
    # Lexeme rules
    # =========================================================================

    def comment(self) -> None:
        """Skip a comment up to (not including) the end of the line."""
        while not self.is_at_end() and self.peek() != '\n':
            if self.peek() == '\\' and self.peek_next() == '\n':
                self.advance()
            self.advance()

    def number(self) -> Token:
        """Scan a decimal number literal, or a word that starts with digits."""
        while self.peek().isdigit():
            self.advance()

        # Fractional part
        if self.peek() == '.' and self.peek_next().isdigit():
            self.advance()  # Consume '.'
            while self.peek().isdigit():
                self.advance()

        if is_name_char(self.peek()):
            return self.word()

        return self.make_token(TokenType.NUMBER, self.lexeme())

    def word(self, keywords: bool = True) -> Token:
        """Scan a bare word as a keyword or NAME."""
        while is_name_char(self.peek()):
            self.advance()

        text = self.lexeme()
        token_type = KEYWORDS.get(text, TokenType.NAME) if keywords else TokenType.NAME
        return self.make_token(token_type, text)

    def variable(self) -> Iterator[Token]:
        """Scan the ``$`` sigil and the variable name following it."""
        yield self.make_token(TokenType.DOLLAR)

        if is_name_start(self.peek()):
            self.mark()
            self.advance()
            # $set names a variable, not the command
            yield self.word(keywords=False)

    def substitution(self) -> Iterator[Token]:
        """Scan a bracketed command substitution, including nested ones."""
        open_line, open_column = self.start_line, self.start_column
        yield self.make_token(TokenType.LEFT_BRACKET)

        self.command_start = True
        yield from self.scan(in_brackets=True)

        if self.is_at_end():
            raise LexError("Missing close-bracket", open_line, open_column)

        self.mark()
        self.advance()
        self.command_start = False
        yield self.make_token(TokenType.RIGHT_BRACKET)

    def quoted(self) -> Iterator[Token]:
        """Scan a quoted string into literal segments and substitutions."""
        open_line, open_column = self.start_line, self.start_column
        yield self.make_token(TokenType.LEFT_QUOTE)

        value: List[str] = []

        def segment() -> Iterator[Token]:
            if value:
                yield self.make_token(TokenType.NAME, ''.join(value))
                value.clear()

        while True:
            if self.is_at_end():
                raise LexError("Unterminated string", open_line, open_column)

            c = self.peek()

            if not value and c not in '"[':
                self.mark()

            if c == '"':
                yield from segment()
                self.mark()
                self.advance()
                yield self.make_token(TokenType.RIGHT_QUOTE)
                return

            if c == '\\':
                value.append(self.escape())
            elif c == '$' and is_name_start(self.peek_next()):
                yield from segment()
                self.mark()
                self.advance()
                yield from self.variable()
            elif c == '[':
                yield from segment()
                self.mark()
                self.advance()
                yield from self.substitution()
            else:
                value.append(self.advance())

    def escape(self) -> str:
        """Consume a backslash sequence inside quotes and return its value."""
        self.advance()  # Consume '\'
        if self.is_at_end():
            return '\\'

        c = self.advance()
        if c == '\n':
            # Continuation: newline and leading whitespace become one space
            while self.peek() in ' \t':
                self.advance()
            return ' '
        return ESCAPES.get(c, c)

    def block(self) -> Iterator[Token]:
        """Scan a brace block, keeping its body verbatim."""
        open_line, open_column = self.start_line, self.start_column
        yield self.make_token(TokenType.LEFT_BRACE)

        self.mark()
        body: List[str] = []
        depth = 1

        while True:
            if self.is_at_end():
                raise LexError("Missing close-brace", open_line, open_column)

            c = self.peek()
            if c == '\\' and self.peek_next() != '\0':
                # Escaped braces do not count towards nesting
                body.append(self.advance())
            elif c == '{':
                depth += 1
            elif c == '}':
                depth -= 1
                if depth == 0:
                    break
            body.append(self.advance())

        yield self.make_token(TokenType.NAME, ''.join(body))

        self.mark()
        self.advance()
        yield self.make_token(TokenType.RIGHT_BRACE)

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def advance(self) -> str:
        """Consume and return the current character."""
        c = self.source[self.current]
        self.current += 1
        if c == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return c

    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        """Return the next character without consuming it."""
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def is_at_end(self) -> bool:
        """Check if we've reached the end of the source."""
        return self.current >= len(self.source)

    def mark(self) -> None:
        """Remember where the next token starts."""
        self.start = self.current
        self.start_line = self.line
        self.start_column = self.column

    def lexeme(self) -> str:
        return self.source[self.start:self.current]

    def make_token(self, type: TokenType, text: str = '') -> Token:
        """Create a token positioned at the last mark."""
        return Token(type, text, self.start_line, self.start_column)
