"""
TclScript Parser

Recursive descent parser that turns a token stream into commands.

Tokens are pulled from the lexer one at a time, so a script can be
parsed and executed statement by statement.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from .tokens import Token, TokenType
from .lexer import Lexer
from .ast import (
    Block, BlockCommand, BinaryExpr, Command, ExprCommand, Expression,
    GroupExpr, InvokeCommand, NumberExpr, PutsCommand, Script, SetCommand,
    StringExpr, SubstitutionExpr, UnaryExpr, UnsetCommand, VariableExpr,
    WordExpr,
)
from .errors import LexError, ParseError

log = logging.getLogger("tclscript.parser")

# Tokens that read as a plain word when used as a command argument
WORD_TOKENS = (
    TokenType.NAME, TokenType.PUTS, TokenType.EXPR, TokenType.UNSET,
    TokenType.SET, TokenType.MUL, TokenType.DIV, TokenType.LEFT_PAREN,
    TokenType.RIGHT_PAREN,
)


class Parser:
    """Recursive descent parser for TclScript."""

    def __init__(self, tokens: Iterable[Token], filename: Optional[str] = None):
        """
        Initialize the parser.

        Args:
            tokens: Token stream, usually a Lexer
            filename: Optional filename for error messages
        """
        self.tokens = iter(tokens)
        self.filename = filename
        self._current: Optional[Token] = None
        self._previous: Optional[Token] = None
        self._depth = 0  # Nesting of [...] substitutions

    @classmethod
    def from_source(cls, source: str, filename: Optional[str] = None,
                    line: int = 1, column: int = 1) -> 'Parser':
        """Create a parser reading directly from source text."""
        return cls(Lexer(source, line, column), filename)

    def parse(self) -> Script:
        """
        Parse the whole token stream.

        Returns:
            Script AST node
        """
        return Script(tuple(self))

    def __iter__(self) -> Iterator[Command]:
        while True:
            command = self.next_command()
            if command is None:
                return
            yield command

    def next_command(self) -> Optional[Command]:
        """
        Parse the next statement.

        Returns:
            The command, or None once the end of input is reached
        """
        while self.match(TokenType.SEMICOLON, TokenType.END_OF_LINE):
            pass

        if self.check(TokenType.END_OF_FILE):
            return None

        command = self.command()
        self.end_statement(command)
        log.debug("parsed %r command at line %d", command.name, command.line)
        return command

    # =========================================================================
    # Commands
    # =========================================================================

    def command(self) -> Command:
        """Parse a single command."""
        token = self.peek()

        if self.match(TokenType.SET):
            target = self.variable_name("Expected variable name after 'set'")
            value = self.word("Expected value after variable name in 'set'")
            return SetCommand(token, target, value)

        if self.match(TokenType.UNSET):
            target = self.variable_name("Expected variable name after 'unset'")
            return UnsetCommand(token, target)

        if self.match(TokenType.PUTS):
            value = self.word("Expected value after 'puts'")
            return PutsCommand(token, value)

        if self.match(TokenType.EXPR):
            return ExprCommand(token, self.expr_argument())

        if self.match(TokenType.LEFT_BRACE):
            return BlockCommand(token, self.block())

        if self.match(TokenType.NAME):
            arguments: List[Expression] = []
            while not self.at_statement_end():
                arguments.append(self.word("Expected argument"))
            return InvokeCommand(token, tuple(arguments))

        raise self.error(f"Expected command, got {token.type.description}",
                         token, expected="command")

    def end_statement(self, command: Command) -> None:
        """Require the current statement to end here."""
        if self.at_statement_end():
            self.match(TokenType.SEMICOLON, TokenType.END_OF_LINE)
            return

        token = self.peek()
        raise self.error(
            f"Unexpected {token.type.description} after '{command.name}' command",
            token, expected="end of statement")

    def at_statement_end(self) -> bool:
        token = self.peek()
        if token.is_separator() or token.type == TokenType.END_OF_FILE:
            return True
        return self._depth > 0 and token.type == TokenType.RIGHT_BRACKET

    def variable_name(self, message: str) -> str:
        """Parse the name operand of set/unset."""
        token = self.peek()
        if token.type == TokenType.NAME or token.is_keyword():
            return self.advance().text
        raise self.error(message, token, expected=TokenType.NAME.description)

    # =========================================================================
    # Words
    # =========================================================================

    def word(self, message: str) -> Expression:
        """Parse one command argument."""
        token = self.peek()

        if self.match(TokenType.NUMBER):
            return NumberExpr(token.text, token)

        if self.match(TokenType.MINUS, TokenType.PLUS):
            if self.match(TokenType.NUMBER):
                return NumberExpr(token.text + self.previous().text, token)
            return WordExpr(token.text, token)

        if self.match(*WORD_TOKENS):
            return WordExpr(token.text, token)

        if self.match(TokenType.DOLLAR):
            return self.variable()

        if self.match(TokenType.LEFT_QUOTE):
            return self.string()

        if self.match(TokenType.LEFT_BRACE):
            block = self.block()
            return WordExpr(block.text, token)

        if self.match(TokenType.LEFT_BRACKET):
            return self.substitution()

        raise self.error(f"{message}, got {token.type.description}",
                         token, expected="value")

    def variable(self) -> VariableExpr:
        """Parse the name after a '$' sigil."""
        dollar = self.previous()
        name = self.consume(TokenType.NAME, "Expected variable name after '$'")
        return VariableExpr(name.text, dollar)

    def string(self) -> StringExpr:
        """Parse the segments of a quoted string."""
        quote = self.previous()
        parts: List[Expression] = []

        while not self.match(TokenType.RIGHT_QUOTE):
            token = self.peek()
            if self.match(TokenType.NAME):
                parts.append(WordExpr(token.text, token))
            elif self.match(TokenType.DOLLAR):
                parts.append(self.variable())
            elif self.match(TokenType.LEFT_BRACKET):
                parts.append(self.substitution())
            else:
                raise self.error("Unterminated string", token,
                                 expected=TokenType.RIGHT_QUOTE.description)

        return StringExpr(tuple(parts), quote)

    def substitution(self) -> SubstitutionExpr:
        """Parse the commands of a [...] substitution."""
        bracket = self.previous()
        commands: List[Command] = []

        self._depth += 1
        try:
            while True:
                while self.match(TokenType.SEMICOLON, TokenType.END_OF_LINE):
                    pass
                if self.match(TokenType.RIGHT_BRACKET):
                    break
                if self.check(TokenType.END_OF_FILE):
                    raise self.error("Missing close-bracket", self.peek(),
                                     expected=TokenType.RIGHT_BRACKET.description)
                command = self.command()
                self.end_statement(command)
                commands.append(command)
        finally:
            self._depth -= 1

        return SubstitutionExpr(tuple(commands), bracket)

    def block(self) -> Block:
        """Parse the body of a brace block without interpreting it."""
        brace = self.previous()
        if self.check(TokenType.RIGHT_BRACE):
            body = Token(TokenType.NAME, '', brace.line, brace.column + 1)
        else:
            body = self.consume(TokenType.NAME, "Expected block body after '{'")
        self.consume(TokenType.RIGHT_BRACE, "Missing close-brace")
        return Block(body.text, body.line, body.column)

    # =========================================================================
    # Expressions
    # =========================================================================

    def expr_argument(self) -> Expression:
        """Parse the operand of 'expr', braced or not."""
        if not self.match(TokenType.LEFT_BRACE):
            return self.expression()

        block = self.block()
        lexer = Lexer(block.text, block.line, block.column)
        inner = Parser(
            (t for t in lexer if t.type != TokenType.END_OF_LINE),
            self.filename,
        )
        expression = inner.expression()
        if not inner.check(TokenType.END_OF_FILE):
            token = inner.peek()
            raise inner.error(f"Unexpected {token.type.description} in expression",
                              token, expected="operator")
        return expression

    def expression(self) -> Expression:
        """Parse addition/subtraction."""
        expr = self.term()

        while self.match(TokenType.PLUS, TokenType.MINUS):
            operator = self.previous()
            right = self.term()
            expr = BinaryExpr(expr, operator, right)

        return expr

    def term(self) -> Expression:
        """Parse multiplication/division."""
        expr = self.primary()

        while self.match(TokenType.MUL, TokenType.DIV):
            operator = self.previous()
            right = self.primary()
            expr = BinaryExpr(expr, operator, right)

        return expr

    def primary(self) -> Expression:
        """Parse an operand."""
        token = self.peek()

        if self.match(TokenType.NUMBER):
            return NumberExpr(token.text, token)

        if self.match(TokenType.NAME):
            return WordExpr(token.text, token)

        if self.match(TokenType.DOLLAR):
            return self.variable()

        # Grouped expression
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression")
            return GroupExpr(expr)

        if self.match(TokenType.MINUS, TokenType.PLUS):
            return UnaryExpr(token, self.primary())

        if self.match(TokenType.LEFT_BRACKET):
            return self.substitution()

        if self.match(TokenType.LEFT_QUOTE):
            return self.string()

        raise self.error(f"Expected operand, got {token.type.description}",
                         token, expected="number, name, variable or '('")

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types and advance."""
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def check(self, type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self.peek().type == type

    def advance(self) -> Token:
        """Consume and return the current token."""
        token = self.peek()
        if token.type != TokenType.END_OF_FILE:
            self._current = None
        self._previous = token
        return token

    def peek(self) -> Token:
        """Return the current token, pulling it from the stream if needed."""
        if self._current is None:
            try:
                self._current = next(self.tokens)
            except LexError as error:
                raise error.locate(filename=self.filename)
            except StopIteration:
                # Hand-built token lists may omit the terminator
                line = self._previous.line if self._previous else 1
                self._current = Token.fixed(TokenType.END_OF_FILE, line)
        return self._current

    def previous(self) -> Token:
        """Return the previous token."""
        return self._previous

    def consume(self, type: TokenType, message: str) -> Token:
        """Consume a token of the expected type or raise an error."""
        if self.check(type):
            return self.advance()

        raise self.error(message, self.peek(), expected=type.description)

    def error(self, message: str, token: Token,
              expected: Optional[str] = None) -> ParseError:
        if self._depth > 0:
            # A lexical error inside the open substitution is reported first
            self.skip_substitution()
        return ParseError(message, token.line, token.column,
                          expected=expected, filename=self.filename)

    def skip_substitution(self) -> None:
        """Discard tokens up to the bracket closing the current substitution."""
        depth = self._depth
        while depth > 0:
            token = self.advance()
            if token.type == TokenType.END_OF_FILE:
                return
            if token.type == TokenType.LEFT_BRACKET:
                depth += 1
            elif token.type == TokenType.RIGHT_BRACKET:
                depth -= 1
