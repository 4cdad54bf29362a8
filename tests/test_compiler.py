"""
TclScript Compiler Tests

Tests for the front end: tokens, lexer, and parser.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from compiler import Lexer, Parser, ASTPrinter, parse_file, parse_source
from compiler.tokens import Token, TokenType, FIXED_TEXT
from compiler.ast import (
    BinaryExpr, BlockCommand, ExprCommand, GroupExpr, InvokeCommand,
    NumberExpr, PutsCommand, SetCommand, StringExpr, SubstitutionExpr,
    UnaryExpr, UnsetCommand, VariableExpr, WordExpr,
)
from compiler.errors import LexError, ParseError


def types_of(source):
    return [t.type for t in Lexer(source).tokenize()]


# =============================================================================
# Token Tests
# =============================================================================

class TestTokens:
    """Token model tests."""

    @pytest.mark.parametrize("token_type", list(FIXED_TEXT))
    def test_fixed_text_is_canonical(self, token_type):
        token = Token(token_type, "something else")
        assert token.text == FIXED_TEXT[token_type]

    @pytest.mark.parametrize("token_type", list(FIXED_TEXT))
    def test_with_text_is_noop_for_fixed_kinds(self, token_type):
        token = Token.fixed(token_type, 3, 4)
        assert token.with_text("x") is token

    @pytest.mark.parametrize("token_type", [TokenType.NUMBER, TokenType.NAME])
    def test_with_text_for_variable_kinds(self, token_type):
        token = Token(token_type, "a", 1, 1)
        changed = token.with_text("b")
        assert changed.text == "b"
        assert changed.type == token_type
        assert token.text == "a"

    def test_descriptions(self):
        assert TokenType.MUL.description == "product"
        assert TokenType.PUTS.description == "output"
        assert TokenType.END_OF_FILE.description == "eof"

    def test_every_kind_has_text_or_canonical_lexeme(self):
        for token_type in TokenType:
            assert token_type.has_text or token_type in FIXED_TEXT


# =============================================================================
# Lexer Tests
# =============================================================================

class TestLexerBasics:
    """Basic lexer functionality tests."""

    def test_empty_source(self):
        tokens = Lexer("").tokenize()
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.END_OF_FILE

    def test_whitespace_only(self):
        assert types_of("   \t  ") == [TokenType.END_OF_FILE]

    def test_set_command(self):
        tokens = Lexer("set a 5").tokenize()
        assert [t.type for t in tokens] == [
            TokenType.SET, TokenType.NAME, TokenType.NUMBER, TokenType.END_OF_FILE
        ]
        assert tokens[1].text == "a"
        assert tokens[2].text == "5"

    def test_separators(self):
        assert types_of("a;b\nc") == [
            TokenType.NAME, TokenType.SEMICOLON, TokenType.NAME,
            TokenType.END_OF_LINE, TokenType.NAME, TokenType.END_OF_FILE,
        ]

    def test_line_continuation(self):
        assert types_of("set a \\\n 5") == [
            TokenType.SET, TokenType.NAME, TokenType.NUMBER, TokenType.END_OF_FILE
        ]

    def test_positions(self):
        tokens = Lexer("set a 5\nputs $a").tokenize()
        puts = tokens[4]
        assert puts.type == TokenType.PUTS
        assert (puts.line, puts.column) == (2, 1)
        assert (tokens[5].line, tokens[5].column) == (2, 6)

    def test_lazy_stream(self):
        stream = iter(Lexer("set a 1; @"))
        assert next(stream).type == TokenType.SET
        assert next(stream).type == TokenType.NAME
        with pytest.raises(LexError):
            list(stream)


class TestLexerWords:
    """Numbers, names and keywords."""

    @pytest.mark.parametrize("text", ["42", "3.14", "007"])
    def test_numbers_keep_text(self, text):
        token = Lexer(text).tokenize()[0]
        assert token.type == TokenType.NUMBER
        assert token.text == text

    def test_word_starting_with_digits(self):
        token = Lexer("5abc").tokenize()[0]
        assert token.type == TokenType.NAME
        assert token.text == "5abc"

    @pytest.mark.parametrize("keyword,expected_type", [
        ("puts", TokenType.PUTS),
        ("expr", TokenType.EXPR),
        ("unset", TokenType.UNSET),
        ("set", TokenType.SET),
    ])
    def test_keywords(self, keyword, expected_type):
        assert Lexer(keyword).tokenize()[0].type == expected_type

    @pytest.mark.parametrize("word", ["setx", "Set", "put", "_set"])
    def test_near_keywords_are_names(self, word):
        token = Lexer(word).tokenize()[0]
        assert token.type == TokenType.NAME
        assert token.text == word

    def test_variable_named_like_keyword(self):
        tokens = Lexer("$set").tokenize()
        assert tokens[0].type == TokenType.DOLLAR
        assert tokens[1].type == TokenType.NAME
        assert tokens[1].text == "set"


class TestLexerOperators:
    """Operator tokenization tests."""

    @pytest.mark.parametrize("op,expected_type", [
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("*", TokenType.MUL),
        ("/", TokenType.DIV),
        ("(", TokenType.LEFT_PAREN),
        (")", TokenType.RIGHT_PAREN),
        ("$", TokenType.DOLLAR),
        ("]", TokenType.RIGHT_BRACKET),
        ("}", TokenType.RIGHT_BRACE),
        (";", TokenType.SEMICOLON),
    ])
    def test_operators(self, op, expected_type):
        assert Lexer(op).tokenize()[0].type == expected_type

    def test_expression(self):
        assert types_of("1+2*(3-4)/5") == [
            TokenType.NUMBER, TokenType.PLUS, TokenType.NUMBER, TokenType.MUL,
            TokenType.LEFT_PAREN, TokenType.NUMBER, TokenType.MINUS,
            TokenType.NUMBER, TokenType.RIGHT_PAREN, TokenType.DIV,
            TokenType.NUMBER, TokenType.END_OF_FILE,
        ]


class TestLexerQuotes:
    """Quoted string tokenization tests."""

    def test_literal_content_is_not_relexed(self):
        tokens = Lexer('"1 + 2; x"').tokenize()
        assert [t.type for t in tokens] == [
            TokenType.LEFT_QUOTE, TokenType.NAME, TokenType.RIGHT_QUOTE,
            TokenType.END_OF_FILE,
        ]
        assert tokens[1].text == "1 + 2; x"

    def test_empty_string(self):
        assert types_of('""') == [
            TokenType.LEFT_QUOTE, TokenType.RIGHT_QUOTE, TokenType.END_OF_FILE
        ]

    def test_substitutions(self):
        tokens = Lexer('puts "a $b [c]"').tokenize()
        assert [t.type for t in tokens] == [
            TokenType.PUTS, TokenType.LEFT_QUOTE, TokenType.NAME,
            TokenType.DOLLAR, TokenType.NAME, TokenType.NAME,
            TokenType.LEFT_BRACKET, TokenType.NAME, TokenType.RIGHT_BRACKET,
            TokenType.RIGHT_QUOTE, TokenType.END_OF_FILE,
        ]
        assert [t.text for t in tokens if t.type == TokenType.NAME] == [
            "a ", "b", " ", "c"
        ]

    def test_escape_sequences(self):
        tokens = Lexer(r'"a\tb\"c\$d"').tokenize()
        assert tokens[1].text == 'a\tb"c$d'

    def test_lone_dollar_is_literal(self):
        tokens = Lexer('"cost: $5"').tokenize()
        assert tokens[1].text == "cost: $5"

    def test_newline_inside_quotes(self):
        tokens = Lexer('"a\nb"').tokenize()
        assert TokenType.END_OF_LINE not in [t.type for t in tokens]

    def test_unterminated_quote(self):
        with pytest.raises(LexError) as info:
            Lexer('puts "hello').tokenize()
        assert info.value.line == 1
        assert info.value.column == 6


class TestLexerBraces:
    """Brace block tokenization tests."""

    def test_block_body_is_verbatim(self):
        tokens = Lexer("{set a $b; puts [x]}").tokenize()
        assert [t.type for t in tokens] == [
            TokenType.LEFT_BRACE, TokenType.NAME, TokenType.RIGHT_BRACE,
            TokenType.END_OF_FILE,
        ]
        assert tokens[1].text == "set a $b; puts [x]"

    def test_nested_braces(self):
        tokens = Lexer("{a {b {c}} d} e").tokenize()
        assert tokens[1].text == "a {b {c}} d"
        assert tokens[3].type == TokenType.NAME
        assert tokens[3].text == "e"

    def test_newlines_inside_braces(self):
        tokens = Lexer("{a\nb}\n").tokenize()
        assert tokens[1].text == "a\nb"
        assert [t.type for t in tokens].count(TokenType.END_OF_LINE) == 1

    def test_body_position(self):
        tokens = Lexer("puts {x}").tokenize()
        assert (tokens[2].line, tokens[2].column) == (1, 7)

    def test_unterminated_block(self):
        with pytest.raises(LexError):
            Lexer("{a {b}").tokenize()


class TestLexerComments:
    """Comment handling tests."""

    def test_comment_line(self):
        assert types_of("# note\nset a 1") == [
            TokenType.END_OF_LINE, TokenType.SET, TokenType.NAME,
            TokenType.NUMBER, TokenType.END_OF_FILE,
        ]

    def test_comment_after_semicolon(self):
        assert types_of("set a 1; # note") == [
            TokenType.SET, TokenType.NAME, TokenType.NUMBER,
            TokenType.SEMICOLON, TokenType.END_OF_FILE,
        ]

    def test_hash_inside_command(self):
        with pytest.raises(LexError):
            Lexer("set a 1 # note").tokenize()


class TestLexerErrors:
    """Unrecognized input."""

    def test_unexpected_character(self):
        with pytest.raises(LexError) as info:
            Lexer("set a @").tokenize()
        assert (info.value.line, info.value.column) == (1, 7)
        assert "line 1:7" in str(info.value)

    def test_unterminated_substitution(self):
        with pytest.raises(LexError):
            Lexer("puts [expr 1").tokenize()


# =============================================================================
# Parser Tests
# =============================================================================

class TestParserCommands:
    """Statement parsing tests."""

    def test_set(self):
        script = parse_source("set a 5")
        assert len(script.commands) == 1
        command = script.commands[0]
        assert isinstance(command, SetCommand)
        assert command.target == "a"
        assert isinstance(command.value, NumberExpr)
        assert command.value.text == "5"

    def test_unset(self):
        command = parse_source("unset a").commands[0]
        assert isinstance(command, UnsetCommand)
        assert command.target == "a"

    def test_puts_variable(self):
        command = parse_source("puts $a").commands[0]
        assert isinstance(command, PutsCommand)
        assert isinstance(command.value, VariableExpr)
        assert command.value.name == "a"

    def test_puts_string(self):
        command = parse_source('puts "x = $x"').commands[0]
        assert isinstance(command.value, StringExpr)
        parts = command.value.parts
        assert isinstance(parts[0], WordExpr)
        assert parts[0].text == "x = "
        assert isinstance(parts[1], VariableExpr)

    def test_puts_block_text(self):
        command = parse_source("puts {hello $world}").commands[0]
        assert isinstance(command.value, WordExpr)
        assert command.value.text == "hello $world"

    def test_signed_number(self):
        command = parse_source("set a -5").commands[0]
        assert isinstance(command.value, NumberExpr)
        assert command.value.text == "-5"

    def test_keyword_as_variable_name(self):
        command = parse_source("set puts 1").commands[0]
        assert isinstance(command, SetCommand)
        assert command.target == "puts"

    def test_token_list_without_terminator(self):
        tokens = [
            Token(TokenType.PUTS, "puts", 1, 1),
            Token(TokenType.NAME, "hi", 1, 6),
        ]
        script = Parser(tokens).parse()
        assert len(script.commands) == 1
        assert isinstance(script.commands[0], PutsCommand)

    def test_empty_statements_discarded(self):
        script = parse_source("set a 1;; \n\n ; set b 2\n")
        assert len(script.commands) == 2

    def test_block_statement(self):
        command = parse_source("{set a 1\nputs $a}").commands[0]
        assert isinstance(command, BlockCommand)
        assert command.block.text == "set a 1\nputs $a"

    def test_invoke(self):
        command = parse_source("frobnicate 1 $x").commands[0]
        assert isinstance(command, InvokeCommand)
        assert command.name == "frobnicate"
        assert len(command.arguments) == 2

    def test_substitution(self):
        command = parse_source("set a [expr 1 + 2]").commands[0]
        assert isinstance(command.value, SubstitutionExpr)
        assert isinstance(command.value.commands[0], ExprCommand)

    def test_nested_substitution(self):
        command = parse_source("puts [set a [expr 1]; set b 2]").commands[0]
        inner = command.value.commands
        assert len(inner) == 2
        assert isinstance(inner[0].value, SubstitutionExpr)


class TestParserExpressions:
    """Expression parsing and precedence tests."""

    def expression(self, source):
        command = parse_source(source).commands[0]
        assert isinstance(command, ExprCommand)
        return command.expression

    def test_precedence(self):
        expr = self.expression("expr 1 + 2 * 3")
        assert isinstance(expr, BinaryExpr)
        assert expr.operator.type == TokenType.PLUS
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.operator.type == TokenType.MUL

    def test_left_associative(self):
        expr = self.expression("expr 8 - 3 - 2")
        assert expr.operator.type == TokenType.MINUS
        assert isinstance(expr.left, BinaryExpr)
        assert expr.left.operator.type == TokenType.MINUS

    def test_grouping(self):
        expr = self.expression("expr (1 + 2) * 3")
        assert expr.operator.type == TokenType.MUL
        assert isinstance(expr.left, GroupExpr)

    def test_unary(self):
        expr = self.expression("expr -$a")
        assert isinstance(expr, UnaryExpr)
        assert isinstance(expr.operand, VariableExpr)

    def test_braced_expression(self):
        expr = self.expression("expr {$a +\n  1}")
        assert isinstance(expr, BinaryExpr)
        assert expr.operator.line == 1
        assert expr.right.token.line == 2

    def test_substitution_operand(self):
        expr = self.expression("expr [set a 1] * 2")
        assert isinstance(expr.left, SubstitutionExpr)


class TestParserErrors:
    """Parse error tests."""

    @pytest.mark.parametrize("source", [
        "set",
        "set a",
        "unset",
        "puts",
        "expr",
        "expr 1 +",
        "expr (1 + 2",
        "expr 1 2",
        "set a 1 2",
        "unset a b",
        "}",
        "$a",
        "puts [set a 1",
        "expr {1 + }",
    ])
    def test_invalid(self, source):
        with pytest.raises((ParseError, LexError)):
            parse_source(source)

    def test_missing_paren_reports_expected(self):
        with pytest.raises(ParseError) as info:
            parse_source("expr (1 + 2")
        assert info.value.expected == TokenType.RIGHT_PAREN.description

    def test_error_position(self):
        with pytest.raises(ParseError) as info:
            parse_source("set a 1\nunset")
        assert info.value.line == 2

    def test_filename_in_message(self):
        with pytest.raises(ParseError) as info:
            parse_source("set", "script.tcl")
        assert str(info.value).startswith("script.tcl:1:")

    def test_parses_incrementally(self):
        parser = Parser.from_source("set a 1; set b")
        first = parser.next_command()
        assert isinstance(first, SetCommand)
        with pytest.raises(ParseError):
            parser.next_command()

    def test_lex_error_inside_substitution_wins(self):
        with pytest.raises(LexError):
            parse_source('puts "[expr 1"')

    def test_parse_error_inside_substitution(self):
        with pytest.raises(ParseError) as info:
            parse_source("puts [expr 1 2]; puts x")
        assert info.value.column == 14

    def test_end_of_input(self):
        parser = Parser.from_source("puts x")
        assert parser.next_command() is not None
        assert parser.next_command() is None
        assert parser.next_command() is None


class TestASTPrinter:
    """Debug printer tests."""

    def test_print(self):
        text = ASTPrinter().print(parse_source("set a [expr 1 + 2]"))
        assert text.startswith("Script")
        assert "Set(a)" in text
        assert "Binary(+)" in text


class TestParseFile:
    """Parsing scripts from disk."""

    def test_parse_file(self, tmp_path):
        path = tmp_path / "script.tcl"
        path.write_text("set a 1\nputs $a\n", encoding="utf-8")
        script = parse_file(str(path))
        assert [c.name for c in script.commands] == ["set", "puts"]
        assert script.commands[1].line == 2

    def test_parse_file_error_names_file(self, tmp_path):
        path = tmp_path / "bad.tcl"
        path.write_text("set a 1\nunset\n", encoding="utf-8")
        with pytest.raises(ParseError) as info:
            parse_file(str(path))
        assert str(info.value).startswith(f"{path}:2:")
