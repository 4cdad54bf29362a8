"""
TclScript Compiler Package

Front end of the TclScript interpreter: tokens, lexer, syntax tree and
parser for the Tcl-like command language.
"""

from typing import Optional

from .tokens import Token, TokenType
from .lexer import Lexer
from .ast import Script, ASTPrinter
from .parser import Parser
from .errors import (
    TclError, LexError, ParseError, EvaluationError, UnresolvedVariableError,
    DivisionByZeroError, UnknownCommandError, ValueCoercionError,
    IntegerOverflowError, InterpreterStateError,
)

__version__ = "0.1.0"
__all__ = [
    "Token",
    "TokenType",
    "Lexer",
    "Parser",
    "Script",
    "ASTPrinter",
    "TclError",
    "LexError",
    "ParseError",
    "EvaluationError",
    "UnresolvedVariableError",
    "DivisionByZeroError",
    "UnknownCommandError",
    "ValueCoercionError",
    "IntegerOverflowError",
    "InterpreterStateError",
]


def parse_source(source: str, filename: Optional[str] = None) -> Script:
    """
    Parse TclScript source code into a syntax tree.

    Args:
        source: TclScript source code string
        filename: Optional filename for error messages

    Returns:
        Script AST node

    Raises:
        LexError: If the text cannot be tokenized
        ParseError: If the tokens do not form valid commands
    """
    return Parser.from_source(source, filename).parse()


def parse_file(filepath: str) -> Script:
    """
    Parse a TclScript source file.

    Args:
        filepath: Path to the script

    Returns:
        Script AST node
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()
    return parse_source(source, filepath)
