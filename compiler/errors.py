"""
TclScript Errors

Defines exception classes for lexing, parsing and evaluation errors.
"""

from typing import Optional


class TclError(Exception):
    """Base exception for all TclScript errors."""

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location information."""
        parts = []

        if self.filename:
            parts.append(self.filename)

        if self.line is not None:
            location = f"{self.line}" if parts else f"line {self.line}"
            if self.column is not None:
                location += f":{self.column}"
            parts.append(location)

        if parts:
            return f"{':'.join(parts)}: {self.message}"
        return self.message

    def locate(self, line: Optional[int] = None, column: Optional[int] = None,
               filename: Optional[str] = None) -> 'TclError':
        """
        Fill in location details the raising site did not know.

        Existing values are kept; the message is refreshed.
        """
        if self.line is None and line is not None:
            self.line = line
            self.column = column
        if filename and not self.filename:
            self.filename = filename
        self.args = (self._format_message(),)
        return self


class LexError(TclError):
    """Raised for unrecognized or unterminated lexemes."""
    pass


class ParseError(TclError):
    """Raised for grammar violations."""

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, expected: Optional[str] = None,
                 filename: Optional[str] = None):
        self.expected = expected
        super().__init__(message, line, column, filename)


class EvaluationError(TclError):
    """Raised for errors during script execution."""
    pass


class UnresolvedVariableError(EvaluationError):
    """Raised when a variable is not found anywhere in the context chain."""

    def __init__(self, name: str, line: Optional[int] = None,
                 column: Optional[int] = None):
        self.name = name
        super().__init__(f"can't read \"{name}\": no such variable", line, column)


class DivisionByZeroError(EvaluationError):
    """Raised when an expression divides by zero."""

    def __init__(self, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__("divide by zero", line, column)


class UnknownCommandError(EvaluationError):
    """Raised when a statement names a command the interpreter does not have."""

    def __init__(self, name: str, line: Optional[int] = None,
                 column: Optional[int] = None):
        self.name = name
        super().__init__(f"invalid command name \"{name}\"", line, column)


class ValueCoercionError(EvaluationError):
    """Raised when a string value is used where a number is required."""

    def __init__(self, value: str, line: Optional[int] = None,
                 column: Optional[int] = None):
        self.value = value
        super().__init__(f"expected number but got \"{value}\"", line, column)


class IntegerOverflowError(EvaluationError):
    """Raised when an integer does not fit in 64 bits."""

    def __init__(self, value: str, line: Optional[int] = None,
                 column: Optional[int] = None):
        self.value = value
        super().__init__(f"integer value too large to represent: {value}", line, column)


class InterpreterStateError(TclError):
    """Raised when an interpreter is run outside of its READY state."""
    pass
