"""
TclScript Value Type

Scripts are loosely typed: every value has a string form, and values that
look like numbers can be used in arithmetic. Numbers are held as numpy
scalars (64-bit integers or doubles).
"""

import re
from typing import Any, Optional, Union
from dataclasses import dataclass
import numpy as np

from compiler.errors import (
    DivisionByZeroError, IntegerOverflowError, ValueCoercionError,
)

Number = Union[np.int64, np.float64]

INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')
REAL_PATTERN = re.compile(r'^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$')
INT64 = np.iinfo(np.int64)


@dataclass(frozen=True)
class TclValue:
    """
    Python representation of a TclScript value.

    ``text`` is the string form; ``number`` caches the numeric form when the
    value was produced by arithmetic or has already been coerced.
    """

    text: str
    number: Optional[Number] = None

    @classmethod
    def empty(cls) -> 'TclValue':
        """Create the empty string value."""
        return cls('')

    @classmethod
    def string(cls, value: str) -> 'TclValue':
        """Create a string value."""
        return cls(value)

    @classmethod
    def from_number(cls, value: Union[int, float, np.number]) -> 'TclValue':
        """Create a numeric value (int64 or float64)."""
        if isinstance(value, (bool, np.bool_)):
            value = int(value)
        if isinstance(value, (int, np.integer)):
            number = to_int64(value)
        else:
            number = np.float64(value)
        return cls(format_number(number), number)

    @classmethod
    def from_python(cls, value: Any) -> 'TclValue':
        """Convert a Python value to TclValue."""
        if isinstance(value, TclValue):
            return value
        if value is None:
            return cls.empty()
        if isinstance(value, (bool, int, float, np.number)):
            return cls.from_number(value)
        if isinstance(value, str):
            return cls.string(value)
        raise TypeError(f"Cannot convert {type(value)} to TclValue")

    def to_python(self) -> Union[str, int, float]:
        """Convert to int or float when numeric, str otherwise."""
        if not self.is_numeric():
            return self.text
        number = self.as_number()
        if isinstance(number, np.integer):
            return int(number)
        return float(number)

    def is_numeric(self) -> bool:
        """Check if the value can be used in arithmetic."""
        if self.number is not None:
            return True
        return REAL_PATTERN.match(self.text.strip()) is not None

    def as_number(self, line: Optional[int] = None,
                  column: Optional[int] = None) -> Number:
        """
        Return the numeric form of the value.

        Raises:
            ValueCoercionError: If the string does not look like a number
            IntegerOverflowError: If an integer literal does not fit in 64 bits
        """
        if self.number is not None:
            return self.number
        try:
            number = parse_number(self.text)
        except IntegerOverflowError as error:
            raise error.locate(line, column)
        if number is None:
            raise ValueCoercionError(self.text, line, column)
        return number

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        if self.number is not None:
            return f"TclValue(number, {self.text})"
        return f"TclValue(string, {self.text!r})"


def to_int64(value: int, line: Optional[int] = None,
             column: Optional[int] = None) -> np.int64:
    """
    Narrow an integer to a 64-bit script integer.

    Raises:
        IntegerOverflowError: If the value is outside the int64 range
    """
    value = int(value)
    if not INT64.min <= value <= INT64.max:
        raise IntegerOverflowError(str(value), line, column)
    return np.int64(value)


def parse_number(text: str) -> Optional[Number]:
    """Parse the numeric form of a string, or None if it is not a number."""
    stripped = text.strip()
    if INTEGER_PATTERN.match(stripped):
        return to_int64(int(stripped))
    if REAL_PATTERN.match(stripped):
        return np.float64(stripped)
    return None


def format_number(number: Number) -> str:
    """Format a number the way scripts print it."""
    if isinstance(number, np.integer):
        return str(int(number))
    value = float(number)
    if value.is_integer() and abs(value) < 1e16:
        return f"{value:.1f}"
    return repr(value)


def arithmetic(operator: str, left: TclValue, right: TclValue,
               line: Optional[int] = None,
               column: Optional[int] = None) -> TclValue:
    """
    Apply a binary arithmetic operator.

    Integer division floors; a real operand makes the result real.
    Integer results are computed exactly and must fit in 64 bits.

    Raises:
        DivisionByZeroError: If the divisor of '/' is zero
        ValueCoercionError: If an operand is not numeric
        IntegerOverflowError: If an integer result does not fit in 64 bits
    """
    a = left.as_number(line, column)
    b = right.as_number(line, column)

    if operator not in ('+', '-', '*', '/'):
        raise ValueError(f"Unknown operator {operator!r}")
    if operator == '/' and b == 0:
        raise DivisionByZeroError(line, column)

    if isinstance(a, np.integer) and isinstance(b, np.integer):
        x, y = int(a), int(b)
        if operator == '+':
            result = x + y
        elif operator == '-':
            result = x - y
        elif operator == '*':
            result = x * y
        else:
            result = x // y
        return TclValue.from_number(to_int64(result, line, column))

    x, y = np.float64(a), np.float64(b)
    if operator == '+':
        return TclValue.from_number(x + y)
    if operator == '-':
        return TclValue.from_number(x - y)
    if operator == '*':
        return TclValue.from_number(x * y)
    return TclValue.from_number(x / y)


def negate(value: TclValue, line: Optional[int] = None,
           column: Optional[int] = None) -> TclValue:
    """Apply unary minus."""
    number = value.as_number(line, column)
    if isinstance(number, np.integer):
        return TclValue.from_number(to_int64(-int(number), line, column))
    return TclValue.from_number(-number)
