"""
Exact rational numbers for the tableau solver.

An ExactRational is an immutable fraction n/d over Python's native
big integers:
- d > 0 always, the sign lives in the numerator
- gcd(|n|, d) == 1, zero is stored as 0/1
- every operation returns a freshly normalized value

Comparisons use cross-multiplication only; floats never take part in a
solver decision. `to_double` exists for display and generation.

Textual literal format: "<int>" or "<int>/<int>" with optional
surrounding whitespace, e.g. " -3/4 ".
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import Union


class RationalError(ArithmeticError):
    """Base class for exact-rational construction errors."""


class DivisionByZero(RationalError, ZeroDivisionError):
    """A zero denominator was requested, or a value was divided by zero."""


class InvalidFormat(RationalError, ValueError):
    """A rational literal did not match "<int>" or "<int>/<int>"."""


_LITERAL = re.compile(r"^\s*([+-]?\d+)\s*(?:/\s*([+-]?\d+)\s*)?$")


class ExactRational:
    __slots__ = ("_num", "_den")

    def __init__(self, numerator: int = 0, denominator: int = 1):
        if not isinstance(numerator, int) or not isinstance(denominator, int):
            raise TypeError("numerator and denominator must be integers")
        if denominator == 0:
            raise DivisionByZero("Denominator cannot be zero.")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        g = math.gcd(numerator, denominator)
        # gcd(0, d) == d, so zero collapses to 0/1 here as well
        self._num = numerator // g
        self._den = denominator // g

    @property
    def numerator(self) -> int:
        return self._num

    @property
    def denominator(self) -> int:
        return self._den

    # --- named arithmetic ---

    def add(self, other: ExactRational) -> ExactRational:
        return ExactRational(self._num * other._den + other._num * self._den, self._den * other._den)

    def subtract(self, other: ExactRational) -> ExactRational:
        return ExactRational(self._num * other._den - other._num * self._den, self._den * other._den)

    def multiply(self, other: ExactRational) -> ExactRational:
        return ExactRational(self._num * other._num, self._den * other._den)

    def divide(self, other: ExactRational) -> ExactRational:
        if other._num == 0:
            raise DivisionByZero("Division by zero.")
        return ExactRational(self._num * other._den, self._den * other._num)

    def negate(self) -> ExactRational:
        return ExactRational(-self._num, self._den)

    def compare_to(self, other: ExactRational) -> int:
        lhs = self._num * other._den
        rhs = other._num * self._den
        return (lhs > rhs) - (lhs < rhs)

    def to_double(self) -> float:
        # int / int is correctly rounded even for huge operands
        return self._num / self._den

    def is_zero(self) -> bool:
        return self._num == 0

    @classmethod
    def parse(cls, text: str) -> ExactRational:
        m = _LITERAL.match(text)
        if m is None:
            raise InvalidFormat(f"Invalid rational format: {text!r}")
        num = int(m.group(1))
        den = int(m.group(2)) if m.group(2) is not None else 1
        return cls(num, den)

    # --- interop ---

    def to_fraction(self) -> Fraction:
        return Fraction(self._num, self._den)

    @classmethod
    def from_fraction(cls, fr: Fraction) -> ExactRational:
        return cls(fr.numerator, fr.denominator)

    # --- operator protocol ---

    def __add__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.add(other)

    def __radd__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else other.add(self)

    def __sub__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.subtract(other)

    def __rsub__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else other.subtract(self)

    def __mul__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.multiply(other)

    def __rmul__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else other.multiply(self)

    def __truediv__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.divide(other)

    def __rtruediv__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else other.divide(self)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self if self._num >= 0 else self.negate()

    def __eq__(self, other):
        other = _operand(other)
        if other is None:
            return NotImplemented
        return self._num == other._num and self._den == other._den

    def __lt__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.compare_to(other) < 0

    def __le__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.compare_to(other) <= 0

    def __gt__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.compare_to(other) > 0

    def __ge__(self, other):
        other = _operand(other)
        return NotImplemented if other is None else self.compare_to(other) >= 0

    def __hash__(self):
        # integral values hash like the int they equal
        if self._den == 1:
            return hash(self._num)
        return hash((self._num, self._den))

    def __bool__(self):
        return self._num != 0

    def __float__(self):
        return self.to_double()

    def __str__(self):
        if self._den == 1:
            return str(self._num)
        return f"{self._num}/{self._den}"

    def __repr__(self):
        return f"ExactRational({self._num}, {self._den})"


def _operand(x) -> Union[ExactRational, None]:
    if isinstance(x, ExactRational):
        return x
    if isinstance(x, int):
        return ExactRational(x)
    return None


ZERO = ExactRational(0)
ONE = ExactRational(1)

Num = Union[ExactRational, int, Fraction, Decimal, float, str]


def R(x: Num) -> ExactRational:
    """Convert a number to ExactRational exactly when possible.
    - ExactRational -> as is
    - int, Fraction, Decimal -> exact
    - str -> rational literal ("3", "-3/4")
    - float -> best rational approx (limit large denominator)
    """
    if isinstance(x, ExactRational):
        return x
    if isinstance(x, int):
        return ExactRational(x)
    if isinstance(x, Fraction):
        return ExactRational.from_fraction(x)
    if isinstance(x, Decimal):
        if not x.is_finite():
            raise InvalidFormat(f"Not a finite number: {x}")
        n, d = x.as_integer_ratio()
        return ExactRational(n, d)
    if isinstance(x, float):
        if math.isnan(x) or math.isinf(x):
            raise InvalidFormat(f"Not a finite number: {x}")
        return ExactRational.from_fraction(Fraction.from_float(x).limit_denominator(10**12))
    if isinstance(x, str):
        return ExactRational.parse(x)
    raise TypeError(f"Cannot convert {type(x).__name__} to ExactRational")


def fmt_out(x: Num) -> str:
    """Pretty-print numbers as integers or reduced fractions for final outputs."""
    return str(R(x))
