# engine/rational.py
from __future__ import annotations

import math
import re
from functools import total_ordering

from engine.errors import DivisionByZero, ParseError

_INT_RE = re.compile(r"^([+-]?)(\d+)$")
_FRACTION_RE = re.compile(r"^([+-]?)(\d+)/(\d+)$")
_MIXED_RE = re.compile(r"^([+-]?)(\d+)'(\d+)/(\d+)$")


@total_ordering
class Rational:
    """
    Exact fraction kept in lowest terms.

    The sign always lives on the numerator and the denominator is positive,
    so two equal values always have identical (numerator, denominator) pairs.
    """

    __slots__ = ("_numerator", "_denominator")

    def __init__(self, numerator: int, denominator: int = 1):
        if denominator == 0:
            raise DivisionByZero("Denominator cannot be zero.")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        g = math.gcd(numerator, denominator)
        self._numerator = numerator // g
        self._denominator = denominator // g

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    # --- Parsing ------------------------------------------------------------------

    @classmethod
    def from_string(cls, text: str) -> Rational:
        """
        Parse an integer ("5"), a fraction ("3/5") or a mixed number ("2'3/5").
        A leading sign applies to the whole value, so "-1'1/2" is -3/2.
        """
        if text is None or not isinstance(text, str) or not text.strip():
            raise ParseError("Empty number literal.")
        s = text.strip()

        m = _MIXED_RE.match(s)
        if m:
            sign, whole, num, den = m.groups()
            if int(den) == 0:
                raise ParseError(f"Zero denominator in literal: {s!r}")
            value = int(whole) * int(den) + int(num)
            return cls(-value if sign == "-" else value, int(den))

        m = _FRACTION_RE.match(s)
        if m:
            sign, num, den = m.groups()
            if int(den) == 0:
                raise ParseError(f"Zero denominator in literal: {s!r}")
            return cls(-int(num) if sign == "-" else int(num), int(den))

        m = _INT_RE.match(s)
        if m:
            sign, digits = m.groups()
            return cls(-int(digits) if sign == "-" else int(digits))

        raise ParseError(f"Malformed number literal: {s!r}")

    # --- Arithmetic ---------------------------------------------------------------

    def add(self, other: Rational) -> Rational:
        return Rational(
            self._numerator * other._denominator + other._numerator * self._denominator,
            self._denominator * other._denominator,
        )

    def subtract(self, other: Rational) -> Rational:
        return Rational(
            self._numerator * other._denominator - other._numerator * self._denominator,
            self._denominator * other._denominator,
        )

    def multiply(self, other: Rational) -> Rational:
        return Rational(
            self._numerator * other._numerator,
            self._denominator * other._denominator,
        )

    def divide(self, other: Rational) -> Rational:
        if other._numerator == 0:
            raise DivisionByZero("Cannot divide by zero.")
        return self.multiply(other.reciprocal())

    def reciprocal(self) -> Rational:
        if self._numerator == 0:
            raise DivisionByZero("Zero has no reciprocal.")
        return Rational(self._denominator, self._numerator)

    def compare(self, other: Rational) -> int:
        lhs = self._numerator * other._denominator
        rhs = other._numerator * self._denominator
        return (lhs > rhs) - (lhs < rhs)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide

    # --- Predicates ---------------------------------------------------------------

    def is_integer(self) -> bool:
        return self._denominator == 1

    def is_proper_fraction(self) -> bool:
        # Strictly between 0 and 1.
        return 0 < self._numerator < self._denominator

    # --- Rendering ----------------------------------------------------------------

    def to_display_string(self) -> str:
        n, d = self._numerator, self._denominator
        if n == 0:
            return "0"
        if d == 1:
            return str(n)
        sign = "-" if n < 0 else ""
        whole, rem = divmod(abs(n), d)
        if whole == 0:
            return f"{sign}{rem}/{d}"
        return f"{sign}{whole}'{rem}/{d}"

    def to_computable_string(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    # --- Dunder plumbing ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rational):
            return (self._numerator, self._denominator) == (other._numerator, other._denominator)
        if isinstance(other, int):
            return self._denominator == 1 and self._numerator == other
        return NotImplemented

    def __lt__(self, other: Rational) -> bool:
        if not isinstance(other, Rational):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        # must agree with int equality above
        if self._denominator == 1:
            return hash(self._numerator)
        return hash((self._numerator, self._denominator))

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"
