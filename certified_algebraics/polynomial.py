"""
Dense univariate polynomials with integer coefficients.

Coefficients are stored highest degree first; the zero polynomial is the
single coefficient (0,). Every operation returns a fresh polynomial and leaves
its operands untouched (the class is frozen).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np

from .errors import AlgebraicsInputError, PrecisionExhaustedError
from .integers import content as _content
from .integers import gcd as _int_gcd

_logger = logging.getLogger(__name__)

PolynomialLike = Union["IntegerPolynomial", int]


def strip_leading_zeros(coefficients: Sequence[int]) -> Tuple[int, ...]:
    """Drop leading zero coefficients; an all-zero (or empty) input becomes (0,)."""
    coeffs = tuple(int(c) for c in coefficients)
    start = 0
    while start < len(coeffs) - 1 and coeffs[start] == 0:
        start += 1
    if not coeffs:
        return (0,)
    return coeffs[start:]


def _check_coefficient(index: int, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise AlgebraicsInputError(
            f"polynomial coefficient must be int, idx={index}, got {type(value).__name__}"
        )
    return int(value)


@dataclass(frozen=True)
class IntegerPolynomial:
    """
    P(x) = c_0 x^d + c_1 x^(d-1) + ... + c_d, with ``coefficients == (c_0, ..., c_d)``.

    Invariant: c_0 != 0 unless P is the zero polynomial ``(0,)``. Use
    ``from_coefficients`` to build from a sequence that may carry leading zeros.
    """

    coefficients: Tuple[int, ...]

    def __post_init__(self) -> None:
        if isinstance(self.coefficients, (str, bytes)) or not isinstance(self.coefficients, Iterable):
            raise AlgebraicsInputError("polynomial coefficients must be a sequence of ints")
        coeffs = tuple(_check_coefficient(i, c) for i, c in enumerate(self.coefficients))
        if not coeffs:
            raise AlgebraicsInputError("polynomial coefficients must be non-empty")
        if len(coeffs) > 1 and coeffs[0] == 0:
            raise AlgebraicsInputError(
                f"leading coefficient must be nonzero, got {coeffs!r}; use from_coefficients to strip"
            )
        object.__setattr__(self, "coefficients", coeffs)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_coefficients(cls, coefficients: Iterable[int]) -> "IntegerPolynomial":
        """Highest-degree-first coefficients, leading zeros allowed."""
        coeffs = [_check_coefficient(i, c) for i, c in enumerate(coefficients)]
        return cls(strip_leading_zeros(coeffs))

    @classmethod
    def from_lowest_first(cls, coefficients: Iterable[int]) -> "IntegerPolynomial":
        return cls.from_coefficients(list(coefficients)[::-1])

    @classmethod
    def zero(cls) -> "IntegerPolynomial":
        return cls((0,))

    @classmethod
    def constant(cls, value: int) -> "IntegerPolynomial":
        return cls((_check_coefficient(0, value),))

    @classmethod
    def monomial(cls, coefficient: int, power: int) -> "IntegerPolynomial":
        if power < 0:
            raise AlgebraicsInputError(f"power must be >= 0, got {power}")
        return cls.from_coefficients((coefficient,) + (0,) * int(power))

    @classmethod
    def from_integer_roots(cls, roots: Iterable[int], *, leading: int = 1) -> "IntegerPolynomial":
        result = cls.constant(leading)
        for r in roots:
            result = result.multiply(cls((1, -_check_coefficient(0, r))))
        return result

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    @property
    def leading_coefficient(self) -> int:
        return self.coefficients[0]

    @property
    def constant_term(self) -> int:
        return self.coefficients[-1]

    @property
    def is_zero(self) -> bool:
        return self.coefficients == (0,)

    @property
    def is_constant(self) -> bool:
        return len(self.coefficients) == 1

    def coefficient(self, power: int) -> int:
        """Coefficient of x^power (0 beyond the degree)."""
        if power < 0 or power > self.degree:
            return 0
        return self.coefficients[self.degree - power]

    def lowest_first(self) -> Tuple[int, ...]:
        return self.coefficients[::-1]

    # ------------------------------------------------------------------
    # Ring operations
    # ------------------------------------------------------------------

    def add(self, other: "IntegerPolynomial") -> "IntegerPolynomial":
        a, b = self.coefficients, other.coefficients
        width = max(len(a), len(b))
        a = (0,) * (width - len(a)) + a
        b = (0,) * (width - len(b)) + b
        return IntegerPolynomial.from_coefficients(x + y for x, y in zip(a, b))

    def negate(self) -> "IntegerPolynomial":
        return IntegerPolynomial(tuple(-c for c in self.coefficients))

    def subtract(self, other: "IntegerPolynomial") -> "IntegerPolynomial":
        return self.add(other.negate())

    def scale(self, factor: int) -> "IntegerPolynomial":
        factor = _check_coefficient(0, factor)
        return IntegerPolynomial.from_coefficients(c * factor for c in self.coefficients)

    def multiply(self, other: "IntegerPolynomial") -> "IntegerPolynomial":
        if self.is_zero or other.is_zero:
            return IntegerPolynomial.zero()
        out = [0] * (len(self.coefficients) + len(other.coefficients) - 1)
        for i, a in enumerate(self.coefficients):
            if a == 0:
                continue
            for j, b in enumerate(other.coefficients):
                out[i + j] += a * b
        return IntegerPolynomial.from_coefficients(out)

    def power(self, exponent: int) -> "IntegerPolynomial":
        """Repeated squaring; p^0 == 1 for every p."""
        if isinstance(exponent, bool) or not isinstance(exponent, int) or exponent < 0:
            raise AlgebraicsInputError(f"exponent must be a nonnegative int, got {exponent!r}")
        if exponent == 0:
            return IntegerPolynomial.constant(1)
        half = self.power(exponent // 2)
        square = half.multiply(half)
        return square.multiply(self) if exponent % 2 else square

    def raise_degree(self, shift: int) -> "IntegerPolynomial":
        """Multiply by x^shift."""
        if shift < 0:
            raise AlgebraicsInputError(f"shift must be >= 0, got {shift}")
        if self.is_zero:
            return IntegerPolynomial.zero()
        return IntegerPolynomial(self.coefficients + (0,) * int(shift))

    def reverse(self) -> "IntegerPolynomial":
        """x^d P(1/x): the roots become their reciprocals."""
        return IntegerPolynomial.from_coefficients(self.coefficients[::-1])

    def compose(self, inner: "IntegerPolynomial") -> "IntegerPolynomial":
        """P(Q(x)) by Horner's rule in the polynomial ring."""
        result = IntegerPolynomial.zero()
        for c in self.coefficients:
            result = result.multiply(inner).add(IntegerPolynomial.constant(c))
        return result

    def linear_substitution(self, a: int, b: int) -> "IntegerPolynomial":
        """P(a x + b). With a == 0 this is the constant P(b)."""
        a = _check_coefficient(0, a)
        b = _check_coefficient(1, b)
        if a == 0:
            return IntegerPolynomial.constant(self.evaluate(b))
        return self.compose(IntegerPolynomial((a, b)))

    def derivative(self) -> "IntegerPolynomial":
        d = self.degree
        if d == 0:
            return IntegerPolynomial.zero()
        return IntegerPolynomial.from_coefficients(c * (d - i) for i, c in enumerate(self.coefficients[:-1]))

    def pseudo_remainder(self, divisor: "IntegerPolynomial") -> "IntegerPolynomial":
        """
        Remainder of self modulo divisor, scaled by a positive integer.

        Each step cancels the leading term with g = gcd(lc_r, lc_d):
          r <- r * |lc_d|/g - d * (lc_r * sign(lc_d)/g) * x^(deg r - deg d)
        so the result equals k * (true remainder) for some integer k > 0.
        A divisor of larger degree leaves self unchanged.
        """
        if divisor.is_zero:
            raise AlgebraicsInputError("pseudo-remainder by the zero polynomial")
        remainder = self
        while not remainder.is_zero and remainder.degree >= divisor.degree:
            lr = remainder.leading_coefficient
            ld = divisor.leading_coefficient
            g = _int_gcd(lr, ld)
            sign = 1 if ld > 0 else -1
            remainder = remainder.scale(abs(ld) // g).subtract(
                divisor.scale(sign * (lr // g)).raise_degree(remainder.degree - divisor.degree)
            )
        return remainder

    # ------------------------------------------------------------------
    # Divisibility
    # ------------------------------------------------------------------

    def _divmod_rational(self, divisor: "IntegerPolynomial") -> Tuple[List[Fraction], List[Fraction]]:
        if divisor.is_zero:
            raise AlgebraicsInputError("division by the zero polynomial")
        rem = [Fraction(c) for c in self.coefficients]
        lead = divisor.leading_coefficient
        steps = self.degree - divisor.degree + 1
        if self.is_zero or steps <= 0:
            return [Fraction(0)], rem
        quotient: List[Fraction] = []
        for i in range(steps):
            coef = rem[i] / lead
            quotient.append(coef)
            if coef:
                for j, d in enumerate(divisor.coefficients):
                    rem[i + j] -= coef * d
        return quotient, rem[steps:]

    def exact_quotient(self, divisor: "IntegerPolynomial") -> "IntegerPolynomial":
        """self / divisor, which must be an integer polynomial with zero remainder."""
        quotient, remainder = self._divmod_rational(divisor)
        if any(remainder) or any(c.denominator != 1 for c in quotient):
            raise AlgebraicsInputError(f"{divisor} does not divide {self} over the integers")
        return IntegerPolynomial.from_coefficients(int(c) for c in quotient)

    def divides(self, other: "IntegerPolynomial") -> bool:
        """True when other == self * q for an integer polynomial q."""
        quotient, remainder = other._divmod_rational(self)
        return not any(remainder) and all(c.denominator == 1 for c in quotient)

    def content(self) -> int:
        return _content(self.coefficients)

    def primitive_part(self) -> "IntegerPolynomial":
        """Divide by the positive content (sign kept)."""
        g = self.content()
        if g in (0, 1):
            return self
        return IntegerPolynomial(tuple(c // g for c in self.coefficients))

    def normalized(self) -> "IntegerPolynomial":
        """Primitive part with a positive leading coefficient."""
        p = self.primitive_part()
        return p.negate() if p.leading_coefficient < 0 else p

    def gcd(self, other: "IntegerPolynomial") -> "IntegerPolynomial":
        """Normalized gcd over Q[x] via the primitive pseudo-remainder sequence."""
        a, b = self.primitive_part(), other.primitive_part()
        if a.is_zero:
            return b.normalized()
        if b.is_zero:
            return a.normalized()
        if a.degree < b.degree:
            a, b = b, a
        while not b.is_zero:
            a, b = b, a.pseudo_remainder(b).primitive_part()
        return a.normalized()

    def square_free_part(self) -> "IntegerPolynomial":
        """P / gcd(P, P'), normalized: same roots, each simple."""
        if self.degree < 1:
            return self.normalized()
        g = self.gcd(self.derivative())
        return self.exact_quotient(g).normalized()

    def is_square_free(self) -> bool:
        if self.is_zero:
            return False
        return self.gcd(self.derivative()).degree == 0

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, x: Any) -> Any:
        """
        Horner evaluation. The arithmetic type follows x: exact for int and
        Fraction, rounded for float, numpy scalars and complex values.
        A coefficient too large for the float type of x raises
        PrecisionExhaustedError.
        """
        acc: Any = 0
        try:
            for c in self.coefficients:
                acc = acc * x + c
        except OverflowError as e:
            raise PrecisionExhaustedError(f"evaluating {self} at {x!r} overflows {type(x).__name__}") from e
        return acc

    def sign_at(self, x: Any) -> int:
        v = self.evaluate(x)
        if isinstance(v, (float, np.floating)) and not np.isfinite(v):
            raise PrecisionExhaustedError(f"{self} at {x!r} is {v!r}; its sign is not representable")
        if v > 0:
            return 1
        if v < 0:
            return -1
        return 0

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(other: Any) -> "IntegerPolynomial":
        if isinstance(other, IntegerPolynomial):
            return other
        if isinstance(other, (int, np.integer)) and not isinstance(other, bool):
            return IntegerPolynomial.constant(int(other))
        return NotImplemented

    def __call__(self, x: Any) -> Any:
        return self.evaluate(x)

    def __add__(self, other: PolynomialLike) -> "IntegerPolynomial":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __neg__(self) -> "IntegerPolynomial":
        return self.negate()

    def __sub__(self, other: PolynomialLike) -> "IntegerPolynomial":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other: PolynomialLike) -> "IntegerPolynomial":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.subtract(self)

    def __mul__(self, other: PolynomialLike) -> "IntegerPolynomial":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    def __pow__(self, exponent: int) -> "IntegerPolynomial":
        return self.power(exponent)

    def __mod__(self, divisor: "IntegerPolynomial") -> "IntegerPolynomial":
        return self.pseudo_remainder(divisor)

    def __str__(self) -> str:
        d = self.degree
        if d == 0:
            return str(self.coefficients[0])
        parts: List[str] = []
        for i, c in enumerate(self.coefficients):
            if c == 0:
                continue
            power = d - i
            magnitude = abs(c)
            if power == 0:
                body = str(magnitude)
            else:
                var = "x" if power == 1 else f"x^{power}"
                body = var if magnitude == 1 else f"{magnitude}{var}"
            if not parts:
                parts.append(f"-{body}" if c < 0 else body)
            else:
                parts.append(f"- {body}" if c < 0 else f"+ {body}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {"coefficients": list(self.coefficients), "degree": self.degree, "text": str(self)}
