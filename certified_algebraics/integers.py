"""
Integer utilities: gcd/lcm, content, divisors, and continued-fraction
denominator recovery for values that are rational up to working precision.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from functools import reduce
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .errors import AlgebraicsInputError, PrecisionExhaustedError

_logger = logging.getLogger(__name__)


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise AlgebraicsInputError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


def gcd(a: int, b: int) -> int:
    """Nonnegative greatest common divisor; gcd(0, 0) == 0."""
    return math.gcd(_require_int("a", a), _require_int("b", b))


def lcm(*values: int) -> int:
    """
    Nonnegative least common multiple of all arguments.

    lcm() == 1 and any zero argument gives 0.
    """
    ints = [abs(_require_int("value", v)) for v in values]
    if any(v == 0 for v in ints):
        return 0
    return reduce(lambda x, y: x * y // math.gcd(x, y), ints, 1)


def content(coefficients: Iterable[int]) -> int:
    """gcd of all coefficients (0 for an all-zero sequence)."""
    return reduce(math.gcd, (abs(int(c)) for c in coefficients), 0)


def divisors(n: int) -> List[int]:
    """Positive divisors of |n| in increasing order (trial division up to sqrt)."""
    n = abs(_require_int("n", n))
    if n == 0:
        raise AlgebraicsInputError("0 has infinitely many divisors")
    small: List[int] = []
    large: List[int] = []
    d = 1
    while d * d <= n:
        if n % d == 0:
            small.append(d)
            if d * d != n:
                large.append(n // d)
        d += 1
    return small + large[::-1]


# =============================================================================
# Continued fractions
# =============================================================================


def _floor(x: Any) -> int:
    if isinstance(x, (int, Fraction)):
        return math.floor(x)
    return int(np.floor(x))


def _convergent_distance(value: Any, h: int, k: int) -> Any:
    if isinstance(value, (int, Fraction)):
        return abs(value - Fraction(h, k))
    return abs(float(value) - h / k)


def reconstruct_rational(
    value: Any,
    *,
    tolerance: Optional[float] = None,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Fraction:
    """
    Smallest-denominator continued-fraction convergent h/k with
    |value - h/k| <= tolerance.

    Exact inputs (int, Fraction) terminate with their own value. Floating
    inputs use ``precision.reconstruction_tolerance`` unless one is given.
    """
    prec = resolve_precision(precision)
    ceiling = resolve_budget(budget).max_continued_fraction_terms
    exact_input = isinstance(value, (int, Fraction))
    if not exact_input and not np.isfinite(float(value)):
        raise AlgebraicsInputError(f"cannot reconstruct a rational from {value!r}")
    if tolerance is None:
        tolerance = 0.0 if exact_input else prec.reconstruction_tolerance(value)
        if tolerance == 0.0 and not exact_input:
            tolerance = NumericPrecision.float64().reconstruction_tolerance(value)

    x = value
    a = _floor(x)
    # convergent recurrences h_i = a_i h_{i-1} + h_{i-2}, same for k
    h_prev, h = 1, a
    k_prev, k = 0, 1
    for _ in range(ceiling):
        if _convergent_distance(value, h, k) <= tolerance:
            return Fraction(h, k)
        remainder = x - a
        if remainder == 0:
            return Fraction(h, k)
        x = 1 / remainder
        a = _floor(x)
        h_prev, h = h, a * h + h_prev
        k_prev, k = k, a * k + k_prev
    raise PrecisionExhaustedError(
        f"continued fraction of {value!r} did not reach tolerance {tolerance!r} "
        f"within {ceiling} terms"
    )


def continued_fraction_denominator(
    value: Any,
    *,
    tolerance: Optional[float] = None,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> int:
    """Denominator of the rational that ``value`` approximates."""
    return reconstruct_rational(value, tolerance=tolerance, precision=precision, budget=budget).denominator


def continued_fraction_terms(value: Fraction, *, max_terms: int = 64) -> Tuple[int, ...]:
    """Partial quotients [a0; a1, a2, ...] of an exact rational."""
    x = Fraction(value)
    terms: List[int] = []
    while len(terms) < max_terms:
        a = math.floor(x)
        terms.append(int(a))
        remainder = x - a
        if remainder == 0:
            break
        x = 1 / remainder
    return tuple(terms)
