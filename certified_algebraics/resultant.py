"""
Resultant engine: integer polynomials whose roots are the pairwise sums or
products of the roots of two inputs.

For p of degree m and q of degree n the combined polynomial has degree at
most m*n. It is sampled at x = 0..m*n as Sylvester determinants in an
auxiliary variable y and then interpolated:

  sum:      R(x) = Res_y(p(y), q(x - y))
  product:  R(x) = Res_y(p(y), y^n q(x / y))

Every sample is the determinant of an integer matrix, hence an integer. The
working precision only decides how that determinant is computed; a floating
determinant is rounded to the nearest integer after checking that its
Hadamard bound leaves the rounding unambiguous, and the integer samples are
interpolated exactly. The interpolated polynomial must reproduce every
sample, otherwise PrecisionExhaustedError is raised.

The second operand of the product keeps its formal degree n for every x,
so all samples come from the same polynomial identity. x = 0 is evaluated
in closed form, q(0)^m ((-1)^m p(0))^n, rather than forced to 0: the two
agree whenever 0 is a product root, and otherwise the closed form is the
true resultant. A product polynomial built by dropping the formal degree
of y^n q(x/y) can differ from R by an overall sign.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, List, Optional, Sequence, Union

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision, to_fraction
from .enclosure import Ball
from .errors import AlgebraicsInputError, PrecisionExhaustedError
from .interpolation import interpolate
from .matrices import determinant
from .polynomial import IntegerPolynomial

_logger = logging.getLogger(__name__)

_EXACT = NumericPrecision.exact()


def _sylvester_rows(p: Sequence[int], q: Sequence[int]) -> List[List[int]]:
    m = len(p) - 1
    n = len(q) - 1
    size = m + n
    rows: List[List[int]] = []
    for i in range(n):
        rows.append([0] * i + list(p) + [0] * (size - m - 1 - i))
    for i in range(m):
        rows.append([0] * i + list(q) + [0] * (size - n - 1 - i))
    return rows


def sylvester_matrix(
    p: IntegerPolynomial,
    q: IntegerPolynomial,
    precision: Optional[NumericPrecision] = None,
) -> np.ndarray:
    """(m+n)x(m+n) Sylvester matrix: n shifted rows of p, then m shifted rows of q."""
    if p.degree < 1 or q.degree < 1:
        raise AlgebraicsInputError(
            f"Sylvester matrix needs two non-constant polynomials, got degrees {p.degree} and {q.degree}"
        )
    return resolve_precision(precision).array(_sylvester_rows(p.coefficients, q.coefficients))


def _require_combinable(p: IntegerPolynomial, q: IntegerPolynomial) -> None:
    for name, poly in (("p", p), ("q", q)):
        if not isinstance(poly, IntegerPolynomial):
            raise AlgebraicsInputError(f"{name} must be IntegerPolynomial, got {type(poly).__name__}")
        if poly.degree < 1:
            raise AlgebraicsInputError(f"{name} must have degree >= 1, got {poly}")


def _integer_determinant(rows: List[List[int]], prec: NumericPrecision, budget: ComputeBudget) -> int:
    """Determinant of an integer matrix, rounded from the working type when that is floating."""
    value = determinant(prec.array(rows), prec, budget)
    if prec.is_exact:
        return int(value)
    # size * eps * prod ||row|| must stay below 1/2, compared exactly in squares
    hadamard_squared = 1
    for row in rows:
        hadamard_squared *= sum(c * c for c in row)
    error_squared = (len(rows) * to_fraction(prec.eps)) ** 2 * hadamard_squared
    if 4 * error_squared >= 1:
        raise PrecisionExhaustedError(
            f"{prec.kind.value} cannot round a {len(rows)}x{len(rows)} integer determinant "
            f"with Hadamard bound {math.isqrt(hadamard_squared)} to an integer"
        )
    if not np.isfinite(value):
        raise PrecisionExhaustedError(f"{prec.kind.value} determinant is not finite: {value!r}")
    return int(np.rint(value))


def _sample_and_interpolate(
    label: str,
    p: IntegerPolynomial,
    q: IntegerPolynomial,
    sample: Callable[[int], Union[int, List[List[int]]]],
    prec: NumericPrecision,
    budget: ComputeBudget,
) -> IntegerPolynomial:
    t0 = time.perf_counter()
    degree = p.degree * q.degree
    values: List[int] = []
    for x in range(degree + 1):
        entry = sample(x)
        value = entry if isinstance(entry, int) else _integer_determinant(entry, prec, budget)
        _logger.debug("%s resultant: R(%d) = %d", label, x, value)
        values.append(value)
    result = interpolate(values, degree, precision=_EXACT, budget=budget)
    for x, value in enumerate(values):
        if result.evaluate(x) != value:
            raise PrecisionExhaustedError(
                f"{label} resultant {result} does not reproduce R({x}) = {value}; "
                f"the {prec.kind.value} samples are not the values of one integer polynomial"
            )
    _logger.info(
        "%s resultant of degrees %d and %d: degree %d in %.1f ms",
        label,
        p.degree,
        q.degree,
        result.degree,
        (time.perf_counter() - t0) * 1000.0,
    )
    return result


def resultant_sum(
    p: IntegerPolynomial,
    q: IntegerPolynomial,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> IntegerPolynomial:
    """Integer polynomial vanishing at every alpha + beta, p(alpha) = q(beta) = 0."""
    _require_combinable(p, q)
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)

    def sample(s: int) -> List[List[int]]:
        shifted = q.linear_substitution(-1, s)
        return _sylvester_rows(p.coefficients, shifted.coefficients)

    return _sample_and_interpolate("sum", p, q, sample, prec, budget)


def resultant_product(
    p: IntegerPolynomial,
    q: IntegerPolynomial,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> IntegerPolynomial:
    """
    Integer polynomial vanishing at every alpha * beta, p(alpha) = q(beta) = 0.

    R(0) is the closed form q(0)^m ((-1)^m p(0))^n, not a forced zero.
    """
    _require_combinable(p, q)
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    m, n = p.degree, q.degree
    q_lowest_first = q.lowest_first()

    def sample(x: int) -> Union[int, List[List[int]]]:
        if x == 0:
            return q.constant_term ** m * ((-1) ** m * p.constant_term) ** n
        # y^n q(x/y), highest power of y first, leading zeros kept
        scaled = [c * x ** i for i, c in enumerate(q_lowest_first)]
        return _sylvester_rows(p.coefficients, scaled)

    return _sample_and_interpolate("product", p, q, sample, prec, budget)


def combine_minimal_polynomial(
    operation: str,
    p: IntegerPolynomial,
    q: IntegerPolynomial,
    enclosure: Ball,
    factorer: Any,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> IntegerPolynomial:
    """
    Minimal polynomial of alpha (op) beta given the propagated enclosure.

    ``operation`` is "sum" or "product"; ``factorer`` picks the irreducible
    factor of the combined polynomial whose root lies in ``enclosure``.
    """
    if operation == "sum":
        combined = resultant_sum(p, q, precision=precision, budget=budget)
    elif operation == "product":
        combined = resultant_product(p, q, precision=precision, budget=budget)
    else:
        raise AlgebraicsInputError(f"operation must be 'sum' or 'product', got {operation!r}")
    return factorer.factor(combined, enclosure)
