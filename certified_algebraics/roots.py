"""
Real root counting and isolation (Sturm sequences, bisection) and complex
root approximation (Durand-Kerner).

Boundary convention: counts are taken on half-open intervals (a, b]. Sign
changes skip exact zeros, so V(a) - V(b) is the number of distinct roots in
(a, b] even when a or b is itself a root. Bisection at m therefore splits
(a, b] into the disjoint (a, m] and (m, b]; a root landing on m belongs to
the lower half only.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Any, List, Optional, Tuple

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision, to_fraction
from .enclosure import Ball, ComplexBall
from .errors import AlgebraicsInputError, PrecisionExhaustedError
from .polynomial import IntegerPolynomial

_logger = logging.getLogger(__name__)


# =============================================================================
# Sturm sequences
# =============================================================================


class SturmSequence:
    """
    p_0 = p, p_1 = p', p_(i+1) = -(p_(i-1) mod p_i) until a constant.

    Each member is divided by its positive content, which leaves all signs
    and hence all sign-change counts unchanged.
    """

    def __init__(self, polynomial: IntegerPolynomial) -> None:
        if not isinstance(polynomial, IntegerPolynomial):
            raise AlgebraicsInputError(f"expected IntegerPolynomial, got {type(polynomial).__name__}")
        if polynomial.is_zero:
            raise AlgebraicsInputError("the zero polynomial has no Sturm sequence")
        self.polynomial = polynomial
        chain: List[IntegerPolynomial] = [polynomial]
        if polynomial.degree > 0:
            chain.append(polynomial.derivative().primitive_part())
            while chain[-1].degree > 0:
                chain.append(chain[-2].pseudo_remainder(chain[-1]).negate().primitive_part())
        self.chain: Tuple[IntegerPolynomial, ...] = tuple(chain)

    def __len__(self) -> int:
        return len(self.chain)

    def sign_changes(self, x: Any) -> int:
        changes = 0
        previous = 0
        for member in self.chain:
            sign = member.sign_at(x)
            if sign == 0:
                continue
            if previous and sign != previous:
                changes += 1
            previous = sign
        return changes

    def count(self, lower: Any, upper: Any) -> int:
        """Distinct real roots in (lower, upper]."""
        if upper < lower:
            raise AlgebraicsInputError(f"empty interval ({lower}, {upper}]")
        return self.sign_changes(lower) - self.sign_changes(upper)

    def count_closed(self, lower: Any, upper: Any) -> int:
        """Distinct real roots in [lower, upper]: the half-open count plus a root at lower."""
        inside = self.count(lower, upper)
        if self.polynomial.sign_at(lower) == 0:
            inside += 1
        return inside


def root_count(
    polynomial: IntegerPolynomial,
    lower: Any,
    upper: Any,
    *,
    precision: Optional[NumericPrecision] = None,
) -> int:
    """Distinct real roots of ``polynomial`` in (lower, upper]."""
    prec = resolve_precision(precision)
    return SturmSequence(polynomial).count(prec.scalar(lower), prec.scalar(upper))


# =============================================================================
# Root bounds
# =============================================================================


def cauchy_bound(polynomial: IntegerPolynomial) -> Fraction:
    """1 + max |a_i / a_n|: every root satisfies |z| < bound (exact)."""
    if polynomial.degree < 1:
        return Fraction(0)
    lead = abs(polynomial.leading_coefficient)
    return 1 + max(Fraction(abs(c), lead) for c in polynomial.coefficients[1:])


def fujiwara_bound(polynomial: IntegerPolynomial) -> float:
    """
    2 max(|a_(n-1)/a_n|, |a_(n-2)/a_n|^(1/2), ..., |a_0/(2 a_n)|^(1/n)).
    Computed in float; use root_upper_bound for a verified value.
    """
    n = polynomial.degree
    if n < 1:
        return 0.0
    lead = abs(polynomial.leading_coefficient)
    terms = []
    for i, c in enumerate(polynomial.coefficients[1:], start=1):
        ratio = Fraction(abs(c), lead)
        if i == n:
            ratio /= 2
        try:
            terms.append(float(ratio) ** (1.0 / i))
        except OverflowError as e:
            raise PrecisionExhaustedError(f"coefficient ratios of {polynomial} overflow float") from e
    return 2.0 * max(terms)


def root_upper_bound(
    polynomial: IntegerPolynomial,
    *,
    precision: Optional[NumericPrecision] = None,
) -> Any:
    """
    B with |z| < B for every complex root z: the larger of the Fujiwara and
    Cauchy bounds. The Cauchy part is exact, so B is verified.
    """
    prec = resolve_precision(precision)
    bound = max(cauchy_bound(polynomial), to_fraction(fujiwara_bound(polynomial)))
    if prec.is_exact:
        return bound
    value = prec.approx(bound)
    return np.nextafter(value, value.dtype.type(np.inf))


# =============================================================================
# Isolation
# =============================================================================


def _bisect(
    sturm: SturmSequence,
    lower: Any,
    upper: Any,
    changes_lower: int,
    changes_upper: int,
    error: Any,
    depth: int,
    max_depth: int,
) -> List[Ball]:
    count = changes_lower - changes_upper
    if count <= 0:
        return []
    half = (upper - lower) / 2
    middle = lower + half
    if half < error:
        return [Ball(middle, half)] * count
    if depth >= max_depth or not (lower < middle < upper):
        raise PrecisionExhaustedError(
            f"bisection stopped at depth {depth} with {count} roots in ({lower}, {upper}]"
        )
    changes_middle = sturm.sign_changes(middle)
    left = _bisect(sturm, lower, middle, changes_lower, changes_middle, error, depth + 1, max_depth)
    right = _bisect(sturm, middle, upper, changes_middle, changes_upper, error, depth + 1, max_depth)
    return left + right


def isolate_real_roots(
    polynomial: IntegerPolynomial,
    lower: Any = None,
    upper: Any = None,
    *,
    error: Any,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Tuple[Ball, ...]:
    """
    Enclosures of radius < error for the real roots in (lower, upper], in
    increasing order. A cluster that cannot be split at that radius comes out
    as repeated copies of the same enclosure, one per root. Bounds default to
    the verified global bound.
    """
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    if error is None or not error > 0:
        raise AlgebraicsInputError(f"error must be positive, got {error!r}")
    sturm = SturmSequence(polynomial)
    if lower is None or upper is None:
        bound = root_upper_bound(polynomial, precision=prec)
        lower = -bound if lower is None else lower
        upper = bound if upper is None else upper
    lo, hi = prec.scalar(lower), prec.scalar(upper)
    if hi < lo:
        raise AlgebraicsInputError(f"empty interval ({lower}, {upper}]")
    roots = _bisect(
        sturm,
        lo,
        hi,
        sturm.sign_changes(lo),
        sturm.sign_changes(hi),
        prec.scalar(error),
        0,
        budget.max_bisection_depth,
    )
    _logger.info("isolated %d real roots of %s in (%s, %s]", len(roots), polynomial, float(lo), float(hi))
    if len({(r.center, r.radius) for r in roots}) < len(roots):
        _logger.warning("roots of %s closer than %s share an enclosure", polynomial, error)
    return tuple(roots)


def all_real_roots(
    polynomial: IntegerPolynomial,
    *,
    error: Any,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Tuple[Ball, ...]:
    return isolate_real_roots(polynomial, error=error, precision=precision, budget=budget)


def has_sign_change(
    polynomial: IntegerPolynomial,
    enclosure: Ball,
    *,
    precision: Optional[NumericPrecision] = None,
) -> bool:
    """
    True when p takes strictly opposite signs at the two ends of the
    enclosure, beyond the evaluation error of the working precision.
    """
    prec = resolve_precision(precision)
    center, radius = prec.scalar(enclosure.center), prec.scalar(enclosure.radius)
    lo, hi = center - radius, center + radius
    at_lo, at_hi = polynomial.evaluate(lo), polynomial.evaluate(hi)
    tol_lo = prec.evaluation_tolerance(polynomial.coefficients, lo)
    tol_hi = prec.evaluation_tolerance(polynomial.coefficients, hi)
    return bool((at_lo < -tol_lo and at_hi > tol_hi) or (at_lo > tol_lo and at_hi < -tol_hi))


# =============================================================================
# Durand-Kerner
# =============================================================================


def _order_roots(roots: List[complex], error: float) -> List[complex]:
    """
    Increasing real part; roots whose real parts agree to within ``error``
    (conjugate pairs) form one cluster, ordered by imaginary part.
    """
    clusters: List[List[complex]] = []
    for z in sorted(roots, key=lambda w: w.real):
        if clusters and z.real - clusters[-1][-1].real < error:
            clusters[-1].append(z)
        else:
            clusters.append([z])
    return [z for cluster in clusters for z in sorted(cluster, key=lambda w: w.imag)]


def durand_kerner(
    polynomial: IntegerPolynomial,
    error: float,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Tuple[ComplexBall, ...]:
    """
    All complex roots of a square-free polynomial, as disks of radius ``error``.

    Guesses start at s, s^2, ..., s^n for the seed s = (0.4 + 0.9i) n^(1/(2n))
    and are corrected simultaneously by
      z_i <- z_i - p(z_i) / (a_n prod_(j != i) (z_i - z_j))
    until the largest correction is below error / 2. Convergence is not
    guaranteed: the budget's iteration ceiling raises PrecisionExhaustedError.
    """
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    n = polynomial.degree
    if n < 1:
        raise AlgebraicsInputError(f"need a non-constant polynomial, got {polynomial}")
    if not error > 0:
        raise AlgebraicsInputError(f"error must be positive, got {error!r}")

    dtype = prec.complex_dtype
    coefficients = np.array([prec.approx(c) for c in polynomial.coefficients], dtype=dtype)
    lead = coefficients[0]
    scale = math.sqrt(n) ** (1.0 / n)
    seed = dtype.type(complex(0.4 * scale, 0.9 * scale))
    guesses = seed ** np.arange(1, n + 1)

    for sweep in range(1, budget.max_iterations + 1):
        differences = guesses[:, None] - guesses[None, :]
        np.fill_diagonal(differences, 1)
        denominators = lead * np.prod(differences, axis=1)
        if np.any(denominators == 0):
            raise PrecisionExhaustedError(f"Durand-Kerner guesses collided at sweep {sweep}")
        steps = np.polyval(coefficients, guesses) / denominators
        guesses = guesses - steps
        largest = float(np.max(np.abs(steps)))
        if not math.isfinite(largest):
            raise PrecisionExhaustedError(f"Durand-Kerner diverged at sweep {sweep}")
        if largest < error / 2:
            _logger.debug("Durand-Kerner: degree %d converged in %d sweeps", n, sweep)
            ordered = _order_roots([complex(z) for z in guesses], float(error))
            return tuple(ComplexBall(z, float(error)) for z in ordered)
    raise PrecisionExhaustedError(
        f"Durand-Kerner did not converge within {budget.max_iterations} sweeps for {polynomial}"
    )
