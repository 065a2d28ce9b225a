"""
Minimal-polynomial discovery by reduction to nearest subset sum.

A degree-d polynomial with coefficients in a k-bit window is written as

  c_0 = 1 + sum_j e_(0,j) 2^j,   c_i = -2^(k-1) + sum_j e_(i,j) 2^j  (i >= 1)

with bits e_(i,j) in {0, 1}. Then P(x) = 0 exactly when the items
2^j x^i (index k*i + j) selected by e sum to

  T = -1 + 2^(k-1) sum_(i=1..d) x^i.

The search tries d = 1..max_deg and accepts the first candidate whose sign
changes across the enclosure of x. Running out of degrees is a normal
outcome, reported through the result object.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .enclosure import Ball
from .errors import AlgebraicsInputError, SubsetSumInfeasibleError
from .polynomial import IntegerPolynomial
from .roots import has_sign_change
from .subset_sum import SubsetSumProblem, subset_sum_certificate

_logger = logging.getLogger(__name__)


@dataclass
class MinimalPolynomialSearch:
    success: bool
    polynomial: Optional[IntegerPolynomial] = None
    degree_tried: int = 0
    total_elapsed_ms: float = 0.0
    diagnostics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "polynomial": None if self.polynomial is None else self.polynomial.to_dict(),
            "degree_tried": self.degree_tried,
            "total_elapsed_ms": self.total_elapsed_ms,
            "diagnostics": dict(self.diagnostics),
            "error": self.error,
        }


def _check_bounds(k: int, degree: int) -> None:
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise AlgebraicsInputError(f"bits per coefficient must be a positive int, got {k!r}")
    if isinstance(degree, bool) or not isinstance(degree, int) or degree < 1:
        raise AlgebraicsInputError(f"degree must be a positive int, got {degree!r}")


def to_subset_sum(
    x: Any,
    k: int,
    degree: int,
    *,
    precision: Optional[NumericPrecision] = None,
) -> SubsetSumProblem:
    """Subset-sum instance whose exact solutions are the k-bit polynomials vanishing at x."""
    _check_bounds(k, degree)
    prec = resolve_precision(precision)
    base = prec.approx(x)
    powers = [base ** i for i in range(degree + 1)]
    items = tuple((1 << j) * powers[i] for i in range(degree + 1) for j in range(k))
    target = -1 + (1 << (k - 1)) * sum(powers[1:])
    return SubsetSumProblem(items, target)


def subset_to_polynomial(inclusion: Sequence[int], k: int, degree: int) -> IntegerPolynomial:
    """Decode an inclusion vector of ``to_subset_sum(x, k, degree)`` into its polynomial."""
    _check_bounds(k, degree)
    if len(inclusion) != k * (degree + 1):
        raise AlgebraicsInputError(
            f"inclusion vector has {len(inclusion)} entries, expected {k * (degree + 1)}"
        )
    lowest_first: List[int] = []
    for i in range(degree + 1):
        offset = 1 if i == 0 else -(1 << (k - 1))
        lowest_first.append(offset + sum(int(inclusion[k * i + j]) << j for j in range(k)))
    return IntegerPolynomial.from_lowest_first(lowest_first)


def search_minimal_polynomial(
    enclosure: Ball,
    max_k: int,
    max_deg: int,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> MinimalPolynomialSearch:
    """
    Smallest degree <= max_deg whose best k-bit candidate brackets a root in
    the enclosure. The accepted polynomial is returned square-free, primitive,
    with a positive leading coefficient.
    """
    t0 = time.perf_counter()
    _check_bounds(max_k, max_deg)
    if not isinstance(enclosure, Ball):
        raise AlgebraicsInputError(f"enclosure must be a Ball, got {type(enclosure).__name__}")
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    largest = max_k * (max_deg + 1)
    if largest > budget.max_subset_items:
        raise SubsetSumInfeasibleError(
            f"max_k={max_k}, max_deg={max_deg} needs {largest} items, ceiling is {budget.max_subset_items}"
        )

    attempts: List[Dict[str, Any]] = []
    for degree in range(1, max_deg + 1):
        problem = to_subset_sum(enclosure.center, max_k, degree, precision=prec)
        certificate = subset_sum_certificate(problem, precision=prec, budget=budget)
        candidate = subset_to_polynomial(certificate.inclusion, max_k, degree)
        accepted = candidate.degree >= 1 and has_sign_change(candidate, enclosure, precision=prec)
        attempts.append(
            {
                "degree": degree,
                "candidate": str(candidate),
                "subset_error": float(certificate.optimal_error),
                "accepted": accepted,
            }
        )
        _logger.debug("degree %d candidate %s (subset error %.3e)", degree, candidate, float(certificate.optimal_error))
        if accepted:
            polynomial = candidate.square_free_part()
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            _logger.info("minimal polynomial of %s found at degree %d: %s", enclosure, degree, polynomial)
            return MinimalPolynomialSearch(
                success=True,
                polynomial=polynomial,
                degree_tried=degree,
                total_elapsed_ms=elapsed_ms,
                diagnostics={"attempts": attempts, "max_k": max_k, "max_deg": max_deg},
            )

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    _logger.info("no polynomial of degree <= %d with %d-bit coefficients fits %s", max_deg, max_k, enclosure)
    return MinimalPolynomialSearch(
        success=False,
        degree_tried=max_deg,
        total_elapsed_ms=elapsed_ms,
        diagnostics={"attempts": attempts, "max_k": max_k, "max_deg": max_deg},
        error="precision exhausted",
    )


def find_minimal_polynomial(
    enclosure: Ball,
    max_k: int,
    max_deg: int,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Optional[IntegerPolynomial]:
    """The polynomial found by ``search_minimal_polynomial``, or None."""
    result = search_minimal_polynomial(enclosure, max_k, max_deg, precision=precision, budget=budget)
    return result.polynomial if result.success else None
