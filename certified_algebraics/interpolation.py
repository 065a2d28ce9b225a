"""
Recover an integer polynomial of degree <= d from its values at 0, 1, ..., d.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, List, Optional, Sequence

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision, to_fraction
from .errors import AlgebraicsInputError, PrecisionExhaustedError
from .integers import continued_fraction_denominator, lcm
from .matrices import invert
from .polynomial import IntegerPolynomial

_logger = logging.getLogger(__name__)


def interpolation_matrix(degree: int, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    """Inverse of the Vandermonde matrix V[i][j] = i^j on the nodes 0..degree."""
    if degree < 0:
        raise AlgebraicsInputError(f"degree must be >= 0, got {degree}")
    prec = resolve_precision(precision)
    vandermonde = [[i ** j for j in range(degree + 1)] for i in range(degree + 1)]
    return invert(vandermonde, prec)


def _nearest_integer(value: Any) -> int:
    if isinstance(value, (int, Fraction)):
        return round(value)
    return int(np.rint(value))


def interpolate(
    values: Sequence[Any],
    degree: Optional[int] = None,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> IntegerPolynomial:
    """
    values[i] = P(i) for i = 0..degree.

    The rational coefficients V^-1 values are brought to a common denominator
    (continued-fraction reconstruction of each one, combined by lcm), scaled
    and rounded, so the result is that common multiple of P. The result must
    reproduce every scaled sample to within the reconstruction tolerance of
    the working precision, otherwise PrecisionExhaustedError is raised.
    """
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    if degree is None:
        degree = len(values) - 1
    if len(values) != degree + 1:
        raise AlgebraicsInputError(f"degree {degree} needs {degree + 1} samples, got {len(values)}")
    if degree < 0:
        raise AlgebraicsInputError("at least one sample is required")

    inverse = interpolation_matrix(degree, prec)
    samples = prec.array(values)
    lowest_first: List[Any] = list(inverse.dot(samples))

    denominators = [
        continued_fraction_denominator(c, precision=prec, budget=budget) for c in lowest_first
    ]
    common = lcm(*denominators)
    try:
        coefficients = [_nearest_integer(common * c) for c in reversed(lowest_first)]
    except OverflowError as e:
        raise PrecisionExhaustedError(
            f"{prec.kind.value} interpolation of degree {degree} needs common denominator {common}, "
            "which overflows the working type"
        ) from e
    result = IntegerPolynomial.from_coefficients(coefficients)
    for node, value in enumerate(values):
        expected = common * to_fraction(value)
        if abs(result.evaluate(node) - expected) > prec.reconstruction_tolerance(expected):
            raise PrecisionExhaustedError(
                f"{prec.kind.value} interpolation of degree {degree} gave {result}, "
                f"which misses sample {node} ({value!r}) scaled by {common}"
            )
    _logger.debug("interpolated degree %d from %d samples (common denominator %d)", result.degree, len(values), common)
    return result
