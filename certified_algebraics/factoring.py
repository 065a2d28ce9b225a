"""
Factoring collaborator: pick the irreducible factor of a combined polynomial
whose root lies in a given enclosure.

Any object with a ``factor(polynomial, enclosure)`` method can be supplied to
the algebraic-number operations. RootRecombinationFactorer is the default:

  1. reduce to the square-free primitive part;
  2. require exactly one real root in the enclosure (Sturm count), otherwise
     the choice is ambiguous;
  3. approximate all complex roots (Durand-Kerner) and group them into real
     roots and conjugate pairs;
  4. for growing degree, multiply out groups that contain the target root,
     scale by each divisor of the leading coefficient, round, and keep the
     first candidate that divides the polynomial exactly.

Step 4 is numeric only as a filter: a candidate is accepted on exact integer
division, never on closeness alone.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import List, Optional, Protocol, Tuple

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .enclosure import Ball
from .errors import AlgebraicsInputError, AmbiguousFactorError, PrecisionExhaustedError
from .integers import divisors
from .polynomial import IntegerPolynomial
from .roots import SturmSequence, durand_kerner, isolate_real_roots

_logger = logging.getLogger(__name__)


class Factorer(Protocol):
    def factor(self, polynomial: IntegerPolynomial, enclosure: Ball) -> IntegerPolynomial:
        ...


class RootRecombinationFactorer:
    """
    Default factoring collaborator.

    ``root_error`` is the radius to which the target root and the complex
    roots are approximated before recombination.
    """

    def __init__(
        self,
        *,
        root_error: float = 1e-10,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> None:
        if not root_error > 0:
            raise AlgebraicsInputError(f"root_error must be positive, got {root_error!r}")
        self.root_error = float(root_error)
        self.precision = precision
        self.budget = budget

    # ------------------------------------------------------------------

    def factor(self, polynomial: IntegerPolynomial, enclosure: Ball) -> IntegerPolynomial:
        prec = resolve_precision(self.precision)
        budget = resolve_budget(self.budget)
        if polynomial.is_zero:
            raise AmbiguousFactorError("every number is a root of the zero polynomial")
        reduced = polynomial.square_free_part()
        if reduced.degree < 1:
            raise AmbiguousFactorError(f"{polynomial} has no roots", analysis={"polynomial": str(polynomial)})

        lower = prec.scalar(enclosure.center) - prec.scalar(enclosure.radius)
        upper = prec.scalar(enclosure.center) + prec.scalar(enclosure.radius)
        inside = SturmSequence(reduced).count_closed(lower, upper)
        analysis = {"polynomial": str(reduced), "enclosure": enclosure.to_dict(), "roots_inside": inside}
        if inside != 1:
            raise AmbiguousFactorError(
                f"{inside} roots of {reduced} lie in {enclosure}; exactly one is required",
                analysis=analysis,
            )
        if reduced.degree == 1:
            return reduced

        if reduced.sign_at(lower) == 0:
            target = float(lower)
        else:
            target = float(
                isolate_real_roots(reduced, lower, upper, error=self.root_error, precision=prec, budget=budget)[0].center
            )
        groups = self._root_groups(reduced, prec, budget)
        target_index = min(range(len(groups)), key=lambda g: min(abs(z - target) for z in groups[g]))
        others = [g for i, g in enumerate(groups) if i != target_index]
        if 2 ** len(others) > budget.max_factor_combinations:
            raise PrecisionExhaustedError(
                f"{2 ** len(others)} root combinations exceed the ceiling of {budget.max_factor_combinations}"
            )

        candidates: List[Tuple[int, Tuple[Tuple[complex, ...], ...]]] = []
        for size in range(len(others) + 1):
            for combo in combinations(others, size):
                degree = 1 + sum(len(g) for g in combo)
                if degree < reduced.degree:
                    candidates.append((degree, combo))
        candidates.sort(key=lambda item: item[0])

        scales = divisors(reduced.leading_coefficient)
        tolerance = prec.factor_match_tolerance
        for degree, combo in candidates:
            roots = list(groups[target_index]) + [z for g in combo for z in g]
            monic = np.poly(np.array(roots, dtype=np.complex128))
            if np.max(np.abs(monic.imag)) > tolerance * max(1.0, float(np.max(np.abs(monic.real)))):
                continue
            for scale in scales:
                scaled = scale * monic.real
                rounded = np.rint(scaled)
                if np.max(np.abs(scaled - rounded)) > tolerance * max(1.0, float(np.max(np.abs(scaled)))):
                    continue
                factor = IntegerPolynomial.from_coefficients(int(c) for c in rounded)
                if factor.degree == degree and factor.divides(reduced):
                    result = factor.normalized()
                    _logger.info("factor %s of %s selected by %s", result, reduced, enclosure)
                    return result
        _logger.debug("no proper factor of %s matched; it is irreducible", reduced)
        return reduced

    def _root_groups(
        self,
        polynomial: IntegerPolynomial,
        prec: NumericPrecision,
        budget: ComputeBudget,
    ) -> List[Tuple[complex, ...]]:
        """Complex roots grouped as real singletons and conjugate pairs."""
        roots = [complex(b.center) for b in durand_kerner(polynomial, self.root_error, precision=prec, budget=budget)]
        threshold = prec.factor_match_tolerance
        groups: List[Tuple[complex, ...]] = []
        upper = [z for z in roots if z.imag > threshold * max(1.0, abs(z))]
        lower = [z for z in roots if z.imag < -threshold * max(1.0, abs(z))]
        real = [complex(z.real, 0.0) for z in roots if z not in upper and z not in lower]
        if len(upper) != len(lower):
            raise PrecisionExhaustedError(f"complex roots of {polynomial} do not pair into conjugates")
        groups.extend((z,) for z in real)
        for z in upper:
            partner = min(lower, key=lambda w: abs(w - z.conjugate()))
            lower.remove(partner)
            groups.append((z, partner))
        return groups


def default_factorer() -> RootRecombinationFactorer:
    return RootRecombinationFactorer()
