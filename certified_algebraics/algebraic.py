"""
Real algebraic numbers: an enclosure plus, when known, the minimal polynomial.

Invariant: a present polynomial is square-free and has exactly one root in
the enclosure. Arithmetic always returns a new number; only ``refine`` and
``define_minimal_polynomial`` change a number in place.

Picking a root of a bare polynomial is the caller's business:
``candidate_roots`` returns every isolated real root and ``from_polynomial``
takes either an index into that list or a selector callable.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .enclosure import Ball, ComplexBall, RootList
from .errors import AlgebraicsInputError, NoRootFoundError, PrecisionExhaustedError
from .factoring import Factorer, RootRecombinationFactorer
from .minpoly import find_minimal_polynomial
from .polynomial import IntegerPolynomial
from .resultant import combine_minimal_polynomial
from .roots import SturmSequence, durand_kerner, isolate_real_roots

_logger = logging.getLogger(__name__)

RootSelector = Callable[[Sequence[Ball]], int]

# radius of the enclosures handed out by candidate_roots unless asked otherwise
DEFAULT_ISOLATION_ERROR = 1e-10


class AlgebraicNumber:
    def __init__(self, enclosure: Ball, minimal_polynomial: Optional[IntegerPolynomial] = None) -> None:
        if not isinstance(enclosure, Ball):
            raise AlgebraicsInputError(f"enclosure must be a Ball, got {type(enclosure).__name__}")
        if minimal_polynomial is not None:
            if not isinstance(minimal_polynomial, IntegerPolynomial):
                raise AlgebraicsInputError(
                    f"minimal polynomial must be IntegerPolynomial, got {type(minimal_polynomial).__name__}"
                )
            if minimal_polynomial.degree < 1:
                raise AlgebraicsInputError(f"minimal polynomial must have degree >= 1, got {minimal_polynomial}")
        self._enclosure = enclosure
        self._polynomial = minimal_polynomial

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_enclosure(cls, center: Any, radius: Any = 0) -> "AlgebraicNumber":
        return cls(Ball(center, radius))

    @classmethod
    def from_polynomial_and_enclosure(cls, polynomial: IntegerPolynomial, enclosure: Ball) -> "AlgebraicNumber":
        """Trusted: the caller guarantees the invariant."""
        return cls(enclosure, polynomial)

    @staticmethod
    def candidate_roots(
        polynomial: IntegerPolynomial,
        *,
        error: Any = DEFAULT_ISOLATION_ERROR,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> RootList:
        """Every real root of a square-free polynomial, isolated in increasing order."""
        if not isinstance(polynomial, IntegerPolynomial) or polynomial.degree < 1:
            raise AlgebraicsInputError(f"need a non-constant IntegerPolynomial, got {polynomial!r}")
        if not polynomial.is_square_free():
            raise AlgebraicsInputError(
                f"{polynomial} has repeated roots; pass its square-free part {polynomial.square_free_part()}"
            )
        return isolate_real_roots(polynomial, error=error, precision=precision, budget=budget)

    @classmethod
    def from_polynomial(
        cls,
        polynomial: IntegerPolynomial,
        root: Union[int, RootSelector],
        *,
        error: Any = DEFAULT_ISOLATION_ERROR,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> "AlgebraicNumber":
        """
        The root of ``polynomial`` chosen by ``root``: an index into
        ``candidate_roots`` (increasing order) or a callable receiving that list.
        """
        roots = cls.candidate_roots(polynomial, error=error, precision=precision, budget=budget)
        if not roots:
            raise NoRootFoundError(f"{polynomial} has no real roots")
        index = root(roots) if callable(root) else root
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(roots):
            raise NoRootFoundError(f"root index {index!r} outside the {len(roots)} real roots of {polynomial}")
        number = cls(roots[index], polynomial)
        if not number.is_uniquely_defined(precision=precision):
            raise PrecisionExhaustedError(f"error {error!r} is too coarse to separate the roots of {polynomial}")
        return number

    def copy(self) -> "AlgebraicNumber":
        return AlgebraicNumber(self._enclosure, self._polynomial)

    def release(self) -> None:
        """Drop the owned polynomial; the number keeps only its enclosure."""
        self._polynomial = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def enclosure(self) -> Ball:
        return self._enclosure

    @property
    def center(self) -> Any:
        return self._enclosure.center

    @property
    def radius(self) -> Any:
        return self._enclosure.radius

    @property
    def minimal_polynomial(self) -> Optional[IntegerPolynomial]:
        return self._polynomial

    @property
    def has_minimal_polynomial(self) -> bool:
        return self._polynomial is not None

    @property
    def degree(self) -> Optional[int]:
        return None if self._polynomial is None else self._polynomial.degree

    def _bounds(self, prec: NumericPrecision) -> Tuple[Any, Any]:
        center, radius = prec.scalar(self.center), prec.scalar(self.radius)
        return center - radius, center + radius

    def is_uniquely_defined(self, *, precision: Optional[NumericPrecision] = None) -> bool:
        """
        True when the known polynomial is square-free with exactly one root in
        the enclosure. A number without a polynomial is taken as defined.
        """
        if self._polynomial is None:
            return True
        if not self._polynomial.is_square_free():
            return False
        lower, upper = self._bounds(resolve_precision(precision))
        return SturmSequence(self._polynomial).count_closed(lower, upper) == 1

    def galois_conjugates(
        self,
        radius: Any = None,
        *,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> Tuple[ComplexBall, ...]:
        """All complex roots of the minimal polynomial, as disks of ``radius`` (default: own radius)."""
        if self._polynomial is None:
            raise AlgebraicsInputError("Galois conjugates need a known minimal polynomial")
        radius = self.radius if radius is None else radius
        if not radius > 0:
            raise AlgebraicsInputError(f"conjugates need a positive radius, got {radius!r}")
        return durand_kerner(self._polynomial, float(radius), precision=precision, budget=budget)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def refine(
        self,
        target_error: Any,
        *,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> None:
        """
        Shrink the enclosure to radius <= target_error. Without a polynomial
        the radius is simply set; with one, the enclosure is re-isolated and
        the smallest root found inside it is kept. A root sitting exactly on
        the lower end becomes a zero-radius enclosure.
        """
        if not target_error > 0:
            raise AlgebraicsInputError(f"target error must be positive, got {target_error!r}")
        if self.radius <= target_error:
            return
        if self._polynomial is None:
            self._enclosure = self._enclosure.with_radius(target_error)
            return
        prec = resolve_precision(precision)
        lower, upper = self._bounds(prec)
        if self._polynomial.sign_at(lower) == 0:
            self._enclosure = Ball(lower, 0)
            return
        roots = isolate_real_roots(
            self._polynomial, lower, upper, error=target_error, precision=prec, budget=resolve_budget(budget)
        )
        if not roots:
            raise NoRootFoundError(f"{self._polynomial} has no root in {self._enclosure}")
        self._enclosure = roots[0]

    def define_minimal_polynomial(
        self,
        max_k: int,
        max_deg: int,
        *,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> bool:
        """Search for the polynomial when none is known. False means not found."""
        if self._polynomial is not None:
            return True
        polynomial = find_minimal_polynomial(self._enclosure, max_k, max_deg, precision=precision, budget=budget)
        if polynomial is None:
            return False
        self._polynomial = polynomial
        return True

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def _require(other: Any) -> "AlgebraicNumber":
        if not isinstance(other, AlgebraicNumber):
            raise AlgebraicsInputError(f"expected AlgebraicNumber, got {type(other).__name__}")
        return other

    def _combine(
        self,
        operation: str,
        other: "AlgebraicNumber",
        enclosure: Ball,
        factorer: Optional[Factorer],
        precision: Optional[NumericPrecision],
        budget: Optional[ComputeBudget],
    ) -> "AlgebraicNumber":
        if self._polynomial is None or other._polynomial is None:
            return AlgebraicNumber(enclosure)
        if factorer is None:
            factorer = RootRecombinationFactorer(precision=precision, budget=budget)
        polynomial = combine_minimal_polynomial(
            operation,
            self._polynomial,
            other._polynomial,
            enclosure,
            factorer,
            precision=precision,
            budget=budget,
        )
        return AlgebraicNumber(enclosure, polynomial)

    def add(
        self,
        other: "AlgebraicNumber",
        *,
        factorer: Optional[Factorer] = None,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> "AlgebraicNumber":
        other = self._require(other)
        enclosure = self._enclosure.add(other._enclosure)
        return self._combine("sum", other, enclosure, factorer, precision, budget)

    def negate(self) -> "AlgebraicNumber":
        polynomial = None if self._polynomial is None else self._polynomial.linear_substitution(-1, 0).normalized()
        return AlgebraicNumber(self._enclosure.negate(), polynomial)

    def subtract(
        self,
        other: "AlgebraicNumber",
        *,
        factorer: Optional[Factorer] = None,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> "AlgebraicNumber":
        return self.add(self._require(other).negate(), factorer=factorer, precision=precision, budget=budget)

    def multiply(
        self,
        other: "AlgebraicNumber",
        *,
        factorer: Optional[Factorer] = None,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> "AlgebraicNumber":
        other = self._require(other)
        enclosure = self._enclosure.multiply(other._enclosure)
        return self._combine("product", other, enclosure, factorer, precision, budget)

    def invert(self) -> "AlgebraicNumber":
        """1/x; ArithmeticUndefinedError when the enclosure contains zero."""
        enclosure = self._enclosure.invert()
        polynomial = None if self._polynomial is None else self._polynomial.reverse().normalized()
        return AlgebraicNumber(enclosure, polynomial)

    def divide(
        self,
        other: "AlgebraicNumber",
        *,
        factorer: Optional[Factorer] = None,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> "AlgebraicNumber":
        return self.multiply(self._require(other).invert(), factorer=factorer, precision=precision, budget=budget)

    def __add__(self, other: Any) -> "AlgebraicNumber":
        if not isinstance(other, AlgebraicNumber):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "AlgebraicNumber":
        if not isinstance(other, AlgebraicNumber):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Any) -> "AlgebraicNumber":
        if not isinstance(other, AlgebraicNumber):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: Any) -> "AlgebraicNumber":
        if not isinstance(other, AlgebraicNumber):
            return NotImplemented
        return self.divide(other)

    def __neg__(self) -> "AlgebraicNumber":
        return self.negate()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Approximate value: {float(self.center):f}, Error: {float(self.radius):g}"

    def __repr__(self) -> str:
        poly = "unknown" if self._polynomial is None else str(self._polynomial)
        return f"AlgebraicNumber(center={float(self.center)!r}, radius={float(self.radius)!r}, polynomial={poly})"

    def describe(
        self,
        conjugate_radius: Any = None,
        *,
        precision: Optional[NumericPrecision] = None,
        budget: Optional[ComputeBudget] = None,
    ) -> str:
        """Value, error, minimal polynomial with its degree, and the Galois conjugates."""
        lines: List[str] = [str(self)]
        if self._polynomial is None:
            lines.append("Minimal polynomial unknown.")
            return "\n".join(lines)
        lines.append(f"Minimal polynomial: {self._polynomial}")
        lines.append(f"Degree: {self._polynomial.degree}")
        lines.append("Galois conjugates:")
        for root in self.galois_conjugates(conjugate_radius, precision=precision, budget=budget):
            lines.append(f"  {root}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enclosure": self._enclosure.to_dict(),
            "minimal_polynomial": None if self._polynomial is None else self._polynomial.to_dict(),
        }
