"""
Working numeric type and computation ceilings.

The number type is a value: every numeric operation accepts ``precision=``
(per call) and falls back to the session default, which is read once from
the environment.

Red-lines:
  - No magic numbers: every tolerance is derived from machine epsilon and the
    scale of the problem it is applied to.
  - Invalid configuration raises ValueError (deployment error), never a
    silent downgrade to some other type.
  - Unbounded work is refused: ComputeBudget names each ceiling explicitly.
"""

from __future__ import annotations

import logging
import math
import numbers
import os
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np

from .errors import PrecisionExhaustedError

_logger = logging.getLogger(__name__)

ENV_PREFIX = "CERTIFIED_ALGEBRAICS_"


# =============================================================================
# Environment helpers
# =============================================================================


def _env_strict_enum(name: str, *, allowed: Tuple[str, ...], default: str) -> str:
    """
    Read an env var as an enum-like string with strict validation.

    Redlines:
    - No silent downgrade: invalid values must raise (deployment/config error).
    """
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return str(default)
    val = str(raw).strip().upper()
    if val not in allowed:
        raise ValueError(f"{name} must be one of {list(allowed)}, got {raw!r}")
    return val


def _env_int(name: str, *, default: int) -> int:
    """
    Read an env var as int (base-10), strict.
    """
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return int(default)
    try:
        return int(str(raw).strip(), 10)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer (base-10), got {raw!r}") from e


# =============================================================================
# Numeric precision
# =============================================================================


class NumericKind(str, Enum):
    EXACT = "EXACT"
    FLOAT64 = "FLOAT64"
    LONGDOUBLE = "LONGDOUBLE"


def to_fraction(value: Any) -> Fraction:
    """Exact rational value of an int, Fraction or binary float (numpy included)."""
    if isinstance(value, numbers.Rational):
        return Fraction(value)
    ratio = getattr(value, "as_integer_ratio", None)
    if ratio is not None:
        num, den = ratio()
        return Fraction(int(num), int(den))
    return Fraction(float(value))


@dataclass(frozen=True)
class NumericPrecision:
    """
    The working numeric type.

    EXACT keeps matrices, interpolation and Sturm evaluation in
    ``fractions.Fraction`` (numpy object arrays). Algorithms that are
    approximate by nature (Durand-Kerner, the subset-sum items of the
    minimal-polynomial search) then run in float64/complex128.
    """

    kind: NumericKind = NumericKind.EXACT

    def __post_init__(self) -> None:
        if not isinstance(self.kind, NumericKind):
            try:
                object.__setattr__(self, "kind", NumericKind(str(self.kind).strip().upper()))
            except ValueError as e:
                raise ValueError(f"unknown numeric kind {self.kind!r}") from e

    @classmethod
    def exact(cls) -> "NumericPrecision":
        return cls(NumericKind.EXACT)

    @classmethod
    def float64(cls) -> "NumericPrecision":
        return cls(NumericKind.FLOAT64)

    @classmethod
    def longdouble(cls) -> "NumericPrecision":
        return cls(NumericKind.LONGDOUBLE)

    @property
    def is_exact(self) -> bool:
        return self.kind is NumericKind.EXACT

    @property
    def float_dtype(self) -> np.dtype:
        if self.kind is NumericKind.LONGDOUBLE:
            return np.dtype(np.longdouble)
        return np.dtype(np.float64)

    @property
    def complex_dtype(self) -> np.dtype:
        if self.kind is NumericKind.LONGDOUBLE:
            return np.dtype(np.clongdouble)
        return np.dtype(np.complex128)

    @property
    def matrix_dtype(self) -> np.dtype:
        if self.is_exact:
            return np.dtype(object)
        return self.float_dtype

    @property
    def lapack_compatible(self) -> bool:
        """LAPACK (scipy.linalg) has no extended-precision or object kernels."""
        return self.kind is NumericKind.FLOAT64

    @property
    def eps(self) -> float:
        return float(np.finfo(self.float_dtype).eps)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def approx(self, value: Any) -> Any:
        """Value as a finite scalar of ``float_dtype`` (never exact)."""
        try:
            if self.kind is NumericKind.LONGDOUBLE:
                if isinstance(value, numbers.Integral):
                    result = np.longdouble(str(int(value)))
                elif isinstance(value, Fraction):
                    result = np.longdouble(str(value.numerator)) / np.longdouble(str(value.denominator))
                else:
                    result = np.longdouble(value)
            else:
                result = np.float64(float(value))
        except OverflowError as e:
            raise PrecisionExhaustedError(f"{value!r} overflows {self.float_dtype}") from e
        if np.isinf(result) and not (isinstance(value, float) and math.isinf(value)):
            raise PrecisionExhaustedError(f"{value!r} overflows {self.float_dtype}")
        return result

    def scalar(self, value: Any) -> Any:
        """Value in the working type: Fraction when exact, else ``approx``."""
        if self.is_exact:
            return to_fraction(value)
        return self.approx(value)

    def array(self, values: Iterable[Any]) -> np.ndarray:
        """1-D or 2-D numpy array of working-type scalars."""
        rows = list(values)
        if rows and isinstance(rows[0], (list, tuple, np.ndarray)):
            data = [[self.scalar(v) for v in row] for row in rows]
        else:
            data = [self.scalar(v) for v in rows]
        return np.array(data, dtype=self.matrix_dtype)

    # ------------------------------------------------------------------
    # Derived tolerances
    # ------------------------------------------------------------------

    def evaluation_tolerance(self, coefficients: Sequence[int], x: Any) -> float:
        """
        Rounding bound of Horner evaluation:
          |fl(p(x)) - p(x)| <= (deg + 1) * eps * sum |c_i| |x|^i
        Zero when the evaluation is exact.
        """
        if self.is_exact:
            return 0
        ax = abs(float(x))
        scale = 0.0
        for c in coefficients:
            scale = scale * ax + abs(float(c))
        return float(len(coefficients)) * self.eps * scale

    def reconstruction_tolerance(self, value: Any) -> float:
        """
        Acceptance distance for continued-fraction convergents: sqrt(eps)
        relative to the magnitude, so convergents with denominators up to
        about eps^(-1/4) are still separable from rounding noise.
        """
        if self.is_exact:
            return 0
        return math.sqrt(self.eps) * max(1.0, abs(float(value)))

    def summation_tolerance(self, items: Sequence[Any], target: Any) -> float:
        """Reordering bound of a floating sum: n * eps * (|T| + sum |items|)."""
        if self.is_exact:
            return 0
        total = abs(float(target)) + sum(abs(float(v)) for v in items)
        return float(len(items) + 1) * self.eps * total

    @property
    def factor_match_tolerance(self) -> float:
        """Cube root of eps: loose on purpose, every match is verified exactly."""
        return self.eps ** (1.0 / 3.0)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "eps": self.eps, "is_exact": self.is_exact}


# =============================================================================
# Ceilings
# =============================================================================


@dataclass(frozen=True)
class ComputeBudget:
    """Explicit ceilings on every search whose cost the caller controls."""

    # meet-in-the-middle enumerates 2^(n/2) sums per half
    max_subset_items: int = 40
    # bisection halves the interval width per level
    max_bisection_depth: int = 200
    # Durand-Kerner sweeps
    max_iterations: int = 10_000
    max_continued_fraction_terms: int = 128
    max_factor_combinations: int = 1 << 16
    # matrices smaller than this use cofactor expansion
    cofactor_cutoff: int = 4

    def __post_init__(self) -> None:
        for name in (
            "max_subset_items",
            "max_bisection_depth",
            "max_iterations",
            "max_continued_fraction_terms",
            "max_factor_combinations",
            "cofactor_cutoff",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive int, got {value!r}")

    def to_dict(self) -> dict:
        return {
            "max_subset_items": self.max_subset_items,
            "max_bisection_depth": self.max_bisection_depth,
            "max_iterations": self.max_iterations,
            "max_continued_fraction_terms": self.max_continued_fraction_terms,
            "max_factor_combinations": self.max_factor_combinations,
            "cofactor_cutoff": self.cofactor_cutoff,
        }


# =============================================================================
# Session defaults
# =============================================================================


def precision_from_env() -> NumericPrecision:
    kind = _env_strict_enum(
        ENV_PREFIX + "PRECISION",
        allowed=tuple(k.value for k in NumericKind),
        default=NumericKind.EXACT.value,
    )
    return NumericPrecision(NumericKind(kind))


def budget_from_env() -> ComputeBudget:
    defaults = ComputeBudget()
    return ComputeBudget(
        max_subset_items=_env_int(ENV_PREFIX + "MAX_SUBSET_ITEMS", default=defaults.max_subset_items),
        max_bisection_depth=_env_int(ENV_PREFIX + "MAX_BISECTION_DEPTH", default=defaults.max_bisection_depth),
        max_iterations=_env_int(ENV_PREFIX + "MAX_ITERATIONS", default=defaults.max_iterations),
        max_continued_fraction_terms=defaults.max_continued_fraction_terms,
        max_factor_combinations=defaults.max_factor_combinations,
        cofactor_cutoff=defaults.cofactor_cutoff,
    )


_default_precision: Optional[NumericPrecision] = None
_default_budget: Optional[ComputeBudget] = None


def get_default_precision() -> NumericPrecision:
    global _default_precision
    if _default_precision is None:
        _default_precision = precision_from_env()
        _logger.debug("session precision from environment: %s", _default_precision.kind.value)
    return _default_precision


def set_default_precision(precision: Optional[NumericPrecision]) -> Optional[NumericPrecision]:
    """Install a session precision (None re-reads the environment). Returns the previous one."""
    global _default_precision
    if precision is not None and not isinstance(precision, NumericPrecision):
        raise TypeError(f"precision must be NumericPrecision, got {type(precision).__name__}")
    previous = _default_precision
    _default_precision = precision
    return previous


def get_default_budget() -> ComputeBudget:
    global _default_budget
    if _default_budget is None:
        _default_budget = budget_from_env()
    return _default_budget


def set_default_budget(budget: Optional[ComputeBudget]) -> Optional[ComputeBudget]:
    global _default_budget
    if budget is not None and not isinstance(budget, ComputeBudget):
        raise TypeError(f"budget must be ComputeBudget, got {type(budget).__name__}")
    previous = _default_budget
    _default_budget = budget
    return previous


def resolve_precision(precision: Optional[NumericPrecision]) -> NumericPrecision:
    return get_default_precision() if precision is None else precision


def resolve_budget(budget: Optional[ComputeBudget]) -> ComputeBudget:
    return get_default_budget() if budget is None else budget
