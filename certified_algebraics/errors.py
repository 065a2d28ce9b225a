"""
Failure taxonomy for certified algebraic arithmetic.

Red-lines:
  - No silent fallback: every unmet precondition raises one of these.
  - "Not found" is not a failure. The minimal-polynomial search reports it
    through its result object instead of raising.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AlgebraicsError(RuntimeError):
    """Root of every hard failure raised by this package."""


class AlgebraicsInputError(AlgebraicsError, ValueError):
    """Malformed input: wrong types, negative radii, empty data, bad indices."""


class ArithmeticUndefinedError(AlgebraicsError):
    """Inversion or division by an enclosure that straddles zero."""


class NoRootFoundError(AlgebraicsError):
    """A searched domain holds no real root of the given polynomial."""


class SubsetSumInfeasibleError(AlgebraicsError):
    """A subset-sum instance cannot be encoded or solved within the budget."""


class SingularMatrixError(AlgebraicsError):
    """Elimination found a column with no nonzero pivot candidate."""


class AmbiguousFactorError(AlgebraicsError):
    """Zero or several irreducible factors match the target enclosure."""

    def __init__(self, message: str, *, analysis: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.analysis: Dict[str, Any] = dict(analysis or {})


class PrecisionExhaustedError(AlgebraicsError):
    """An iteration or recursion ceiling was reached before convergence."""
