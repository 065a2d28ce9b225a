"""
Dense matrix algebra for the resultant engine and interpolation.

Matrices are numpy arrays in the working type of a NumericPrecision: object
arrays of Fraction when exact, float64/longdouble otherwise. Row operations
are vectorised per row so both representations share one code path.

Redlines:
  - A column without a nonzero pivot candidate is a SingularMatrixError,
    never an open-ended search.
  - Row exchanges are counted one per swap; the determinant sign is (-1)^swaps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np
import scipy.linalg

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .errors import AlgebraicsInputError, SingularMatrixError

_logger = logging.getLogger(__name__)


def as_matrix(rows: Any, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    """Square-or-rectangular 2-D array in the working type."""
    prec = resolve_precision(precision)
    if isinstance(rows, np.ndarray) and rows.dtype == prec.matrix_dtype and rows.ndim == 2:
        return rows.copy()
    data = [list(r) for r in rows]
    if not data or not data[0]:
        raise AlgebraicsInputError("matrix must have at least one row and one column")
    width = len(data[0])
    if any(len(r) != width for r in data):
        raise AlgebraicsInputError("matrix rows must all have the same length")
    return prec.array(data)


def _square(a: np.ndarray) -> int:
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise AlgebraicsInputError(f"square matrix required, got shape {a.shape}")
    return int(a.shape[0])


# =============================================================================
# Determinant
# =============================================================================


def cofactor_determinant(matrix: Any, precision: Optional[NumericPrecision] = None) -> Any:
    """Laplace expansion along the first row. O(n!): small matrices only."""
    a = as_matrix(matrix, precision)
    n = _square(a)
    if n == 1:
        return a[0, 0]
    if n == 2:
        return a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]
    total: Any = 0
    for j in range(n):
        if a[0, j] == 0:
            continue
        minor = np.delete(np.delete(a, 0, axis=0), j, axis=1)
        term = a[0, j] * cofactor_determinant(minor, precision)
        total = total + term if j % 2 == 0 else total - term
    return total


@dataclass(frozen=True)
class LUDecomposition:
    """
    P A = L U with unit-diagonal L.

    ``permutation[i]`` is the row of A that ended up in row i, so
    ``A[permutation] == L @ U``.
    """

    permutation: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    row_exchanges: int
    singular: bool = False

    @property
    def sign(self) -> int:
        return -1 if self.row_exchanges % 2 else 1

    def determinant(self) -> Any:
        diag = np.diagonal(self.upper)
        product: Any = diag[0]
        for v in diag[1:]:
            product = product * v
        return product if self.sign > 0 else -product


def lu_decompose(
    matrix: Any,
    precision: Optional[NumericPrecision] = None,
    *,
    allow_singular: bool = False,
) -> LUDecomposition:
    """
    Doolittle elimination with partial (max-magnitude) pivoting.

    When a column has no nonzero candidate on or below the diagonal the
    matrix is singular: SingularMatrixError, or with ``allow_singular`` the
    column is skipped and the result is flagged ``singular``.
    """
    prec = resolve_precision(precision)
    u = as_matrix(matrix, prec)
    n = _square(u)
    lower = identity(n, prec)
    perm = np.arange(n)
    swaps = 0
    singular = False

    for col in range(n):
        magnitudes = np.abs(u[col:, col])
        pivot = col + int(np.argmax(magnitudes))
        if u[pivot, col] == 0:
            if not allow_singular:
                raise SingularMatrixError(f"no nonzero pivot in column {col} of a {n}x{n} matrix")
            singular = True
            continue
        if pivot != col:
            u[[col, pivot], :] = u[[pivot, col], :]
            lower[[col, pivot], :col] = lower[[pivot, col], :col]
            perm[[col, pivot]] = perm[[pivot, col]]
            swaps += 1
        for row in range(col + 1, n):
            if u[row, col] == 0:
                continue
            factor = u[row, col] / u[col, col]
            lower[row, col] = factor
            u[row, col:] = u[row, col:] - factor * u[col, col:]

    return LUDecomposition(permutation=perm, lower=lower, upper=u, row_exchanges=swaps, singular=singular)


def determinant(
    matrix: Any,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> Any:
    """Cofactor expansion below the budget's size cutoff, LU otherwise. Singular gives 0."""
    prec = resolve_precision(precision)
    a = as_matrix(matrix, prec)
    n = _square(a)
    if n < resolve_budget(budget).cofactor_cutoff:
        return cofactor_determinant(a, prec)
    lu = lu_decompose(a, prec, allow_singular=True)
    if lu.singular:
        return prec.scalar(0)
    return lu.determinant()


# =============================================================================
# Inversion
# =============================================================================


def _triangular_inverse(t: np.ndarray, prec: NumericPrecision, *, lower: bool) -> np.ndarray:
    n = t.shape[0]
    eye = identity(n, prec)
    if prec.lapack_compatible:
        return scipy.linalg.solve_triangular(t, eye, lower=lower, unit_diagonal=lower, check_finite=True)
    x = eye.copy()
    order = range(n) if lower else range(n - 1, -1, -1)
    for i in order:
        known = slice(0, i) if lower else slice(i + 1, n)
        row = eye[i, :].copy()
        if known.stop > known.start:
            row = row - t[i, known].dot(x[known, :])
        x[i, :] = row if lower else row / t[i, i]
    return x


def invert(matrix: Any, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    """
    A^-1 = U^-1 L^-1 P: invert both triangular factors by substitution,
    multiply, then undo the row permutation on the columns.
    """
    prec = resolve_precision(precision)
    lu = lu_decompose(matrix, prec)
    if any(v == 0 for v in np.diagonal(lu.upper)):
        raise SingularMatrixError("upper factor has a zero on its diagonal")
    l_inv = _triangular_inverse(lu.lower, prec, lower=True)
    u_inv = _triangular_inverse(lu.upper, prec, lower=False)
    product = u_inv.dot(l_inv)
    result = np.empty_like(product)
    result[:, lu.permutation] = product
    if not prec.is_exact and not np.all(np.isfinite(result.astype(prec.float_dtype))):
        raise SingularMatrixError("inverse is not finite in the working precision")
    return result


# =============================================================================
# Helpers
# =============================================================================


def matrix_multiply(a: Any, b: Any, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    left = as_matrix(a, precision)
    right = as_matrix(b, precision)
    if left.shape[1] != right.shape[0]:
        raise AlgebraicsInputError(f"cannot multiply {left.shape} by {right.shape}")
    return left.dot(right)


def transpose(matrix: Any, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    return as_matrix(matrix, precision).T.copy()


def vector_norm(vector: Sequence[Any]) -> float:
    """Euclidean norm, computed in float."""
    return float(np.sqrt(sum(float(v) * float(v) for v in vector)))


def identity(n: int, precision: Optional[NumericPrecision] = None) -> np.ndarray:
    prec = resolve_precision(precision)
    return prec.array([[1 if i == j else 0 for j in range(n)] for i in range(n)])

