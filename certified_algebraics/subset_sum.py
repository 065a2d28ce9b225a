"""
Nearest subset sum by meet-in-the-middle, and inclusion certificates.

Given items v_1..v_n and a target T, find the inclusion vector e in {0,1}^n
minimising |T - sum e_i v_i|. Each half of the items has its 2^(n/2) subset
sums enumerated and sorted; a two-pointer scan over (first ascending, second
descending) then finds the closest cross sum.

The certificate extracts an inclusion vector attaining the optimum using the
solver as an oracle: each item is dropped in turn and put back only if the
remaining items can no longer reach the optimum.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .errors import AlgebraicsInputError, SubsetSumInfeasibleError

_logger = logging.getLogger(__name__)


def _is_finite(value: Any) -> bool:
    if isinstance(value, (int, Fraction)):
        return True
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError, OverflowError):
        return False


@dataclass(frozen=True)
class SubsetSumProblem:
    items: Tuple[Any, ...]
    target: Any

    def __post_init__(self) -> None:
        if isinstance(self.items, (str, bytes)):
            raise AlgebraicsInputError("items must be a sequence of numbers")
        object.__setattr__(self, "items", tuple(self.items))
        for i, v in enumerate(self.items):
            if not _is_finite(v):
                raise SubsetSumInfeasibleError(f"item {i} is not a finite number: {v!r}")
        if not _is_finite(self.target):
            raise SubsetSumInfeasibleError(f"target is not a finite number: {self.target!r}")

    @property
    def size(self) -> int:
        return len(self.items)

    def restricted(self, keep: Sequence[bool]) -> "SubsetSumProblem":
        return SubsetSumProblem(tuple(v for v, k in zip(self.items, keep) if k), self.target)


@dataclass(frozen=True)
class SubsetSumSolution:
    error: Any
    inclusion: Tuple[int, ...]
    total: Any


@dataclass
class SubsetSumCertificate:
    inclusion: Tuple[int, ...]
    optimal_error: Any
    achieved_error: Any
    solver_calls: int = 0
    elapsed_ms: float = 0.0
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inclusion": list(self.inclusion),
            "optimal_error": float(self.optimal_error),
            "achieved_error": float(self.achieved_error),
            "solver_calls": self.solver_calls,
            "elapsed_ms": self.elapsed_ms,
            "diagnostics": dict(self.diagnostics),
        }


def sorted_subset_sums(
    items: Sequence[Any],
    precision: Optional[NumericPrecision] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    All 2^len(items) subset sums in ascending order, with the bit mask of
    the subset behind each sum (bit i set when items[i] is included).
    """
    prec = resolve_precision(precision)
    sums = prec.array([0])
    masks = np.zeros(1, dtype=np.int64)
    for i, value in enumerate(items):
        sums = np.concatenate([sums, sums + prec.scalar(value)])
        masks = np.concatenate([masks, masks | np.int64(1 << i)])
    order = np.argsort(sums, kind="stable")
    return sums[order], masks[order]


def _closest_cross_sum(first: List[Any], second: List[Any], target: Any) -> Tuple[Any, int, int]:
    i, j = 0, len(second) - 1
    best_error, best_i, best_j = abs(target - (first[0] + second[j])), 0, j
    while i < len(first) and j >= 0:
        diff = target - (first[i] + second[j])
        error = abs(diff)
        if error < best_error:
            best_error, best_i, best_j = error, i, j
        if diff > 0:
            i += 1
        elif diff < 0:
            j -= 1
        else:
            break
    return best_error, best_i, best_j


def nearest_subset_sum(
    problem: SubsetSumProblem,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> SubsetSumSolution:
    """Optimal error and one inclusion vector attaining it."""
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    n = problem.size
    if n > budget.max_subset_items:
        raise SubsetSumInfeasibleError(
            f"{n} items exceed the ceiling of {budget.max_subset_items} (2^(n/2) sums per half)"
        )
    items = [prec.scalar(v) for v in problem.items]
    target = prec.scalar(problem.target)
    half = n // 2
    first_sums, first_masks = sorted_subset_sums(items[:half], prec)
    second_sums, second_masks = sorted_subset_sums(items[half:], prec)
    error, i, j = _closest_cross_sum(list(first_sums), list(second_sums), target)
    low_mask, high_mask = int(first_masks[i]), int(second_masks[j])
    inclusion = tuple((low_mask >> k) & 1 for k in range(half)) + tuple(
        (high_mask >> k) & 1 for k in range(n - half)
    )
    return SubsetSumSolution(error=error, inclusion=inclusion, total=first_sums[i] + second_sums[j])


def subset_sum_certificate(
    problem: SubsetSumProblem,
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> SubsetSumCertificate:
    """
    Inclusion vector reaching the global optimum, found by n + 1 solver calls.

    Dropping item i is kept when the remaining items still reach the optimum
    (within the summation tolerance of the working precision).
    """
    t0 = time.perf_counter()
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    optimum = nearest_subset_sum(problem, precision=prec, budget=budget).error
    tolerance = prec.summation_tolerance(problem.items, problem.target)
    keep = [True] * problem.size
    calls = 1
    for i in range(problem.size):
        keep[i] = False
        remaining = nearest_subset_sum(problem.restricted(keep), precision=prec, budget=budget).error
        calls += 1
        if remaining > optimum + tolerance:
            keep[i] = True
        _logger.debug("certificate item %d: drop error %s, kept=%s", i, remaining, keep[i])

    target = prec.scalar(problem.target)
    total = prec.scalar(0)
    for value, k in zip(problem.items, keep):
        if k:
            total = total + prec.scalar(value)
    inclusion = tuple(1 if k else 0 for k in keep)
    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    return SubsetSumCertificate(
        inclusion=inclusion,
        optimal_error=optimum,
        achieved_error=abs(target - total),
        solver_calls=calls,
        elapsed_ms=elapsed_ms,
        diagnostics={"items": problem.size, "tolerance": tolerance, "precision": prec.kind.value},
    )
