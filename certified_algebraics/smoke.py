"""
End-to-end smoke run over the public operations.

  Stage1: build sqrt(2) and the real root of x^5 - x + 1 from their polynomials
  Stage2: sum and product, minimal polynomials through the resultant engine
  Stage3: inversion of sqrt(2)
  Stage4: minimal polynomial of a bare enclosure by subset-sum search

Every stage compares against a known polynomial; a mismatch fails the run.
"""

from __future__ import annotations

import logging
import math
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .algebraic import AlgebraicNumber
from .config import ComputeBudget, NumericPrecision, resolve_budget, resolve_precision
from .enclosure import Ball
from .errors import AlgebraicsError
from .minpoly import find_minimal_polynomial
from .polynomial import IntegerPolynomial

_logger = logging.getLogger(__name__)


@dataclass
class SmokeResult:
    success: bool
    stages: List[Dict[str, Any]] = field(default_factory=list)
    elapsed_ms: float = 0.0
    diagnostics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "stages": list(self.stages),
            "elapsed_ms": self.elapsed_ms,
            "diagnostics": dict(self.diagnostics),
            "error": self.error,
        }


def _stage(stages: List[Dict[str, Any]], name: str, got: Optional[IntegerPolynomial], expected: IntegerPolynomial,
           t0: float) -> bool:
    ok = got == expected
    stages.append(
        {
            "name": name,
            "polynomial": None if got is None else str(got),
            "expected": str(expected),
            "ok": ok,
            "elapsed_ms": (time.perf_counter() - t0) * 1000.0,
        }
    )
    _logger.info("[%s] %s | got %s | expected %s", name, "ok" if ok else "MISMATCH", got, expected)
    return ok


def run_smoke_test(
    *,
    precision: Optional[NumericPrecision] = None,
    budget: Optional[ComputeBudget] = None,
) -> SmokeResult:
    t_total = time.perf_counter()
    prec = resolve_precision(precision)
    budget = resolve_budget(budget)
    stages: List[Dict[str, Any]] = []
    diagnostics = {"precision": prec.to_dict(), "budget": budget.to_dict()}
    try:
        t0 = time.perf_counter()
        sqrt2 = AlgebraicNumber.from_polynomial(
            IntegerPolynomial((1, 0, -2)), 1, precision=prec, budget=budget
        )
        quintic = AlgebraicNumber.from_polynomial(
            IntegerPolynomial((1, 0, 0, 0, -1, 1)), 0, precision=prec, budget=budget
        )
        _logger.info("[construct] sqrt2 = %s | quintic root = %s", sqrt2, quintic)
        ok = sqrt2.is_uniquely_defined(precision=prec) and quintic.is_uniquely_defined(precision=prec)
        stages.append({"name": "construct", "ok": ok, "elapsed_ms": (time.perf_counter() - t0) * 1000.0})

        t0 = time.perf_counter()
        total = quintic.add(sqrt2.negate(), precision=prec, budget=budget)
        ok &= _stage(
            stages,
            "sum",
            total.minimal_polynomial,
            IntegerPolynomial((1, 0, -10, 0, 38, 2, -100, 40, 121, 38, -17)),
            t0,
        )

        t0 = time.perf_counter()
        square = sqrt2.multiply(sqrt2, precision=prec, budget=budget)
        ok &= _stage(stages, "product", square.minimal_polynomial, IntegerPolynomial((1, -2)), t0)

        t0 = time.perf_counter()
        inverse = sqrt2.invert()
        ok &= _stage(stages, "invert", inverse.minimal_polynomial, IntegerPolynomial((2, 0, -1)), t0)

        t0 = time.perf_counter()
        found = find_minimal_polynomial(Ball(math.sqrt(2), 1e-10), 3, 2, precision=prec, budget=budget)
        ok &= _stage(stages, "discover", found, IntegerPolynomial((1, 0, -2)), t0)
    except AlgebraicsError as e:
        _logger.error("smoke run aborted: %s", e)
        return SmokeResult(
            success=False,
            stages=stages,
            elapsed_ms=(time.perf_counter() - t_total) * 1000.0,
            diagnostics=diagnostics,
            error=f"{type(e).__name__}: {e}",
        )

    elapsed_ms = (time.perf_counter() - t_total) * 1000.0
    _logger.info("smoke run %s in %.1fms", "passed" if ok else "FAILED", elapsed_ms)
    return SmokeResult(
        success=bool(ok),
        stages=stages,
        elapsed_ms=elapsed_ms,
        diagnostics=diagnostics,
        error=None if ok else "stage mismatch",
    )


def _configure_smoke_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="certified algebraic arithmetic smoke run")
    parser.add_argument(
        "--precision",
        type=str,
        default=None,
        help="EXACT, FLOAT64 or LONGDOUBLE (default: CERTIFIED_ALGEBRAICS_PRECISION or EXACT)",
    )
    parser.add_argument("--verbose", action="store_true", help="DEBUG logging")
    args = parser.parse_args(argv)

    _configure_smoke_logging(args.verbose)
    precision = None if args.precision is None else NumericPrecision(args.precision)
    result = run_smoke_test(precision=precision)
    for stage in result.stages:
        print(f"  {stage['name']:<10} {'ok' if stage['ok'] else 'FAIL'}  {stage['elapsed_ms']:.1f}ms")
    print(f"  success: {result.success} | total {result.elapsed_ms:.1f}ms")
    if result.error:
        print(f"  error: {result.error}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
