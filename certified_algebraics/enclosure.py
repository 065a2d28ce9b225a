"""
Enclosures: a center and a nonnegative radius such that the true value lies
within the radius of the center (closed ball).

Real balls carry their center in whatever real type produced it (int,
Fraction, float or a numpy scalar), so exact isolation results stay exact.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Tuple

from .errors import AlgebraicsInputError, ArithmeticUndefinedError


def _finite_real(name: str, value: Any) -> None:
    if isinstance(value, (int, Fraction)):
        return
    try:
        f = float(value)
    except (TypeError, ValueError) as e:
        raise AlgebraicsInputError(f"{name} must be real, got {type(value).__name__}") from e
    if not math.isfinite(f):
        raise AlgebraicsInputError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class Ball:
    """Closed real interval [center - radius, center + radius]."""

    center: Any
    radius: Any = 0

    def __post_init__(self) -> None:
        _finite_real("center", self.center)
        _finite_real("radius", self.radius)
        if self.radius < 0:
            raise AlgebraicsInputError(f"radius must be nonnegative, got {self.radius!r}")

    @classmethod
    def from_bounds(cls, lower: Any, upper: Any) -> "Ball":
        if upper < lower:
            raise AlgebraicsInputError(f"empty interval [{lower}, {upper}]")
        return cls((lower + upper) / 2, (upper - lower) / 2)

    @property
    def lower(self) -> Any:
        return self.center - self.radius

    @property
    def upper(self) -> Any:
        return self.center + self.radius

    def contains(self, value: Any) -> bool:
        return abs(value - self.center) <= self.radius

    def contains_zero(self) -> bool:
        return abs(self.center) <= self.radius

    def overlaps(self, other: "Ball") -> bool:
        return abs(self.center - other.center) <= self.radius + other.radius

    # ------------------------------------------------------------------
    # Enclosure arithmetic
    # ------------------------------------------------------------------

    def add(self, other: "Ball") -> "Ball":
        return Ball(self.center + other.center, self.radius + other.radius)

    def negate(self) -> "Ball":
        return Ball(-self.center, self.radius)

    def subtract(self, other: "Ball") -> "Ball":
        return self.add(other.negate())

    def multiply(self, other: "Ball") -> "Ball":
        """First-order propagation: radius = |a| rb + |b| ra."""
        return Ball(
            self.center * other.center,
            abs(self.center) * other.radius + abs(other.center) * self.radius,
        )

    def invert(self) -> "Ball":
        """Reciprocal with radius r / (|c| - r); undefined when zero is enclosed."""
        if self.contains_zero():
            raise ArithmeticUndefinedError(f"cannot invert {self}: the enclosure contains zero")
        center = Fraction(1) / self.center if isinstance(self.center, (int, Fraction)) else 1 / self.center
        return Ball(center, self.radius / (abs(self.center) - self.radius))

    def divide(self, other: "Ball") -> "Ball":
        return self.multiply(other.invert())

    def with_radius(self, radius: Any) -> "Ball":
        return Ball(self.center, radius)

    def __str__(self) -> str:
        return f"{float(self.center):.6f} ± {float(self.radius):.3g}"

    def to_dict(self) -> Dict[str, Any]:
        return {"center": float(self.center), "radius": float(self.radius)}


@dataclass(frozen=True)
class ComplexBall:
    """Closed disk of the complex plane."""

    center: complex
    radius: float

    def __post_init__(self) -> None:
        c = complex(self.center)
        if not (math.isfinite(c.real) and math.isfinite(c.imag)):
            raise AlgebraicsInputError(f"center must be finite, got {self.center!r}")
        _finite_real("radius", self.radius)
        if self.radius < 0:
            raise AlgebraicsInputError(f"radius must be nonnegative, got {self.radius!r}")

    @property
    def is_real(self) -> bool:
        """The disk meets the real axis."""
        return abs(complex(self.center).imag) <= self.radius

    def contains(self, value: complex) -> bool:
        return abs(complex(value) - complex(self.center)) <= self.radius

    def __str__(self) -> str:
        c = complex(self.center)
        sign = "-" if c.imag < 0 else "+"
        return f"{c.real:.6f} {sign} {abs(c.imag):.6f}i ± {float(self.radius):.3g}"

    def to_dict(self) -> Dict[str, Any]:
        c = complex(self.center)
        return {"real": c.real, "imag": c.imag, "radius": float(self.radius)}


RootList = Tuple[Ball, ...]
