"""Mapping between unit-hex logical space and viewport display space."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from config import SETTINGS
from hexgrid import LogicalPoint, LogicalVector


class NonInvertibleTransform(ArithmeticError):
    """Raised when display coordinates cannot be mapped back (zero scale)."""


@dataclass(frozen=True)
class DisplayVector:
    x: float
    y: float


@dataclass(frozen=True)
class DisplayPoint:
    """Pixel position relative to the viewport's top-left corner."""

    x: float
    y: float

    def __add__(self, v: DisplayVector) -> "DisplayPoint":
        return DisplayPoint(self.x + v.x, self.y + v.y)

    def __sub__(self, other: "DisplayPoint") -> DisplayVector:
        return DisplayVector(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class Bounds:
    """Viewport size in display units."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"bounds must not be negative: {self.width}x{self.height}")

    @property
    def size(self) -> Tuple[float, float]:
        return self.width, self.height

    def center(self) -> DisplayPoint:
        return DisplayPoint(self.width / 2.0, self.height / 2.0)

    def contains(self, p: DisplayPoint) -> bool:
        return 0.0 <= p.x <= self.width and 0.0 <= p.y <= self.height

    def position_in(self, p: Optional[DisplayPoint]) -> Optional[DisplayPoint]:
        """Return ``p`` if it lies inside the viewport, else None."""
        if p is None or not self.contains(p):
            return None
        return p


@dataclass(frozen=True)
class SpaceTransform:
    """Uniform scale followed by a translation to the viewport center."""

    scale: float
    origin: DisplayPoint

    @classmethod
    def for_bounds(cls, bounds: Bounds, divisor: Optional[float] = None) -> "SpaceTransform":
        """Hex radius is ``min(width, height) / divisor`` pixels."""
        if divisor is None:
            divisor = SETTINGS.hex_radius_divisor
        return cls(scale=min(bounds.width, bounds.height) / divisor, origin=bounds.center())

    @property
    def invertible(self) -> bool:
        return self.scale != 0

    def to_display(self, p: LogicalPoint) -> DisplayPoint:
        return DisplayPoint(p.x * self.scale + self.origin.x, p.y * self.scale + self.origin.y)

    def to_display_vector(self, v: LogicalVector) -> DisplayVector:
        return DisplayVector(v.x * self.scale, v.y * self.scale)

    def to_logical(self, p: DisplayPoint) -> LogicalPoint:
        if not self.invertible:
            raise NonInvertibleTransform("viewport has zero area")
        return LogicalPoint((p.x - self.origin.x) / self.scale, (p.y - self.origin.y) / self.scale)

    def to_display_array(self, points: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`to_display` for an ``(..., 2)`` array of logical xy."""
        pts = np.asarray(points, dtype=np.float64)
        return pts * self.scale + np.array([self.origin.x, self.origin.y], dtype=np.float64)
