"""Hex grid cube coordinate utilities.

Coordinates live on a flat-top hex lattice of unit radius ("logical space").
Every cell is addressed by a cube triple ``(q, r, s)`` with ``q + r + s == 0``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

SQRT3 = math.sqrt(3.0)


class InvalidCoordinate(ValueError):
    """Raised when a cube triple does not sum to zero."""


@dataclass(frozen=True)
class LogicalVector:
    """Displacement in unit-hex logical space."""

    x: float
    y: float

    def __mul__(self, k: float) -> "LogicalVector":
        return LogicalVector(self.x * k, self.y * k)


@dataclass(frozen=True)
class LogicalPoint:
    """Position in unit-hex logical space; origin is the center of hex (0, 0, 0)."""

    x: float
    y: float

    def __add__(self, v: LogicalVector) -> "LogicalPoint":
        return LogicalPoint(self.x + v.x, self.y + v.y)

    def __sub__(self, other: "LogicalPoint") -> LogicalVector:
        return LogicalVector(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, order=True)
class CubeCoord:
    q: int
    r: int
    s: int

    def __post_init__(self) -> None:
        if self.q + self.r + self.s != 0:
            raise InvalidCoordinate(
                f"invalid hex coordinate ({self.q}, {self.r}, {self.s}): components must sum to 0"
            )

    @classmethod
    def from_axial(cls, q: int, r: int) -> "CubeCoord":
        return cls(q, r, -q - r)

    def axial(self) -> Tuple[int, int]:
        return self.q, self.r

    def neighbors(self) -> List["CubeCoord"]:
        """Return the six adjacent coordinates, counter-clockwise from +q."""
        return [
            CubeCoord(self.q + dq, self.r + dr, self.s + ds)
            for dq, dr, ds in DIRECTIONS
        ]

    def __str__(self) -> str:
        return f"({self.q}, {self.r}, {self.s})"


DIRECTIONS: Tuple[Tuple[int, int, int], ...] = (
    (1, 0, -1),
    (1, -1, 0),
    (0, -1, 1),
    (-1, 0, 1),
    (-1, 1, 0),
    (0, 1, -1),
)

ORIGIN = CubeCoord(0, 0, 0)


def distance(a: CubeCoord, b: CubeCoord) -> int:
    """Return hex distance between two coordinates."""
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def hexes_within(center_coord: CubeCoord, radius: int) -> Iterator[CubeCoord]:
    """Yield every coordinate at most ``radius`` steps from ``center_coord``."""
    if radius < 0:
        raise ValueError("radius must be >= 0")
    for dq in range(-radius, radius + 1):
        for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
            yield CubeCoord.from_axial(center_coord.q + dq, center_coord.r + dr)


def center(coord: CubeCoord) -> LogicalPoint:
    """Center of ``coord`` in logical space."""
    return LogicalPoint(1.5 * coord.q, SQRT3 * (0.5 * coord.q + coord.r))


def _corner_offsets() -> Tuple[LogicalVector, ...]:
    pts = []
    for i in range(6):
        angle = math.radians(60 * i)  # flat-top hexagon
        pts.append(LogicalVector(math.cos(angle), math.sin(angle)))
    return tuple(pts)


_CORNERS = _corner_offsets()


def corner_offsets() -> Tuple[LogicalVector, ...]:
    """Unit-radius offsets from a hex center to its six corners.

    The same offsets apply to every cell; only the center differs.
    """
    return _CORNERS


def _round_half_away(v: float) -> int:
    # ``round`` would send 0.5 to 0 and 2.5 to 2.
    return int(math.copysign(math.floor(abs(v) + 0.5), v))


def cube_round(fq: float, fr: float, fs: float) -> CubeCoord:
    """Round fractional cube coordinates to the nearest lattice cell.

    The axis with the largest rounding error is rebuilt from the other two,
    which keeps ``q + r + s == 0``. Ties favour rebuilding q, then r, then s.
    """
    rq = _round_half_away(fq)
    rr = _round_half_away(fr)
    rs = _round_half_away(fs)

    dq = abs(rq - fq)
    dr = abs(rr - fr)
    ds = abs(rs - fs)

    if dq >= dr and dq >= ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs
    else:
        rs = -rq - rr

    return CubeCoord(rq, rr, rs)


def nearest_coordinate(point: LogicalPoint) -> CubeCoord:
    """Inverse of :func:`center`: the cell whose hexagon contains ``point``."""
    # divide last so points on a shared edge round to an exact tie
    fq = 2.0 * point.x / 3.0
    fr = (SQRT3 * point.y - point.x) / 3.0
    fs = -fq - fr
    return cube_round(fq, fr, fs)


def hex_polygon(coord: CubeCoord) -> List[LogicalPoint]:
    """Return the six corner points of ``coord`` in logical space."""
    c = center(coord)
    return [c + offset for offset in corner_offsets()]
