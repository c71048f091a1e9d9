# geometry.py - drawable hex outlines in display space
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from config import RGBA
from hexgrid import CubeCoord, center, corner_offsets
from viewport import DisplayPoint, SpaceTransform

Polygon = Tuple[DisplayPoint, ...]


@dataclass(frozen=True)
class Stroke:
    color: RGBA
    width: float = 1.0


@dataclass(frozen=True)
class Geometry:
    """Closed polygons sharing one stroke, ready for the host to draw."""

    polygons: Tuple[Polygon, ...]
    stroke: Stroke

    @property
    def is_empty(self) -> bool:
        return not self.polygons

    def __len__(self) -> int:
        return len(self.polygons)


_CORNER_ARRAY = np.array([(v.x, v.y) for v in corner_offsets()], dtype=np.float64)


def hex_outline(coord: CubeCoord, transform: SpaceTransform) -> Polygon:
    """Six display-space corners of ``coord``."""
    c = transform.to_display(center(coord))
    return tuple(c + transform.to_display_vector(v) for v in corner_offsets())


def hex_outlines(coords: Iterable[CubeCoord], transform: SpaceTransform) -> Tuple[Polygon, ...]:
    """Batch version of :func:`hex_outline` for a whole grid."""
    centers = np.array([(p.x, p.y) for p in map(center, coords)], dtype=np.float64).reshape(-1, 2)
    if len(centers) == 0:
        return ()
    # (N, 1, 2) centers + (1, 6, 2) corners -> (N, 6, 2) logical corners
    corners = centers[:, None, :] + _CORNER_ARRAY[None, :, :]
    pts = transform.to_display_array(corners)
    return tuple(tuple(DisplayPoint(float(x), float(y)) for x, y in poly) for poly in pts.tolist())
