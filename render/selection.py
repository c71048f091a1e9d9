"""Pointer-driven hex selection with cached outline geometry.

The engine owns the selection state and two render caches:

* the grid outline (every hex in the registry), rebuilt only when the
  viewport size changes or the registry is replaced;
* the selected-hex outline, rebuilt when the selection changes or the
  viewport size changes.

Hosts feed it pointer events with the current viewport bounds and ask it
for geometry on every redraw.  Both calls are synchronous and pure
computation; the host's event loop serializes them.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from config import SETTINGS, DisplaySettings
from hexgrid import CubeCoord, nearest_coordinate
from mapstate import Hex, HexRegistry
from render.geometry import Geometry, Stroke, hex_outline, hex_outlines
from viewport import Bounds, DisplayPoint, NonInvertibleTransform, SpaceTransform

logger = logging.getLogger(__name__)

Size = Tuple[float, float]


class EventStatus(enum.Enum):
    IGNORED = "ignored"
    CAPTURED = "captured"


class PointerKind(enum.Enum):
    PRESS = "press"
    RELEASE = "release"
    MOVE = "move"


class Button(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event as delivered by the host.

    ``position`` is relative to the viewport, or None when the pointer is
    outside it. ``button`` is None for motion events.
    """

    kind: PointerKind
    position: Optional[DisplayPoint]
    button: Optional[Button] = None

    @classmethod
    def press(cls, x: float, y: float, button: Button = Button.PRIMARY) -> "PointerEvent":
        return cls(PointerKind.PRESS, DisplayPoint(x, y), button)

    @property
    def is_primary_press(self) -> bool:
        return self.kind is PointerKind.PRESS and self.button is Button.PRIMARY


class RenderCache:
    """Holds one geometry together with the viewport size it was built for."""

    def __init__(self) -> None:
        self._geometry: Optional[Geometry] = None
        self._size: Optional[Size] = None
        self.renders = 0

    @property
    def is_valid(self) -> bool:
        return self._geometry is not None

    def clear(self) -> None:
        self._geometry = None
        self._size = None

    def draw(self, size: Size, render: Callable[[], Geometry]) -> Geometry:
        if self._geometry is None or self._size != size:
            self._geometry = render()
            self._size = size
            self.renders += 1
        return self._geometry


class SelectionEngine:
    def __init__(self, registry: HexRegistry, settings: Optional[DisplaySettings] = None) -> None:
        self.settings = settings or SETTINGS
        self._registry = registry
        self._selected: Optional[CubeCoord] = None
        self._grid_cache = RenderCache()
        self._selection_cache = RenderCache()

    # ---- state -----------------------------------------------------------
    @property
    def registry(self) -> HexRegistry:
        return self._registry

    @property
    def selected(self) -> Optional[CubeCoord]:
        return self._selected

    def selected_hex(self) -> Optional[Hex]:
        if self._selected is None:
            return None
        return self._registry.lookup(self._selected)

    @property
    def grid_renders(self) -> int:
        return self._grid_cache.renders

    @property
    def selection_renders(self) -> int:
        return self._selection_cache.renders

    def transform(self, bounds: Bounds) -> SpaceTransform:
        return SpaceTransform.for_bounds(bounds, self.settings.hex_radius_divisor)

    def _set_selected(self, coord: Optional[CubeCoord]) -> None:
        if coord == self._selected:
            return
        logger.debug("selection %s -> %s", self._selected, coord)
        self._selected = coord
        self.invalidate_selection()

    def select(self, coord: CubeCoord) -> bool:
        """Select ``coord`` if the registry holds it; otherwise clear the selection."""
        if self._registry.contains(coord):
            self._set_selected(coord)
            return True
        self._set_selected(None)
        return False

    def clear_selection(self) -> None:
        self._set_selected(None)

    def invalidate_grid(self) -> None:
        self._grid_cache.clear()

    def invalidate_selection(self) -> None:
        self._selection_cache.clear()

    def set_registry(self, registry: HexRegistry) -> None:
        """Swap the registry; drops a selection the new registry lacks."""
        self._registry = registry
        self.invalidate_grid()
        if self._selected is not None and not registry.contains(self._selected):
            self._set_selected(None)
        else:
            self.invalidate_selection()

    # ---- events ----------------------------------------------------------
    def hit_test(self, position: DisplayPoint, bounds: Bounds) -> CubeCoord:
        """Nearest cell under ``position``; raises NonInvertibleTransform."""
        logical = self.transform(bounds).to_logical(position)
        return nearest_coordinate(logical)

    def update(self, event: PointerEvent, bounds: Bounds) -> EventStatus:
        if not event.is_primary_press:
            return EventStatus.IGNORED
        position = bounds.position_in(event.position)
        if position is None:
            return EventStatus.IGNORED
        try:
            coord = self.hit_test(position, bounds)
        except NonInvertibleTransform:
            logger.warning("ignoring press at %s: viewport %sx%s has no area",
                           position.as_tuple(), bounds.width, bounds.height)
            return EventStatus.IGNORED
        self.select(coord)
        return EventStatus.CAPTURED

    # ---- drawing ---------------------------------------------------------
    def _grid_geometry(self, transform: SpaceTransform) -> Geometry:
        logger.debug("rebuilding grid outline for %d hexes", len(self._registry))
        stroke = Stroke(self.settings.grid_color, self.settings.grid_line_width)
        return Geometry(hex_outlines(self._registry.coordinates(), transform), stroke)

    def _selection_geometry(self, transform: SpaceTransform) -> Geometry:
        stroke = Stroke(self.settings.selection_color, self.settings.selection_line_width)
        if self._selected is None:
            return Geometry((), stroke)
        return Geometry((hex_outline(self._selected, transform),), stroke)

    def draw(self, bounds: Bounds) -> List[Geometry]:
        """Return ``[grid, selection]``; draw in that order so the highlight is on top."""
        transform = self.transform(bounds)
        size = bounds.size
        grid = self._grid_cache.draw(size, lambda: self._grid_geometry(transform))
        selection = self._selection_cache.draw(size, lambda: self._selection_geometry(transform))
        return [grid, selection]
