# render/__init__.py
# Package init for geometry, selection and image rendering

from .geometry import Geometry, Stroke, hex_outline, hex_outlines
from .selection import Button, EventStatus, PointerEvent, PointerKind, RenderCache, SelectionEngine
from .render_topdown import render_geometries

__all__ = [
    "Geometry", "Stroke", "hex_outline", "hex_outlines",
    "Button", "EventStatus", "PointerEvent", "PointerKind", "RenderCache", "SelectionEngine",
    "render_geometries",
]
