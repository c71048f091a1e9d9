# render_topdown.py - composite engine geometry onto a Pillow image
from __future__ import annotations
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from config import RGBA, SETTINGS
from render.geometry import Geometry


def render_geometries(
    geometries: Sequence[Geometry],
    size: Tuple[int, int],
    background: Optional[RGBA] = None,
    scale: int = 1,
) -> Image.Image:
    """Stroke each geometry in order onto a fresh RGBA image.

    Later geometries are drawn on top of earlier ones, matching the order
    returned by ``SelectionEngine.draw``. ``background`` defaults to the
    current ``SETTINGS.background_color``.
    """
    if background is None:
        background = SETTINGS.background_color
    img_w, img_h = int(size[0]), int(size[1])
    img = Image.new("RGBA", (img_w, img_h), background)
    draw = ImageDraw.Draw(img)
    for geometry in geometries:
        width = max(1, int(round(geometry.stroke.width)))
        for poly in geometry.polygons:
            pts = [p.as_tuple() for p in poly]
            # close the outline explicitly; ImageDraw.line leaves it open
            draw.line(pts + [pts[0]], fill=geometry.stroke.color, width=width)
    if scale > 1:
        img = img.resize((img_w * scale, img_h * scale), Image.NEAREST)
    return img
