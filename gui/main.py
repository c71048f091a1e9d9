"""Pygame front-end: shows a hex map and lets the user pick one cell."""
from __future__ import annotations

import logging
from typing import Optional

import pygame

from config import SETTINGS, DisplaySettings
from hexgrid import CubeCoord
from mapstate import MapState, SaveError
from render.geometry import Geometry
from render.selection import Button, EventStatus, PointerEvent, PointerKind, SelectionEngine
from viewport import Bounds, DisplayPoint

logger = logging.getLogger(__name__)

PYGAME_BUTTONS = {
    1: Button.PRIMARY,
    2: Button.MIDDLE,
    3: Button.SECONDARY,
}

# Arrow keys step to a neighbour; index into CubeCoord.neighbors()
KEY_DIRECTIONS = {
    pygame.K_RIGHT: 0,
    pygame.K_UP: 2,
    pygame.K_LEFT: 3,
    pygame.K_DOWN: 5,
}


def pointer_event_from_pygame(ev: pygame.event.Event) -> Optional[PointerEvent]:
    """Translate a pygame mouse event, or return None for anything else."""
    if ev.type == pygame.MOUSEBUTTONDOWN:
        kind = PointerKind.PRESS
    elif ev.type == pygame.MOUSEBUTTONUP:
        kind = PointerKind.RELEASE
    elif ev.type == pygame.MOUSEMOTION:
        return PointerEvent(PointerKind.MOVE, DisplayPoint(*ev.pos))
    else:
        return None
    # wheel buttons (4, 5) have no pointer meaning here
    button = PYGAME_BUTTONS.get(ev.button)
    if button is None:
        return None
    return PointerEvent(kind, DisplayPoint(*ev.pos), button)


class HexMapGUI:
    """Window host: owns the surface, forwards events and composites geometry."""

    def __init__(
        self,
        state: MapState,
        map_path: Optional[str] = None,
        settings: Optional[DisplaySettings] = None,
    ) -> None:
        self.settings = settings or SETTINGS
        pygame.init()
        self.clock = pygame.time.Clock()
        self.screen = pygame.display.set_mode(self.settings.window_size, pygame.RESIZABLE)
        pygame.display.set_caption(self.settings.window_title)
        self.font = pygame.font.SysFont(self.settings.hud_font_name, self.settings.hud_font_size)

        self.state = state
        self.map_path = map_path
        self.engine = SelectionEngine(state.registry, self.settings)
        self.running = False

        # HUD caching
        self._hud_text = ""
        self._hud_surface: Optional[pygame.Surface] = None

    @property
    def bounds(self) -> Bounds:
        w, h = self.screen.get_size()
        return Bounds(w, h)

    def handle_event(self, ev: pygame.event.Event) -> EventStatus:
        if ev.type == pygame.QUIT:
            self.running = False
            return EventStatus.CAPTURED
        if ev.type == pygame.VIDEORESIZE:
            # pygame 2 resizes the display surface itself; draw() picks up the new size
            return EventStatus.CAPTURED
        if ev.type == pygame.KEYDOWN:
            return self.handle_key(ev)
        pointer = pointer_event_from_pygame(ev)
        if pointer is None:
            return EventStatus.IGNORED
        return self.engine.update(pointer, self.bounds)

    def handle_key(self, ev: pygame.event.Event) -> EventStatus:
        mods = pygame.key.get_mods()
        if ev.key == pygame.K_ESCAPE:
            self.running = False
        elif ev.key == pygame.K_s and mods & pygame.KMOD_CTRL:
            self.save()
        elif ev.key in KEY_DIRECTIONS:
            self.move_selection(KEY_DIRECTIONS[ev.key])
        else:
            return EventStatus.IGNORED
        return EventStatus.CAPTURED

    def move_selection(self, direction: int) -> None:
        current = self.engine.selected
        if current is None:
            return
        target: CubeCoord = current.neighbors()[direction]
        if self.engine.registry.contains(target):
            self.engine.select(target)

    def save(self) -> bool:
        if self.map_path is None:
            logger.warning("no map path; nothing saved")
            return False
        try:
            self.state.save_json(self.map_path)
        except SaveError as exc:
            logger.error("save failed: %s", exc)
            return False
        return True

    def hud_text(self) -> str:
        h = self.engine.selected_hex()
        if h is None:
            return f"{len(self.engine.registry)} hexes | no selection"
        attrs = " ".join(f"{k}:{v}" for k, v in h.attributes.items())
        return f"hex{h.coordinate} {attrs}".rstrip()

    def _draw_geometry(self, geometry: Geometry) -> None:
        color = geometry.stroke.color
        width = max(1, int(round(geometry.stroke.width)))
        for poly in geometry.polygons:
            pygame.draw.polygon(self.screen, color, [p.as_tuple() for p in poly], width)

    def draw(self) -> None:
        self.screen.fill(self.settings.background_color)
        for geometry in self.engine.draw(self.bounds):
            self._draw_geometry(geometry)

        hud_str = self.hud_text()
        if hud_str != self._hud_text or self._hud_surface is None:
            self._hud_text = hud_str
            self._hud_surface = self.font.render(hud_str, True, self.settings.hud_text_color)
        self.screen.blit(self._hud_surface, (8, 8))

    def run(self) -> None:
        self.running = True
        while self.running:
            for ev in pygame.event.get():
                self.handle_event(ev)
            self.draw()
            pygame.display.flip()
            self.clock.tick(self.settings.fps)
        pygame.quit()
