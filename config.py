from dataclasses import dataclass
from typing import Tuple

RGBA = Tuple[int, int, int, int]


@dataclass
class DisplaySettings:
    """Tweakable viewer parameters.

    Central store for values read by the selection engine, the pygame
    viewer and the CLI. Hosts may adjust these at startup.
    """

    # Hex radius is min(viewport width, height) / divisor
    hex_radius_divisor: float = 20.0

    # Strokes
    grid_color: RGBA = (0, 0, 0, 255)
    grid_line_width: float = 1.0
    selection_color: RGBA = (255, 0, 0, 255)
    selection_line_width: float = 1.0
    background_color: RGBA = (255, 255, 255, 255)
    hud_text_color: RGBA = (20, 20, 20, 255)

    # Window
    window_size: Tuple[int, int] = (1024, 768)
    window_title: str = "Hex Mapper"
    fps: int = 30
    hud_font_name: str = "consolas"
    hud_font_size: int = 16

    default_map_path: str = "maps/sample_map.json"


# Global settings instance used throughout the codebase
SETTINGS = DisplaySettings()
