"""
Hex Mapper GUI Package

This package provides the pygame viewer that hosts the selection engine.
"""

from .main import HexMapGUI, pointer_event_from_pygame

__all__ = ["HexMapGUI", "pointer_event_from_pygame"]
