"""Renderer package: monochrome framebuffer and drawing primitives."""

from . import icons
from .framebuffer import DARK, LIGHT, THRESHOLD, Framebuffer, load_font
from .icons import Icon, draw_icon

__all__ = [
    "DARK",
    "Framebuffer",
    "Icon",
    "LIGHT",
    "THRESHOLD",
    "draw_icon",
    "icons",
    "load_font",
]
