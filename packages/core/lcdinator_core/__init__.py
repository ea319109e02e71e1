"""Core daemon services: settings, logging, navigation, screens, render loop."""

from .config import AppConfig, default_serial_port, load_config, save_config
from .navigation import (
    DialogResult,
    DialogType,
    KeyCode,
    NavigationSnapshot,
    NavigationState,
    Navigator,
    ScreenId,
    cycle_screen,
)
from .scheduler import KeyReader, RenderScheduler
from .screens import MENU_ITEMS, Screen, build_registry, scroll_window

__all__ = [
    "AppConfig",
    "DialogResult",
    "DialogType",
    "KeyCode",
    "KeyReader",
    "MENU_ITEMS",
    "NavigationSnapshot",
    "NavigationState",
    "Navigator",
    "RenderScheduler",
    "Screen",
    "ScreenId",
    "build_registry",
    "cycle_screen",
    "default_serial_port",
    "load_config",
    "save_config",
    "scroll_window",
]
