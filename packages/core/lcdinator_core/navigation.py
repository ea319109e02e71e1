"""Keypad navigation: shared state and the key dispatcher.

The key reader thread mutates a single :class:`NavigationState` while the render
scheduler reads it. Every field is guarded by the state's lock, so individual
reads and writes are atomic; multi-field changes go through :meth:`update`.
Only the scheduler resets ``dialog_result`` (via :meth:`settle_dialog`), and
only key handling ever sets it. A confirmed result freezes key handling until
the scheduler has settled it, so the action it runs is the one confirmed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from lcdinator_telemetry.models import ServiceAction

if TYPE_CHECKING:
    from .screens import Screen


logger = logging.getLogger("lcdinator.navigation")


class KeyCode(IntEnum):
    HELP = 0x41
    LEFT = 0x42
    ESC = 0x43
    UP = 0x44
    ENTER = 0x45
    DOWN = 0x46
    RIGHT = 0x47


class ScreenId(IntEnum):
    SYSTEM_INFO = 0
    NETWORK_INFO = 1
    ABOUT = 2
    MENU = 3
    SERVICE_MANAGER = 4


class DialogType(IntEnum):
    NONE = 0
    SHUTDOWN = 1
    REBOOT = 2


class DialogResult(IntEnum):
    NONE = 0
    CONFIRMED = 1
    CANCELLED = 2


# The About overlay is reached with Help only, never by cycling.
NON_CYCLABLE = ScreenId.ABOUT


@dataclass(frozen=True)
class NavigationSnapshot:
    current_screen: int
    in_menu: bool
    menu_index: int
    in_dialog: bool
    dialog_type: DialogType
    dialog_result: DialogResult
    net_iface_index: int
    service_index: int
    service_view_offset: int
    service_action: ServiceAction
    service_target: str | None


_DEFAULTS: dict[str, Any] = {
    "current_screen": int(ScreenId.SYSTEM_INFO),
    "in_menu": False,
    "menu_index": 0,
    "in_dialog": False,
    "dialog_type": DialogType.NONE,
    "dialog_result": DialogResult.NONE,
    "net_iface_index": 0,
    "service_index": 0,
    "service_view_offset": 0,
    "service_action": ServiceAction.NONE,
    "service_target": None,
}

_NORMAL: dict[str, Any] = {
    "current_screen": int(ScreenId.SYSTEM_INFO),
    "in_menu": False,
    "menu_index": 0,
    "in_dialog": False,
    "dialog_type": DialogType.NONE,
}


class _Field:
    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        with obj._lock:
            return obj._values[self.name]

    def __set__(self, obj, value) -> None:
        with obj._lock:
            obj._values[self.name] = value


class NavigationState:
    current_screen = _Field()
    in_menu = _Field()
    menu_index = _Field()
    in_dialog = _Field()
    dialog_type = _Field()
    dialog_result = _Field()
    net_iface_index = _Field()
    service_index = _Field()
    service_view_offset = _Field()
    service_action = _Field()
    service_target = _Field()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, Any] = dict(_DEFAULTS)

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - set(_DEFAULTS)
        if unknown:
            raise AttributeError(f"Unknown navigation fields: {sorted(unknown)}")
        with self._lock:
            self._values.update(changes)

    def adjust(self, name: str, delta: int, low: int, high: int) -> bool:
        """Clamped add; returns False when already at the bound."""
        with self._lock:
            current = self._values[name]
            target = max(low, min(high, current + delta))
            if target == current:
                return False
            self._values[name] = target
            return True

    def rotate(self, name: str, delta: int, count: int) -> bool:
        """Wrapping add over ``range(count)``."""
        if count <= 0:
            return False
        with self._lock:
            current = self._values[name]
            target = (current + delta) % count
            if target == current:
                return False
            self._values[name] = target
            return True

    def take_dialog_result(self) -> DialogResult:
        with self._lock:
            result = self._values["dialog_result"]
            self._values["dialog_result"] = DialogResult.NONE
            return result

    def reset_to_normal(self) -> None:
        self.update(**_NORMAL)

    def settle_dialog(self) -> tuple[DialogResult, NavigationSnapshot]:
        """Consume the dialog result and apply its follow-up in one locked step.

        The snapshot is taken before the follow-up, so it names exactly what was
        confirmed. A confirmed service action is disarmed; a confirmed dialog
        returns to the normal screen. A confirmation with nothing behind it
        changes nothing else.
        """
        with self._lock:
            snap = NavigationSnapshot(**self._values)
            self._values["dialog_result"] = DialogResult.NONE
            if snap.dialog_result is DialogResult.CONFIRMED:
                if snap.service_action is not ServiceAction.NONE:
                    self._values.update(service_action=ServiceAction.NONE, service_target=None)
                elif snap.dialog_type is not DialogType.NONE:
                    self._values.update(_NORMAL)
            return snap.dialog_result, snap

    def snapshot(self) -> NavigationSnapshot:
        with self._lock:
            return NavigationSnapshot(**self._values)


def cycle_screen(current: int, step: int, count: int, skip: int = NON_CYCLABLE) -> int:
    target = (current + step) % count
    if target == skip:
        target = (target + step) % count
    return target


class Navigator:
    """Arbitrates keypad input between the modal layers and the active screen."""

    def __init__(self, state: NavigationState, registry: "tuple[Screen, ...]") -> None:
        self.state = state
        self.registry = registry

    def handle_key(self, code: int) -> bool:
        try:
            key = KeyCode(code)
        except ValueError:
            logger.debug("ignoring unknown key 0x%02X", code)
            return False

        state = self.state
        if state.dialog_result is DialogResult.CONFIRMED:
            return False

        if state.in_dialog or state.in_menu:
            return self.registry[ScreenId.MENU].handle_key(key)

        current = state.current_screen
        if current == ScreenId.ABOUT:
            if key is KeyCode.ESC:
                state.current_screen = int(ScreenId.SYSTEM_INFO)
                return True
            return False

        screen = self.registry[current] if 0 <= current < len(self.registry) else None
        if screen is not None and screen.is_capturing():
            return screen.handle_key(key)

        if key is KeyCode.LEFT or key is KeyCode.RIGHT:
            step = -1 if key is KeyCode.LEFT else 1
            state.current_screen = cycle_screen(current, step, len(self.registry))
            return True
        if key is KeyCode.HELP:
            state.current_screen = int(ScreenId.ABOUT)
            return True
        if key is KeyCode.ESC:
            state.update(in_menu=True, menu_index=0, current_screen=int(ScreenId.MENU))
            return True

        if screen is None:
            return False
        return screen.handle_key(key)
