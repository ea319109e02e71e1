"""The fixed set of panel screens.

Screens hold no cursors of their own; everything they remember between frames
lives in the shared :class:`~lcdinator_core.navigation.NavigationState`.
"""

from __future__ import annotations

import socket

from lcdinator_renderer import Framebuffer, icons
from lcdinator_telemetry.models import ServiceAction

from .navigation import DialogResult, DialogType, KeyCode, NavigationState, ScreenId


LINE_HEIGHT = 16
CHAR_WIDTH = 7

MENU_ITEMS: tuple[tuple[str, DialogType], ...] = (
    ("Shutdown", DialogType.SHUTDOWN),
    ("Reboot", DialogType.REBOOT),
)

_DIALOG_PROMPTS = {
    DialogType.SHUTDOWN: "Shutdown? (OK/ESC)",
    DialogType.REBOOT: "Reboot? (OK/ESC)",
}


def scroll_window(selected: int, offset: int, count: int, rows: int) -> int:
    """Return the first visible row so that ``selected`` stays on screen."""
    if count <= rows:
        return 0
    if selected < offset:
        offset = selected
    elif selected >= offset + rows:
        offset = selected - rows + 1
    return max(0, min(offset, count - rows))


def _line_top(row: int) -> int:
    return 1 + row * LINE_HEIGHT


class Screen:
    screen_id: ScreenId
    name: str = ""

    def draw(self, fb: Framebuffer) -> None:
        raise NotImplementedError

    def handle_key(self, key: KeyCode) -> bool:
        return False

    def is_capturing(self) -> bool:
        """True while the screen owns every key (e.g. a pending confirmation)."""
        return False


class SystemInfoScreen(Screen):
    screen_id = ScreenId.SYSTEM_INFO
    name = "System Info"

    def __init__(self, telemetry) -> None:
        self.telemetry = telemetry

    def draw(self, fb: Framebuffer) -> None:
        mem = self.telemetry.memory_info()
        disk = self.telemetry.disk_info()
        rows = (
            (icons.CPU, f"CPU: {self.telemetry.cpu_usage_percent():2.0f}%"),
            (icons.RAM, f"RAM: {mem.used_mb}/{mem.total_mb} MB"),
            (icons.DISK, f"DSK: {disk.used_gb}/{disk.total_gb} GB"),
            (icons.CLOCK, f"UPT: {self.telemetry.uptime_string()}"),
        )
        for row, (bitmap, line) in enumerate(rows):
            fb.icon(0, 2 + row * LINE_HEIGHT, bitmap)
            fb.text((10, _line_top(row)), line)


class NetworkInfoScreen(Screen):
    screen_id = ScreenId.NETWORK_INFO
    name = "Network"

    def __init__(self, telemetry, state: NavigationState) -> None:
        self.telemetry = telemetry
        self.state = state

    def draw(self, fb: Framebuffer) -> None:
        ifaces = self.telemetry.network_interfaces()
        if not ifaces:
            fb.text((0, 4), "No interfaces")
            return
        idx = self.state.net_iface_index
        if not 0 <= idx < len(ifaces):
            idx = 0
        iface = ifaces[idx]

        fb.icon(0, 4, icons.PLUG)
        fb.text((10, _line_top(0)), f"{iface.name} ({idx + 1}/{len(ifaces)})")
        if iface.ip:
            fb.icon(0, 20, icons.NET)
            fb.text((10, _line_top(1)), f"IP: {iface.ip}")
        else:
            fb.icon(0, 20, icons.NET_ERROR)
            fb.text((10, _line_top(1)), f"{'Up' if iface.up else 'Down'}, no IP")
        fb.icon(0, 36, icons.ARROW_UP)
        fb.text((10, _line_top(2)), f"RX: {iface.rx_bytes_per_s // 1024} KB/s")
        fb.icon(0, 52, icons.ARROW_DOWN)
        fb.text((10, _line_top(3)), f"TX: {iface.tx_bytes_per_s // 1024} KB/s")

    def handle_key(self, key: KeyCode) -> bool:
        count = len(self.telemetry.network_interfaces())
        if count == 0:
            return False
        if key is KeyCode.UP:
            return self.state.rotate("net_iface_index", -1, count)
        if key is KeyCode.DOWN:
            return self.state.rotate("net_iface_index", 1, count)
        return False


class AboutScreen(Screen):
    screen_id = ScreenId.ABOUT
    name = "About"

    def __init__(self, version: str) -> None:
        self.version = version

    def draw(self, fb: Framebuffer) -> None:
        fb.text((0, _line_top(0)), "LCDinator")
        fb.text((0, _line_top(1)), "by nemvince")
        fb.text((0, _line_top(2)), socket.gethostname()[:18])
        fb.text((0, _line_top(3)), f"version {self.version}")


class MenuScreen(Screen):
    """Power menu with its confirmation dialog drawn as an overlay line."""

    screen_id = ScreenId.MENU
    name = "Menu"

    def __init__(self, state: NavigationState) -> None:
        self.state = state

    def draw(self, fb: Framebuffer) -> None:
        snap = self.state.snapshot()
        for i, (label, _dialog) in enumerate(MENU_ITEMS):
            prefix = "> " if snap.menu_index == i else "  "
            fb.text((0, 6 + i * 20), prefix + label)
        if snap.in_dialog:
            fb.text((4, _line_top(3)), _DIALOG_PROMPTS.get(snap.dialog_type, "Are you sure?"))

    def handle_key(self, key: KeyCode) -> bool:
        state = self.state
        if state.in_dialog:
            if key is KeyCode.ENTER:
                state.update(dialog_result=DialogResult.CONFIRMED, in_dialog=False)
                return True
            if key is KeyCode.ESC:
                state.update(dialog_result=DialogResult.CANCELLED, in_dialog=False, dialog_type=DialogType.NONE)
                return True
            return False

        if key is KeyCode.UP:
            return state.adjust("menu_index", -1, 0, len(MENU_ITEMS) - 1)
        if key is KeyCode.DOWN:
            return state.adjust("menu_index", 1, 0, len(MENU_ITEMS) - 1)
        if key is KeyCode.ENTER:
            index = max(0, min(state.menu_index, len(MENU_ITEMS) - 1))
            state.update(in_menu=True, in_dialog=True, dialog_type=MENU_ITEMS[index][1])
            return True
        if key is KeyCode.ESC:
            state.update(
                in_menu=False,
                menu_index=0,
                in_dialog=False,
                dialog_type=DialogType.NONE,
                current_screen=int(ScreenId.SYSTEM_INFO),
            )
            return True
        return False


class ServiceManagerScreen(Screen):
    screen_id = ScreenId.SERVICE_MANAGER
    name = "Services"

    def __init__(self, telemetry, state: NavigationState, rows: int = 3) -> None:
        self.telemetry = telemetry
        self.state = state
        self.rows = rows

    def is_capturing(self) -> bool:
        return self.state.service_action is not ServiceAction.NONE

    def draw(self, fb: Framebuffer) -> None:
        services = self.telemetry.running_services()
        count = len(services)
        if count == 0:
            fb.text((0, 4), "No services found")
            return

        selected = max(0, min(self.state.service_index, count - 1))
        offset = scroll_window(selected, self.state.service_view_offset, count, self.rows)
        self.state.service_view_offset = offset

        max_chars = fb.width // CHAR_WIDTH - 2 - 3
        for row in range(self.rows):
            index = offset + row
            if index >= count:
                break
            label = services[index]
            if len(label) > max_chars > 0:
                label = label[: max_chars - 1] + "~"
            prefix = "> " if index == selected else "  "
            fb.text((0, _line_top(row)), prefix + label)

        if count > self.rows:
            self._draw_scrollbar(fb, offset, count)

        snap = self.state.snapshot()
        if snap.service_action is not ServiceAction.NONE:
            verb = "Stop" if snap.service_action is ServiceAction.STOP else "Restart"
            target = snap.service_target or services[selected]
            fb.text((0, _line_top(3)), f"{verb} {target}? (OK/ESC)")

    def _draw_scrollbar(self, fb: Framebuffer, offset: int, count: int) -> None:
        area = self.rows * LINE_HEIGHT
        top = _line_top(0)
        thumb = max(3, min(area, (self.rows * area) // count))
        span = count - self.rows
        thumb_top = top + (offset * (area - thumb)) // span if span > 0 else top
        x = fb.width - 3
        fb.draw(lambda d: d.rectangle((x, thumb_top, x + 1, min(thumb_top + thumb, top + area) - 1), fill=0))

    def handle_key(self, key: KeyCode) -> bool:
        state = self.state
        services = self.telemetry.running_services()
        count = len(services)

        if state.service_action is not ServiceAction.NONE:
            if key is KeyCode.ENTER:
                state.dialog_result = DialogResult.CONFIRMED
                return True
            if key is KeyCode.ESC:
                state.update(service_action=ServiceAction.NONE, service_target=None)
                return True
            if key is KeyCode.LEFT:
                return self._arm(ServiceAction.STOP)
            if key is KeyCode.RIGHT:
                return self._arm(ServiceAction.RESTART)
            return False

        if count == 0:
            state.update(service_index=0, service_view_offset=0)
            return False

        changed = False
        selected = max(0, min(state.service_index, count - 1))
        if key is KeyCode.UP and selected > 0:
            selected -= 1
            changed = True
        elif key is KeyCode.DOWN and selected < count - 1:
            selected += 1
            changed = True
        elif key is KeyCode.LEFT:
            changed = self._arm(ServiceAction.STOP, services[selected])
        elif key in (KeyCode.RIGHT, KeyCode.ENTER):
            changed = self._arm(ServiceAction.RESTART, services[selected])

        offset = scroll_window(selected, state.service_view_offset, count, self.rows)
        state.update(service_index=selected, service_view_offset=offset)
        return changed

    def _arm(self, action: ServiceAction, target: str | None = None) -> bool:
        state = self.state
        if target is None:
            if state.service_action is action:
                return False
            state.service_action = action
            return True
        state.update(service_action=action, service_target=target)
        return True


def build_registry(telemetry, state: NavigationState, version: str, service_rows: int = 3) -> tuple[Screen, ...]:
    registry: tuple[Screen, ...] = (
        SystemInfoScreen(telemetry),
        NetworkInfoScreen(telemetry, state),
        AboutScreen(version),
        MenuScreen(state),
        ServiceManagerScreen(telemetry, state, rows=service_rows),
    )
    for idx, screen in enumerate(registry):
        if screen.screen_id != idx:
            raise ValueError(f"Screen {screen.name!r} registered at {idx}, expected {int(screen.screen_id)}")
    return registry
