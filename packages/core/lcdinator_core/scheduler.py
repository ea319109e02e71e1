"""Render loop and keypad reader.

The scheduler is the only writer to the serial line and the only user of the
framebuffer. The key reader feeds the navigator from its own thread and asks for
a redraw through a queue of capacity one: while a redraw is pending further
requests are dropped, so a burst of key presses collapses into one render.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable

from lcdinator_display import DeviceIOError, P210Protocol, SendStats
from lcdinator_renderer import Framebuffer
from lcdinator_telemetry.models import ServiceAction

from .logging_setup import get_logger
from .navigation import DialogResult, DialogType, NavigationState, Navigator, ScreenId
from .screens import Screen


logger = get_logger("scheduler")

WAKE_REDRAW = "redraw"
WAKE_TICK = "tick"


class RenderScheduler:
    def __init__(
        self,
        protocol: P210Protocol,
        registry: tuple[Screen, ...],
        state: NavigationState,
        actions,
        framebuffer: Framebuffer | None = None,
        tick_s: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.protocol = protocol
        self.registry = registry
        self.state = state
        self.actions = actions
        self.framebuffer = framebuffer or Framebuffer(protocol.width, protocol.height)
        self.tick_s = tick_s
        self._clock = clock
        self._redraw: queue.Queue[None] = queue.Queue(maxsize=1)
        self._stop = threading.Event()
        self._fatal: BaseException | None = None
        self._next_tick: float | None = None
        self._current = int(ScreenId.SYSTEM_INFO)

    @property
    def current_screen(self) -> int:
        return self._current

    @property
    def redraw_pending(self) -> bool:
        return not self._redraw.empty()

    def request_redraw(self) -> bool:
        try:
            self._redraw.put_nowait(None)
        except queue.Full:
            return False
        return True

    def fail(self, exc: BaseException) -> None:
        """Report a fatal error from another thread; raised on the next wake."""
        self._fatal = exc
        self.request_redraw()

    def stop(self) -> None:
        self._stop.set()
        self.request_redraw()

    def wait(self) -> str:
        now = self._clock()
        if self._next_tick is None:
            self._next_tick = now + self.tick_s
        try:
            self._redraw.get(timeout=max(0.0, self._next_tick - now))
            return WAKE_REDRAW
        except queue.Empty:
            self._next_tick += self.tick_s
            if self._next_tick <= self._clock():
                self._next_tick = self._clock() + self.tick_s
            return WAKE_TICK

    def run(self) -> None:
        self.protocol.initialize()
        while not self._stop.is_set():
            self.wait()
            if self._stop.is_set():
                break
            self.wake()

    def wake(self) -> SendStats:
        if self._fatal is not None:
            raise self._fatal

        self._consume_dialog_result()

        requested = self.state.current_screen
        if 0 <= requested < len(self.registry):
            self._current = requested
        else:
            logger.warning("ignoring out-of-range screen %s", requested, extra={"screen": requested})

        screen = self.registry[self._current]
        fb = self.framebuffer
        fb.clear()
        screen.draw(fb)
        stats = self.protocol.send_frame(fb.pack())
        logger.debug(
            "frame sent screen=%s bytes=%d duration=%.3fs",
            screen.name,
            stats.bytes_sent,
            stats.duration_s,
            extra={"event": "frame_sent", "screen": screen.name},
        )
        return stats

    def _consume_dialog_result(self) -> None:
        result, snap = self.state.settle_dialog()
        if result is DialogResult.NONE:
            return
        if result is DialogResult.CANCELLED:
            logger.info("dialog cancelled", extra={"event": "dialog_cancelled"})
            return

        if snap.service_action is not ServiceAction.NONE:
            if snap.service_target:
                self.actions.perform_service_action(snap.service_target, snap.service_action)
            else:
                logger.warning("confirmed %s without a service", snap.service_action.value)
            return

        if snap.dialog_type is DialogType.SHUTDOWN:
            self.actions.perform_shutdown()
        elif snap.dialog_type is DialogType.REBOOT:
            self.actions.perform_reboot()
        else:
            logger.warning("confirmation with no pending action", extra={"event": "dialog_empty"})


class KeyReader(threading.Thread):
    """Reads one keycode byte at a time; the serial read timeout bounds each wait."""

    def __init__(self, transport, navigator: Navigator, scheduler: RenderScheduler) -> None:
        super().__init__(daemon=True, name="KeyReader")
        self.transport = transport
        self.navigator = navigator
        self.scheduler = scheduler
        self._stop_event = threading.Event()

    def stop(self) -> None:
        self._stop_event.set()

    def poll_once(self) -> bool:
        data = self.transport.read(1)
        if not data:
            return False
        code = data[0]
        logger.info("key pressed 0x%02X", code, extra={"event": "key", "key": code})
        if self.navigator.handle_key(code):
            self.scheduler.request_redraw()
            return True
        return False

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except DeviceIOError as exc:
                logger.error("key reader stopped: %s", exc, extra={"event": "key_reader_error"})
                self.scheduler.fail(exc)
                return
