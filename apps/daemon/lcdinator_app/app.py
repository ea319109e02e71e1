"""Daemon runtime: open the panel, start the key reader, run the render loop."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata

from lcdinator_core import (
    AppConfig,
    KeyReader,
    NavigationState,
    Navigator,
    RenderScheduler,
    build_registry,
)
from lcdinator_core.logging_setup import get_logger
from lcdinator_display import DisplayError, DisplayTransport, P210Protocol
from lcdinator_renderer import Framebuffer
from lcdinator_telemetry import ProcessActions, TelemetryProvider


# The P210 controller drives one fixed 128x64 panel.
PANEL_WIDTH = 128
PANEL_HEIGHT = 64


def app_version() -> str:
    try:
        return metadata.version("lcdinator")
    except metadata.PackageNotFoundError:
        return "0.1.0"


@dataclass
class Runtime:
    transport: DisplayTransport
    state: NavigationState
    navigator: Navigator
    scheduler: RenderScheduler
    reader: KeyReader


def build_runtime(cfg: AppConfig, transport, telemetry=None, actions=None) -> Runtime:
    display = cfg.display
    protocol = P210Protocol(
        transport,
        width=PANEL_WIDTH,
        height=PANEL_HEIGHT,
        command_delay_s=display.command_delay_ms / 1000,
        first_settle_s=display.first_settle_ms / 1000,
        settle_s=display.settle_ms / 1000,
        window_size=display.window_size,
        even_windows_first=display.even_windows_first,
    )
    telemetry = telemetry if telemetry is not None else TelemetryProvider()
    actions = actions if actions is not None else ProcessActions()

    state = NavigationState()
    registry = build_registry(telemetry, state, version=app_version(), service_rows=cfg.screens.service_rows)
    navigator = Navigator(state, registry)
    scheduler = RenderScheduler(
        protocol,
        registry,
        state,
        actions,
        framebuffer=Framebuffer(PANEL_WIDTH, PANEL_HEIGHT),
        tick_s=cfg.scheduler.tick_ms / 1000,
    )
    reader = KeyReader(transport, navigator, scheduler)
    return Runtime(transport=transport, state=state, navigator=navigator, scheduler=scheduler, reader=reader)


def run_daemon(cfg: AppConfig, port: str) -> int:
    logger = get_logger()
    transport = DisplayTransport()
    try:
        transport.open(
            port=port,
            baud=cfg.device.baud,
            read_timeout_ms=cfg.device.read_timeout_ms,
            write_timeout_ms=cfg.device.write_timeout_ms,
        )
    except DisplayError as exc:
        logger.critical("%s", exc, extra={"event": "port_open_failed", "port": port})
        return 1

    runtime = build_runtime(cfg, transport)
    try:
        runtime.reader.start()
        runtime.scheduler.run()
    except DisplayError as exc:
        logger.critical("fatal display error: %s", exc, extra={"event": "fatal", "port": port})
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted", extra={"event": "interrupted"})
    finally:
        runtime.reader.stop()
        transport.close()
    return 0
