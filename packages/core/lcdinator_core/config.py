"""Daemon settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class DeviceConfig:
    port: str | None = None
    baud: int = 115200
    read_timeout_ms: int = 100
    write_timeout_ms: int = 2000


@dataclass
class DisplayConfig:
    command_delay_ms: int = 5
    first_settle_ms: int = 500
    settle_ms: int = 50
    window_size: int = 64
    even_windows_first: bool = True


@dataclass
class SchedulerConfig:
    tick_ms: int = 1000


@dataclass
class ScreensConfig:
    service_rows: int = 3


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    log_level: str = "INFO"


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    device: DeviceConfig = field(default_factory=DeviceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    screens: ScreensConfig = field(default_factory=ScreensConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "LCDinator"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "LCDinator"
    return Path.home() / ".config" / "lcdinator"


def config_path() -> Path:
    return config_root() / "config.json"


def default_serial_port() -> str:
    system = platform.system()
    if system == "Windows":
        return "COM1"
    if system == "Darwin":
        return "/dev/tty.usbserial"
    # Checkpoint 12200 / P210 wire the panel to the second UART.
    return "/dev/ttyS1"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_device(cfg: AppConfig) -> None:
    defaults = DeviceConfig()
    if cfg.device.port is not None and not str(cfg.device.port).strip():
        cfg.device.port = None
    try:
        cfg.device.baud = int(cfg.device.baud)
    except (TypeError, ValueError):
        cfg.device.baud = defaults.baud
    cfg.device.read_timeout_ms = max(10, min(1000, int(cfg.device.read_timeout_ms)))
    cfg.device.write_timeout_ms = max(100, int(cfg.device.write_timeout_ms))


def _normalize_display(cfg: AppConfig) -> None:
    d = cfg.display
    d.command_delay_ms = max(0, int(d.command_delay_ms))
    d.first_settle_ms = max(0, int(d.first_settle_ms))
    d.settle_ms = max(0, int(d.settle_ms))
    d.window_size = max(1, int(d.window_size))
    d.even_windows_first = bool(d.even_windows_first)


def _normalize_scheduler(cfg: AppConfig) -> None:
    cfg.scheduler.tick_ms = max(100, min(10000, int(cfg.scheduler.tick_ms)))


def _normalize_screens(cfg: AppConfig) -> None:
    cfg.screens.service_rows = max(1, int(cfg.screens.service_rows))


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    level = str(cfg.diagnostics.log_level).upper()
    cfg.diagnostics.log_level = level if level in LOG_LEVELS else "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=CONFIG_VERSION,
        device=_merge(DeviceConfig, data.get("device", {})),
        display=_merge(DisplayConfig, data.get("display", {})),
        scheduler=_merge(SchedulerConfig, data.get("scheduler", {})),
        screens=_merge(ScreensConfig, data.get("screens", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    try:
        _normalize_device(cfg)
        _normalize_display(cfg)
        _normalize_scheduler(cfg)
        _normalize_screens(cfg)
        _normalize_diagnostics(cfg)
    except (TypeError, ValueError):
        return AppConfig()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
