"""JSON-lines daemon log, console echo, and crash reporting."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import LOG_LEVELS, DiagnosticsConfig, config_root


ROOT_LOGGER = "lcdinator"

# Optional ``extra=`` keys copied into the JSON record when present.
CONTEXT_FIELDS = ("event", "crash_id", "key", "screen", "port")


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        payload.update({name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    diagnostics: DiagnosticsConfig | None = None,
    console: bool = True,
    directory: Path | None = None,
) -> logging.Logger:
    """Attach the rotating JSON file (and optionally stderr) to the daemon logger once."""
    diagnostics = diagnostics or DiagnosticsConfig()
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger

    level_name = diagnostics.log_level if diagnostics.log_level in LOG_LEVELS else "INFO"
    logger.setLevel(getattr(logging, level_name))

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str((directory or log_dir()) / "lcdinator.log"),
        when="midnight",
        backupCount=max(2, diagnostics.keep_log_files),
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console:
        echo = logging.StreamHandler()
        echo.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(echo)

    logger.info("logging configured at %s", level_name, extra={"event": "logging_configured"})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def _report_crash(event: str, where: str, exc_info) -> str:
    crash_id = uuid.uuid4().hex
    get_logger().critical(
        "%s crash_id=%s",
        where,
        crash_id,
        exc_info=exc_info,
        extra={"event": event, "crash_id": crash_id},
    )
    return crash_id


def install_crash_hooks() -> None:
    """Log uncaught exceptions from any thread and dump tracebacks on hard faults."""

    def _main_hook(exc_type, exc_value, exc_tb) -> None:
        _report_crash("uncaught_exception", "uncaught exception", (exc_type, exc_value, exc_tb))

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        name = args.thread.name if args.thread else "?"
        _report_crash("thread_exception", f"exception in thread {name}", (args.exc_type, args.exc_value, args.exc_traceback))

    sys.excepthook = _main_hook
    threading.excepthook = _thread_hook

    fault_log = (log_dir() / "fault.log").open("a", encoding="utf-8")
    faulthandler.enable(file=fault_log, all_threads=True)
