"""CLI entrypoint: ``lcdinator [DEVICE]``."""

from __future__ import annotations

import argparse

from lcdinator_core import default_serial_port, load_config
from lcdinator_core.logging_setup import configure_logging, install_crash_hooks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lcdinator", description="Front-panel LCD status daemon")
    parser.add_argument(
        "device",
        nargs="?",
        default=None,
        help=f"Serial device of the panel (default: config file or {default_serial_port()})",
    )
    return parser


def resolve_port(device: str | None, configured: str | None) -> str:
    return device or configured or default_serial_port()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config()
    configure_logging(cfg.diagnostics)
    install_crash_hooks()

    from .app import run_daemon

    return int(run_daemon(cfg, resolve_port(args.device, cfg.device.port)))


if __name__ == "__main__":
    raise SystemExit(main())
