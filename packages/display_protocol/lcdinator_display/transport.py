"""Serial transport abstraction for the front-panel LCD."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import serial

from .errors import DeviceIOError


logger = logging.getLogger("lcdinator.transport")


@dataclass
class SerialConfig:
    port: str
    baud: int = 115200
    read_timeout_ms: int = 100
    write_timeout_ms: int = 2000


class DisplayTransport:
    """Thin wrapper over pyserial with 8N1 settings and strict write accounting.

    The read timeout is fixed when the port is opened: the key reader thread
    reads while the render thread writes, and reconfiguring the port from one
    thread while the other is mid-transfer is not safe.
    """

    def __init__(self) -> None:
        self._serial: Any | None = None
        self.config: SerialConfig | None = None

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self, port: str, baud: int = 115200, read_timeout_ms: int = 100, write_timeout_ms: int = 2000) -> None:
        if self.is_open:
            return
        self.config = SerialConfig(
            port=port,
            baud=baud,
            read_timeout_ms=read_timeout_ms,
            write_timeout_ms=write_timeout_ms,
        )
        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=baud,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=max(read_timeout_ms, 1) / 1000,
                write_timeout=max(write_timeout_ms, 1) / 1000,
            )
        except (serial.SerialException, OSError) as exc:
            raise DeviceIOError(f"Cannot open serial port {port}: {exc}") from exc
        logger.info("serial port %s open at %d baud", port, baud, extra={"event": "port_open"})

    def close(self) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None

    def write(self, payload: bytes) -> int:
        if not self.is_open:
            raise DeviceIOError("Serial port is not open")
        try:
            written = self._serial.write(payload)
        except (serial.SerialException, OSError) as exc:
            raise DeviceIOError(f"Serial write error: {exc}") from exc
        written = len(payload) if written is None else int(written)
        if written < len(payload):
            raise DeviceIOError(
                f"Serial write error: wrote only {written} of {len(payload)} bytes",
                written=written,
                expected=len(payload),
            )
        return written

    def read(self, max_len: int = 1) -> bytes:
        if not self.is_open:
            raise DeviceIOError("Serial port is not open")
        try:
            return bytes(self._serial.read(max_len))
        except (serial.SerialException, OSError) as exc:
            raise DeviceIOError(f"Serial read error: {exc}") from exc

    def flush_output(self) -> None:
        if self.is_open:
            self._serial.flush()
