"""Typed models for display transport and protocol state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProtocolState(str, Enum):
    DISCONNECTED = "Disconnected"
    PORT_OPEN = "PortOpen"
    READY = "Ready"
    STREAMING = "Streaming"


@dataclass(frozen=True)
class WireFrame:
    """One encoded frame: command prefix plus column payload split in two passes."""

    commands: tuple[bytes, ...]
    payload: bytes
    first_pass: tuple[bytes, ...]
    second_pass: tuple[bytes, ...]

    @property
    def windows(self) -> tuple[bytes, ...]:
        return self.first_pass + self.second_pass

    def to_bytes(self) -> bytes:
        return b"".join(self.commands) + b"".join(self.windows)


@dataclass
class SendStats:
    bytes_sent: int = 0
    packets_sent: int = 0
    duration_s: float = 0.0
    mode: str = "redraw"
