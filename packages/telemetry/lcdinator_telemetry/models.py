"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class MemoryInfo:
    used_mb: int
    total_mb: int


@dataclass(frozen=True)
class DiskInfo:
    used_gb: int
    total_gb: int


@dataclass(frozen=True)
class NetworkInterface:
    name: str
    ip: str
    up: bool
    rx_bytes_per_s: int
    tx_bytes_per_s: int


class ServiceAction(str, Enum):
    NONE = "none"
    STOP = "stop"
    RESTART = "restart"
