"""System telemetry and process-action providers for LCDinator."""

from .actions import ProcessActions
from .models import DiskInfo, MemoryInfo, NetworkInterface, ServiceAction
from .provider import TelemetryProvider, format_uptime, parse_service_units

__all__ = [
    "DiskInfo",
    "MemoryInfo",
    "NetworkInterface",
    "ProcessActions",
    "ServiceAction",
    "TelemetryProvider",
    "format_uptime",
    "parse_service_units",
]
