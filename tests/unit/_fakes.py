"""Shared test doubles for the panel, telemetry, and action providers."""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
for _sub in ("packages/core", "packages/display_protocol", "packages/renderer", "packages/telemetry", "apps/daemon"):
    _path = str(ROOT / _sub)
    if _path not in sys.path:
        sys.path.insert(0, _path)

from lcdinator_display import DeviceIOError
from lcdinator_telemetry.models import DiskInfo, MemoryInfo, NetworkInterface


class FakeTransport:
    def __init__(self, reads=None, fail_after=None):
        self.reads = list(reads or [])
        self.writes = []
        self.is_open = True
        self.fail_after = fail_after

    def write(self, payload):
        if self.fail_after is not None and len(self.writes) >= self.fail_after:
            raise DeviceIOError("Serial write error: wrote only 0 of %d bytes" % len(payload))
        self.writes.append(bytes(payload))
        return len(payload)

    def read(self, max_len=1):
        if self.reads:
            item = self.reads.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return b""


class FakeTelemetry:
    def __init__(self, services=None, ifaces=None):
        self.services = list(services if services is not None else [])
        self.ifaces = list(ifaces if ifaces is not None else [])

    def cpu_usage_percent(self):
        return 12.5

    def memory_info(self):
        return MemoryInfo(used_mb=512, total_mb=1024)

    def disk_info(self):
        return DiskInfo(used_gb=3, total_gb=16)

    def uptime_string(self):
        return "01h 02m"

    def network_interfaces(self):
        return list(self.ifaces)

    def running_services(self):
        return list(self.services)


class FakeActions:
    def __init__(self):
        self.calls = []

    def perform_shutdown(self):
        self.calls.append(("shutdown",))

    def perform_reboot(self):
        self.calls.append(("reboot",))

    def perform_service_action(self, name, action):
        self.calls.append(("service", name, action))


def make_ifaces(count):
    return [
        NetworkInterface(name=f"eth{i}", ip=f"10.0.0.{i + 1}" if i % 2 == 0 else "", up=True, rx_bytes_per_s=2048, tx_bytes_per_s=1024)
        for i in range(count)
    ]


def make_services(count):
    return [f"svc{i:02d}" for i in range(count)]
