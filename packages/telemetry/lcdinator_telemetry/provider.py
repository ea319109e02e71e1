"""psutil-backed telemetry provider that never raises into the caller."""

from __future__ import annotations

import logging
import socket
import subprocess
import time
from dataclasses import dataclass

import psutil

from .models import DiskInfo, MemoryInfo, NetworkInterface


logger = logging.getLogger("lcdinator.telemetry")

_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024

SERVICE_LIST_CMD = (
    "systemctl",
    "list-units",
    "--type=service",
    "--state=running",
    "--no-legend",
    "--plain",
    "--no-pager",
)


def format_uptime(seconds: float) -> str:
    total = int(seconds)
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    if days > 0:
        return f"{days}d {hours:02d}h {minutes:02d}m"
    if hours > 0:
        return f"{hours:02d}h {minutes:02d}m"
    return f"{minutes:02d}m"


def parse_service_units(output: str) -> list[str]:
    names: list[str] = []
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        unit = fields[0]
        if unit.endswith(".service"):
            unit = unit[: -len(".service")]
        names.append(unit)
    return names


@dataclass
class _NicCounters:
    ts: float
    rx: int
    tx: int


class TelemetryProvider:
    """Polling provider with stable zero/empty defaults on read failure."""

    def __init__(self, disk_path: str = "/", service_timeout_s: float = 2.0) -> None:
        self.disk_path = disk_path
        self.service_timeout_s = service_timeout_s
        self._nic_prev: dict[str, _NicCounters] = {}
        try:
            # Prime the counter so the first real sample is not a meaningless 0.0.
            psutil.cpu_percent(interval=None)
        except Exception:
            logger.debug("cpu counter priming failed", exc_info=True)

    def cpu_usage_percent(self) -> float:
        try:
            return float(psutil.cpu_percent(interval=None))
        except Exception:
            logger.debug("cpu read failed", exc_info=True)
            return 0.0

    def memory_info(self) -> MemoryInfo:
        try:
            vm = psutil.virtual_memory()
        except Exception:
            logger.debug("memory read failed", exc_info=True)
            return MemoryInfo(used_mb=0, total_mb=0)
        return MemoryInfo(used_mb=int(vm.used // _MB), total_mb=int(vm.total // _MB))

    def disk_info(self) -> DiskInfo:
        try:
            du = psutil.disk_usage(self.disk_path)
        except Exception:
            logger.debug("disk read failed", exc_info=True)
            return DiskInfo(used_gb=0, total_gb=0)
        return DiskInfo(used_gb=int(du.used // _GB), total_gb=int(du.total // _GB))

    def uptime_string(self) -> str:
        try:
            return format_uptime(max(time.time() - psutil.boot_time(), 0.0))
        except Exception:
            logger.debug("uptime read failed", exc_info=True)
            return "?"

    def network_interfaces(self) -> list[NetworkInterface]:
        try:
            addrs = psutil.net_if_addrs()
            stats = psutil.net_if_stats()
            counters = psutil.net_io_counters(pernic=True)
        except Exception:
            logger.debug("network read failed", exc_info=True)
            return []

        now = time.monotonic()
        result: list[NetworkInterface] = []
        for name in sorted(addrs):
            if name == "lo":
                continue
            ip = next((a.address for a in addrs[name] if a.family == socket.AF_INET), "")
            st = stats.get(name)
            rx_rate = tx_rate = 0
            io = counters.get(name)
            if io is not None:
                prev = self._nic_prev.get(name)
                if prev is not None:
                    elapsed = max(now - prev.ts, 1e-6)
                    rx_rate = int(max(io.bytes_recv - prev.rx, 0) / elapsed)
                    tx_rate = int(max(io.bytes_sent - prev.tx, 0) / elapsed)
                self._nic_prev[name] = _NicCounters(ts=now, rx=io.bytes_recv, tx=io.bytes_sent)
            result.append(
                NetworkInterface(
                    name=name,
                    ip=ip,
                    up=bool(st.isup) if st is not None else False,
                    rx_bytes_per_s=rx_rate,
                    tx_bytes_per_s=tx_rate,
                )
            )
        return result

    def running_services(self) -> list[str]:
        try:
            proc = subprocess.run(
                SERVICE_LIST_CMD,
                capture_output=True,
                text=True,
                timeout=self.service_timeout_s,
                check=False,
            )
        except (OSError, subprocess.SubprocessError):
            logger.debug("service listing failed", exc_info=True)
            return []
        if proc.returncode != 0:
            return []
        return parse_service_units(proc.stdout)
