import threading
import time
import unittest

from lcdinator_app.app import build_runtime
from lcdinator_core import AppConfig, KeyCode, ScreenId
from lcdinator_display import DeviceIOError
from lcdinator_telemetry.models import DiskInfo, MemoryInfo


class ScriptedPanel:
    """Serial double that replays key presses and records every write."""

    def __init__(self, keys):
        self._keys = [bytes([k]) for k in keys]
        self._lock = threading.Lock()
        self.writes = []
        self.is_open = True

    def write(self, payload):
        with self._lock:
            self.writes.append(bytes(payload))
        return len(payload)

    def read(self, max_len=1):
        with self._lock:
            if self._keys:
                return self._keys.pop(0)
        time.sleep(0.005)
        return b""

    def frames(self):
        with self._lock:
            return sum(1 for w in self.writes if w == b"\x1b\x47")


class NullTelemetry:
    def cpu_usage_percent(self):
        return 0.0

    def memory_info(self):
        return MemoryInfo(used_mb=0, total_mb=0)

    def disk_info(self):
        return DiskInfo(used_gb=0, total_gb=0)

    def uptime_string(self):
        return "00m"

    def network_interfaces(self):
        return []

    def running_services(self):
        return []


class RecordingActions:
    def __init__(self):
        self.calls = []
        self.done = threading.Event()

    def perform_shutdown(self):
        self.calls.append("shutdown")
        self.done.set()

    def perform_reboot(self):
        self.calls.append("reboot")
        self.done.set()

    def perform_service_action(self, name, action):
        self.calls.append(("service", name, action))
        self.done.set()


def fast_config():
    cfg = AppConfig()
    cfg.display.command_delay_ms = 0
    cfg.display.first_settle_ms = 0
    cfg.display.settle_ms = 0
    cfg.scheduler.tick_ms = 50
    return cfg


class DaemonLoopTests(unittest.TestCase):
    def test_menu_reboot_through_both_threads(self):
        panel = ScriptedPanel([KeyCode.ESC, KeyCode.DOWN, KeyCode.ENTER, KeyCode.ENTER])
        actions = RecordingActions()
        runtime = build_runtime(fast_config(), panel, telemetry=NullTelemetry(), actions=actions)

        loop = threading.Thread(target=runtime.scheduler.run, daemon=True)
        runtime.reader.start()
        loop.start()
        try:
            self.assertTrue(actions.done.wait(timeout=5.0))
        finally:
            runtime.reader.stop()
            runtime.scheduler.stop()
            loop.join(timeout=2.0)
            runtime.reader.join(timeout=2.0)

        self.assertEqual(actions.calls, ["reboot"])
        self.assertEqual(panel.writes[:3], [b"\x1b\x40", b"\x0b", b"\x0c"])
        self.assertGreaterEqual(panel.frames(), 1)
        self.assertEqual(runtime.state.current_screen, ScreenId.SYSTEM_INFO)
        self.assertFalse(loop.is_alive())

    def test_reader_failure_stops_loop(self):
        class BrokenPanel(ScriptedPanel):
            def read(self, max_len=1):
                raise DeviceIOError("Serial read error: device unplugged")

        panel = BrokenPanel([])
        runtime = build_runtime(fast_config(), panel, telemetry=NullTelemetry(), actions=RecordingActions())
        runtime.reader.start()
        runtime.reader.join(timeout=2.0)
        with self.assertRaises(DeviceIOError):
            runtime.scheduler.run()


if __name__ == "__main__":
    unittest.main()
