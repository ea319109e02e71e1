import sys
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from lcdinator_telemetry.provider import TelemetryProvider, format_uptime, parse_service_units


class FormattingTests(unittest.TestCase):
    def test_format_uptime(self):
        self.assertEqual(format_uptime(59), "00m")
        self.assertEqual(format_uptime(3 * 3600 + 5 * 60), "03h 05m")
        self.assertEqual(format_uptime(2 * 86400 + 3600 + 60), "2d 01h 01m")

    def test_parse_service_units(self):
        output = (
            "cron.service      loaded active running Regular background program processing daemon\n"
            "\n"
            "ssh.service       loaded active running OpenBSD Secure Shell server\n"
            "getty@tty1.service loaded active running Getty on tty1\n"
        )
        self.assertEqual(parse_service_units(output), ["cron", "ssh", "getty@tty1"])
        self.assertEqual(parse_service_units(""), [])


class TelemetryProviderTests(unittest.TestCase):
    def test_live_readings(self):
        provider = TelemetryProvider()
        self.assertGreaterEqual(provider.cpu_usage_percent(), 0.0)
        self.assertGreater(provider.memory_info().total_mb, 0)
        self.assertTrue(provider.uptime_string())
        for iface in provider.network_interfaces():
            self.assertNotEqual(iface.name, "lo")

    def test_failures_return_defaults(self):
        provider = TelemetryProvider()
        with mock.patch("psutil.cpu_percent", side_effect=RuntimeError("boom")):
            self.assertEqual(provider.cpu_usage_percent(), 0.0)
        with mock.patch("psutil.virtual_memory", side_effect=OSError("boom")):
            self.assertEqual(provider.memory_info().total_mb, 0)
        with mock.patch("psutil.disk_usage", side_effect=OSError("boom")):
            self.assertEqual(provider.disk_info().total_gb, 0)
        with mock.patch("psutil.net_if_addrs", side_effect=OSError("boom")):
            self.assertEqual(provider.network_interfaces(), [])

    def test_service_listing_failure(self):
        provider = TelemetryProvider()
        with mock.patch("subprocess.run", side_effect=FileNotFoundError("systemctl")):
            self.assertEqual(provider.running_services(), [])
        failed = mock.Mock(returncode=1, stdout="ssh.service loaded active running x\n")
        with mock.patch("subprocess.run", return_value=failed):
            self.assertEqual(provider.running_services(), [])
        ok = mock.Mock(returncode=0, stdout="ssh.service loaded active running x\n")
        with mock.patch("subprocess.run", return_value=ok):
            self.assertEqual(provider.running_services(), ["ssh"])


if __name__ == "__main__":
    unittest.main()
