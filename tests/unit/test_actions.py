import sys
import threading
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from lcdinator_telemetry.actions import ProcessActions
from lcdinator_telemetry.models import ServiceAction


class RecordingRunner:
    def __init__(self, code=0, exc=None):
        self.calls = []
        self.code = code
        self.exc = exc

    def __call__(self, argv):
        self.calls.append(tuple(argv))
        if self.exc is not None:
            raise self.exc
        return self.code


class ProcessActionsTests(unittest.TestCase):
    def test_power_commands(self):
        runner = RecordingRunner()
        actions = ProcessActions(runner=runner, background=False)
        actions.perform_shutdown()
        actions.perform_reboot()
        self.assertEqual(runner.calls, [("systemctl", "poweroff"), ("systemctl", "reboot")])

    def test_service_commands(self):
        runner = RecordingRunner()
        actions = ProcessActions(runner=runner, background=False)
        actions.perform_service_action("ssh", ServiceAction.STOP)
        actions.perform_service_action("cron", "restart")
        self.assertEqual(
            runner.calls,
            [("systemctl", "stop", "ssh.service"), ("systemctl", "restart", "cron.service")],
        )

    def test_none_action_rejected(self):
        actions = ProcessActions(runner=RecordingRunner(), background=False)
        with self.assertRaises(ValueError):
            actions.perform_service_action("ssh", ServiceAction.NONE)

    def test_failures_are_logged_not_raised(self):
        actions = ProcessActions(runner=RecordingRunner(exc=FileNotFoundError("systemctl")), background=False)
        with self.assertLogs("lcdinator.actions", level="ERROR"):
            actions.perform_reboot()
        actions = ProcessActions(runner=RecordingRunner(code=3), background=False)
        with self.assertLogs("lcdinator.actions", level="WARNING"):
            actions.perform_shutdown()

    def test_background_dispatch(self):
        runner = RecordingRunner()
        actions = ProcessActions(runner=runner)
        actions.perform_reboot()
        for thread in threading.enumerate():
            if thread.name == "ProcessAction":
                thread.join(timeout=2.0)
        self.assertEqual(runner.calls, [("systemctl", "reboot")])


if __name__ == "__main__":
    unittest.main()
