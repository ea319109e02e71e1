"""Fire-and-forget system actions: shutdown, reboot, service stop/restart."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable, Sequence

from .models import ServiceAction


logger = logging.getLogger("lcdinator.actions")

Runner = Callable[[Sequence[str]], int]


def _run_command(argv: Sequence[str]) -> int:
    proc = subprocess.run(list(argv), stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False)
    return proc.returncode


class ProcessActions:
    """Runs systemctl commands on a background thread; results are only logged."""

    def __init__(self, runner: Runner | None = None, background: bool = True) -> None:
        self._runner = runner or _run_command
        self._background = background

    def perform_shutdown(self) -> None:
        self._dispatch(("systemctl", "poweroff"))

    def perform_reboot(self) -> None:
        self._dispatch(("systemctl", "reboot"))

    def perform_service_action(self, name: str, action: ServiceAction) -> None:
        action = ServiceAction(action)
        if action is ServiceAction.NONE:
            raise ValueError("Service action must be stop or restart")
        self._dispatch(("systemctl", action.value, f"{name}.service"))

    def _dispatch(self, argv: tuple[str, ...]) -> None:
        logger.info("dispatching %s", " ".join(argv), extra={"event": "action_dispatch"})
        if not self._background:
            self._execute(argv)
            return
        thread = threading.Thread(target=self._execute, args=(argv,), name="ProcessAction", daemon=True)
        thread.start()

    def _execute(self, argv: tuple[str, ...]) -> None:
        try:
            code = self._runner(argv)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.error("%s failed: %s", " ".join(argv), exc, extra={"event": "action_error"})
            return
        if code != 0:
            logger.warning("%s exited with %s", " ".join(argv), code, extra={"event": "action_exit"})
