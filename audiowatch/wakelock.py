"""Keep the machine awake while listening.

The lock is held by a ``systemd-inhibit`` child process that blocks idle
and sleep until it is terminated.
"""

from __future__ import annotations

import subprocess
import time
from typing import Optional

from .constants import APP_NAME
from .errors import WakeLockUnsupported
from .logger import get_logger

log = get_logger(__name__)


class WakeLock:
    """Inhibit idle and sleep while held."""

    COMMAND = [
        "systemd-inhibit",
        "--what=idle:sleep",
        f"--who={APP_NAME}",
        "--why=Listening for sounds",
        "sleep",
        "infinity",
    ]

    def __init__(self) -> None:
        self._process: Optional[subprocess.Popen] = None

    @property
    def held(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            WakeLockUnsupported: If the inhibitor cannot be started.
        """
        if self.held:
            return
        try:
            process = subprocess.Popen(
                self.COMMAND,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise WakeLockUnsupported(f"systemd-inhibit unavailable: {e}") from e

        # Give the inhibitor a moment to fail on hosts without logind.
        time.sleep(0.1)
        if process.poll() is not None:
            stderr_msg = ""
            if process.stderr:
                stderr_msg = process.stderr.read().decode(errors="ignore").strip()
                process.stderr.close()
            raise WakeLockUnsupported(f"systemd-inhibit exited: {stderr_msg}")
        self._process = process
        log.debug("Wake lock acquired")

    def release(self) -> None:
        if self._process is None:
            return
        process, self._process = self._process, None
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                process.kill()
        if process.stderr:
            process.stderr.close()
        log.debug("Wake lock released")


__all__ = ["WakeLock"]
