"""Notification sinks for accepted detections."""

from __future__ import annotations

from typing import Iterable, Optional

from .constants import NOTIFICATION_TITLE
from .logger import get_logger
from .models import Detection
from .utils import display_time

log = get_logger(__name__)


class DesktopNotifier:
    """Show a desktop notification for each detection.

    ``tray`` is a ``QSystemTrayIcon`` (or anything with ``showMessage``).
    Without one, notifications are written to the log instead.
    """

    def __init__(self, tray: Optional[object] = None) -> None:
        self.tray = tray

    def notify(self, title: str, body: str) -> None:
        if self.tray is None:
            log.info("%s %s", title, body)
            return
        self.tray.showMessage(title, body)

    def __call__(self, detection: Detection) -> None:
        self.notify(NOTIFICATION_TITLE, f"Detected: {detection.sound}")


class EmailNotifier:
    """Announce each detection to every configured address.

    Delivery is simulated: one log line is written per address.
    """

    def __init__(self, emails: Iterable[str]) -> None:
        self.emails = emails

    def __call__(self, detection: Detection) -> None:
        when = display_time(detection.timestamp)
        for email in self.emails:
            log.info('📧 Email sent to %s: detected "%s" at %s', email, detection.sound, when)


__all__ = ["DesktopNotifier", "EmailNotifier"]
