"""Plain-text renderings of the lists shown to the user."""

from __future__ import annotations

from typing import Iterable

from .constants import RECENT_DETECTIONS
from .debounce import DetectionHistory
from .models import Pattern

NO_EMAILS = "No email configured"
NO_PATTERNS = "No pattern recorded"
NO_DETECTIONS = "No sound detected yet"


def email_lines(emails: Iterable[str]) -> list[str]:
    lines = list(emails)
    return lines or [NO_EMAILS]


def pattern_lines(patterns: Iterable[Pattern]) -> list[str]:
    """Return one ``name  duration  (id)`` line per pattern."""
    lines = [f"{p.name}  {p.duration_seconds:.1f}s  ({p.id})" for p in patterns]
    return lines or [NO_PATTERNS]


def detection_lines(history: DetectionHistory, limit: int = RECENT_DETECTIONS) -> list[str]:
    """Return the latest detections, most recent first."""
    lines = [f"{d.display_time}  {d.sound}" for d in history.recent(limit)]
    return lines or [NO_DETECTIONS]


__all__ = ["email_lines", "pattern_lines", "detection_lines"]
