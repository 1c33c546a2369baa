"""Detection cooldown and history.

:class:`DetectionDebouncer` accepts at most one detection per cooldown
window.  The window is global: a detection of any pattern suppresses
every pattern until it has elapsed.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional

from .constants import DETECTION_COOLDOWN_MS, RECENT_DETECTIONS
from .logger import get_logger
from .models import Detection
from .utils import display_time, now_ms

log = get_logger(__name__)

DetectionCallback = Callable[[Detection], None]


class DetectionHistory:
    """Append-only, time-ordered record of accepted detections."""

    def __init__(self, detections: Iterable[Detection] = ()) -> None:
        self._detections: list[Detection] = []
        for detection in detections:
            self.append(detection)

    def append(self, detection: Detection) -> None:
        last = self.last()
        if last is not None and detection.timestamp < last.timestamp:
            raise ValueError(
                f"Detection at {detection.timestamp} is older than the last one at {last.timestamp}"
            )
        self._detections.append(detection)

    def last(self) -> Optional[Detection]:
        return self._detections[-1] if self._detections else None

    def recent(self, limit: int = RECENT_DETECTIONS) -> list[Detection]:
        """Return up to ``limit`` detections, most recent first."""
        return list(reversed(self._detections[-limit:]))

    def __len__(self) -> int:
        return len(self._detections)

    def __iter__(self) -> Iterator[Detection]:
        return iter(tuple(self._detections))


class DetectionDebouncer:
    """Accept detections outside the cooldown window and notify listeners.

    Parameters
    ----------
    history:
        History to append accepted detections to.  A new one is created
        when omitted.
    notifiers:
        Callables invoked once with every accepted :class:`Detection`.
    cooldown_ms:
        A detection is rejected while less than this many milliseconds
        have passed since the last accepted one.
    clock:
        Callable returning the current time in milliseconds.
    """

    def __init__(
        self,
        history: Optional[DetectionHistory] = None,
        notifiers: Iterable[DetectionCallback] = (),
        *,
        cooldown_ms: int = DETECTION_COOLDOWN_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.history = history if history is not None else DetectionHistory()
        self.notifiers: list[DetectionCallback] = list(notifiers)
        self.cooldown_ms = cooldown_ms
        self.clock = clock

    def add_notifier(self, notifier: DetectionCallback) -> None:
        self.notifiers.append(notifier)

    def try_accept(self, sound: str, now: Optional[int] = None) -> Optional[Detection]:
        """Record a detection of ``sound`` unless still cooling down.

        Returns:
            The accepted :class:`Detection`, or ``None`` if rejected.
        """
        if now is None:
            now = self.clock()
        last = self.history.last()
        if last is not None and now - last.timestamp < self.cooldown_ms:
            log.debug("Detection of %r suppressed by cooldown", sound)
            return None

        detection = Detection(sound=sound, timestamp=int(now), display_time=display_time(now))
        self.history.append(detection)
        log.info("Detected %r at %s", sound, detection.display_time)
        for notifier in self.notifiers:
            try:
                notifier(detection)
            except Exception:
                log.exception("Notifier %r failed for %r", notifier, sound)
        return detection


__all__ = ["DetectionHistory", "DetectionDebouncer", "DetectionCallback"]
