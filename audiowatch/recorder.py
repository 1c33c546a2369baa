"""Accumulate sampled frames into a named pattern."""

from __future__ import annotations

from typing import Callable

from .constants import TICK_INTERVAL_MS
from .errors import AlreadyRecording, EmptyRecording, InvalidName, NotRecording
from .logger import get_logger
from .models import Frame, Pattern
from .utils import now_ms

log = get_logger(__name__)


class PatternRecorder:
    """Record frames between :meth:`start` and :meth:`finish`.

    The recorder is either idle or recording.  :meth:`finish` and
    :meth:`cancel` always return it to idle and drop the buffer, whether
    or not a pattern is produced.
    """

    def __init__(
        self,
        *,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.tick_interval_ms = tick_interval_ms
        self.clock = clock
        self._frames: list[Frame] = []
        self._recording = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def start(self) -> None:
        if self._recording:
            raise AlreadyRecording("A recording is already in progress")
        self._frames = []
        self._recording = True
        log.info("Recording started")

    def on_tick(self, frame: Frame) -> None:
        if not self._recording:
            raise NotRecording("Frame received while not recording")
        self._frames.append(frame)

    def finish(self, name: str) -> Pattern:
        """Stop recording and return the captured pattern.

        Raises:
            EmptyRecording: If no frames were captured.
            InvalidName: If ``name`` is empty after stripping whitespace.
        """
        frames = tuple(self._frames)
        self._reset()
        if not frames:
            raise EmptyRecording("No audio was captured")
        name = (name or "").strip()
        if not name:
            raise InvalidName("Pattern name must not be empty")
        pattern = Pattern(
            id=int(self.clock()),
            name=name,
            frames=frames,
            duration=len(frames) * self.tick_interval_ms,
        )
        log.info(
            "Recorded pattern %r (%d frames, %.1fs)",
            pattern.name,
            len(frames),
            pattern.duration_seconds,
        )
        return pattern

    def cancel(self) -> None:
        if self._recording:
            log.info("Recording cancelled (%d frames discarded)", len(self._frames))
        self._reset()

    def _reset(self) -> None:
        self._frames = []
        self._recording = False


__all__ = ["PatternRecorder"]
