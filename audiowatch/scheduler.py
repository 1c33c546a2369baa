"""Tick loop driving sampling, recording and matching."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from PySide6 import QtCore

from .constants import TICK_INTERVAL_MS
from .debounce import DetectionDebouncer, DetectionHistory
from .errors import WakeLockUnsupported
from .logger import get_logger
from .matcher import Matcher
from .models import Detection, Pattern
from .recorder import PatternRecorder
from .spectrum import SpectrumSampler, level_percent
from .store import EmailList, PatternStore
from .wakelock import WakeLock

log = get_logger(__name__)


@dataclass
class DetectorState:
    """Everything the scheduler owns between ticks."""

    store: PatternStore = field(default_factory=PatternStore)
    emails: EmailList = field(default_factory=EmailList)
    history: DetectionHistory = field(default_factory=DetectionHistory)
    listening: bool = False


class Scheduler(QtCore.QThread):
    """Sample the input at a fixed interval and route each frame.

    Every tick takes one frame from the sampler, hands it to the recorder
    while recording and, while listening with at least one stored pattern,
    to the matcher; each matched name goes through the debouncer.  Ticks
    never overlap: the loop runs one tick to completion, then waits for the
    next slot on a cancellable event.  Mode changes made from other threads
    take the same lock as a tick.
    """

    # Live level meter reading, 0-100
    levelChanged = QtCore.Signal(int)
    # Name of an accepted detection
    soundDetected = QtCore.Signal(str)
    # Name of a newly stored pattern
    patternSaved = QtCore.Signal(str)

    def __init__(
        self,
        sampler: SpectrumSampler,
        *,
        state: Optional[DetectorState] = None,
        recorder: Optional[PatternRecorder] = None,
        matcher: Optional[Matcher] = None,
        debouncer: Optional[DetectionDebouncer] = None,
        wake_lock: Optional[WakeLock] = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        """Initialise the scheduler thread.

        Args:
            sampler: Source of live frames.
            state: Patterns, emails and detection history to work on.
            recorder: Recorder used for new patterns.
            matcher: Matcher used while listening.
            debouncer: Cooldown filter; its history replaces the one in
                ``state``.
            wake_lock: Lock held while listening, if any.
            tick_interval_ms: Milliseconds between tick starts.
            parent: Optional Qt parent.
        """
        super().__init__(parent)
        self.sampler = sampler
        self.state = state if state is not None else DetectorState()
        self.recorder = recorder if recorder is not None else PatternRecorder(
            tick_interval_ms=tick_interval_ms
        )
        self.matcher = matcher if matcher is not None else Matcher()
        self.debouncer = debouncer if debouncer is not None else DetectionDebouncer(
            self.state.history
        )
        self.state.history = self.debouncer.history
        self.debouncer.add_notifier(self._emit_detection)
        self.wake_lock = wake_lock
        self.tick_interval_ms = tick_interval_ms
        self._cancel = threading.Event()
        self._lock = threading.RLock()

    # --------------------------------------------------------------
    @property
    def is_listening(self) -> bool:
        return self.state.listening

    @property
    def is_recording(self) -> bool:
        return self.recorder.is_recording

    def start_listening(self) -> None:
        """Begin matching live frames against the stored patterns.

        Raises:
            PermissionDenied: If the audio input cannot be opened; the
                scheduler state is left unchanged.
        """
        with self._lock:
            if self.state.listening:
                return
            self.sampler.acquire_stream()
            self._acquire_wake_lock()
            self.state.listening = True
            log.info("Listening started (%d pattern(s))", len(self.state.store))
        self._ensure_running()

    def stop_listening(self) -> None:
        with self._lock:
            if not self.state.listening:
                return
            self.state.listening = False
            if self.wake_lock is not None:
                self.wake_lock.release()
            log.info("Listening stopped")
        self._stop_if_idle()

    def start_recording(self) -> None:
        """Begin capturing frames for a new pattern.

        Raises:
            PermissionDenied: If the audio input cannot be opened.
            AlreadyRecording: If a recording is in progress.
        """
        with self._lock:
            self.sampler.acquire_stream()
            self.recorder.start()
        self._ensure_running()

    def finish_recording(self, name: str) -> Pattern:
        """Stop recording and store the captured pattern under ``name``.

        Raises:
            EmptyRecording: If nothing was captured.
            InvalidName: If ``name`` is blank.
        """
        try:
            with self._lock:
                pattern = self.recorder.finish(name)
                self.state.store.add(pattern)
        finally:
            self._stop_if_idle()
        self.patternSaved.emit(pattern.name)
        return pattern

    def cancel_recording(self) -> None:
        with self._lock:
            self.recorder.cancel()
        self._stop_if_idle()

    def remove_pattern(self, pattern_id: int) -> None:
        with self._lock:
            self.state.store.remove(pattern_id)

    def shutdown(self) -> None:
        """Stop all activity and release the audio stream."""
        self._reset_modes()
        self._stop_loop()
        self.sampler.release()

    # --------------------------------------------------------------
    def tick(self, now: Optional[int] = None) -> list[Detection]:
        """Run one sampling cycle and return the detections it accepted."""
        accepted: list[Detection] = []
        with self._lock:
            frame = self.sampler.sample()
            self.levelChanged.emit(level_percent(frame.level))

            if self.recorder.is_recording:
                self.recorder.on_tick(frame)

            patterns = self.state.store.all()
            if self.state.listening and patterns:
                for name in self.matcher.evaluate(frame, patterns):
                    detection = self.debouncer.try_accept(name, now)
                    if detection is not None:
                        accepted.append(detection)
        return accepted

    def run(self) -> None:  # noqa: D401
        interval = self.tick_interval_ms / 1000
        while not self._cancel.is_set():
            started = time.monotonic()
            try:
                self.tick()
            except Exception:
                log.exception("Scheduler tick failed; stopping")
                self._reset_modes()
                break
            remaining = interval - (time.monotonic() - started)
            self._cancel.wait(max(remaining, 0.0))

    # --------------------------------------------------------------
    def _emit_detection(self, detection: Detection) -> None:
        self.soundDetected.emit(detection.sound)

    def _acquire_wake_lock(self) -> None:
        if self.wake_lock is None:
            return
        try:
            self.wake_lock.acquire()
        except WakeLockUnsupported as e:
            log.info("Wake lock not supported: %s", e)

    def _reset_modes(self) -> None:
        # Leaves neither listening nor recording set once the loop is gone.
        with self._lock:
            self.state.listening = False
            self.recorder.cancel()
            if self.wake_lock is not None:
                self.wake_lock.release()

    def _ensure_running(self) -> None:
        if self.isRunning():
            return
        self._cancel.clear()
        self.start()

    def _stop_if_idle(self) -> None:
        with self._lock:
            idle = not self.state.listening and not self.recorder.is_recording
        if idle:
            self._stop_loop()

    def _stop_loop(self) -> None:
        self._cancel.set()
        if self.isRunning():
            self.wait(2000)


__all__ = ["DetectorState", "Scheduler"]
