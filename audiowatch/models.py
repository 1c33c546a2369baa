"""Data types flowing through the detection pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np


@dataclass(frozen=True, eq=False)
class Frame:
    """One sampled spectrum with its loudness and capture time.

    ``spectrum`` is a one-dimensional ``uint8`` array of magnitude bins,
    ``level`` the arithmetic mean of those bins and ``timestamp`` the
    capture time in milliseconds since the epoch.
    """

    spectrum: np.ndarray
    level: float
    timestamp: int

    @classmethod
    def from_spectrum(cls, spectrum: np.ndarray, timestamp: int) -> "Frame":
        """Build a frame, deriving ``level`` from ``spectrum``."""
        spectrum = np.asarray(spectrum, dtype=np.uint8)
        level = float(spectrum.mean()) if spectrum.size else 0.0
        return cls(spectrum=spectrum, level=level, timestamp=int(timestamp))

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequencies": self.spectrum.tolist(),
            "level": self.level,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Frame":
        return cls(
            spectrum=np.asarray(data["frequencies"], dtype=np.uint8),
            level=float(data["level"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass(frozen=True)
class Pattern:
    """A named fingerprint made of recorded frames.

    ``id`` is the creation time in milliseconds and ``duration`` the
    recording length in milliseconds.
    """

    id: int
    name: str
    frames: tuple[Frame, ...]
    duration: int

    @property
    def duration_seconds(self) -> float:
        return self.duration / 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": [frame.to_dict() for frame in self.frames],
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pattern":
        """Rebuild a pattern; raises ``ValueError`` if it has no frames."""
        frames = tuple(Frame.from_dict(f) for f in data["data"])
        if not frames:
            raise ValueError(f"pattern {data.get('id')!r} has no frames")
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            frames=frames,
            duration=int(data["duration"]),
        )


@dataclass(frozen=True)
class Detection:
    """An accepted detection of a stored pattern."""

    sound: str
    timestamp: int
    display_time: str

    def to_dict(self) -> dict[str, Any]:
        return {"sound": self.sound, "timestamp": self.timestamp, "time": self.display_time}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Detection":
        return cls(
            sound=str(data["sound"]),
            timestamp=int(data["timestamp"]),
            display_time=str(data["time"]),
        )


__all__ = ["Frame", "Pattern", "Detection"]
