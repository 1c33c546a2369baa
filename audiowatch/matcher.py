"""Utility functions for matching live spectra against stored patterns."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .constants import (
    BIN_STRIDE,
    BIN_TOLERANCE,
    FRAME_STRIDE,
    MATCH_THRESHOLD,
    MIN_LEVEL,
)
from .models import Frame, Pattern


def spectrum_similarity(
    reference: np.ndarray,
    live: np.ndarray,
    *,
    bin_stride: int = BIN_STRIDE,
    tolerance: int = BIN_TOLERANCE,
) -> float:
    """Return the share of compared bins whose magnitudes agree.

    Every ``bin_stride``-th bin of the common length of both spectra is
    compared; a bin matches when the absolute difference is strictly below
    ``tolerance``.

    Args:
        reference: Stored spectrum.
        live: Live spectrum.
        bin_stride: Step between compared bins.
        tolerance: Exclusive upper bound on the per-bin difference.

    Returns:
        Similarity in the range ``0``‑``1``; ``0.0`` if either spectrum is
        empty.
    """

    n = min(len(reference), len(live))
    if n == 0:
        return 0.0
    # Widen before subtracting so uint8 values do not wrap around.
    a = np.asarray(reference[:n:bin_stride], dtype=np.int16)
    b = np.asarray(live[:n:bin_stride], dtype=np.int16)
    matches = int(np.count_nonzero(np.abs(a - b) < tolerance))
    return matches / a.size


def comparison_frames(pattern: Pattern, frame_stride: int = FRAME_STRIDE) -> tuple[Frame, ...]:
    """Return the frames of ``pattern`` used for comparison.

    Frames at indices ``0, frame_stride, 2 * frame_stride, ...`` are taken.
    A pattern shorter than ``frame_stride`` frames yields no comparison
    frames at all.
    """

    frames = pattern.frames
    if len(frames) < frame_stride:
        return ()
    return tuple(frames[::frame_stride])


def pattern_score(
    live: Frame,
    pattern: Pattern,
    *,
    frame_stride: int = FRAME_STRIDE,
    bin_stride: int = BIN_STRIDE,
    tolerance: int = BIN_TOLERANCE,
) -> Optional[float]:
    """Return the average similarity of ``live`` to ``pattern``.

    Returns:
        Mean of the per-frame similarities over the comparison frames, or
        ``None`` when the pattern has no comparison frames.
    """

    samples = comparison_frames(pattern, frame_stride)
    if not samples:
        return None
    total = sum(
        spectrum_similarity(f.spectrum, live.spectrum, bin_stride=bin_stride, tolerance=tolerance)
        for f in samples
    )
    return total / len(samples)


def evaluate(
    live: Frame,
    patterns: Sequence[Pattern],
    *,
    threshold: float = MATCH_THRESHOLD,
    min_level: float = MIN_LEVEL,
    frame_stride: int = FRAME_STRIDE,
    bin_stride: int = BIN_STRIDE,
    tolerance: int = BIN_TOLERANCE,
) -> list[str]:
    """Return the names of every pattern matched by ``live``.

    Each pattern is scored independently.  A pattern matches when its
    average similarity exceeds ``threshold`` and the live level exceeds
    ``min_level``; patterns without comparison frames never match.

    Args:
        live: The current frame.
        patterns: Stored patterns, in store order.
        threshold: Exclusive lower bound on the average similarity.
        min_level: Exclusive lower bound on ``live.level``.

    Returns:
        Matched pattern names in the order of ``patterns``.
    """

    if live.level <= min_level:
        return []
    matched: list[str] = []
    for pattern in patterns:
        score = pattern_score(
            live,
            pattern,
            frame_stride=frame_stride,
            bin_stride=bin_stride,
            tolerance=tolerance,
        )
        if score is not None and score > threshold:
            matched.append(pattern.name)
    return matched


class Matcher:
    """Stateless scorer bound to a set of matching parameters."""

    def __init__(
        self,
        *,
        threshold: float = MATCH_THRESHOLD,
        min_level: float = MIN_LEVEL,
        frame_stride: int = FRAME_STRIDE,
        bin_stride: int = BIN_STRIDE,
        tolerance: int = BIN_TOLERANCE,
    ) -> None:
        self.threshold = threshold
        self.min_level = min_level
        self.frame_stride = frame_stride
        self.bin_stride = bin_stride
        self.tolerance = tolerance

    def evaluate(self, live: Frame, patterns: Sequence[Pattern]) -> list[str]:
        return evaluate(
            live,
            patterns,
            threshold=self.threshold,
            min_level=self.min_level,
            frame_stride=self.frame_stride,
            bin_stride=self.bin_stride,
            tolerance=self.tolerance,
        )


__all__ = [
    "spectrum_similarity",
    "comparison_frames",
    "pattern_score",
    "evaluate",
    "Matcher",
]
