"""
Pytest configuration and shared fixtures.

This module provides:
- A Qt core application for tests that touch the scheduler
- Helpers for building spectra, frames and patterns
"""
import sys
from pathlib import Path
from typing import Sequence

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import numpy as np
import pytest

from audiowatch.models import Frame, Pattern

TEST_BINS = 1024


@pytest.fixture(scope="session")
def qapp():
    """Return the process-wide ``QCoreApplication``."""
    from PySide6 import QtCore

    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    return app


def make_frame(value: int = 50, timestamp: int = 0, bins: int = TEST_BINS) -> Frame:
    """Return a frame whose bins all equal ``value``."""
    return Frame.from_spectrum(np.full(bins, value, dtype=np.uint8), timestamp)


def make_pattern(
    frames: Sequence[Frame],
    name: str = "Doorbell",
    pattern_id: int = 1,
    tick_interval_ms: int = 50,
) -> Pattern:
    """Return a pattern made of ``frames``."""
    return Pattern(
        id=pattern_id,
        name=name,
        frames=tuple(frames),
        duration=len(frames) * tick_interval_ms,
    )
