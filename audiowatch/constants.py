"""Application-wide constants used for spectral sampling and matching.

The values in this module configure the audio pipeline, the spectral
comparison and the detection cooldown.  Centralising the configuration
avoids magic numbers spread throughout the code base and makes it easy
to tune behaviour in one place.  :mod:`audiowatch.config` uses these
values as its defaults.
"""

from __future__ import annotations

# ─── Audio configuration ────────────────────────────────────────────────────

# Sampling frequency of the input stream in hertz.
SAMPLE_RATE: int = 44_100

# Number of samples fed into each transform.  A spectrum holds half as
# many magnitude bins as the transform has points.
FFT_SIZE: int = 2048
BIN_COUNT: int = FFT_SIZE // 2

# Weight given to the previous spectrum when smoothing successive
# transforms.  ``0`` disables smoothing.
SMOOTHING_TIME_CONSTANT: float = 0.8

# Decibel range mapped onto the byte scale ``0``‑``255``.  Magnitudes at
# or below ``MIN_DECIBELS`` become ``0``; at or above ``MAX_DECIBELS``
# they become ``255``.
MIN_DECIBELS: float = -100.0
MAX_DECIBELS: float = -30.0

# ─── Scheduling ──────────────────────────────────────────────────────────

# Milliseconds between two sampler ticks.  Also used to compute the
# duration of a recorded pattern.
TICK_INTERVAL_MS: int = 50

# ─── Pattern matching defaults ───────────────────────────────────────────

# Only every n-th stored frame of a pattern is compared with the live
# spectrum.
FRAME_STRIDE: int = 10

# Only every n-th frequency bin is compared.
BIN_STRIDE: int = 5

# Two bins "match" when their magnitudes differ by less than this.
BIN_TOLERANCE: int = 30

# Average similarity a pattern must exceed to count as a match.
MATCH_THRESHOLD: float = 0.85

# Mean spectrum level the live frame must exceed to count as a match.
MIN_LEVEL: float = 20.0

# ─── Detection ───────────────────────────────────────────────────────────

# Minimum time between two accepted detections, across all patterns.
DETECTION_COOLDOWN_MS: int = 5000

# Number of detections shown in the recent-detections list.
RECENT_DETECTIONS: int = 10

NOTIFICATION_TITLE: str = "🔔 Sound detected!"

# ─── Storage ─────────────────────────────────────────────────────────────

APP_NAME: str = "audiowatch"
APP_AUTHOR: str = "audiowatch"
DATA_FILENAME: str = "sound_detector_data.json"

__all__ = [
    "SAMPLE_RATE",
    "FFT_SIZE",
    "BIN_COUNT",
    "SMOOTHING_TIME_CONSTANT",
    "MIN_DECIBELS",
    "MAX_DECIBELS",
    "TICK_INTERVAL_MS",
    "FRAME_STRIDE",
    "BIN_STRIDE",
    "BIN_TOLERANCE",
    "MATCH_THRESHOLD",
    "MIN_LEVEL",
    "DETECTION_COOLDOWN_MS",
    "RECENT_DETECTIONS",
    "NOTIFICATION_TITLE",
    "APP_NAME",
    "APP_AUTHOR",
    "DATA_FILENAME",
]
