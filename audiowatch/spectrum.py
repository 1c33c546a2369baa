"""Live spectral sampling of an audio input stream.

:class:`SpectrumSampler` keeps the most recent ``fft_size`` samples of a
``sounddevice`` input stream in a ring buffer and turns them into a
byte-scaled magnitude spectrum whenever :meth:`SpectrumSampler.sample`
is called.  The conversion in :func:`byte_frequency_data` follows the
behaviour of a browser ``AnalyserNode``: a Blackman window, magnitude
normalised by the transform size, exponential smoothing over time and a
linear mapping of the decibel range onto ``0``‑``255``.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import numpy as np
from scipy import fft
from scipy.signal import get_window

from .constants import (
    FFT_SIZE,
    MAX_DECIBELS,
    MIN_DECIBELS,
    SAMPLE_RATE,
    SMOOTHING_TIME_CONSTANT,
)
from .errors import PermissionDenied, StreamUnavailable
from .logger import get_logger
from .models import Frame
from .utils import now_ms

log = get_logger(__name__)


def byte_frequency_data(
    samples: np.ndarray,
    previous: Optional[np.ndarray] = None,
    *,
    smoothing: float = SMOOTHING_TIME_CONSTANT,
    min_db: float = MIN_DECIBELS,
    max_db: float = MAX_DECIBELS,
) -> tuple[np.ndarray, np.ndarray]:
    """Return the byte spectrum of ``samples`` and the smoothed magnitudes.

    Args:
        samples: One block of ``N`` time-domain samples in ``[-1, 1]``.
        previous: Smoothed magnitudes returned by the previous call, or
            ``None`` for the first block.
        smoothing: Weight of ``previous`` in the exponential average.
        min_db: Decibel level mapped to ``0``.
        max_db: Decibel level mapped to ``255``.

    Returns:
        Tuple of ``(spectrum, smoothed)`` where ``spectrum`` holds ``N // 2``
        ``uint8`` bins and ``smoothed`` the float magnitudes to pass back
        in as ``previous`` on the next call.
    """

    samples = np.asarray(samples, dtype=np.float64).reshape(-1)
    n = samples.size
    window = get_window("blackman", n)
    magnitudes = np.abs(fft.rfft(samples * window))[: n // 2] / n

    if previous is not None and previous.shape == magnitudes.shape:
        smoothed = smoothing * previous + (1.0 - smoothing) * magnitudes
    else:
        smoothed = (1.0 - smoothing) * magnitudes

    with np.errstate(divide="ignore"):
        decibels = 20.0 * np.log10(smoothed)
    scaled = (decibels - min_db) * (255.0 / (max_db - min_db))
    spectrum = np.floor(np.clip(np.nan_to_num(scaled, neginf=0.0), 0.0, 255.0))
    return spectrum.astype(np.uint8), smoothed


def level_percent(level: float) -> int:
    """Return ``level`` as a ``0``‑``100`` meter reading."""
    return min(int(round(level)), 100)


class SpectrumSampler:
    """Turn a live input stream into fixed-size magnitude spectra.

    Parameters
    ----------
    device:
        ``sounddevice`` input device (index or name); ``None`` selects the
        default input.
    sample_rate:
        Sampling frequency in hertz.
    channels:
        Number of input channels.  Multichannel input is mixed to mono.
    fft_size:
        Transform size; every spectrum has ``fft_size // 2`` bins.
    smoothing, min_db, max_db:
        See :func:`byte_frequency_data`.
    clock:
        Callable returning the current time in milliseconds.
    """

    def __init__(
        self,
        device: Optional[int | str] = None,
        *,
        sample_rate: int = SAMPLE_RATE,
        channels: int = 1,
        fft_size: int = FFT_SIZE,
        smoothing: float = SMOOTHING_TIME_CONSTANT,
        min_db: float = MIN_DECIBELS,
        max_db: float = MAX_DECIBELS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.device = device
        self.sample_rate = sample_rate
        self.channels = channels
        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_db = min_db
        self.max_db = max_db
        self.clock = clock
        self.stream = None
        self._buffer = np.zeros(fft_size, dtype=np.float32)
        self._smoothed: Optional[np.ndarray] = None
        self._lock = threading.Lock()

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2

    @property
    def is_active(self) -> bool:
        return self.stream is not None

    # --------------------------------------------------------------
    def acquire_stream(self) -> None:
        """Open and start the input stream.

        Raises:
            PermissionDenied: If the audio input cannot be opened.
        """
        if self.stream is not None:
            return
        import sounddevice as sd

        try:
            stream = sd.InputStream(
                device=self.device,
                channels=self.channels,
                samplerate=self.sample_rate,
                dtype="float32",
                callback=self._callback,
            )
            stream.start()
        except (sd.PortAudioError, OSError) as e:
            raise PermissionDenied(f"Audio input unavailable: {e}") from e
        self.stream = stream
        log.info(
            "Audio stream opened (device=%s, %d Hz, %d bins)",
            self.device,
            self.sample_rate,
            self.bin_count,
        )

    def release(self) -> None:
        """Stop and close the input stream, if any."""
        if self.stream is None:
            return
        stream, self.stream = self.stream, None
        try:
            stream.stop()
        finally:
            stream.close()
        with self._lock:
            self._buffer[:] = 0.0
            self._smoothed = None
        log.info("Audio stream closed")

    # --------------------------------------------------------------
    def _callback(self, indata, frames, _time, status) -> None:  # noqa: D401
        if status:
            log.warning("Input status: %s", status)
        if indata.ndim == 2 and indata.shape[1] > 1:
            block = indata.mean(axis=1)
        else:
            block = indata.reshape(-1)
        self.feed(block)

    def feed(self, block: np.ndarray) -> None:
        """Append ``block`` to the ring buffer of recent samples."""
        block = np.asarray(block, dtype=np.float32).reshape(-1)
        if block.size == 0:
            return
        with self._lock:
            if block.size >= self.fft_size:
                self._buffer[:] = block[-self.fft_size :]
            else:
                self._buffer = np.roll(self._buffer, -block.size)
                self._buffer[-block.size :] = block

    def sample(self) -> Frame:
        """Return a frame built from the most recent samples.

        Raises:
            StreamUnavailable: If :meth:`acquire_stream` has not succeeded.
        """
        if self.stream is None:
            raise StreamUnavailable("sample() called without an active audio stream")
        with self._lock:
            spectrum, self._smoothed = byte_frequency_data(
                self._buffer,
                self._smoothed,
                smoothing=self.smoothing,
                min_db=self.min_db,
                max_db=self.max_db,
            )
        return Frame.from_spectrum(spectrum, self.clock())


__all__ = ["SpectrumSampler", "byte_frequency_data", "level_percent"]
