import os
import time
from typing import Optional

from appdirs import user_data_dir

from .constants import APP_AUTHOR, APP_NAME, DATA_FILENAME


def now_ms() -> int:
    """Return the current wall-clock time in whole milliseconds."""
    return int(time.time() * 1000)


def display_time(timestamp_ms: Optional[int] = None) -> str:
    """
    Format a timestamp as a local ``HH:MM:SS`` string.

    Args:
        timestamp_ms (int | None): Milliseconds since the epoch. The
            current time is used when omitted.
    Returns:
        str: Localised time of day.
    """
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return time.strftime("%H:%M:%S", time.localtime(timestamp_ms / 1000))


def default_data_path() -> str:
    """Return the per-user location of the saved patterns and emails."""

    base_path = user_data_dir(APP_NAME, APP_AUTHOR)
    return os.path.join(base_path, DATA_FILENAME)


__all__ = ["now_ms", "display_time", "default_data_path"]
