"""Exceptions raised by the audiowatch pipeline."""

from __future__ import annotations


class AudioWatchError(Exception):
    """Base class for all audiowatch errors."""


class PermissionDenied(AudioWatchError):
    """The audio input (or another host resource) was refused."""


class StreamUnavailable(AudioWatchError):
    """The sampler was used before an input stream was acquired."""


class AlreadyRecording(AudioWatchError):
    """A recording session is already in progress."""


class NotRecording(AudioWatchError):
    """A frame was offered to the recorder while it was idle."""


class EmptyRecording(AudioWatchError):
    """The recording session captured no frames."""


class InvalidName(AudioWatchError):
    """A pattern name was empty or whitespace only."""


class WakeLockUnsupported(AudioWatchError):
    """The host offers no way to keep the screen awake."""


class InvalidEmail(AudioWatchError):
    """An email address failed the basic format check."""


class DuplicateEmail(AudioWatchError):
    """An email address is already configured."""


__all__ = [
    "AudioWatchError",
    "PermissionDenied",
    "StreamUnavailable",
    "AlreadyRecording",
    "NotRecording",
    "EmptyRecording",
    "InvalidName",
    "WakeLockUnsupported",
    "InvalidEmail",
    "DuplicateEmail",
]
