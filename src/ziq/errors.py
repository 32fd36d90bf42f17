"""Exception hierarchy shared by the signal core and its collaborators."""

from __future__ import annotations


class ZiqError(Exception):
    """Base class for every error raised by :mod:`ziq`."""


class ConstructionError(ZiqError, ValueError):
    """Raised when a signal, renderer or configuration is built with invalid parameters."""


class AudioIOError(ZiqError, OSError):
    """Raised when reading or writing audio data fails."""


class UnsupportedInputError(ZiqError, ValueError):
    """Raised when input audio is readable but cannot be used (e.g. not mono)."""


class PlaybackError(AudioIOError):
    """Raised when the external player cannot be found or exits with an error."""


class PlaybackTimeoutError(PlaybackError):
    """Raised when playback exceeds the configured deadline."""


__all__ = [
    "AudioIOError",
    "ConstructionError",
    "PlaybackError",
    "PlaybackTimeoutError",
    "UnsupportedInputError",
    "ZiqError",
]
