"""Compose pure functions of time into waveforms and render them to PCM."""

from __future__ import annotations

from .application import ZiqApplication
from .errors import (
    AudioIOError,
    ConstructionError,
    PlaybackError,
    PlaybackTimeoutError,
    UnsupportedInputError,
    ZiqError,
)
from .pcm import decode_pcm, encode_pcm, load_pcm, save_pcm, write_pcm
from .renderer import Renderer, render_frames
from .sampler import SampleBuffer, Sampler, import_pcm, import_wav
from .signals import (
    Amplitude,
    Combine,
    Constant,
    Lerp,
    Limit,
    Loop,
    Shift,
    Signal,
    SineOscillator,
    Speed,
)
from .timebase import MILLISECOND, SECOND, as_seconds, seconds

__all__ = [
    "Amplitude",
    "AudioIOError",
    "Combine",
    "Constant",
    "ConstructionError",
    "Lerp",
    "Limit",
    "Loop",
    "MILLISECOND",
    "PlaybackError",
    "PlaybackTimeoutError",
    "Renderer",
    "SECOND",
    "SampleBuffer",
    "Sampler",
    "Shift",
    "Signal",
    "SineOscillator",
    "Speed",
    "UnsupportedInputError",
    "ZiqApplication",
    "ZiqError",
    "as_seconds",
    "decode_pcm",
    "encode_pcm",
    "import_pcm",
    "import_wav",
    "load_pcm",
    "render_frames",
    "save_pcm",
    "seconds",
    "write_pcm",
]
