"""Discrete sample buffers and their playback as continuous signals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import numpy as np

from . import formats, pcm
from .errors import ConstructionError, UnsupportedInputError
from .signals import Signal
from .timebase import SECOND
from .utils import RAW_DTYPE, validate_sample_rate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class SampleBuffer:
    """Read-only mono frames plus the rate they were recorded at.

    The frame array is made read-only on construction, copying first when the
    caller's array is still writeable, and is shared by every signal that
    plays it.
    """

    frames: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sample_rate", validate_sample_rate(self.sample_rate))
        array = np.asarray(self.frames, dtype=RAW_DTYPE)
        if array.ndim != 1:
            raise ConstructionError(f"sample buffers are mono; got frames of shape {array.shape}")
        if array.flags.writeable:
            array = array.copy()
            array.setflags(write=False)
        object.__setattr__(self, "frames", array)

    def __len__(self) -> int:
        return int(self.frames.shape[0])

    @property
    def duration(self) -> int:
        """Offset (ns) of the first nanosecond past the last frame."""

        return (len(self) * SECOND) // self.sample_rate

    @classmethod
    def from_pcm_bytes(cls, data: bytes, sample_rate: int) -> "SampleBuffer":
        return cls(pcm.decode_pcm(data), sample_rate)


@dataclass(frozen=True, slots=True)
class Sampler(Signal):
    """Plays a :class:`SampleBuffer` back without interpolation.

    An offset selects the last frame whose tick ``i / sample_rate`` falls
    within that nanosecond or earlier, which is ``floor(t * sample_rate)``
    for rates that divide one second evenly and still maps rounded tick
    times back onto their own frame for the rest.  Offsets before zero or
    at/after :attr:`SampleBuffer.duration` yield ``0``.
    """

    buffer: SampleBuffer

    def __post_init__(self) -> None:
        if not isinstance(self.buffer, SampleBuffer):
            raise TypeError(f"buffer must be a SampleBuffer, got {type(self.buffer).__name__}")

    def _evaluate(self, t):
        frames = self.buffer.frames
        count = frames.shape[0]
        if count == 0:
            return np.zeros(np.shape(t), dtype=RAW_DTYPE)
        rate = self.buffer.sample_rate
        # clipping first keeps t * rate inside int64
        clipped = np.clip(t, -1, self.buffer.duration)
        index = (clipped * rate + (rate - 1)) // SECOND
        valid = (clipped >= 0) & (index < count)
        return np.where(valid, frames[np.clip(index, 0, count - 1)], 0.0)

    def _params(self):
        return {"sample_rate": self.buffer.sample_rate, "frames": len(self.buffer)}


def import_pcm(path: str | Path, sample_rate: int) -> Sampler:
    """Create a :class:`Sampler` from a flat little-endian float64 file."""

    buffer = SampleBuffer(pcm.load_pcm(path), sample_rate)
    logger.debug("Imported %d PCM frames from %s at %d Hz", len(buffer), path, buffer.sample_rate)
    return Sampler(buffer)


def import_wav(
    path: str | Path,
    *,
    decoder: Callable[[str | Path], formats.DecodedAudio] = formats.decode_wav,
) -> Sampler:
    """Create a :class:`Sampler` from a mono audio file via ``decoder``."""

    decoded = decoder(path)
    if decoded.channels != 1:
        raise UnsupportedInputError(
            f"unsupported channel layout in {path}: expected 1 channel, got {decoded.channels}"
        )
    samples = np.asarray(decoded.samples, dtype=RAW_DTYPE).reshape(-1)
    buffer = SampleBuffer(samples, decoded.sample_rate)
    logger.debug("Imported %d frames from %s at %d Hz", len(buffer), path, buffer.sample_rate)
    return Sampler(buffer)


__all__ = ["SampleBuffer", "Sampler", "import_pcm", "import_wav"]
