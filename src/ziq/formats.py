"""WAV decoding through the stdlib :mod:`wave` module."""

from __future__ import annotations

import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .errors import AudioIOError, UnsupportedInputError
from .utils import RAW_DTYPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class DecodedAudio:
    """Samples decoded from an audio file.

    ``samples`` has shape ``(frames,)`` for mono files and
    ``(frames, channels)`` otherwise; no channel mixing is performed.
    """

    samples: np.ndarray
    sample_rate: int
    channels: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])


def _pcm_to_float(data: bytes, sampwidth: int) -> np.ndarray:
    if sampwidth == 1:
        # 8-bit WAV is unsigned [0,255]
        arr = np.frombuffer(data, dtype=np.uint8).astype(RAW_DTYPE)
        return (arr - 128.0) / 128.0
    if sampwidth == 2:
        return np.frombuffer(data, dtype="<i2").astype(RAW_DTYPE) / 32768.0
    if sampwidth == 3:
        raw = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        ints = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
        ints = np.where(ints & 0x800000, ints - 0x1000000, ints)
        return ints.astype(RAW_DTYPE) / 8388608.0
    if sampwidth == 4:
        return np.frombuffer(data, dtype="<i4").astype(RAW_DTYPE) / 2147483648.0
    raise UnsupportedInputError(f"Unsupported WAV sample width: {sampwidth} bytes")


def decode_wav(path: str | Path) -> DecodedAudio:
    """Decode a PCM WAV file into float64 samples in ``[-1, 1)``.

    Supports 8-bit unsigned and 16/24/32-bit signed PCM.
    """

    try:
        with wave.open(str(path), "rb") as wf:
            nch = wf.getnchannels()
            sampwidth = wf.getsampwidth()
            fr = wf.getframerate()
            data = wf.readframes(wf.getnframes())
    except wave.Error as exc:
        raise UnsupportedInputError(f"decode wav: {path}: {exc}") from exc
    except EOFError as exc:
        raise UnsupportedInputError(f"decode wav: {path}: truncated file") from exc
    except OSError as exc:
        raise AudioIOError(f"open file: {path}: {exc}") from exc

    samples = _pcm_to_float(data, sampwidth)
    usable = samples.shape[0] - samples.shape[0] % nch
    samples = samples[:usable]
    if nch > 1:
        samples = samples.reshape(-1, nch)
    logger.debug("Decoded %s: %d channel(s), %d-bit, %d Hz", path, nch, sampwidth * 8, fr)
    return DecodedAudio(samples=samples, sample_rate=int(fr), channels=int(nch))


__all__ = ["DecodedAudio", "decode_wav"]
