# utils.py
from __future__ import annotations

import numbers

import numpy as np

from .errors import ConstructionError

# =========================
# Settings / fidelity
# =========================
RAW_DTYPE = np.float64
PCM_DTYPE = np.dtype("<f8")
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_FRAMES_PER_BLOCK = 1024  # Use this everywhere for block size


def validate_sample_rate(sample_rate, *, allow_default: bool = False) -> int:
    """Return ``sample_rate`` as a positive ``int``.

    ``None`` selects :data:`DEFAULT_SAMPLE_RATE` only when the caller opts in
    with ``allow_default``.
    """

    if sample_rate is None and allow_default:
        return DEFAULT_SAMPLE_RATE
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, numbers.Integral):
        raise ConstructionError(f"sample rate must be a positive integer, got {sample_rate!r}")
    if sample_rate <= 0:
        raise ConstructionError(f"sample rate must be positive, got {sample_rate}")
    return int(sample_rate)


def as_frames(frames) -> np.ndarray:
    """Coerce ``frames`` to a 1-D float64 array without copying when possible."""

    array = np.asarray(frames, dtype=RAW_DTYPE)
    if array.ndim != 1:
        raise ConstructionError(f"frames must be one-dimensional, got shape {array.shape}")
    return array


__all__ = [
    "DEFAULT_FRAMES_PER_BLOCK",
    "DEFAULT_SAMPLE_RATE",
    "PCM_DTYPE",
    "RAW_DTYPE",
    "as_frames",
    "validate_sample_rate",
]
