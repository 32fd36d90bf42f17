"""Flat little-endian float64 PCM encoding.

A PCM buffer is the frames of a mono signal written back to back as 8-byte
little-endian IEEE-754 doubles with no header.  The mapping is lossless in
both directions.  The sample rate is not stored in the dump; :func:`save_pcm`
can write it to a JSON side-car next to the file instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

import numpy as np

from .errors import AudioIOError, ConstructionError
from .utils import PCM_DTYPE, RAW_DTYPE, as_frames, validate_sample_rate

logger = logging.getLogger(__name__)

FRAME_BYTES = PCM_DTYPE.itemsize


def _checked_frames(frames) -> np.ndarray:
    if frames is None:
        raise ConstructionError("no frames were provided")
    array = as_frames(frames)
    if array.shape[0] == 0:
        raise ConstructionError("no frames were provided")
    return array


def encode_pcm(frames) -> bytes:
    """Return ``frames`` as PCM bytes (8 bytes per frame)."""

    return _checked_frames(frames).astype(PCM_DTYPE, copy=False).tobytes()


def write_pcm(sink: BinaryIO, frames) -> int:
    """Encode ``frames`` into the binary stream ``sink``; returns bytes written."""

    array = _checked_frames(frames)
    if sink is None:
        raise ConstructionError("no output sink was provided")
    payload = array.astype(PCM_DTYPE, copy=False).tobytes()
    try:
        sink.write(payload)
    except OSError as exc:
        raise AudioIOError(f"write PCM frames: {exc}") from exc
    return len(payload)


def decode_pcm(data: bytes) -> np.ndarray:
    """Decode PCM bytes into a float64 frame array.

    A trailing partial frame (fewer than 8 bytes) is ignored rather than
    reported as an error.
    """

    view = memoryview(data).cast("B")
    usable = len(view) - (len(view) % FRAME_BYTES)
    if usable != len(view):
        logger.debug("Dropping %d trailing PCM bytes", len(view) - usable)
    if usable == 0:
        return np.zeros(0, dtype=RAW_DTYPE)
    return np.frombuffer(view[:usable], dtype=PCM_DTYPE).astype(RAW_DTYPE)


def read_pcm(source: BinaryIO) -> np.ndarray:
    """Decode everything remaining in the binary stream ``source``."""

    try:
        data = source.read()
    except OSError as exc:
        raise AudioIOError(f"read PCM frames: {exc}") from exc
    return decode_pcm(data)


def _metadata_path(path: Path) -> Path:
    return path.with_suffix(path.suffix + ".json")


def save_pcm(path: str | Path, frames, *, sample_rate: Optional[int] = None) -> Path:
    """Write ``frames`` to ``path``.

    When ``sample_rate`` is given a ``<path>.json`` side-car describing the
    dump (frame count, channels, rate, dtype) is written alongside it.
    """

    target = Path(path)
    payload = encode_pcm(frames)
    rate = validate_sample_rate(sample_rate) if sample_rate is not None else None
    try:
        target.write_bytes(payload)
    except OSError as exc:
        raise AudioIOError(f"write file: {target}: {exc}") from exc
    if rate is not None:
        metadata = {
            "frames": len(payload) // FRAME_BYTES,
            "channels": 1,
            "sample_rate": rate,
            "format": "raw",
            "dtype": "float64",
        }
        meta_path = _metadata_path(target)
        try:
            meta_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        except OSError as exc:
            raise AudioIOError(f"write file: {meta_path}: {exc}") from exc
    logger.debug("Saved %d PCM bytes to %s", len(payload), target)
    return target


def load_pcm(path: str | Path) -> np.ndarray:
    target = Path(path)
    try:
        with open(target, "rb") as fh:
            return read_pcm(fh)
    except AudioIOError as exc:
        raise AudioIOError(f"read file: {target}: {exc}") from exc
    except OSError as exc:
        raise AudioIOError(f"open file: {target}: {exc}") from exc


def load_pcm_metadata(path: str | Path) -> Dict[str, Any]:
    """Read the JSON side-car written by :func:`save_pcm` for ``path``."""

    meta_path = _metadata_path(Path(path))
    try:
        with open(meta_path, "r", encoding="utf8") as fh:
            return json.load(fh)
    except OSError as exc:
        raise AudioIOError(f"open file: {meta_path}: {exc}") from exc


__all__ = [
    "FRAME_BYTES",
    "decode_pcm",
    "encode_pcm",
    "load_pcm",
    "load_pcm_metadata",
    "read_pcm",
    "save_pcm",
    "write_pcm",
]
