"""Sample signals into float64 frame sequences."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .diagnostics import render_timing
from .errors import ConstructionError
from .signals import Signal
from .timebase import SECOND, TIME_DTYPE, as_duration
from .utils import DEFAULT_FRAMES_PER_BLOCK, DEFAULT_SAMPLE_RATE, RAW_DTYPE, validate_sample_rate

logger = logging.getLogger(__name__)


def frame_count(sample_rate: int, duration: int) -> int:
    """Number of ticks ``i / sample_rate`` inside ``[0, duration)``."""

    return -(-(duration * sample_rate) // SECOND)


def tick_times(sample_rate: int, start: int, duration: int) -> np.ndarray:
    """Return the int64 nanosecond offsets sampled for ``[start, start + duration)``."""

    rate = validate_sample_rate(sample_rate)
    start = as_duration(start, name="start")
    duration = _validate_duration(duration)
    return _block_times(rate, start, 0, frame_count(rate, duration))


def _validate_duration(duration) -> int:
    duration = as_duration(duration)
    if duration <= 0:
        raise ConstructionError(f"invalid duration: {duration}ns")
    return duration


def _block_times(sample_rate: int, start: int, first: int, stop: int) -> np.ndarray:
    index = np.arange(first, stop, dtype=TIME_DTYPE)
    return start + (index * SECOND) // sample_rate


def render_frames(
    signal: Signal,
    sample_rate: int | None = DEFAULT_SAMPLE_RATE,
    start=0,
    duration=SECOND,
    *,
    block_frames: int = DEFAULT_FRAMES_PER_BLOCK,
    workers: int = 1,
) -> np.ndarray:
    """Sample ``signal`` over ``[start, start + duration)``.

    Frame ``i`` is the value at ``start + i / sample_rate``.  Evaluation runs
    in blocks of ``block_frames``; with ``workers > 1`` the blocks are spread
    over a thread pool, each filling its own slice of the output.  Passing
    ``sample_rate=None`` selects :data:`DEFAULT_SAMPLE_RATE`.
    """

    if not isinstance(signal, Signal):
        raise ConstructionError("no signal was provided")
    rate = validate_sample_rate(sample_rate, allow_default=True)
    start = as_duration(start, name="start")
    duration = _validate_duration(duration)
    if block_frames <= 0:
        raise ConstructionError(f"block_frames must be positive, got {block_frames}")
    if workers <= 0:
        raise ConstructionError(f"workers must be positive, got {workers}")

    total = frame_count(rate, duration)
    out = np.empty(total, dtype=RAW_DTYPE)

    def render_block(first: int) -> None:
        stop = min(first + block_frames, total)
        out[first:stop] = signal.sample(_block_times(rate, start, first, stop))

    blocks = range(0, total, block_frames)
    with render_timing(f"render {total} frames @ {rate} Hz", logger):
        if workers == 1 or len(blocks) <= 1:
            for first in blocks:
                render_block(first)
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # list() surfaces any exception raised inside a worker
                list(pool.map(render_block, blocks))
    logger.debug("Rendered %d frames from %dns over %dns", total, start, duration)
    return out


@dataclass(slots=True)
class Renderer:
    """Rendering policy shared across calls (rate, block size, parallelism)."""

    sample_rate: int = DEFAULT_SAMPLE_RATE
    block_frames: int = DEFAULT_FRAMES_PER_BLOCK
    workers: int = 1

    def __post_init__(self) -> None:
        self.sample_rate = validate_sample_rate(self.sample_rate, allow_default=True)
        if self.block_frames <= 0:
            raise ConstructionError(f"block_frames must be positive, got {self.block_frames}")
        if self.workers <= 0:
            raise ConstructionError(f"workers must be positive, got {self.workers}")

    def render(self, signal: Signal, duration, start=0) -> np.ndarray:
        return render_frames(
            signal,
            self.sample_rate,
            start,
            duration,
            block_frames=self.block_frames,
            workers=self.workers,
        )


__all__ = ["Renderer", "frame_count", "render_frames", "tick_times"]
