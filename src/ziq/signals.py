# signals.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np

from .errors import ConstructionError
from .timebase import SECOND, TIME_DTYPE, as_duration
from .utils import RAW_DTYPE


# =========================
# Signal base
# =========================
#
# A signal maps a time offset (integer nanoseconds) to a real value.  Every
# combinator closes over its operands and parameters and never changes after
# construction, so evaluating the same signal twice at the same offset always
# yields the same value.  ``_evaluate`` receives an int64 array (possibly 0-d)
# and returns a float64 array of the same shape.
class Signal:
    """Base class for pure, immutable functions of time."""

    __slots__ = ()

    def __call__(self, t) -> float:
        offset = np.asarray(as_duration(t, name="t"), dtype=TIME_DTYPE)
        return float(self._evaluate(offset))

    def sample(self, times) -> np.ndarray:
        """Evaluate the signal at every offset in ``times`` (integer nanoseconds)."""

        offsets = np.asarray(times)
        if offsets.dtype.kind not in "iu":
            raise TypeError(f"times must be an integer array of nanoseconds, got dtype {offsets.dtype}")
        offsets = offsets.astype(TIME_DTYPE, copy=False)
        out = np.asarray(self._evaluate(offsets), dtype=RAW_DTYPE)
        return np.broadcast_to(out, offsets.shape).copy() if out.shape != offsets.shape else out

    def _evaluate(self, t: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    @property
    def inputs(self) -> Tuple["Signal", ...]:
        return ()

    def _params(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> Dict[str, Any]:
        """Return a nested description of the signal graph rooted here."""

        node: Dict[str, Any] = {"type": type(self).__name__}
        node.update(self._params())
        operands = self.inputs
        if operands:
            node["inputs"] = [operand.describe() for operand in operands]
        return node


def _require_signal(value: object, name: str) -> "Signal":
    if not isinstance(value, Signal):
        raise TypeError(f"{name} must be a Signal, got {type(value).__name__}")
    return value


# =========================
# Sources
# =========================


@dataclass(frozen=True, slots=True)
class Constant(Signal):
    """Ignores time and always returns ``value``."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def _evaluate(self, t):
        return np.full(np.shape(t), self.value, dtype=RAW_DTYPE)

    def _params(self):
        return {"value": self.value}


@dataclass(frozen=True, slots=True)
class SineOscillator(Signal):
    """Sine oscillation whose frequency (Hz) is itself a signal.

    Returns ``sin(2π · t_seconds · frequency(t))`` so a time-varying frequency
    signal produces frequency modulation.
    """

    frequency: Signal

    def __post_init__(self) -> None:
        _require_signal(self.frequency, "frequency")

    def _evaluate(self, t):
        return np.sin(2.0 * np.pi * (t / SECOND) * self.frequency._evaluate(t))

    @property
    def inputs(self):
        return (self.frequency,)


@dataclass(frozen=True, slots=True)
class Lerp(Signal):
    """Linear ramp from ``start`` at t=0 reaching ``end`` at ``duration``.

    The ramp keeps extrapolating past ``duration`` (and before zero); it is not
    clamped.
    """

    start: float
    end: float
    duration: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", float(self.start))
        object.__setattr__(self, "end", float(self.end))
        duration = as_duration(self.duration)
        if duration <= 0:
            raise ConstructionError(f"lerp duration must be positive, got {duration}ns")
        object.__setattr__(self, "duration", duration)

    def _evaluate(self, t):
        elapsed = t / float(self.duration)
        return (self.end - self.start) * elapsed + self.start

    def _params(self):
        return {"start": self.start, "end": self.end, "duration": self.duration}


# =========================
# Combinators
# =========================


@dataclass(frozen=True, slots=True)
class Amplitude(Signal):
    """Scales ``source`` by ``multiplier`` at every instant."""

    source: Signal
    multiplier: Signal

    def __post_init__(self) -> None:
        _require_signal(self.source, "source")
        _require_signal(self.multiplier, "multiplier")

    def _evaluate(self, t):
        return self.source._evaluate(t) * self.multiplier._evaluate(t)

    @property
    def inputs(self):
        return (self.source, self.multiplier)


@dataclass(frozen=True, slots=True)
class Loop(Signal):
    """Repeats ``source`` from its beginning every ``period``."""

    source: Signal
    period: int

    def __post_init__(self) -> None:
        _require_signal(self.source, "source")
        period = as_duration(self.period, name="period")
        if period <= 0:
            raise ConstructionError(f"loop period must be positive, got {period}ns")
        object.__setattr__(self, "period", period)

    def _evaluate(self, t):
        # floor modulo: negative offsets also land in [0, period)
        return self.source._evaluate(np.mod(t, self.period))

    @property
    def inputs(self):
        return (self.source,)

    def _params(self):
        return {"period": self.period}


@dataclass(frozen=True, slots=True)
class Limit(Signal):
    """Switches from ``before`` to ``after`` once ``threshold`` has elapsed.

    The switch is a hard cut: ``after`` is selected for ``t >= threshold``.
    """

    before: Signal
    after: Signal
    threshold: int

    def __post_init__(self) -> None:
        _require_signal(self.before, "before")
        _require_signal(self.after, "after")
        object.__setattr__(self, "threshold", as_duration(self.threshold, name="threshold"))

    def _evaluate(self, t):
        return np.where(t >= self.threshold, self.after._evaluate(t), self.before._evaluate(t))

    @property
    def inputs(self):
        return (self.before, self.after)

    def _params(self):
        return {"threshold": self.threshold}


@dataclass(frozen=True, slots=True, init=False)
class Combine(Signal):
    """Additive mix: the arithmetic mean of all operands."""

    signals: Tuple[Signal, ...]

    def __init__(self, *signals: Signal) -> None:
        if not signals:
            raise ConstructionError("combine requires at least one signal")
        for idx, signal in enumerate(signals):
            _require_signal(signal, f"signals[{idx}]")
        object.__setattr__(self, "signals", tuple(signals))

    def _evaluate(self, t):
        total = np.zeros(np.shape(t), dtype=RAW_DTYPE)
        for signal in self.signals:
            total = total + signal._evaluate(t)
        return total / len(self.signals)

    @property
    def inputs(self):
        return self.signals


@dataclass(frozen=True, slots=True)
class Shift(Signal):
    """Reads ``source`` ``offset`` ahead (a negative offset delays it)."""

    source: Signal
    offset: int

    def __post_init__(self) -> None:
        _require_signal(self.source, "source")
        object.__setattr__(self, "offset", as_duration(self.offset, name="offset"))

    def _evaluate(self, t):
        return self.source._evaluate(t + self.offset)

    @property
    def inputs(self):
        return (self.source,)

    def _params(self):
        return {"offset": self.offset}


@dataclass(frozen=True, slots=True)
class Speed(Signal):
    """Scales time by ``factor``.

    ``factor > 1`` accelerates, ``0 < factor < 1`` slows down, ``0`` freezes
    the source at t=0 and a negative factor plays it backwards.  Scaled
    offsets are truncated toward zero to whole nanoseconds.
    """

    source: Signal
    factor: float

    def __post_init__(self) -> None:
        _require_signal(self.source, "source")
        factor = float(self.factor)
        if not math.isfinite(factor):
            raise ConstructionError(f"speed factor must be finite, got {factor}")
        object.__setattr__(self, "factor", factor)

    def _evaluate(self, t):
        scaled = np.trunc(t * self.factor).astype(TIME_DTYPE)
        return self.source._evaluate(scaled)

    @property
    def inputs(self):
        return (self.source,)

    def _params(self):
        return {"factor": self.factor}


__all__ = [
    "Amplitude",
    "Combine",
    "Constant",
    "Lerp",
    "Limit",
    "Loop",
    "Shift",
    "SineOscillator",
    "Signal",
    "Speed",
]
