"""Time offsets expressed as integer nanoseconds."""

from __future__ import annotations

import datetime as _dt
import numbers

import numpy as np

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND

TIME_DTYPE = np.int64


def seconds(value: float) -> int:
    """Return ``value`` seconds as a nanosecond offset (rounded to nearest)."""

    return int(round(float(value) * SECOND))


def as_seconds(offset: int) -> float:
    return offset / SECOND


def as_duration(value, *, name: str = "duration") -> int:
    """Coerce ``value`` to an integer nanosecond offset.

    Integers (including numpy integers) are taken as nanoseconds and
    :class:`datetime.timedelta` values are converted exactly.  Floats are
    rejected: use :func:`seconds` to state the unit explicitly.
    """

    if isinstance(value, _dt.timedelta):
        return (value.days * 86_400 + value.seconds) * SECOND + value.microseconds * MICROSECOND
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(
            f"{name} must be an integer number of nanoseconds or a timedelta, "
            f"got {type(value).__name__} (use ziq.seconds() for seconds)"
        )
    return int(value)


__all__ = [
    "MICROSECOND",
    "MILLISECOND",
    "NANOSECOND",
    "SECOND",
    "TIME_DTYPE",
    "as_duration",
    "as_seconds",
    "seconds",
]
