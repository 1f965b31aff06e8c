# chartseries/core/calendar.py
"""
Bucket arithmetic shared by aggregation, gap filling and labelling.

Timestamps are wall-clock instants stored as ``datetime64[ms]``. Every
function accepts a scalar or an array and returns the same shape.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

import numpy as np

from .units import TimeUnit

TIMESTAMP_DTYPE = np.dtype("datetime64[ms]")

# 1970-01-01 was a Thursday; with Sunday as day 0 that is weekday 4.
_EPOCH_WEEKDAY_FROM_SUNDAY = 4

_TRUNCATION_CODES: dict[TimeUnit, str] = {
    TimeUnit.MINUTE: "m",
    TimeUnit.HOUR: "h",
    TimeUnit.DAY: "D",
    TimeUnit.MONTH: "M",
    TimeUnit.YEAR: "Y",
}

_FIXED_STEPS: dict[TimeUnit, np.timedelta64] = {
    TimeUnit.MINUTE: np.timedelta64(1, "m"),
    TimeUnit.HOUR: np.timedelta64(1, "h"),
    TimeUnit.DAY: np.timedelta64(1, "D"),
    TimeUnit.WEEK: np.timedelta64(7, "D"),
}

# Calendar units step in their own resolution so month/year lengths are respected.
_CALENDAR_CODES: dict[TimeUnit, str] = {
    TimeUnit.MONTH: "M",
    TimeUnit.YEAR: "Y",
}


def _naive_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def as_timestamps(values: Iterable[Any] | np.ndarray) -> np.ndarray:
    """
    Coerce datetimes, ISO strings or datetime64 values into a ``datetime64[ms]`` array.

    Aware datetimes are converted to UTC wall-clock time; convert them to the
    zone you want to bucket in before calling this (see ``chartseries.io.load``).
    """
    if isinstance(values, np.ndarray) and np.issubdtype(values.dtype, np.datetime64):
        return values.astype(TIMESTAMP_DTYPE)
    return np.array([_naive_utc(v) for v in values], dtype=TIMESTAMP_DTYPE)


def _restore_shape(out: np.ndarray, scalar: bool):
    return out[()] if scalar else out


def normalize(timestamps, unit: TimeUnit):
    """
    Start of the bucket containing each timestamp.

    MINUTE/HOUR/DAY truncate, WEEK goes back to the most recent Sunday
    (midnight), MONTH to day 1 and YEAR to January 1.
    """
    t = np.asarray(timestamps, dtype=TIMESTAMP_DTYPE)
    scalar = t.ndim == 0

    if unit is TimeUnit.WEEK:
        days = t.astype("datetime64[D]")
        weekday = (days.astype(np.int64) + _EPOCH_WEEKDAY_FROM_SUNDAY) % 7
        out = days - weekday.astype("timedelta64[D]")
    else:
        out = t.astype(f"datetime64[{_TRUNCATION_CODES[unit]}]")

    return _restore_shape(np.asarray(out).astype(TIMESTAMP_DTYPE), scalar)


def step(bucket_starts, unit: TimeUnit, n: int = 1):
    """Advance bucket starts by ``n`` units (calendar months/years, not fixed spans)."""
    t = np.asarray(bucket_starts, dtype=TIMESTAMP_DTYPE)
    scalar = t.ndim == 0

    if unit in _CALENDAR_CODES:
        code = _CALENDAR_CODES[unit]
        out = t.astype(f"datetime64[{code}]") + np.timedelta64(n, code)
    else:
        out = t + _FIXED_STEPS[unit] * n

    return _restore_shape(np.asarray(out).astype(TIMESTAMP_DTYPE), scalar)


def bucket_range(start, end, unit: TimeUnit) -> np.ndarray:
    """
    Every bucket start from ``normalize(start)`` to ``normalize(end)`` inclusive.

    Returns an empty array when ``end`` falls in an earlier bucket than ``start``.
    """
    first = np.datetime64(normalize(start, unit), "ms")
    last = np.datetime64(normalize(end, unit), "ms")
    if last < first:
        return np.array([], dtype=TIMESTAMP_DTYPE)

    if unit in _CALENDAR_CODES:
        code = _CALENDAR_CODES[unit]
        lo = first.astype(f"datetime64[{code}]")
        hi = last.astype(f"datetime64[{code}]") + np.timedelta64(1, code)
        return np.arange(lo, hi).astype(TIMESTAMP_DTYPE)

    delta = _FIXED_STEPS[unit]
    return np.arange(first, last + delta, delta).astype(TIMESTAMP_DTYPE)


def to_datetime(timestamp) -> datetime:
    """Convert one ``datetime64`` timestamp to a naive ``datetime``."""
    return np.datetime64(timestamp, "ms").item()
