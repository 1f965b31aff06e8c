# chartseries/transform/distribution.py
"""
Interval records -> minute-level TemporalDataSet.

Each record's field values are split across the minutes its [start, end)
interval overlaps, proportionally to the overlap. Overlapping records add up.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable

import numpy as np

from chartseries.core.calendar import TIMESTAMP_DTYPE, as_timestamps, normalize
from chartseries.core.dataset import TemporalDataSet
from chartseries.core.units import TimeUnit

logger = logging.getLogger(__name__)

_MINUTE = np.timedelta64(1, "m")


@runtime_checkable
class Interval(Protocol):
    """Structural interface of anything the distributor can split."""

    @property
    def start(self) -> datetime: ...

    @property
    def end(self) -> datetime: ...

    def fields(self) -> Mapping[str, float]: ...


@runtime_checkable
class Point(Protocol):
    """Structural interface of a point-in-time measurement."""

    @property
    def time(self) -> datetime: ...

    def fields(self) -> Mapping[str, float]: ...


def _field_order(rows: Sequence[Mapping[str, float]], fields: Sequence[str] | None) -> list[str]:
    if fields is not None:
        return list(fields)
    order: dict[str, None] = {}
    for row in rows:
        for key in row:
            order.setdefault(key, None)
    return list(order)


def _as_dataset(
    timestamps: np.ndarray,
    matrix: np.ndarray,
    names: list[str],
) -> TemporalDataSet:
    if len(names) == 1:
        return TemporalDataSet(
            timestamps=timestamps, values=matrix[:, 0], unit=TimeUnit.MINUTE, name=names[0]
        )
    return TemporalDataSet(
        timestamps=timestamps,
        channels={name: matrix[:, i] for i, name in enumerate(names)},
        unit=TimeUnit.MINUTE,
    )


def minute_shares(start: np.datetime64, end: np.datetime64) -> tuple[np.ndarray, np.ndarray]:
    """
    Minute windows overlapped by [start, end) and the share of the interval in each.

    A record starting and ending inside the same minute puts its whole value
    there (share 1.0). Otherwise windows run from the start minute up to the
    end minute, the latter only when the record reaches past its boundary.
    Shares are 0 when ``end <= start``; zero-overlap windows are dropped.
    """
    start_min = normalize(start, TimeUnit.MINUTE)
    end_min = normalize(end, TimeUnit.MINUTE)

    if start_min == end_min:
        return np.array([start_min], dtype=TIMESTAMP_DTYPE), np.ones(1)

    stop = end_min + _MINUTE if end > end_min else end_min
    windows = np.arange(start_min, stop, _MINUTE).astype(TIMESTAMP_DTYPE)
    if windows.size == 0:
        return windows, np.zeros(0)

    total = (end - start) / np.timedelta64(1, "ms")
    lo = np.maximum(windows, start)
    hi = np.minimum(windows + _MINUTE, end)
    overlap = (hi - lo) / np.timedelta64(1, "ms")

    if total > 0:
        shares = np.clip(overlap, 0.0, None) / total
    else:
        shares = np.zeros(windows.size)

    keep = shares > 0
    return windows[keep], shares[keep]


def _wall_clock_minutes(windows: np.ndarray, wall_clock, *, aware: bool) -> np.ndarray:
    """Wall-clock minute of each window; ``aware`` windows are UTC instants."""
    moments = [w.item() for w in windows]
    if aware:
        moments = [m.replace(tzinfo=timezone.utc) for m in moments]
    return normalize(as_timestamps([wall_clock(m) for m in moments]), TimeUnit.MINUTE)


def distribute(
    records: Iterable[Interval],
    *,
    fields: Sequence[str] | None = None,
    wall_clock=None,
) -> TemporalDataSet:
    """
    Proportionally distribute interval records into one-minute buckets.

    Parameters
    ----------
    records:
        Objects exposing ``start``, ``end`` and ``fields()``.
    fields:
        Field names to keep, in output order. Defaults to every field seen,
        in order of first appearance. Missing fields count as 0.0.
    wall_clock:
        Optional callable mapping each minute to its wall-clock bucket
        (e.g. ``ChartSeriesConfig.wall_clock``).

    Returns
    -------
    TemporalDataSet
        MINUTE unit; single-channel (named after the field) for one field,
        multi-channel otherwise, also when there are no records.
    """
    records = list(records)
    rows = [dict(r.fields()) for r in records]
    names = _field_order(rows, fields)

    if not names:
        logger.debug("distribute: no fields, returning empty MINUTE dataset")
        return TemporalDataSet.empty(TimeUnit.MINUTE)

    minute_chunks: list[np.ndarray] = []
    value_chunks: list[np.ndarray] = []

    for record, row in zip(records, rows):
        # shares are measured on absolute instants; the zone only picks the bucket
        windows, shares = minute_shares(*as_timestamps([record.start, record.end]))
        if windows.size == 0:
            continue
        if wall_clock is not None:
            aware = getattr(record.start, "tzinfo", None) is not None
            windows = _wall_clock_minutes(windows, wall_clock, aware=aware)

        field_values = np.array([float(row.get(name, 0.0)) for name in names])
        minute_chunks.append(windows)
        value_chunks.append(shares[:, None] * field_values[None, :])

    if not minute_chunks:
        return _as_dataset(
            np.array([], dtype=TIMESTAMP_DTYPE), np.zeros((0, len(names))), names
        )

    minutes = np.concatenate(minute_chunks)
    contributions = np.concatenate(value_chunks)

    keys, inverse = np.unique(minutes, return_inverse=True)
    totals = np.zeros((keys.size, len(names)))
    np.add.at(totals, inverse.reshape(-1), contributions)

    logger.debug(
        "distribute: %d records -> %d minute buckets, fields=%s",
        len(records), keys.size, names,
    )
    return _as_dataset(keys, totals, names)


def wrap_points(
    records: Iterable[Point],
    *,
    fields: Sequence[str] | None = None,
    wall_clock=None,
) -> TemporalDataSet:
    """
    Wrap point-in-time measurements as a MINUTE dataset, one row per record.

    Rows are stable-sorted by time; several readings at the same instant are kept.
    """
    records = list(records)
    rows = [dict(r.fields()) for r in records]
    names = _field_order(rows, fields)

    if not names:
        return TemporalDataSet.empty(TimeUnit.MINUTE)
    if not records:
        return _as_dataset(np.array([], dtype=TIMESTAMP_DTYPE), np.zeros((0, len(names))), names)

    times: list[Any] = [r.time if wall_clock is None else wall_clock(r.time) for r in records]
    t = as_timestamps(times)
    matrix = np.array([[float(row.get(name, 0.0)) for name in names] for row in rows])

    order = np.argsort(t, kind="stable")
    logger.debug("wrap_points: %d readings, fields=%s", len(records), names)
    return _as_dataset(t[order], matrix[order], names)
