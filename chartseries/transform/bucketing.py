# chartseries/transform/bucketing.py
"""
Re-bucket a TemporalDataSet into another time unit.

Aggregation semantics:
- SUM: sum of the values falling into each bucket.
- DAILY_AVERAGE: mean per calendar day first, then for WEEK/MONTH/YEAR the
  mean of those daily values over the days that have data in each window.
  Every window between the first and last day is emitted (0.0 when empty).
- DURATION_SUM: number of samples in each bucket; each MINUTE sample stands
  for one minute, so the result is a duration in minutes.
- MIN_MAX: (min, max) per bucket, returned as channels "min" and "max".
"""
from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from chartseries.core.calendar import TIMESTAMP_DTYPE, bucket_range, normalize
from chartseries.core.dataset import TemporalDataSet
from chartseries.core.exceptions import InvalidTemporalDataSet, UnsupportedAggregation
from chartseries.core.units import AggregationType, TimeUnit

logger = logging.getLogger(__name__)

MIN_CHANNEL = "min"
MAX_CHANNEL = "max"

# (timestamps, values, target_unit) -> (bucket_starts, bucket_values)
ChannelAggregator = Callable[[np.ndarray, np.ndarray, TimeUnit], tuple[np.ndarray, np.ndarray]]


def _group(timestamps: np.ndarray, unit: TimeUnit) -> tuple[np.ndarray, np.ndarray]:
    """Sorted bucket keys and, for every sample, the index of its bucket."""
    keys, inverse = np.unique(normalize(timestamps, unit), return_inverse=True)
    return keys, inverse.reshape(-1)


def _sum(timestamps: np.ndarray, values: np.ndarray, unit: TimeUnit):
    keys, inverse = _group(timestamps, unit)
    return keys, np.bincount(inverse, weights=values, minlength=keys.size)


def _count(timestamps: np.ndarray, values: np.ndarray, unit: TimeUnit):
    keys, inverse = _group(timestamps, unit)
    return keys, np.bincount(inverse, minlength=keys.size).astype(np.float64)


def _daily_means(timestamps: np.ndarray, values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    days, inverse = _group(timestamps, TimeUnit.DAY)
    sums = np.bincount(inverse, weights=values, minlength=days.size)
    counts = np.bincount(inverse, minlength=days.size)
    return days, sums / counts


def _daily_average(timestamps: np.ndarray, values: np.ndarray, unit: TimeUnit):
    days, daily = _daily_means(timestamps, values)
    if unit is TimeUnit.DAY or days.size == 0:
        return days, daily

    windows = bucket_range(days[0], days[-1], unit)
    slot = np.searchsorted(windows, normalize(days, unit))
    sums = np.bincount(slot, weights=daily, minlength=windows.size)
    counts = np.bincount(slot, minlength=windows.size)
    averages = np.divide(sums, counts, out=np.zeros(windows.size), where=counts > 0)
    return windows, averages


def _min_max(timestamps: np.ndarray, values: np.ndarray, unit: TimeUnit):
    keys, inverse = _group(timestamps, unit)
    mins = np.full(keys.size, np.inf)
    maxs = np.full(keys.size, -np.inf)
    np.minimum.at(mins, inverse, values)
    np.maximum.at(maxs, inverse, values)
    return keys, mins, maxs


_AGGREGATORS: dict[AggregationType, ChannelAggregator] = {
    AggregationType.SUM: _sum,
    AggregationType.DAILY_AVERAGE: _daily_average,
    AggregationType.DURATION_SUM: _count,
}


def validate(data: TemporalDataSet, target_unit: TimeUnit, kind: AggregationType) -> None:
    """Raise UnsupportedAggregation if ``kind`` cannot turn ``data`` into ``target_unit``."""
    if kind is AggregationType.DAILY_AVERAGE and not TimeUnit.DAY.is_smaller_or_equal(target_unit):
        raise UnsupportedAggregation(
            f"DAILY_AVERAGE requires a target unit of DAY or larger, got {target_unit.name}."
        )
    if kind is AggregationType.DURATION_SUM and data.unit is not TimeUnit.MINUTE:
        raise UnsupportedAggregation(
            f"DURATION_SUM is only supported for MINUTE datasets, got {data.unit.name}."
        )
    if kind is AggregationType.MIN_MAX and not data.is_single_channel:
        raise UnsupportedAggregation("MIN_MAX is only supported for single-channel datasets.")


def aggregate(
    data: TemporalDataSet,
    target_unit: TimeUnit,
    kind: AggregationType = AggregationType.SUM,
) -> TemporalDataSet:
    """
    Group ``data`` into ``target_unit`` buckets and combine each bucket with ``kind``.

    Raises
    ------
    UnsupportedAggregation
        DAILY_AVERAGE below DAY, DURATION_SUM on a non-MINUTE dataset,
        MIN_MAX on a multi-channel dataset.
    """
    if not isinstance(target_unit, TimeUnit):
        raise UnsupportedAggregation(f"target_unit must be a TimeUnit, got {target_unit!r}")
    if not isinstance(kind, AggregationType):
        raise UnsupportedAggregation(f"kind must be an AggregationType, got {kind!r}")

    validate(data, target_unit, kind)

    if data.unit is target_unit and kind is AggregationType.SUM:
        return data

    logger.debug(
        "aggregate: %d samples %s -> %s (%s)",
        data.n, data.unit.name, target_unit.name, kind.name,
    )

    if kind is AggregationType.MIN_MAX:
        keys, mins, maxs = _min_max(data.timestamps, data.values, target_unit)
        return TemporalDataSet(
            timestamps=keys,
            channels={MIN_CHANNEL: mins, MAX_CHANNEL: maxs},
            unit=target_unit,
            name=data.name,
        )

    fn = _AGGREGATORS[kind]

    if data.is_single_channel:
        keys, values = fn(data.timestamps, data.values, target_unit)
        return data._replace(timestamps=keys, values=values, unit=target_unit)

    reference: np.ndarray | None = None
    channels: dict[str, np.ndarray] = {}
    for name, values in data.channels.items():
        keys, aggregated = fn(data.timestamps, values, target_unit)
        if reference is None:
            reference = keys
        elif not np.array_equal(keys, reference):
            raise InvalidTemporalDataSet(
                f"Channel '{name}' produced different buckets than the first channel."
            )
        channels[name] = aggregated

    if reference is None:
        reference = np.array([], dtype=TIMESTAMP_DTYPE)
    return data._replace(timestamps=reference, channels=channels, unit=target_unit)


class Aggregator:
    """
    Reusable aggregation step bound to a target unit and kind.

    Usage:
        daily_steps = Aggregator(TimeUnit.DAY)(minute_steps)
    """

    def __init__(self, target_unit: TimeUnit, kind: AggregationType = AggregationType.SUM):
        self.target_unit = target_unit
        self.kind = kind

    def __call__(self, data: TemporalDataSet) -> TemporalDataSet:
        return aggregate(data, self.target_unit, self.kind)

    def __repr__(self) -> str:
        return f"Aggregator(target_unit={self.target_unit.name}, kind={self.kind.name})"
