# chartseries/transform/marks.py
"""
TemporalDataSet -> plot-ready Mark / RangeMark records.

Labels reflect the dataset granularity:
- MINUTE: "14:05"
- HOUR: "14h"
- DAY: "5/8 Thu"
- WEEK: "May W2" (Sunday-based week of month)
- MONTH: "2025-05"
- YEAR: "2025"
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Mapping

import numpy as np

from chartseries.core.calendar import normalize, to_datetime
from chartseries.core.dataset import TemporalDataSet
from chartseries.core.exceptions import InvalidChannelSelection, MissingChannel
from chartseries.core.mark import Mark, RangeMark
from chartseries.core.units import TimeUnit

from .bucketing import MAX_CHANNEL, MIN_CHANNEL
from .gaps import fill_gaps as _fill_gaps

logger = logging.getLogger(__name__)

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def week_of_month(timestamp) -> tuple[int, int]:
    """
    (month, ordinal) of the week bucket containing ``timestamp``.

    The bucket is anchored on its Sunday; weeks are counted within that
    Sunday's month from the first Sunday on or after day 1.
    """
    sunday = to_datetime(normalize(timestamp, TimeUnit.WEEK)).date()
    first = date(sunday.year, sunday.month, 1)
    first_sunday = first + timedelta(days=(6 - first.weekday()) % 7)
    ordinal = (sunday - first_sunday).days // 7 + 1
    return sunday.month, max(ordinal, 1)


def generate_label(timestamp, unit: TimeUnit) -> str:
    dt = to_datetime(timestamp)

    if unit is TimeUnit.MINUTE:
        return f"{dt.hour}:{dt.minute:02d}"
    if unit is TimeUnit.HOUR:
        return f"{dt.hour}h"
    if unit is TimeUnit.DAY:
        return f"{dt.month}/{dt.day} {_WEEKDAYS[dt.weekday()]}"
    if unit is TimeUnit.WEEK:
        month, ordinal = week_of_month(timestamp)
        return f"{_MONTHS[month - 1]} W{ordinal}"
    if unit is TimeUnit.MONTH:
        return f"{dt.year}-{dt.month:02d}"
    return f"{dt.year}"


def generate_labels(data: TemporalDataSet) -> list[str]:
    return [generate_label(t, data.unit) for t in data.timestamps]


def _prepare(data: TemporalDataSet, fill_gaps: bool, fill_value: float) -> TemporalDataSet:
    return _fill_gaps(data, fill_value) if fill_gaps else data


def _build(values: np.ndarray, labels: list[str]) -> list[Mark]:
    return [
        Mark(index=float(i), value=float(v), label=label)
        for i, (v, label) in enumerate(zip(values, labels))
    ]


def to_marks(
    data: TemporalDataSet,
    *,
    fill_gaps: bool = True,
    fill_value: float = 0.0,
) -> list[Mark]:
    """Single-channel dataset -> one Mark per bucket."""
    if not data.is_single_channel:
        raise InvalidChannelSelection(
            "to_marks() needs a single-channel dataset; use to_channel_marks() or to_marks_map()."
        )
    data = _prepare(data, fill_gaps, fill_value)
    return _build(data.values, generate_labels(data))


def to_channel_marks(
    data: TemporalDataSet,
    channel: str,
    *,
    fill_gaps: bool = True,
    fill_value: float = 0.0,
) -> list[Mark]:
    """One channel of a multi-channel dataset -> Marks."""
    if not data.is_multi_channel:
        raise InvalidChannelSelection(
            "to_channel_marks() needs a multi-channel dataset; use to_marks()."
        )
    data.get_values(channel)  # raises MissingChannel before any filling
    data = _prepare(data, fill_gaps, fill_value)
    return _build(data.get_values(channel), generate_labels(data))


def to_marks_map(
    data: TemporalDataSet,
    *,
    fill_gaps: bool = True,
    fill_value: float = 0.0,
) -> dict[str, list[Mark]]:
    """Every channel of a multi-channel dataset -> channel name -> Marks (shared labels)."""
    if not data.is_multi_channel:
        raise InvalidChannelSelection("to_marks_map() needs a multi-channel dataset; use to_marks().")
    data = _prepare(data, fill_gaps, fill_value)
    labels = generate_labels(data)
    return {name: _build(values, labels) for name, values in data.channels.items()}


def to_range_marks(
    data: TemporalDataSet,
    *,
    fill_gaps: bool = False,
    fill_value: float = 0.0,
) -> list[RangeMark]:
    """
    MIN_MAX aggregated dataset -> RangeMarks pairing the "min" and "max" channels.

    Gaps are not filled by default: a 0..0 range reads as a real measurement.
    """
    names = set(data.channel_names)
    missing = [c for c in (MIN_CHANNEL, MAX_CHANNEL) if c not in names]
    if missing:
        raise MissingChannel(
            f"Range marks need 'min' and 'max' channels; missing {missing}. "
            "Aggregate with AggregationType.MIN_MAX first."
        )

    data = _prepare(data, fill_gaps, fill_value)
    labels = generate_labels(data)
    mins = _build(data.get_values(MIN_CHANNEL), labels)
    maxs = _build(data.get_values(MAX_CHANNEL), labels)

    logger.debug("to_range_marks: %d ranges (%s)", len(labels), data.unit.name)
    return [
        RangeMark(index=lo.index, min_point=lo, max_point=hi, label=lo.label)
        for lo, hi in zip(mins, maxs)
    ]


def flatten_marks_map(marks_map: Mapping[str, list[Mark]]) -> list[Mark]:
    """Concatenate a channel map, suffixing each label with " (channel)"."""
    return [
        Mark(index=m.index, value=m.value, label=f"{m.label} ({name})")
        for name, marks in marks_map.items()
        for m in marks
    ]
