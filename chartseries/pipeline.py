# chartseries/pipeline.py
"""
End-to-end helpers: records -> TemporalDataSet -> aggregate -> marks.

Each record type carries its own defaults (``default_aggregation`` and
``fill_gaps_by_default``): activity data is summed and gap-filled, sparse
measurements are averaged per day and left sparse.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence, Union

from chartseries.config import DEFAULT_CONFIG, ChartSeriesConfig
from chartseries.core import (
    AggregationType,
    InvalidChannelSelection,
    Mark,
    RangeMark,
    TemporalDataSet,
    TimeUnit,
)
from chartseries.io.load import to_temporal_dataset
from chartseries.io.records import MassUnit, Weight, convert_mass
from chartseries.transform import aggregate, to_channel_marks, to_marks, to_marks_map, to_range_marks

logger = logging.getLogger(__name__)

ChartOutput = Union[list[Mark], list[RangeMark], dict[str, list[Mark]]]


def transform(
    data: TemporalDataSet,
    time_unit: TimeUnit = TimeUnit.DAY,
    aggregation: AggregationType = AggregationType.SUM,
) -> TemporalDataSet:
    return aggregate(data, time_unit, aggregation)


def _defaults(records: Sequence[object]) -> tuple[AggregationType, bool]:
    if not records:
        return AggregationType.SUM, True
    kind = type(records[0])
    return (
        getattr(kind, "default_aggregation", AggregationType.SUM),
        getattr(kind, "fill_gaps_by_default", True),
    )


def chart_marks(
    records: Sequence[object],
    time_unit: TimeUnit = TimeUnit.DAY,
    aggregation: AggregationType | None = None,
    *,
    fill_gaps: bool | None = None,
    fill_value: float | None = None,
    channel: str | None = None,
    config: ChartSeriesConfig | None = None,
) -> ChartOutput:
    """
    Records -> chart-ready marks.

    Returns
    -------
    list[RangeMark]
        for MIN_MAX aggregation,
    list[Mark]
        for single-channel data, or for one ``channel`` of multi-channel data,
    dict[str, list[Mark]]
        for multi-channel data without ``channel``.

    Raises
    ------
    InvalidChannelSelection
        ``channel`` given for a single series that has another name.
    """
    cfg = config or DEFAULT_CONFIG
    records = list(records)
    default_kind, default_fill = _defaults(records)
    kind = default_kind if aggregation is None else aggregation
    fill = default_fill if fill_gaps is None else fill_gaps
    value = cfg.fill_value if fill_value is None else fill_value

    data = transform(to_temporal_dataset(records, cfg), time_unit, kind)
    logger.debug(
        "chart_marks: %d records -> %d %s buckets (%s, fill_gaps=%s)",
        len(records), data.n, time_unit.name, kind.name, fill,
    )

    single_series = kind is AggregationType.MIN_MAX or data.is_single_channel
    if single_series and channel is not None and channel != data.name:
        raise InvalidChannelSelection(
            f"'{channel}' does not name the single series '{data.name}'; "
            "channel= only selects from multi-channel records."
        )

    if kind is AggregationType.MIN_MAX:
        return to_range_marks(data, fill_gaps=fill, fill_value=value)
    if data.is_single_channel:
        return to_marks(data, fill_gaps=fill, fill_value=value)
    if channel is not None:
        return to_channel_marks(data, channel, fill_gaps=fill, fill_value=value)
    return to_marks_map(data, fill_gaps=fill, fill_value=value)


def weight_marks(
    records: Sequence[Weight],
    mass_unit: MassUnit = MassUnit.KILOGRAM,
    time_unit: TimeUnit = TimeUnit.DAY,
    aggregation: AggregationType = AggregationType.DAILY_AVERAGE,
    *,
    fill_gaps: bool = False,
    fill_value: float | None = None,
    config: ChartSeriesConfig | None = None,
) -> list[Mark]:
    """Weight marks converted from kilograms to ``mass_unit``."""
    if aggregation is AggregationType.MIN_MAX:
        raise ValueError("weight_marks() returns plain marks; use chart_marks() for MIN_MAX.")
    marks = chart_marks(
        records,
        time_unit,
        aggregation,
        fill_gaps=fill_gaps,
        fill_value=fill_value,
        config=config,
    )
    return [
        replace(m, value=convert_mass(m.value, MassUnit.KILOGRAM, mass_unit))
        for m in marks
    ]
