from __future__ import annotations

import logging
from typing import Iterable, Sequence

from chartseries.config import DEFAULT_CONFIG, ChartSeriesConfig
from chartseries.core import TemporalDataSet, TimeUnit
from chartseries.io.records import HeartRate
from chartseries.transform.distribution import Interval, Point, distribute, wrap_points

logger = logging.getLogger(__name__)


def to_temporal_dataset(
    records: Iterable[object],
    config: ChartSeriesConfig | None = None,
    *,
    fields: Sequence[str] | None = None,
) -> TemporalDataSet:
    """
    Turn a homogeneous list of records into a MINUTE TemporalDataSet.

    - HeartRate: every sample becomes a point (series start/end ignored)
    - interval records (start, end, fields()): proportionally distributed per minute
    - point records (time, fields()): wrapped as-is, sorted by time

    Aware datetimes are read as wall-clock time in ``config.timezone``.
    """
    cfg = config or DEFAULT_CONFIG
    records = list(records)
    if not records:
        return TemporalDataSet.empty(TimeUnit.MINUTE)

    kinds = {type(r) for r in records}
    if len(kinds) > 1:
        names = ", ".join(sorted(k.__name__ for k in kinds))
        raise TypeError(f"to_temporal_dataset() expects one record type, got: {names}")

    first = records[0]
    if isinstance(first, HeartRate):
        samples = [s for r in records for s in r.samples]
        logger.debug("loading %d heart-rate series (%d samples)", len(records), len(samples))
        if not samples:
            return TemporalDataSet.empty(TimeUnit.MINUTE, name="heartRate")
        return wrap_points(samples, fields=fields, wall_clock=cfg.wall_clock)

    if isinstance(first, Interval):
        logger.debug("distributing %d %s records", len(records), type(first).__name__)
        return distribute(records, fields=fields, wall_clock=cfg.wall_clock)

    if isinstance(first, Point):
        logger.debug("wrapping %d %s readings", len(records), type(first).__name__)
        return wrap_points(records, fields=fields, wall_clock=cfg.wall_clock)

    raise TypeError(
        f"{type(first).__name__} exposes neither (start, end, fields()) nor (time, fields())."
    )
