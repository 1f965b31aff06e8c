# chartseries/transform/gaps.py
from __future__ import annotations

import logging

import numpy as np

from chartseries.core.calendar import bucket_range, normalize
from chartseries.core.dataset import TemporalDataSet
from chartseries.core.exceptions import AmbiguousBucket

logger = logging.getLogger(__name__)


def fill_gaps(data: TemporalDataSet, fill_value: float = 0.0) -> TemporalDataSet:
    """
    Return ``data`` with every missing bucket between its first and last one added.

    Buckets are generated at ``data.unit`` and filled with ``fill_value``
    (every channel). Use it after aggregating to the unit you chart at:
    a dataset with several samples in one bucket raises AmbiguousBucket.

    Filling sparse measurements (weight, blood pressure) with 0.0 drags
    averages and minimums down; pass ``fill_value=float("nan")`` to mark
    gaps instead.
    """
    if data.n == 0:
        return data

    existing = normalize(data.timestamps, data.unit)
    keys, counts = np.unique(existing, return_counts=True)
    duplicates = int((counts > 1).sum())
    if duplicates:
        raise AmbiguousBucket(
            f"fill_gaps() needs one value per {data.unit.name} bucket; found {duplicates} "
            "bucket(s) holding several samples. Aggregate the dataset first."
        )

    complete = bucket_range(keys[0], keys[-1], data.unit)
    slot = np.searchsorted(complete, existing)

    def _fill(values: np.ndarray) -> np.ndarray:
        out = np.full(complete.size, fill_value, dtype=np.float64)
        out[slot] = values
        return out

    logger.debug(
        "fill_gaps: %d -> %d %s buckets", data.n, complete.size, data.unit.name
    )

    if data.is_single_channel:
        return data._replace(timestamps=complete, values=_fill(data.values))
    return data._replace(
        timestamps=complete,
        channels={name: _fill(values) for name, values in data.channels.items()},
    )
