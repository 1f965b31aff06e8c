# chartseries/transform/__init__.py
"""
Pure transforms over TemporalDataSet, in pipeline order:

    distribute / wrap_points -> aggregate -> fill_gaps -> to_marks & co.

Every function returns a new dataset (or new records); inputs are never mutated.
"""

from .distribution import Interval, Point, distribute, wrap_points, minute_shares
from .bucketing import Aggregator, aggregate, validate, MIN_CHANNEL, MAX_CHANNEL
from .gaps import fill_gaps
from .marks import (
    generate_label,
    generate_labels,
    week_of_month,
    to_marks,
    to_channel_marks,
    to_marks_map,
    to_range_marks,
    flatten_marks_map,
)


__all__ = [
    # input
    "Interval",
    "Point",
    "distribute",
    "wrap_points",
    "minute_shares",

    # bucketing
    "Aggregator",
    "aggregate",
    "validate",
    "MIN_CHANNEL",
    "MAX_CHANNEL",

    # gap filling
    "fill_gaps",

    # output
    "generate_label",
    "generate_labels",
    "week_of_month",
    "to_marks",
    "to_channel_marks",
    "to_marks_map",
    "to_range_marks",
    "flatten_marks_map",
]
