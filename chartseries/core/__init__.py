# chartseries/core/__init__.py
"""
Core domain objects for chartseries.

This module defines the chart-agnostic data model:
- TimeUnit / AggregationType: bucketing vocabulary
- TemporalDataSet: validated time series with one or several channels
- Mark / RangeMark: plot-ready output records
- calendar: bucket normalization and stepping shared by all transforms

The core layer is independent from record types and rendering.
"""

import logging

from .units import TimeUnit, AggregationType
from .dataset import TemporalDataSet
from .mark import Mark, RangeMark
from .calendar import normalize, step, bucket_range
from .exceptions import (
    CoreError,
    InvalidTemporalDataSet,
    InvalidChannelSelection,
    InvalidConfig,
    UnsupportedAggregation,
    AmbiguousBucket,
    MissingChannel,
)

logging.getLogger("chartseries").addHandler(logging.NullHandler())


__all__ = [
    # vocabulary
    "TimeUnit",
    "AggregationType",

    # domain objects
    "TemporalDataSet",
    "Mark",
    "RangeMark",

    # bucket calendar
    "normalize",
    "step",
    "bucket_range",

    # exceptions
    "CoreError",
    "InvalidTemporalDataSet",
    "InvalidChannelSelection",
    "InvalidConfig",
    "UnsupportedAggregation",
    "AmbiguousBucket",
    "MissingChannel",
]
