# chartseries/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all chartseries exceptions."""


# ---- Validation / construction errors ----
class InvalidTemporalDataSet(CoreError, ValueError):
    """Raised when a TemporalDataSet is constructed with invalid inputs."""


class InvalidChannelSelection(InvalidTemporalDataSet):
    """Raised when values/channels are both or neither given, or lengths disagree."""


class InvalidConfig(CoreError, ValueError):
    """Raised when a ChartSeriesConfig is constructed with invalid inputs."""


# ---- Transform preconditions ----
class UnsupportedAggregation(CoreError, ValueError):
    """Raised when an aggregation kind cannot be applied to the given data/unit."""


class AmbiguousBucket(CoreError, ValueError):
    """Raised when several samples fall into the same bucket where one is expected."""


# ---- Lookup errors (also behave like KeyError for dict-like APIs) ----
class MissingChannel(CoreError, KeyError):
    """Raised when a requested channel name is not present."""
