# chartseries/core/units.py
from __future__ import annotations

from enum import Enum


class TimeUnit(Enum):
    """
    Bucket granularity, ordered from finest to coarsest.

    The value is the granularity level, so units compare by span:
    MINUTE < HOUR < DAY < WEEK < MONTH < YEAR.
    """
    MINUTE = 0
    HOUR = 1
    DAY = 2
    WEEK = 3
    MONTH = 4
    YEAR = 5

    @property
    def level(self) -> int:
        return self.value

    def is_smaller_than(self, other: "TimeUnit") -> bool:
        return self.level < other.level

    def is_smaller_or_equal(self, other: "TimeUnit") -> bool:
        return self.level <= other.level

    def is_bigger_than(self, other: "TimeUnit") -> bool:
        return self.level > other.level

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TimeUnit):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other: object) -> bool:
        if not isinstance(other, TimeUnit):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, TimeUnit):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, TimeUnit):
            return NotImplemented
        return self.level >= other.level


class AggregationType(Enum):
    """
    How the samples falling into one target bucket are combined.

    - SUM: total of the bucket values (steps per day)
    - DAILY_AVERAGE: per-day mean first, then mean over days with data
    - DURATION_SUM: number of minute samples in the bucket (minutes of activity)
    - MIN_MAX: (min, max) pair per bucket, for range charts
    """
    SUM = "sum"
    DAILY_AVERAGE = "daily_average"
    DURATION_SUM = "duration_sum"
    MIN_MAX = "min_max"
