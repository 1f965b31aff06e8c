# chartseries/config.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from chartseries.core.exceptions import InvalidConfig


@dataclass(frozen=True, slots=True)
class ChartSeriesConfig:
    """
    Settings for turning records into chart series.

    - timezone: IANA zone used to read aware datetimes as wall-clock time;
      None means the system local zone
    - fill_value: value for buckets added by gap filling (NaN is allowed)
    """
    timezone: str | None = None
    fill_value: float = 0.0

    def __post_init__(self) -> None:
        if self.timezone is not None:
            if not isinstance(self.timezone, str) or not self.timezone.strip():
                raise InvalidConfig("ChartSeriesConfig.timezone must be a non-empty string or None.")
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise InvalidConfig(f"Unknown timezone '{self.timezone}'.") from e

        try:
            fill = float(self.fill_value)
        except (TypeError, ValueError) as e:
            raise InvalidConfig("ChartSeriesConfig.fill_value must be a number.") from e
        if math.isinf(fill):
            raise InvalidConfig("ChartSeriesConfig.fill_value must be finite or NaN.")
        object.__setattr__(self, "fill_value", fill)

    @property
    def tz(self) -> tzinfo | None:
        return None if self.timezone is None else ZoneInfo(self.timezone)

    def wall_clock(self, value: datetime) -> datetime:
        """Naive wall-clock time of ``value`` in the configured zone."""
        if value.tzinfo is None:
            return value
        return value.astimezone(self.tz).replace(tzinfo=None)


DEFAULT_CONFIG = ChartSeriesConfig()
