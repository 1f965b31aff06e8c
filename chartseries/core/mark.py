# chartseries/core/mark.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Mark:
    """One plot-ready point: position in the emitted sequence, value and label."""
    index: float
    value: float
    label: str


@dataclass(frozen=True, slots=True)
class RangeMark:
    """
    A (min, max) pair of Marks sharing one position and label.

    Produced from MIN_MAX aggregated data for range/band charts.
    """
    index: float
    min_point: Mark
    max_point: Mark
    label: str

    @property
    def min_value(self) -> float:
        return self.min_point.value

    @property
    def max_value(self) -> float:
        return self.max_point.value
