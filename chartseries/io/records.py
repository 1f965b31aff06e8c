from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar

from chartseries.core.units import AggregationType


class MassUnit(Enum):
    GRAM = "g"
    KILOGRAM = "kg"
    POUND = "lb"
    OUNCE = "oz"


_GRAMS_PER: dict[MassUnit, float] = {
    MassUnit.GRAM: 1.0,
    MassUnit.KILOGRAM: 1000.0,
    MassUnit.POUND: 453.59237,
    MassUnit.OUNCE: 28.3495231,
}


def convert_mass(value: float, source: MassUnit, target: MassUnit) -> float:
    return value * _GRAMS_PER[source] / _GRAMS_PER[target]


@dataclass(frozen=True, slots=True)
class Mass:
    """A mass stored in grams; build it with ``Mass.kilograms(70)`` and friends."""

    in_grams: float

    @classmethod
    def grams(cls, value: float) -> "Mass":
        return cls(float(value))

    @classmethod
    def kilograms(cls, value: float) -> "Mass":
        return cls(convert_mass(value, MassUnit.KILOGRAM, MassUnit.GRAM))

    @classmethod
    def pounds(cls, value: float) -> "Mass":
        return cls(convert_mass(value, MassUnit.POUND, MassUnit.GRAM))

    def to(self, unit: MassUnit) -> float:
        return convert_mass(self.in_grams, MassUnit.GRAM, unit)

    def to_kilograms(self) -> float:
        return self.to(MassUnit.KILOGRAM)

    def __str__(self) -> str:
        return f"{self.to_kilograms()} kg"


# ---------------------------------------------------------------------------
# Interval records: value spread over [start, end)
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class StepCount:
    start: datetime
    end: datetime
    steps: int

    default_aggregation: ClassVar[AggregationType] = AggregationType.SUM
    fill_gaps_by_default: ClassVar[bool] = True

    def fields(self) -> dict[str, float]:
        return {"stepCount": float(self.steps)}


@dataclass(frozen=True, slots=True)
class Exercise:
    start: datetime
    end: datetime
    calories_burned: float

    default_aggregation: ClassVar[AggregationType] = AggregationType.SUM
    fill_gaps_by_default: ClassVar[bool] = True

    def fields(self) -> dict[str, float]:
        return {"caloriesBurned": float(self.calories_burned)}


@dataclass(frozen=True, slots=True)
class Diet:
    """
    One meal. Macronutrients are reported in kilograms, calories as-is.

    meal_type follows the source app's integer code and is not charted.
    """
    start: datetime
    end: datetime
    calories: float
    protein: Mass
    carbohydrate: Mass
    fat: Mass
    meal_type: int = 0

    default_aggregation: ClassVar[AggregationType] = AggregationType.SUM
    fill_gaps_by_default: ClassVar[bool] = True

    def fields(self) -> dict[str, float]:
        return {
            "calories": float(self.calories),
            "protein": self.protein.to_kilograms(),
            "carbohydrate": self.carbohydrate.to_kilograms(),
            "fat": self.fat.to_kilograms(),
        }


@dataclass(frozen=True, slots=True)
class SleepSession:
    """Sleep interval; its value is the session length in hours."""
    start: datetime
    end: datetime
    title: str | None = None

    default_aggregation: ClassVar[AggregationType] = AggregationType.SUM
    fill_gaps_by_default: ClassVar[bool] = True

    @property
    def hours(self) -> float:
        # whole minutes, like the sleep apps report them
        minutes = int((self.end - self.start).total_seconds() / 60)
        return minutes / 60.0

    def fields(self) -> dict[str, float]:
        return {"sleepHours": self.hours}


# ---------------------------------------------------------------------------
# Point-in-time measurements
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class HeartRateSample:
    time: datetime
    beats_per_minute: int

    def fields(self) -> dict[str, float]:
        return {"heartRate": float(self.beats_per_minute)}


@dataclass(frozen=True, slots=True)
class HeartRate:
    """
    A heart-rate series. Only the individual samples are charted;
    the series start/end are ignored.
    """
    start: datetime
    end: datetime
    samples: tuple[HeartRateSample, ...] = field(default_factory=tuple)

    default_aggregation: ClassVar[AggregationType] = AggregationType.MIN_MAX
    fill_gaps_by_default: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(self.samples))


@dataclass(frozen=True, slots=True)
class BloodPressure:
    time: datetime
    systolic: float
    diastolic: float

    default_aggregation: ClassVar[AggregationType] = AggregationType.DAILY_AVERAGE
    fill_gaps_by_default: ClassVar[bool] = False

    def fields(self) -> dict[str, float]:
        return {"systolic": float(self.systolic), "diastolic": float(self.diastolic)}


@dataclass(frozen=True, slots=True)
class BloodGlucose:
    time: datetime
    level: float

    default_aggregation: ClassVar[AggregationType] = AggregationType.MIN_MAX
    fill_gaps_by_default: ClassVar[bool] = False

    def fields(self) -> dict[str, float]:
        return {"bloodGlucose": float(self.level)}


@dataclass(frozen=True, slots=True)
class Weight:
    time: datetime
    weight: Mass

    default_aggregation: ClassVar[AggregationType] = AggregationType.DAILY_AVERAGE
    fill_gaps_by_default: ClassVar[bool] = False

    def fields(self) -> dict[str, float]:
        return {"weight": self.weight.to_kilograms()}


@dataclass(frozen=True, slots=True)
class BodyFat:
    time: datetime
    percentage: float

    default_aggregation: ClassVar[AggregationType] = AggregationType.DAILY_AVERAGE
    fill_gaps_by_default: ClassVar[bool] = False

    def fields(self) -> dict[str, float]:
        return {"bodyFat": float(self.percentage)}


@dataclass(frozen=True, slots=True)
class SkeletalMuscleMass:
    time: datetime
    mass: float

    default_aggregation: ClassVar[AggregationType] = AggregationType.DAILY_AVERAGE
    fill_gaps_by_default: ClassVar[bool] = False

    def fields(self) -> dict[str, float]:
        return {"skeletalMuscleMass": float(self.mass)}
