# test/test_pipeline.py
from datetime import datetime

import numpy as np
import pytest

from chartseries.core import (
    AggregationType,
    InvalidChannelSelection,
    Mark,
    RangeMark,
    TimeUnit,
    UnsupportedAggregation,
)
from chartseries.io.load import to_temporal_dataset
from chartseries.io.records import (
    BloodPressure,
    Diet,
    Exercise,
    HeartRate,
    HeartRateSample,
    Mass,
    MassUnit,
    StepCount,
    Weight,
)
from chartseries.pipeline import chart_marks, transform, weight_marks
from chartseries.transform import fill_gaps, flatten_marks_map


def _dt(day: int, hh: int, mm: int = 0) -> datetime:
    return datetime(2025, 5, day, hh, mm)


STEPS = [
    StepCount(_dt(5, 0, 0), _dt(5, 0, 2), 60),
    StepCount(_dt(5, 0, 2), _dt(5, 0, 3), 30),
    StepCount(_dt(5, 2, 30), _dt(5, 2, 31), 10),
]

BLOOD_PRESSURE = [
    BloodPressure(_dt(5, 8), 120, 80),   # Monday
    BloodPressure(_dt(5, 20), 130, 90),  # Monday
    BloodPressure(_dt(7, 9), 110, 70),   # Wednesday
    BloodPressure(_dt(9, 9), 140, 90),   # Friday
]


def test_steps_end_to_end_by_hour():
    hourly = transform(to_temporal_dataset(STEPS), TimeUnit.HOUR, AggregationType.SUM)
    assert np.allclose(hourly.values, [90.0, 10.0])

    filled = fill_gaps(hourly)
    assert np.allclose(filled.values, [90.0, 0.0, 10.0])

    marks = chart_marks(STEPS, TimeUnit.HOUR)
    assert [m.value for m in marks] == pytest.approx([90.0, 0.0, 10.0])
    assert [m.label for m in marks] == ["0h", "1h", "2h"]


def test_blood_pressure_week_average_divides_by_days_with_data():
    marks = chart_marks(BLOOD_PRESSURE, TimeUnit.WEEK)

    assert set(marks) == {"systolic", "diastolic"}
    assert marks["systolic"][0].value == pytest.approx((125.0 + 110.0 + 140.0) / 3)
    assert marks["diastolic"][0].value == pytest.approx((85.0 + 70.0 + 90.0) / 3)
    assert marks["systolic"][0].label == "May W1"


def test_blood_pressure_single_channel_selection():
    marks = chart_marks(BLOOD_PRESSURE, TimeUnit.DAY, channel="systolic")
    # sparse measurements are not gap filled by default
    assert [m.value for m in marks] == pytest.approx([125.0, 110.0, 140.0])

    filled = chart_marks(BLOOD_PRESSURE, TimeUnit.DAY, channel="systolic", fill_gaps=True)
    assert [m.value for m in filled] == pytest.approx([125.0, 0.0, 110.0, 0.0, 140.0])


def test_heart_rate_defaults_to_range_marks():
    hr = [HeartRate(_dt(5, 8), _dt(5, 10), samples=[
        HeartRateSample(_dt(5, 8, 5), 70),
        HeartRateSample(_dt(5, 8, 45), 95),
        HeartRateSample(_dt(5, 9, 10), 88),
    ])]
    ranges = chart_marks(hr, TimeUnit.HOUR)

    assert all(isinstance(r, RangeMark) for r in ranges)
    assert [(r.min_value, r.max_value) for r in ranges] == [(70.0, 95.0), (88.0, 88.0)]
    assert [r.label for r in ranges] == ["8h", "9h"]


def test_heart_rate_daily_average_gives_plain_marks():
    hr = [HeartRate(_dt(5, 8), _dt(5, 10), samples=[
        HeartRateSample(_dt(5, 8, 5), 70),
        HeartRateSample(_dt(5, 9, 10), 80),
    ])]
    marks = chart_marks(hr, TimeUnit.DAY, AggregationType.DAILY_AVERAGE)
    assert marks == [Mark(index=0.0, value=75.0, label="5/5 Mon")]


def test_exercise_duration_in_minutes():
    workout = [Exercise(_dt(5, 7, 0), _dt(5, 7, 30), 300.0)]
    marks = chart_marks(workout, TimeUnit.DAY, AggregationType.DURATION_SUM)
    assert [m.value for m in marks] == [30.0]


def test_diet_channels_and_flattening():
    meals = [
        Diet(_dt(5, 12), _dt(5, 12, 30), 600, Mass.grams(30), Mass.grams(80), Mass.grams(20)),
        Diet(_dt(6, 19), _dt(6, 19, 30), 800, Mass.grams(40), Mass.grams(90), Mass.grams(30)),
    ]
    marks = chart_marks(meals, TimeUnit.DAY)
    assert list(marks) == ["calories", "protein", "carbohydrate", "fat"]
    assert [m.value for m in marks["calories"]] == pytest.approx([600.0, 800.0])

    flat = flatten_marks_map(marks)
    assert flat[0].label == "5/5 Mon (calories)"
    assert len(flat) == 8

    protein = chart_marks(meals, TimeUnit.DAY, channel="protein")
    assert [m.value for m in protein] == pytest.approx([0.03, 0.04])


def test_min_max_on_multi_channel_records_is_rejected():
    with pytest.raises(UnsupportedAggregation):
        chart_marks(BLOOD_PRESSURE, TimeUnit.DAY, AggregationType.MIN_MAX)


def test_weight_marks_in_pounds():
    readings = [
        Weight(_dt(5, 7), Mass.kilograms(70)),
        Weight(_dt(5, 21), Mass.kilograms(72)),
    ]
    kg = weight_marks(readings)
    lb = weight_marks(readings, MassUnit.POUND)

    assert kg[0].value == pytest.approx(71.0)
    assert lb[0].value == pytest.approx(71.0 / 0.45359237)
    assert lb[0].label == kg[0].label == "5/5 Mon"

    with pytest.raises(ValueError):
        weight_marks(readings, aggregation=AggregationType.MIN_MAX)


def test_empty_records():
    assert chart_marks([], TimeUnit.DAY) == []


def test_channel_must_match_a_single_series():
    with pytest.raises(InvalidChannelSelection):
        chart_marks(STEPS, TimeUnit.HOUR, channel="stpeCount")

    named = chart_marks(STEPS, TimeUnit.HOUR, channel="stepCount")
    assert [m.value for m in named] == pytest.approx([90.0, 0.0, 10.0])

    hr = [HeartRate(_dt(5, 8), _dt(5, 9), samples=[HeartRateSample(_dt(5, 8, 5), 70)])]
    with pytest.raises(InvalidChannelSelection):
        chart_marks(hr, TimeUnit.HOUR, channel="max")
