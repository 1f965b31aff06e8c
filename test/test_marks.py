# test/test_marks.py
import numpy as np
import pytest

from chartseries.core import (
    InvalidChannelSelection,
    Mark,
    MissingChannel,
    RangeMark,
    TemporalDataSet,
    TimeUnit,
)
from chartseries.transform import (
    flatten_marks_map,
    generate_label,
    to_channel_marks,
    to_marks,
    to_marks_map,
    to_range_marks,
    week_of_month,
)


def _t(s: str) -> np.datetime64:
    return np.datetime64(s, "ms")


@pytest.mark.parametrize(
    "stamp, unit, expected",
    [
        ("2025-05-07T09:05", TimeUnit.MINUTE, "9:05"),
        ("2025-05-07T14:00", TimeUnit.HOUR, "14h"),
        ("2025-05-07T00:00", TimeUnit.DAY, "5/7 Wed"),
        ("2025-05-04T00:00", TimeUnit.DAY, "5/4 Sun"),
        ("2025-05-07T00:00", TimeUnit.WEEK, "May W1"),
        ("2025-05-14T00:00", TimeUnit.WEEK, "May W2"),
        ("2025-05-02T00:00", TimeUnit.WEEK, "Apr W4"),  # bucket Sunday is 2025-04-27
        ("2025-06-03T00:00", TimeUnit.WEEK, "Jun W1"),  # June 2025 starts on a Sunday
        ("2025-05-01T00:00", TimeUnit.MONTH, "2025-05"),
        ("2025-01-01T00:00", TimeUnit.YEAR, "2025"),
    ],
)
def test_generate_label(stamp, unit, expected):
    assert generate_label(_t(stamp), unit) == expected


def test_week_of_month_anchor():
    assert week_of_month(_t("2025-05-31")) == (5, 4)  # Sunday 2025-05-25
    assert week_of_month(_t("2025-06-01")) == (6, 1)


def test_to_marks_fills_gaps_by_default():
    ds = TemporalDataSet.single(
        [_t("2025-05-05T00:00"), _t("2025-05-05T02:00")], [90.0, 10.0], unit=TimeUnit.HOUR
    )
    marks = to_marks(ds)

    assert marks == [
        Mark(index=0.0, value=90.0, label="0h"),
        Mark(index=1.0, value=0.0, label="1h"),
        Mark(index=2.0, value=10.0, label="2h"),
    ]
    assert len(to_marks(ds, fill_gaps=False)) == 2


def test_to_marks_rejects_multi_channel():
    ds = TemporalDataSet.multi([_t("2025-05-05")], {"a": [1.0]}, unit=TimeUnit.DAY)
    with pytest.raises(InvalidChannelSelection):
        to_marks(ds)


def test_to_channel_marks_selects_channel():
    ds = TemporalDataSet.multi(
        [_t("2025-05-05"), _t("2025-05-07")],
        {"systolic": [120.0, 130.0], "diastolic": [80.0, 85.0]},
        unit=TimeUnit.DAY,
    )
    marks = to_channel_marks(ds, "diastolic")
    assert [m.value for m in marks] == [80.0, 0.0, 85.0]
    assert [m.label for m in marks] == ["5/5 Mon", "5/6 Tue", "5/7 Wed"]


def test_to_channel_marks_errors():
    ds = TemporalDataSet.multi([_t("2025-05-05")], {"a": [1.0]}, unit=TimeUnit.DAY)
    with pytest.raises(MissingChannel):
        to_channel_marks(ds, "b")

    single = TemporalDataSet.single([_t("2025-05-05")], [1.0], unit=TimeUnit.DAY)
    with pytest.raises(InvalidChannelSelection):
        to_channel_marks(single, "a")


def test_to_marks_map_shares_labels():
    ds = TemporalDataSet.multi(
        [_t("2025-05-01"), _t("2025-06-01")],
        {"calories": [2000.0, 1800.0], "fat": [0.07, 0.06]},
        unit=TimeUnit.MONTH,
    )
    marks = to_marks_map(ds)

    assert list(marks) == ["calories", "fat"]
    assert [m.label for m in marks["calories"]] == [m.label for m in marks["fat"]] == ["2025-05", "2025-06"]

    with pytest.raises(InvalidChannelSelection):
        to_marks_map(TemporalDataSet.single([_t("2025-05-01")], [1.0], unit=TimeUnit.MONTH))


def test_to_range_marks_pairs_min_and_max():
    ds = TemporalDataSet.multi(
        [_t("2025-05-05"), _t("2025-05-06")],
        {"min": [60.0, 58.0], "max": [120.0, 110.0]},
        unit=TimeUnit.DAY,
    )
    ranges = to_range_marks(ds)

    assert len(ranges) == 2
    first = ranges[0]
    assert isinstance(first, RangeMark)
    assert first.index == 0.0
    assert first.label == "5/5 Mon"
    assert (first.min_value, first.max_value) == (60.0, 120.0)
    assert first.min_point.label == first.max_point.label == first.label


def test_to_range_marks_does_not_fill_by_default():
    ds = TemporalDataSet.multi(
        [_t("2025-05-05"), _t("2025-05-07")],
        {"min": [60.0, 58.0], "max": [120.0, 110.0]},
        unit=TimeUnit.DAY,
    )
    assert len(to_range_marks(ds)) == 2
    assert len(to_range_marks(ds, fill_gaps=True)) == 3


def test_to_range_marks_requires_min_and_max():
    ds = TemporalDataSet.multi([_t("2025-05-05")], {"min": [1.0]}, unit=TimeUnit.DAY)
    with pytest.raises(MissingChannel):
        to_range_marks(ds)
    with pytest.raises(MissingChannel):
        to_range_marks(TemporalDataSet.single([_t("2025-05-05")], [1.0], unit=TimeUnit.DAY))


def test_flatten_marks_map_suffixes_labels():
    flat = flatten_marks_map({
        "protein": [Mark(0.0, 0.05, "5/5 Mon")],
        "fat": [Mark(0.0, 0.02, "5/5 Mon")],
    })
    assert [m.label for m in flat] == ["5/5 Mon (protein)", "5/5 Mon (fat)"]
