from __future__ import annotations

import pandas as pd
import pytest

from non24_tool.drift import (
    DEFAULT_DRIFT,
    calculate_drift,
    entry_drift,
    fold_drift,
)
from non24_tool.model import SleepRecord

DAY = pd.Timedelta(hours=24)


def _rec(sleep: str, hours: float = 8, rating: int = 3) -> SleepRecord:
    start = pd.Timestamp(sleep)
    return SleepRecord(
        sleep=start, wake=start + pd.Timedelta(hours=hours), rating=rating
    )


def test_fold_drift_exact_day_is_zero() -> None:
    assert fold_drift(DAY) == pd.Timedelta(0)
    assert fold_drift(pd.Timedelta(0)) == pd.Timedelta(0)


@pytest.mark.parametrize(
    "minutes",
    [-719, -60, -1, 0, 1, 30, 90, 719, 720],
)
def test_fold_drift_keeps_sign_inside_half_day(minutes: int) -> None:
    d = pd.Timedelta(minutes=minutes)
    assert fold_drift(DAY + d) == d


@pytest.mark.parametrize(
    ("raw_hours", "expected_hours"),
    [(23, -1), (13, -11), (-13, 11), (-12, 12), (47, -1), (72.25, 0.25)],
)
def test_fold_drift_outside_range_folds(
    raw_hours: float, expected_hours: float
) -> None:
    assert fold_drift(pd.Timedelta(hours=raw_hours)) == pd.Timedelta(
        hours=expected_hours
    )


def test_fold_drift_slightly_earlier_reads_negative() -> None:
    # 23h50m later on the clock is really 10 minutes earlier.
    assert fold_drift(pd.Timedelta(hours=23, minutes=50)) == pd.Timedelta(
        minutes=-10
    )


def test_fold_drift_nat() -> None:
    assert pd.isna(fold_drift(pd.NaT))


def test_entry_drift_sleep_and_wake() -> None:
    prev = _rec("2024-01-01T23:00Z", hours=8)
    curr = _rec("2024-01-02T23:20Z", hours=7)
    sleep_drift, wake_drift = entry_drift(prev, curr)
    assert sleep_drift == pd.Timedelta(minutes=20)
    assert wake_drift == pd.Timedelta(minutes=-40)


def test_calculate_drift_defaults_with_sparse_data() -> None:
    for entries in ([], [_rec("2024-01-01T23:00Z")]):
        result = calculate_drift(entries)
        assert result.sleep_drift == DEFAULT_DRIFT
        assert result.wake_drift == pd.Timedelta(minutes=30)
        assert result.avg_rating == 3


def test_calculate_drift_constant_half_hour() -> None:
    start = pd.Timestamp("2024-01-01T23:00Z")
    entries = [
        SleepRecord(
            sleep=start + i * pd.Timedelta(hours=24, minutes=30),
            wake=start + i * pd.Timedelta(hours=24, minutes=30) + pd.Timedelta(hours=8),
        )
        for i in range(5)
    ]
    result = calculate_drift(entries)
    assert result.sleep_drift == pd.Timedelta(minutes=30)
    assert result.wake_drift == pd.Timedelta(minutes=30)


def test_calculate_drift_is_unweighted_mean_of_pairs() -> None:
    entries = [
        _rec("2024-01-01T23:00Z"),
        _rec("2024-01-02T23:10Z"),
        # three-day gap still counts as a single pair
        _rec("2024-01-06T00:00Z"),
    ]
    result = calculate_drift(entries)
    assert result.sleep_drift == pd.Timedelta(minutes=30)


def test_calculate_drift_negative_drift() -> None:
    entries = [
        _rec("2024-01-01T01:00Z"),
        _rec("2024-01-02T00:40Z"),
        _rec("2024-01-03T00:20Z"),
    ]
    result = calculate_drift(entries)
    assert result.sleep_drift == pd.Timedelta(minutes=-20)


def test_calculate_drift_rating_includes_first_entry() -> None:
    entries = [
        _rec("2024-01-01T23:00Z", rating=1),
        _rec("2024-01-02T23:30Z", rating=5),
    ]
    assert calculate_drift(entries).avg_rating == 3.0
