"""Cálculo de deriva diaria (sleep/wake) con plegado modular a 24h."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from non24_tool.model import DriftResult, SleepRecord
from non24_tool.timeutil import DAY, HALF_DAY

DEFAULT_DRIFT = pd.Timedelta(minutes=30)
DEFAULT_RATING = 3.0


def fold_drift(delta: pd.Timedelta) -> pd.Timedelta:
    """Fold a raw difference into the signed range (-12h, 12h].

    The difference is first normalized into [0, 24h); anything above 12h is
    read as the shorter rotation backwards, so +23h50m becomes -10m while
    exactly +12h stays positive. Multi-day gaps reduce to their 24h
    remainder.
    """
    if pd.isna(delta):
        return pd.NaT
    normalized = ((delta % DAY) + DAY) % DAY
    if normalized > HALF_DAY:
        normalized -= DAY
    return normalized


def entry_drift(
    prev: SleepRecord, curr: SleepRecord
) -> tuple[pd.Timedelta, pd.Timedelta]:
    """Sleep and wake drift between two consecutive main sleeps."""
    return (
        fold_drift(curr.sleep - prev.sleep),
        fold_drift(curr.wake - prev.wake),
    )


def calculate_drift(entries: Sequence[SleepRecord]) -> DriftResult:
    """Average day-over-day drift across consecutive main-sleep entries.

    Each pair contributes equally, whatever the gap between them. The rating
    is averaged over every entry, the first one included.

    Args:
        entries: Main-sleep records sorted by ``sleep``.

    Returns:
        Drift result; with fewer than two entries a fixed +30m drift and a
        rating of 3 so predictions still work on sparse data.
    """
    if len(entries) < 2:
        return DriftResult(
            sleep_drift=DEFAULT_DRIFT,
            wake_drift=DEFAULT_DRIFT,
            avg_rating=DEFAULT_RATING,
        )

    total_sleep = pd.Timedelta(0)
    total_wake = pd.Timedelta(0)
    for prev, curr in zip(entries, entries[1:]):
        sleep_diff, wake_diff = entry_drift(prev, curr)
        total_sleep += sleep_diff
        total_wake += wake_diff

    pairs = len(entries) - 1
    return DriftResult(
        sleep_drift=total_sleep / pairs,
        wake_drift=total_wake / pairs,
        avg_rating=sum(e.rating for e in entries) / len(entries),
    )
