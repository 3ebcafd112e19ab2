"""Longitud de ciclo libre y promedios de sueño diario."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from non24_tool.config import AnalysisConfig
from non24_tool.drift import calculate_drift, fold_drift
from non24_tool.grouping import (
    main_sleep_entries,
    records_to_frame,
    sleep_duration,
    visible_records,
)
from non24_tool.model import CycleMetrics, SleepRecord
from non24_tool.timeutil import DAY, MINUTE, round_half_up


def cycle_length(total_drift: pd.Timedelta) -> int:
    """Days for a constant daily drift to loop back to the same clock time.

    A +1h/day rhythm (25h day) realigns after 24 days. Drift under one
    minute returns 0, the "no measurable drift" sentinel shown as N/A.
    """
    drift = fold_drift(total_drift)
    if pd.isna(drift) or abs(drift) < MINUTE:
        return 0
    return round_half_up(DAY / abs(drift))


def average_sleep_per_day(
    records: Sequence[SleepRecord], max_entries: int = 0
) -> pd.Timedelta:
    """Average total sleep (naps included) per day with data.

    Args:
        records: Records in insertion order.
        max_entries: When positive, only the last ``max_entries`` records
            (the visible window) are considered.

    Returns:
        Mean of the per-day sums, or ``NaT`` when there is no data or a
        dated record has an invalid duration (e.g. unparseable wake).
    """
    frame = records_to_frame(visible_records(records, max_entries))
    if frame.empty:
        return pd.NaT
    dated = frame[frame["date"].notna()]
    if dated.empty or dated["duration"].isna().any():
        return pd.NaT
    per_day = dated.groupby("date")["duration"].sum()
    return pd.Timedelta(per_day.mean())


def average_main_sleep_duration(entries: Sequence[SleepRecord]) -> pd.Timedelta:
    """Mean duration of main-sleep entries (``NaT`` if empty)."""
    if not entries:
        return pd.NaT
    total = sum((sleep_duration(e) for e in entries), pd.Timedelta(0))
    return total / len(entries)


def cycle_metrics(
    records: Sequence[SleepRecord], config: AnalysisConfig
) -> CycleMetrics:
    """Compute every Non-24 panel figure from scratch.

    Total drift comes from all main sleeps, visible drift from the
    entry-limited window; both sleep averages are computed independently.
    """
    averaging_days = config.resolve_averaging_days(records)
    all_mains = main_sleep_entries(records, averaging_days)
    shown = visible_records(records, config.max_entries)
    visible_mains = main_sleep_entries(shown, averaging_days)

    total_drift = calculate_drift(all_mains).sleep_drift
    visible_drift = calculate_drift(visible_mains).sleep_drift

    return CycleMetrics(
        cycle_length_days=cycle_length(total_drift),
        total_drift=total_drift,
        visible_drift=visible_drift,
        avg_sleep_all_days=average_sleep_per_day(records),
        avg_sleep_visible_days=average_sleep_per_day(
            records, max_entries=config.max_entries
        ),
    )
