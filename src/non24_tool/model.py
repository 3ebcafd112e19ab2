"""Modelos tipados para registros de sueño, agrupación diaria y métricas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd


@dataclass(frozen=True)
class SleepRecord:
    """One sleep interval from the log.

    ``sleep``/``wake`` are timezone-aware timestamps, or ``NaT`` when the
    source string could not be parsed.
    """

    sleep: pd.Timestamp
    wake: pd.Timestamp
    rating: int = 3
    note: str = ""


@dataclass(frozen=True)
class PredictedRecord(SleepRecord):
    """Synthetic record produced by the predictor (never stored)."""

    is_predicted: bool = True


@dataclass(frozen=True)
class DayGroup:
    """Records whose ``sleep`` falls on the same calendar day."""

    day: date | None
    records: tuple[SleepRecord, ...]
    indices: tuple[int, ...]


@dataclass(frozen=True)
class DriftResult:
    """Average day-over-day drift of sleep and wake onset."""

    sleep_drift: pd.Timedelta
    wake_drift: pd.Timedelta
    avg_rating: float


@dataclass(frozen=True)
class CycleMetrics:
    """Figures shown in the Non-24 panel."""

    cycle_length_days: int
    total_drift: pd.Timedelta
    visible_drift: pd.Timedelta
    avg_sleep_all_days: pd.Timedelta
    avg_sleep_visible_days: pd.Timedelta
