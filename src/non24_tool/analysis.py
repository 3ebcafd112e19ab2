"""Orquestación: del registro de sueño al informe Non-24 completo."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from non24_tool.config import AnalysisConfig
from non24_tool.cycle import average_main_sleep_duration, cycle_metrics
from non24_tool.drift import calculate_drift
from non24_tool.grouping import group_by_day, main_sleep_entries, visible_records
from non24_tool.model import (
    CycleMetrics,
    DayGroup,
    DriftResult,
    PredictedRecord,
    SleepRecord,
)
from non24_tool.predict import predict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Non24Report:
    """Everything the view layer needs for one rendering pass."""

    groups: list[DayGroup]
    drift: DriftResult
    metrics: CycleMetrics | None
    predictions: list[PredictedRecord]


def generate_predictions(
    records: Sequence[SleepRecord], config: AnalysisConfig
) -> list[PredictedRecord]:
    """Predict future sleep windows from the visible window.

    Drift, average duration, seed pattern and last wake all come from the
    main sleeps of the entry-limited window.
    """
    if not records or not config.show_predictions or config.prediction_days == 0:
        return []

    averaging_days = config.resolve_averaging_days(records)
    if not main_sleep_entries(records, averaging_days):
        return []

    shown = visible_records(records, config.max_entries)
    visible_mains = main_sleep_entries(shown, averaging_days)
    if not visible_mains:
        return []
    logger.debug(
        "Predicting %d days from %d visible main sleeps",
        config.prediction_days,
        len(visible_mains),
    )

    drift = calculate_drift(visible_mains)
    return predict(
        visible_mains,
        average_main_sleep_duration(visible_mains),
        drift,
        visible_mains[-1].wake,
        config.prediction_days,
    )


def build_report(
    records: Sequence[SleepRecord], config: AnalysisConfig
) -> Non24Report:
    """Derive groups, drift, cycle metrics and predictions.

    Nothing is cached: call again whenever the data or any setting changes.
    Metrics are ``None`` with fewer than two records.
    """
    averaging_days = config.resolve_averaging_days(records)
    shown = visible_records(records, config.max_entries)
    logger.debug(
        "Building report: %d records, %d visible, averaging %d days",
        len(records),
        len(shown),
        averaging_days,
    )

    metrics = cycle_metrics(records, config) if len(records) >= 2 else None
    return Non24Report(
        groups=group_by_day(shown),
        drift=calculate_drift(main_sleep_entries(shown, averaging_days)),
        metrics=metrics,
        predictions=generate_predictions(records, config),
    )
