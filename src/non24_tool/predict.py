"""Proyección de ventanas futuras de sueño/vigilia a partir de la deriva."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from non24_tool.model import DriftResult, PredictedRecord, SleepRecord
from non24_tool.timeutil import DAY, round_half_up

logger = logging.getLogger(__name__)

PREDICTED_NOTE = "Predicted entry"


def predict_step(
    prev_wake: pd.Timestamp,
    seed_sleep: pd.Timestamp,
    sleep_drift: pd.Timedelta,
    step: int,
    avg_sleep_duration: pd.Timedelta,
    rating: int,
) -> PredictedRecord:
    """Build the prediction for one step.

    The anchor is ``prev_wake`` + 24h with its clock set to the seed sleep
    hour/minute (in the seed's zone). The cumulative drift
    ``sleep_drift * (step + 1)`` is added to give the wake time, and the
    sleep time is derived backwards from the average duration.

    Args:
        prev_wake: Wake time of the previous step (last real wake for 0).
        seed_sleep: Last real main-sleep onset; only its clock time is used.
        sleep_drift: Average daily sleep drift.
        step: Zero-based step index.
        avg_sleep_duration: Average main-sleep duration.
        rating: Rating to stamp on the synthetic record.

    Returns:
        The predicted record.
    """
    anchor = prev_wake + DAY
    if seed_sleep.tzinfo is not None and anchor.tzinfo is not None:
        anchor = anchor.tz_convert(seed_sleep.tzinfo)
    anchor = anchor.replace(hour=seed_sleep.hour, minute=seed_sleep.minute)

    wake = anchor + sleep_drift * (step + 1)
    sleep = wake - avg_sleep_duration
    return PredictedRecord(
        sleep=sleep,
        wake=wake,
        rating=rating,
        note=PREDICTED_NOTE,
    )


def predict(
    entries: Sequence[SleepRecord],
    avg_sleep_duration: pd.Timedelta,
    drift: DriftResult,
    last_wake: pd.Timestamp,
    days: int,
) -> list[PredictedRecord]:
    """Extrapolate ``days`` future sleep windows.

    Each step starts from the previous step's predicted wake, so drift
    compounds additively: step N sits at the seed clock time plus
    ``(N + 1) * sleep_drift``.

    Args:
        entries: Main-sleep records sorted by ``sleep``; the last one is the
            seed pattern.
        avg_sleep_duration: Average main-sleep duration.
        drift: Drift computed over ``entries``.
        last_wake: Wake time of the last real main sleep.
        days: Number of days to predict.

    Returns:
        Predicted records in order, empty when ``days`` is 0 or there are no
        entries.
    """
    if days <= 0 or not entries:
        return []

    seed_sleep = entries[-1].sleep
    if pd.isna(seed_sleep) or pd.isna(last_wake):
        return []

    rating = round_half_up(drift.avg_rating)
    predictions: list[PredictedRecord] = []
    prev_wake = last_wake
    for step in range(days):
        record = predict_step(
            prev_wake=prev_wake,
            seed_sleep=seed_sleep,
            sleep_drift=drift.sleep_drift,
            step=step,
            avg_sleep_duration=avg_sleep_duration,
            rating=rating,
        )
        logger.debug(
            "Prediction %d: sleep=%s wake=%s drift=%s",
            step + 1,
            record.sleep,
            record.wake,
            drift.sleep_drift * (step + 1),
        )
        predictions.append(record)
        prev_wake = record.wake
    return predictions
