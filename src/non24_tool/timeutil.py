"""Constantes y helpers de tiempo compartidos por el motor."""

from __future__ import annotations

import math
from datetime import tzinfo

import pandas as pd

MINUTE = pd.Timedelta(minutes=1)
HOUR = pd.Timedelta(hours=1)
HALF_DAY = pd.Timedelta(hours=12)
DAY = pd.Timedelta(days=1)


def parse_timestamp(raw: object, default_tz: tzinfo) -> pd.Timestamp:
    """Parse an ISO-8601 string into a timezone-aware timestamp.

    Strings with an explicit offset keep it; naive strings are localized to
    ``default_tz``. Anything unparseable becomes ``NaT`` without raising.

    Args:
        raw: Value taken from the record payload.
        default_tz: Zone for timestamps without offset.

    Returns:
        Parsed timestamp or ``NaT``.
    """
    if not isinstance(raw, str) or not raw.strip():
        return pd.NaT
    parsed = pd.to_datetime(raw.strip(), errors="coerce")
    if parsed is None or pd.isna(parsed):
        return pd.NaT
    ts = pd.Timestamp(parsed)
    if ts.tzinfo is None:
        return ts.tz_localize(default_tz, ambiguous="NaT", nonexistent="NaT")
    return ts


def round_half_up(value: float) -> int:
    """Round like JavaScript ``Math.round`` (halves go up)."""
    return int(math.floor(value + 0.5))
