"""Formato legible de derivas, duraciones y longitudes de ciclo."""

from __future__ import annotations

import pandas as pd

from non24_tool.timeutil import HOUR, MINUTE, round_half_up


def format_drift(drift: pd.Timedelta) -> str:
    """Format a drift as ``+30m``, ``-1h 15m`` or ``+2h``.

    Hours are taken modulo 24 so only the part beyond a full day shows.
    """
    if pd.isna(drift):
        return "N/A"
    sign = "+" if drift >= pd.Timedelta(0) else "-"
    magnitude = abs(drift)
    hours = (magnitude // HOUR) % 24
    minutes = (magnitude % HOUR) // MINUTE

    if hours == 0:
        return f"{sign}{minutes}m"
    if minutes == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {minutes}m"


def format_days(days: int) -> str:
    """Format a cycle length in weeks and days (0 is N/A)."""
    if days == 0:
        return "N/A"
    if days == 1:
        return "1 day"

    weeks, remaining = divmod(days, 7)
    if weeks == 0:
        return f"{days} days"
    if remaining == 0:
        return f"{weeks}w"
    return f"{weeks}w {remaining}d"


def format_duration(duration: pd.Timedelta) -> str:
    """Format an average sleep duration as ``7h 30m``."""
    if pd.isna(duration):
        return "N/A"
    hours = duration / HOUR
    whole = int(hours // 1)
    minutes = round_half_up((hours % 1) * 60)
    return f"{whole}h {minutes}m"
