"""Agrupación por día calendario y selección de sueño principal vs siestas."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

import pandas as pd

from non24_tool.model import DayGroup, PredictedRecord, SleepRecord
from non24_tool.timeutil import DAY

FRAME_COLUMNS = [
    "sleep",
    "wake",
    "date",
    "duration",
    "rating",
    "note",
    "is_main",
    "is_predicted",
]


def date_key(ts: pd.Timestamp) -> date | None:
    """Calendar date of a timestamp, in the timestamp's own zone.

    This is the rule that decides which records share a day: the date
    component of ``sleep`` as written, not converted to any display zone.
    Invalid timestamps have no day (``None``).
    """
    if pd.isna(ts):
        return None
    return ts.date()


def sleep_duration(record: SleepRecord) -> pd.Timedelta:
    """Elapsed time between ``sleep`` and ``wake``.

    A negative interval means the wake time was stored on the sleep date
    (23:00 -> 01:00 same day); it is wrapped forward so the result is the
    overnight duration, never negative. Invalid timestamps give ``NaT``.
    """
    if pd.isna(record.sleep) or pd.isna(record.wake):
        return pd.NaT
    elapsed = record.wake - record.sleep
    if elapsed < pd.Timedelta(0):
        elapsed = elapsed % DAY
    return elapsed


def group_by_day(records: Sequence[SleepRecord]) -> list[DayGroup]:
    """Group records by the calendar date of ``sleep``.

    Args:
        records: Records in insertion order.

    Returns:
        Groups sorted by date. Records with an invalid ``sleep`` end up in
        one trailing group whose ``day`` is ``None``.
    """
    buckets: dict[date | None, list[int]] = {}
    for idx, record in enumerate(records):
        buckets.setdefault(date_key(record.sleep), []).append(idx)

    days = sorted(d for d in buckets if d is not None)
    if None in buckets:
        days.append(None)

    return [
        DayGroup(
            day=day,
            records=tuple(records[i] for i in buckets[day]),
            indices=tuple(buckets[day]),
        )
        for day in days
    ]


def main_sleep_of(group: DayGroup) -> SleepRecord | None:
    """Longest record of the day; ties keep the first one encountered."""
    if not group.records:
        return None
    if len(group.records) == 1:
        return group.records[0]

    longest = group.records[0]
    longest_duration = pd.Timedelta(0)
    for record in group.records:
        duration = sleep_duration(record)
        if pd.notna(duration) and duration > longest_duration:
            longest_duration = duration
            longest = record
    return longest


def naps_of(group: DayGroup) -> list[SleepRecord]:
    """Every record of the day except the main sleep."""
    main = main_sleep_of(group)
    out: list[SleepRecord] = []
    skipped = False
    for record in group.records:
        # Identity check: two naps may compare equal field-by-field.
        if not skipped and record is main:
            skipped = True
            continue
        out.append(record)
    return out


def distinct_days(records: Sequence[SleepRecord]) -> int:
    """Number of distinct valid sleep dates (default averaging window)."""
    return len({d for d in (date_key(r.sleep) for r in records) if d is not None})


def main_sleep_entries(
    records: Sequence[SleepRecord], averaging_days: int | None = None
) -> list[SleepRecord]:
    """Chronological main sleeps, trimmed to the trailing averaging window.

    Args:
        records: Records in insertion order (naps included).
        averaging_days: Keep only the most recent N main sleeps when N is
            smaller than the number of distinct days. ``None`` keeps all.

    Returns:
        Main-sleep records sorted by ``sleep``.
    """
    mains: list[SleepRecord] = []
    for group in group_by_day(records):
        if group.day is None:
            continue
        main = main_sleep_of(group)
        if main is not None:
            mains.append(main)
    mains.sort(key=lambda r: r.sleep)

    if averaging_days is None or averaging_days <= 0:
        return mains
    unique_days = len({date_key(r.sleep) for r in mains})
    if averaging_days < unique_days and len(mains) > averaging_days:
        return mains[-averaging_days:]
    return mains


def visible_records(
    records: Sequence[SleepRecord], max_entries: int
) -> list[SleepRecord]:
    """Last ``max_entries`` records by insertion order (0 = all)."""
    if max_entries > 0 and len(records) > max_entries:
        return list(records[-max_entries:])
    return list(records)


def records_to_frame(records: Sequence[SleepRecord]) -> pd.DataFrame:
    """Convert records to a DataFrame with day and main-sleep flags."""
    if not records:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    main_ids: set[int] = set()
    for group in group_by_day(records):
        main = main_sleep_of(group)
        if main is not None and group.day is not None:
            main_ids.add(id(main))

    rows = [
        {
            "sleep": r.sleep,
            "wake": r.wake,
            "date": date_key(r.sleep),
            "duration": sleep_duration(r),
            "rating": r.rating,
            "note": r.note,
            "is_main": id(r) in main_ids,
            "is_predicted": isinstance(r, PredictedRecord),
        }
        for r in records
    ]
    out = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    out["duration"] = pd.to_timedelta(out["duration"])
    return out
