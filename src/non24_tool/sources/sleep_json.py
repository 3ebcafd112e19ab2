"""Lectura del registro de sueño en JSON ({sleep, wake, rating, note})."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any

from dateutil import tz

from non24_tool.model import SleepRecord
from non24_tool.sources.base import SleepSource, SourcePaths
from non24_tool.timeutil import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "data.json"
DEFAULT_RATING = 3


@dataclass(frozen=True)
class SleepLogPaths(SourcePaths):
    """Location of the sleep log."""

    # root: a .json file, or a folder containing data.json / *.json


class SleepLogSource(SleepSource):
    """JSON sleep-log reading source."""

    def log_file(self) -> Path:
        """Return the log file: root itself, data.json, or newest *.json."""
        root = self.root
        if root.is_file():
            return root

        preferred = root / DEFAULT_FILE_NAME
        if preferred.exists():
            return preferred

        files = sorted(
            root.glob("*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No *.json sleep log in {root}")
        return files[0]

    def load_records(
        self, path: Path, default_tz: tzinfo | None = None
    ) -> list[SleepRecord]:
        """Parse the JSON log into records, keeping insertion order.

        Timestamps are not validated: unparseable strings become ``NaT``.

        Args:
            path: Path to JSON file.
            default_tz: Zone for timestamps without offset (UTC if omitted).

        Returns:
            List of sleep records.

        Raises:
            ValueError: If JSON shape is invalid.
        """
        zone = default_tz if default_tz is not None else tz.UTC
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Sleep log JSON must be a list")

        out: list[SleepRecord] = []
        for idx, item in enumerate(raw):
            record = _item_to_record(item, zone)
            if record is None:
                logger.debug("Skipping non-object item %d in %s", idx, path)
                continue
            out.append(record)
        return out


def _parse_rating(item: dict[str, Any]) -> int:
    """Rating as int; missing or non-numeric values fall back to 3."""
    value = item.get("rating")
    if value is None:
        return DEFAULT_RATING
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_RATING


def _item_to_record(item: Any, zone: tzinfo) -> SleepRecord | None:
    """Convierte un ítem dict en SleepRecord; None si no es un objeto."""
    if not isinstance(item, dict):
        return None
    note = item.get("note")
    return SleepRecord(
        sleep=parse_timestamp(item.get("sleep"), zone),
        wake=parse_timestamp(item.get("wake"), zone),
        rating=_parse_rating(item),
        note=str(note) if note is not None else "",
    )


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)
