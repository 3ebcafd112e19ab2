"""Configuración del análisis (ventana visible, predicción, zona horaria)."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass, replace
from datetime import tzinfo
from pathlib import Path
from typing import Any

from dateutil import tz

from non24_tool.grouping import distinct_days
from non24_tool.model import SleepRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings the view layer passes into every computation.

    ``max_entries`` limits the visible window (0 = all records);
    ``averaging_days`` of ``None`` means "every day present in the data".
    """

    max_entries: int = 90
    prediction_days: int = 30
    averaging_days: int | None = None
    show_predictions: bool = True
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        """Reject values the view controls would refuse.

        Raises:
            ValueError: If a numeric setting is out of range or the timezone
                name is unknown.
        """
        if self.max_entries < 0:
            raise ValueError("max_entries must be a non-negative integer")
        if self.prediction_days < 0:
            raise ValueError("prediction_days must be a non-negative integer")
        if self.averaging_days is not None and self.averaging_days < 1:
            raise ValueError("averaging_days must be a positive integer")
        if tz.gettz(self.timezone) is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")

    def zone(self) -> tzinfo:
        """Zone used to localize timestamps without offset."""
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        return zone

    def resolve_averaging_days(self, records: Sequence[SleepRecord]) -> int:
        """Averaging window, defaulting to the distinct days in ``records``."""
        if self.averaging_days is not None:
            return self.averaging_days
        return distinct_days(records)

    def with_overrides(self, **values: Any) -> AnalysisConfig:
        """Return a copy with every non-``None`` value applied."""
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)


def _defaults() -> dict[str, Any]:
    return asdict(AnalysisConfig())


def _has_expected_type(key: str, value: Any) -> bool:
    """Whether a settings value has the JSON type its field expects."""
    if key == "averaging_days" and value is None:
        return True
    if key == "show_predictions":
        return isinstance(value, bool)
    if key == "timezone":
        return isinstance(value, str)
    return isinstance(value, int) and not isinstance(value, bool)


def load_config(path: Path | None) -> AnalysisConfig:
    """Read a JSON settings file merged over the defaults.

    A missing file, malformed JSON or a non-object payload all give the
    defaults; unknown keys and values of the wrong type are ignored.

    Args:
        path: Settings file, or ``None`` for defaults.

    Returns:
        Validated configuration.
    """
    defaults = _defaults()
    if path is None or not path.exists():
        return AnalysisConfig(**defaults)

    try:
        parsed: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return AnalysisConfig(**defaults)
    if not isinstance(parsed, dict):
        return AnalysisConfig(**defaults)

    values: dict[str, Any] = {}
    for key, value in parsed.items():
        if key not in defaults:
            continue
        if not _has_expected_type(key, value):
            logger.warning("Ignoring setting %s=%r in %s", key, value, path)
            continue
        values[key] = value
    merged = {**defaults, **values}
    return AnalysisConfig(**merged)
