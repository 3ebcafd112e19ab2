"""Contrato común de las fuentes de registros de sueño."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from non24_tool.model import SleepRecord


@dataclass(frozen=True)
class SourcePaths:
    """Where a sleep source reads from (a file or a folder)."""

    root: Path


class SleepSource(ABC):
    """A place sleep records are loaded from.

    Callers go through ``validate`` -> ``log_file`` -> ``load_records``;
    records come back in insertion order with invalid timestamps as ``NaT``.
    """

    def __init__(self, paths: SourcePaths) -> None:
        self._paths = paths

    @property
    def root(self) -> Path:
        return self._paths.root

    def validate(self) -> None:
        """Check the configured location exists.

        Raises:
            FileNotFoundError: If ``root`` is missing.
        """
        if not self.root.exists():
            raise FileNotFoundError(str(self.root))

    @abstractmethod
    def log_file(self) -> Path:
        """Resolve the concrete file to read under ``root``."""

    @abstractmethod
    def load_records(
        self, path: Path, default_tz: tzinfo | None = None
    ) -> list[SleepRecord]:
        """Parse ``path`` into records.

        Args:
            path: File returned by ``log_file``.
            default_tz: Zone for timestamps without offset.
        """

    def read(
        self, default_tz: tzinfo | None = None
    ) -> tuple[Path, list[SleepRecord]]:
        """Validate, resolve and load in one call."""
        self.validate()
        path = self.log_file()
        return path, self.load_records(path, default_tz)
