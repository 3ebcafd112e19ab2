"""Tests for CLI entrypoints."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from non24_tool import cli


def _write_log(path: Path, days: int = 5) -> Path:
    start = pd.Timestamp("2024-01-01T23:00Z")
    step = pd.Timedelta(hours=24, minutes=30)
    data = [
        {
            "sleep": (start + i * step).isoformat(),
            "wake": (start + i * step + pd.Timedelta(hours=8)).isoformat(),
            "rating": 3,
            "note": "",
        }
        for i in range(days)
    ]
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        [
            "prog",
            "--data",
            "/tmp/log.json",
            "--max-entries",
            "0",
            "--prediction-days",
            "10",
            "--no-predictions",
            "-vv",
        ],
    )
    ns = cli.parse_args()
    assert ns.data == "/tmp/log.json"
    assert ns.max_entries == 0
    assert ns.prediction_days == 10
    assert ns.averaging_days is None
    assert ns.no_predictions is True
    assert ns.verbose == 2


def test_main_happy_path(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    log = _write_log(tmp_path / "data.json")
    out = tmp_path / "out" / "report.xlsx"
    monkeypatch.setattr(
        "sys.argv",
        [
            "prog",
            "--data",
            str(tmp_path),
            "--max-entries",
            "0",
            "--prediction-days",
            "2",
            "--xlsx",
            str(out),
        ],
    )

    code = cli.main()
    assert code == 0

    printed = capsys.readouterr().out
    assert f"OK: Sleep log: {log.resolve()}" in printed
    assert "Cycle length: 6w 6d" in printed
    assert "Drift: Total +30m" in printed
    assert "Avg Sleep: All 8h 0m" in printed
    assert printed.count("Predicted: ") == 2

    wb = load_workbook(out)
    assert "Registro" in wb.sheetnames


def test_main_reads_config_file(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    log = _write_log(tmp_path / "log.json")
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"show_predictions": False}), encoding="utf-8")
    monkeypatch.setattr(
        "sys.argv", ["prog", "--data", str(log), "--config", str(settings)]
    )

    assert cli.main() == 0
    assert "Predicted: " not in capsys.readouterr().out


def test_main_propagates_missing_data(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr("sys.argv", ["prog", "--data", str(tmp_path / "nope.json")])
    with pytest.raises(FileNotFoundError):
        cli.main()
