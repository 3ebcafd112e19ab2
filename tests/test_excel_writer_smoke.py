from __future__ import annotations

from pathlib import Path
from typing import cast

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from non24_tool.excel_writer import (
    ExcelLayout,
    _format_sheet,
    build_log_frame,
    build_summary_frame,
    write_sleep_xlsx,
)
from non24_tool.model import CycleMetrics, PredictedRecord, SleepRecord


def _records() -> list[SleepRecord]:
    return [
        SleepRecord(
            sleep=pd.Timestamp("2024-01-01T23:00Z"),
            wake=pd.Timestamp("2024-01-02T07:00Z"),
            rating=4,
            note="main",
        ),
        SleepRecord(
            sleep=pd.Timestamp("2024-01-01T15:00Z"),
            wake=pd.Timestamp("2024-01-01T16:30Z"),
            rating=3,
            note="nap",
        ),
    ]


def _predictions() -> list[PredictedRecord]:
    return [
        PredictedRecord(
            sleep=pd.Timestamp("2024-01-02T23:30Z"),
            wake=pd.Timestamp("2024-01-03T07:30Z"),
            rating=4,
            note="Predicted entry",
        )
    ]


def _metrics() -> CycleMetrics:
    return CycleMetrics(
        cycle_length_days=48,
        total_drift=pd.Timedelta(minutes=30),
        visible_drift=pd.Timedelta(minutes=-15),
        avg_sleep_all_days=pd.Timedelta(hours=9, minutes=30),
        avg_sleep_visible_days=pd.Timedelta(hours=8),
    )


def test_build_log_frame_kinds_and_hours() -> None:
    df = build_log_frame(_records(), _predictions())
    assert list(df["kind"]) == ["Main", "Nap", "Predicted"]
    assert list(df["hours"]) == [8.0, 1.5, 8.0]
    assert df.loc[0, "weekday"] == "lun"


def test_build_log_frame_empty() -> None:
    df = build_log_frame([], [])
    assert df.empty


def test_build_summary_frame_formats_values() -> None:
    df = build_summary_frame(_metrics())
    values = dict(zip(df["Métrica"], df["Valor"]))
    assert values["Cycle length"] == "6w 6d"
    assert values["Drift: Total"] == "+30m"
    assert values["Drift: Visible"] == "-15m"
    assert values["Avg Sleep: All"] == "9h 30m"
    assert build_summary_frame(None).empty


def test_write_sleep_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "out.xlsx"
    write_sleep_xlsx(_records(), _predictions(), _metrics(), out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().log_sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers[0] == "Día"
    assert "Dormir" in headers
    assert "Tipo" in headers
    assert "sleep" not in headers

    assert ws.cell(row=2, column=1).value == "lun"
    kind_col = headers.index("Tipo") + 1
    assert ws.cell(row=4, column=kind_col).value == "Predicted"

    assert ws.column_dimensions["A"].width == 6
    nota_letter = get_column_letter(headers.index("Nota") + 1)
    assert ws.column_dimensions[nota_letter].width == 30

    horas_cell = ws.cell(row=2, column=headers.index("Horas") + 1)
    assert horas_cell.number_format == "0.00"

    assert ws.cell(row=4, column=1).font.italic is True
    assert not ws.cell(row=2, column=1).font.italic

    summary = cast(Worksheet, wb[ExcelLayout().summary_sheet_name])
    assert summary.cell(row=1, column=1).font.bold is True
    assert summary.cell(row=2, column=2).value == "6w 6d"


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
