"""Generación de Excel formateado con el registro de sueño y el resumen Non-24."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from non24_tool.formatting import format_days, format_drift, format_duration
from non24_tool.grouping import records_to_frame
from non24_tool.model import CycleMetrics, PredictedRecord, SleepRecord
from non24_tool.timeutil import HOUR

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Día",
    "sleep": "Dormir",
    "wake": "Despertar",
    "hours": "Horas",
    "kind": "Tipo",
    "rating": "Calidad",
    "note": "Nota",
}

_LOG_COLUMNS = ["weekday", "sleep", "wake", "hours", "kind", "rating", "note"]


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the report workbook."""

    log_sheet_name: str = "Registro"
    summary_sheet_name: str = "Resumen Non-24"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    if i is None or (isinstance(i, float) and pd.isna(i)):
        return ""
    if isinstance(i, int | float):
        idx = int(i)
        return _DIA_SEMANA[idx] if 0 <= idx < 7 else ""
    return ""


def _kind_label(row: pd.Series) -> str:
    if row["is_predicted"]:
        return "Predicted"
    return "Main" if row["is_main"] else "Nap"


def _naive(ts: object) -> object:
    """Quita la zona horaria (Excel no admite datetimes con tz)."""
    if ts is None or pd.isna(ts):
        return None
    stamp = pd.Timestamp(ts)
    return stamp.tz_localize(None) if stamp.tzinfo is not None else stamp


def build_log_frame(
    records: Sequence[SleepRecord], predictions: Sequence[PredictedRecord]
) -> pd.DataFrame:
    """One row per real or predicted record, ready for export."""
    frames = [
        f
        for f in (records_to_frame(records), records_to_frame(predictions))
        if not f.empty
    ]
    if not frames:
        return pd.DataFrame(columns=_LOG_COLUMNS)
    frame = pd.concat(frames, ignore_index=True)

    out = pd.DataFrame(
        {
            "weekday": [
                _weekday_label(ts.weekday()) if pd.notna(ts) else ""
                for ts in frame["sleep"]
            ],
            "sleep": [_naive(ts) for ts in frame["sleep"]],
            "wake": [_naive(ts) for ts in frame["wake"]],
            "hours": [
                round(d / HOUR, 2) if pd.notna(d) else None
                for d in frame["duration"]
            ],
            "kind": frame.apply(_kind_label, axis=1),
            "rating": frame["rating"],
            "note": frame["note"],
        }
    )
    return out[_LOG_COLUMNS]


def build_summary_frame(metrics: CycleMetrics | None) -> pd.DataFrame:
    """Metric/value table for the Non-24 panel figures."""
    if metrics is None:
        return pd.DataFrame({"Métrica": [], "Valor": []})
    return pd.DataFrame(
        {
            "Métrica": [
                "Cycle length",
                "Drift: Total",
                "Drift: Visible",
                "Avg Sleep: All",
                "Avg Sleep: Visible",
            ],
            "Valor": [
                format_days(metrics.cycle_length_days),
                format_drift(metrics.total_drift),
                format_drift(metrics.visible_drift),
                format_duration(metrics.avg_sleep_all_days),
                format_duration(metrics.avg_sleep_visible_days),
            ],
        }
    )


def write_sleep_xlsx(
    records: Sequence[SleepRecord],
    predictions: Sequence[PredictedRecord],
    metrics: CycleMetrics | None,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write a formatted Excel report.

    Args:
        records: Real records in insertion order.
        predictions: Predicted records (appended after the real ones).
        metrics: Panel figures, or ``None`` when there is too little data.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    log_df = build_log_frame(records, predictions).rename(columns=_HEADER_MAP)
    summary_df = build_summary_frame(metrics)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        log_df.to_excel(writer, index=False, sheet_name=layout.log_sheet_name)
        summary_df.to_excel(
            writer, index=False, sheet_name=layout.summary_sheet_name
        )
        _format_sheet(writer.book[layout.log_sheet_name])
        _format_sheet(writer.book[layout.summary_sheet_name])


_THIN = Side(style="thin")
_GRID = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
_PREDICTED_FONT = Font(italic=True, color="808080")

_COLUMN_WIDTHS: dict[str, int] = {
    "Día": 6,
    "Dormir": 18,
    "Despertar": 18,
    "Horas": 8,
    "Tipo": 11,
    "Calidad": 9,
    "Nota": 30,
    "Métrica": 20,
    "Valor": 14,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Dormir": "dd/mm/yyyy hh:mm",
    "Despertar": "dd/mm/yyyy hh:mm",
    "Horas": "0.00",
    "Calidad": "0",
}


def _format_sheet(ws: Any) -> None:
    """Grid, widths and number formats by header; predicted rows in grey italics.

    Args:
        ws: openpyxl worksheet whose first row holds the headers.
    """
    columns = {str(cell.value): cell.column_letter for cell in ws[1]}
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = _CENTER
        cell.border = _GRID

    for header, letter in columns.items():
        width = _COLUMN_WIDTHS.get(header)
        if width is not None:
            ws.column_dimensions[letter].width = width

    formats = {
        letter: _NUMBER_FORMATS[header]
        for header, letter in columns.items()
        if header in _NUMBER_FORMATS
    }
    kind_letter = columns.get(_HEADER_MAP["kind"])
    for row in ws.iter_rows(min_row=2):
        predicted = any(
            c.column_letter == kind_letter and c.value == "Predicted" for c in row
        )
        for cell in row:
            cell.alignment = _CENTER
            cell.border = _GRID
            fmt = formats.get(cell.column_letter)
            if fmt is not None:
                cell.number_format = fmt
            if predicted:
                cell.font = _PREDICTED_FONT
