"""CLI para analizar deriva y ciclo libre (non-24) desde un registro JSON."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from non24_tool.analysis import build_report
from non24_tool.config import load_config
from non24_tool.excel_writer import ExcelLayout, write_sleep_xlsx
from non24_tool.formatting import format_days, format_drift, format_duration
from non24_tool.sources.base import SleepSource
from non24_tool.sources.sleep_json import SleepLogPaths, SleepLogSource


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Análisis non-24: deriva, longitud de ciclo y predicción."
    )
    parser.add_argument(
        "--data",
        default="data.json",
        help="Registro JSON o carpeta que lo contiene (default: ./data.json).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Archivo JSON de configuración (opcional).",
    )
    parser.add_argument(
        "--max-entries",
        type=int,
        default=None,
        help="Registros visibles (0 = todos).",
    )
    parser.add_argument(
        "--prediction-days",
        type=int,
        default=None,
        help="Días a predecir.",
    )
    parser.add_argument(
        "--averaging-days",
        type=int,
        default=None,
        help="Días recientes para promediar (default: todos los días).",
    )
    parser.add_argument(
        "--no-predictions",
        action="store_true",
        help="No generar predicciones.",
    )
    parser.add_argument(
        "--timezone",
        default=None,
        help="Zona para timestamps sin offset (default: UTC).",
    )
    parser.add_argument(
        "--xlsx",
        default=None,
        help="Ruta de salida para exportar el informe a Excel.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Más detalle en el log (-v INFO, -vv DEBUG).",
    )
    return parser.parse_args()


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def main() -> int:
    """Run the analysis CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    _configure_logging(ns.verbose)

    config_path = Path(ns.config).expanduser() if ns.config else None
    config = load_config(config_path).with_overrides(
        max_entries=ns.max_entries,
        prediction_days=ns.prediction_days,
        averaging_days=ns.averaging_days,
        show_predictions=False if ns.no_predictions else None,
        timezone=ns.timezone,
    )

    data_root = Path(ns.data).expanduser().resolve()
    source: SleepSource = SleepLogSource(SleepLogPaths(root=data_root))
    log_file, records = source.read(config.zone())

    report = build_report(records, config)

    print(f"OK: Sleep log: {log_file}")
    print(f"OK: Records: {len(records)} ({len(report.groups)} visible days)")
    if report.metrics is not None:
        m = report.metrics
        print(f"Cycle length: {format_days(m.cycle_length_days)}")
        print(f"Drift: Total {format_drift(m.total_drift)}")
        print(f"Drift: Visible {format_drift(m.visible_drift)}")
        print(f"Avg Sleep: All {format_duration(m.avg_sleep_all_days)}")
        print(f"Avg Sleep: Visible {format_duration(m.avg_sleep_visible_days)}")
    for p in report.predictions:
        print(f"Predicted: {p.sleep.isoformat()} -> {p.wake.isoformat()}")

    if ns.xlsx:
        out_path = Path(ns.xlsx).expanduser()
        if out_path.is_dir():
            ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            out_path = out_path / f"non24_informe_{ts}.xlsx"
        write_sleep_xlsx(
            records, report.predictions, report.metrics, out_path, ExcelLayout()
        )
        print(f"OK: Output: {out_path}")
    return 0
