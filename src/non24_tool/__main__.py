"""Punto de entrada: python -m non24_tool."""

from __future__ import annotations

from non24_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
