"""Write the rendered report to stdout or a file."""

from __future__ import annotations

import sys
from pathlib import Path

from ..models.schema import ReportRow
from .csv_reporter import render_csv
from .json_reporter import render_json
from .table_reporter import render_table

FORMATS = ("table", "json", "csv")


def render(rows: list[ReportRow], fmt: str = "table", pretty: bool = True) -> str:
    if fmt == "table":
        return render_table(rows)
    if fmt == "json":
        return render_json(rows, pretty=pretty) + "\n"
    if fmt == "csv":
        return render_csv(rows)
    raise ValueError(f"unknown format {fmt!r}; expected one of {', '.join(FORMATS)}")


def write_report(text: str, output_path: Path | None = None, stream=None) -> None:
    """Write *text* to *output_path*, or to *stream* (stdout) when no path is given.

    Raises:
        SystemExit: if the file cannot be written.
    """
    if output_path is None:
        (stream or sys.stdout).write(text)
        return
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        print(f"[error] Could not write report to '{output_path}': {exc}", file=sys.stderr)
        sys.exit(1)
