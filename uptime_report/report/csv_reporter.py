"""Render the report as CSV."""

import csv
import io

from ..models.schema import ReportRow

COLUMNS = ("ComputerName", "Days", "Hours", "Minutes")


def render_csv(rows: list[ReportRow]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row.as_record())
    return buf.getvalue()
