"""Render the report as a fixed-width text table."""

from ..models.schema import ReportRow

COLUMNS = ("ComputerName", "Days", "Hours", "Minutes")


def render_table(rows: list[ReportRow]) -> str:
    """Return a table with a dash underline; names left-, numbers right-aligned.

    An empty row list renders as an empty string.
    """
    if not rows:
        return ""

    records = [row.as_record() for row in rows]
    widths = {
        col: max(len(col), *(len(str(rec[col])) for rec in records))
        for col in COLUMNS
    }

    def _line(cells: dict) -> str:
        parts = []
        for col in COLUMNS:
            text = str(cells[col])
            if col == "ComputerName":
                parts.append(text.ljust(widths[col]))
            else:
                parts.append(text.rjust(widths[col]))
        return " ".join(parts).rstrip()

    lines = [
        _line({col: col for col in COLUMNS}),
        _line({col: "-" * widths[col] for col in COLUMNS}),
    ]
    lines.extend(_line(rec) for rec in records)
    return "\n".join(lines) + "\n"
