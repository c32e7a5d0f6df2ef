"""Render the report as JSON."""

import json

from ..models.schema import ReportRow


def render_json(rows: list[ReportRow], pretty: bool = True) -> str:
    """Serialise rows to a JSON array of ComputerName/Days/Hours/Minutes objects."""
    indent = 2 if pretty else None
    return json.dumps([row.as_record() for row in rows], indent=indent, ensure_ascii=False)
