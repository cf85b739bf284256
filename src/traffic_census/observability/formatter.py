"""
Report Formatter
================

Renders a PipelineResult for the console.

Text Layout (hour-only logs):
    Top Congested Traffic Lights Per Hour:
    Hour 08:00
      L1: 7 cars
      L2: 3 cars

Logs with dates get a "Day YYYY-MM-DD" heading per day with the hour
blocks indented beneath it. JSON output is the result's `to_dict()`.
"""

import json
from typing import List

from traffic_census.models.report import PipelineResult, RankedReport


REPORT_TITLE = "Top Congested Traffic Lights Per Hour:"


def format_text(report: RankedReport) -> str:
    """Render the ranked report as plain text."""
    lines: List[str] = [REPORT_TITLE]
    current_day = None
    for group in report.groups:
        indent = ""
        if group.day is not None:
            if group.day != current_day:
                lines.append(f"Day {group.day}")
                current_day = group.day
            indent = "  "
        lines.append(f"{indent}Hour {group.hour:02d}:00")
        for entry in group.entries:
            lines.append(f"{indent}  {entry.light_id}: {entry.count} cars")
    return "\n".join(lines)


def format_json(result: PipelineResult) -> str:
    """Render the whole run outcome as indented JSON."""
    return json.dumps(result.to_dict(), indent=2)


def render(result: PipelineResult, fmt: str = "text") -> str:
    if fmt == "json":
        return format_json(result)
    return format_text(result.report)
