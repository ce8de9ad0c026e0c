"""Day table and availability report built from reveal results."""

import json
from collections.abc import Iterable

from src.rifugio.models import (
    UNAVAILABLE,
    AvailabilityReport,
    DayCapacityTable,
    RevealResult,
)
from src.rifugio.parsing import parse_day_label


def build_day_table(results: Iterable[RevealResult]) -> DayCapacityTable:
    """Map day of month to the bed count revealed for it.

    Results whose label has no day number are skipped. A day whose overlay
    gave no number is kept with None. If two results claim the same day the
    later one wins.
    """
    table: DayCapacityTable = {}
    for result in results:
        day = result.day
        if day is None:
            day = parse_day_label(result.label_text, result.anchor_text)
        if day is None:
            continue
        table[day] = result.capacity
    return table


def build_report(
    table: DayCapacityTable, start_day: int, end_day: int, min_capacity: int
) -> AvailabilityReport:
    """Verdict for every day in [start_day, end_day], ascending.

    A day is reported with its bed count only when that count is known and
    at least min_capacity; otherwise it is UNAVAILABLE.
    """
    report: AvailabilityReport = []
    for day in range(start_day, end_day + 1):
        capacity = table.get(day)
        if capacity is None or capacity < min_capacity:
            report.append((day, UNAVAILABLE))
        else:
            report.append((day, capacity))
    return report


def format_report(report: AvailabilityReport) -> list[str]:
    """Render report lines as "<day>: <beds>" or "<day>: unavailable"."""
    return [f"{day}: {verdict}" for day, verdict in report]


def report_as_json(report: AvailabilityReport) -> str:
    """Render the report as a JSON list of {day, beds, available} objects."""
    rows = [
        {
            "day": day,
            "beds": None if verdict == UNAVAILABLE else verdict,
            "available": verdict != UNAVAILABLE,
        }
        for day, verdict in report
    ]
    return json.dumps(rows, indent=2)
