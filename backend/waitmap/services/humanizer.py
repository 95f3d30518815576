# waitmap/services/humanizer.py
from datetime import datetime
from typing import List

from waitmap.models.report_models import AggregatedWait, ReportRecord
from waitmap.services.classification import capacity_text, format_age


def humanize_wait(aggregated: AggregatedWait, now: datetime) -> List[str]:
    """
    Convert an aggregated wait into the popup header lines.
    """
    lines = []
    if aggregated.est_wait is None:
        lines.append("No wait time data")
    else:
        lines.append(f"Average wait: {aggregated.est_wait} min")

    lines.append(capacity_text(aggregated.capacity_enum))

    if aggregated.last_updated is not None:
        lines.append(f"Updated {format_age(aggregated.last_updated, now)}")

    lines.append(f"Reports: {aggregated.report_count}")
    return lines


def humanize_report(report: ReportRecord, now: datetime) -> str:
    parts = []
    if report.wait_minutes is not None:
        parts.append(f"{report.wait_minutes} min wait")
    if report.capacity_enum is not None:
        parts.append(capacity_text(report.capacity_enum))
    line = f"{format_age(report.created_at, now)}: " + " • ".join(parts)
    if report.comment:
        line += f" ({report.comment})"
    return line
