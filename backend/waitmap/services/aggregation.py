# waitmap/services/aggregation.py
"""
Reduce noisy user reports into one display-ready wait signal per hospital.

Recency policy: a report counts when its ``created_at`` falls inside
``[now - window, now]``. Everything here is pure; callers hand in a
snapshot of reports and the reference time.
"""
import math
import os
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from waitmap.models.report_models import AggregatedWait, ReportRecord

REPORT_WINDOW_MINUTES = int(os.getenv("REPORT_WINDOW_MINUTES", "180"))
DEFAULT_WINDOW = timedelta(minutes=REPORT_WINDOW_MINUTES)


def as_utc(ts: datetime) -> datetime:
    """Treat naive timestamps (e.g. from SQLite) as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def select_recent(reports: Iterable[ReportRecord], now: datetime, window: timedelta) -> List[ReportRecord]:
    """Reports inside the window, oldest first. Equal timestamps keep input order."""
    now = as_utc(now)
    cutoff = now - window
    considered = [r for r in reports if cutoff <= as_utc(r.created_at) <= now]
    return sorted(considered, key=lambda r: as_utc(r.created_at))


def aggregate(reports: Sequence[ReportRecord], now: datetime, window: timedelta = DEFAULT_WINDOW) -> AggregatedWait:
    considered = select_recent(reports, now, window)
    if not considered:
        return AggregatedWait()

    waits = [r.wait_minutes for r in considered if r.wait_minutes is not None]
    est_wait = _round_half_up(sum(waits) / len(waits)) if waits else None

    # capacity is categorical: latest report carrying one wins
    capacity = None
    for r in reversed(considered):
        if r.capacity_enum is not None:
            capacity = r.capacity_enum
            break

    return AggregatedWait(
        est_wait=est_wait,
        capacity_enum=capacity,
        report_count=len(considered),
        last_updated=as_utc(considered[-1].created_at),
    )


def aggregate_by_hospital(
    reports: Iterable[ReportRecord],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
    hospital_ids: Optional[Iterable[int]] = None,
) -> Dict[int, AggregatedWait]:
    """Bulk variant keyed by hospital_id. When hospital_ids is given the result
    is keyed by exactly those ids, empty ones included."""
    grouped: Dict[int, List[ReportRecord]] = defaultdict(list)
    for r in reports:
        grouped[r.hospital_id].append(r)

    ids = list(hospital_ids) if hospital_ids is not None else list(grouped)
    return {hid: aggregate(grouped.get(hid, []), now, window) for hid in ids}
