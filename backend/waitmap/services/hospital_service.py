# waitmap/services/hospital_service.py
import logging
import os
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from geopy.distance import geodesic
from sqlalchemy.orm import Session

from waitmap.models.hospital import Hospital, Report
from waitmap.models.report_models import AggregatedWait, NormalizedReport, ReportRecord
from waitmap.services import redis_client
from waitmap.services.aggregation import DEFAULT_WINDOW, aggregate, aggregate_by_hospital

logger = logging.getLogger(__name__)

RECENT_REPORTS_LIMIT = int(os.getenv("RECENT_REPORTS_LIMIT", "5"))


# ------------------------------- Hospitals -------------------------------
def list_hospitals(db: Session, query: str = "") -> List[Hospital]:
    q = db.query(Hospital)
    if query and query.strip():
        q = q.filter(Hospital.name.ilike(f"%{query.strip()}%"))
    return q.order_by(Hospital.name).all()


def get_hospital(db: Session, hospital_id: int) -> Optional[Hospital]:
    return db.get(Hospital, hospital_id)


def distance_km(lat: float, lon: float, hospital: Hospital) -> float:
    return round(geodesic((lat, lon), (hospital.lat, hospital.lon)).km, 1)


# ------------------------------- Reports -------------------------------
def recent_reports(db: Session, hospital_ids: Iterable[int], limit: int = RECENT_REPORTS_LIMIT) -> Dict[int, List[ReportRecord]]:
    """Newest-first reports per hospital, capped at limit."""
    result = {}
    for hid in hospital_ids:
        rows = (
            db.query(Report)
            .filter(Report.hospital_id == hid)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .limit(limit)
            .all()
        )
        result[hid] = [ReportRecord.model_validate(row) for row in rows]
    return result


def reports_in_window(db: Session, hospital_ids: List[int], now: datetime, window: timedelta = DEFAULT_WINDOW) -> List[ReportRecord]:
    if not hospital_ids:
        return []
    rows = (
        db.query(Report)
        .filter(Report.hospital_id.in_(hospital_ids))
        .filter(Report.created_at >= now - window)
        .order_by(Report.created_at, Report.id)
        .all()
    )
    return [ReportRecord.model_validate(row) for row in rows]


def create_report(db: Session, report: NormalizedReport) -> Report:
    row = Report(
        hospital_id=report.hospital_id,
        wait_minutes=report.wait_minutes,
        capacity_enum=int(report.capacity_enum) if report.capacity_enum is not None else None,
        comment=report.comment,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    redis_client.invalidate_aggregated_waits([row.hospital_id])
    logger.info(f"📝 Stored report {row.id} for hospital {row.hospital_id}")
    return row


# ------------------------------- Aggregates -------------------------------
def aggregated_waits(db: Session, hospital_ids: List[int], now: datetime, window: timedelta = DEFAULT_WINDOW) -> Dict[int, AggregatedWait]:
    """Aggregates for the given hospitals, served from the per-hospital Redis cache when fresh.

    Only misses are written back, so a cached entry never outlives its own TTL.
    """
    cached = redis_client.get_aggregated_waits(hospital_ids)
    result = {}
    missing = []
    for hid in hospital_ids:
        if hid in cached:
            result[hid] = AggregatedWait.model_validate(cached[hid])
        else:
            missing.append(hid)

    if missing:
        computed = aggregate_by_hospital(reports_in_window(db, missing, now, window), now, window, hospital_ids=missing)
        result.update(computed)
        redis_client.set_aggregated_waits({hid: agg.model_dump(mode="json") for hid, agg in computed.items()})
    return result


def aggregated_wait_for(db: Session, hospital_id: int, now: datetime, window: timedelta = DEFAULT_WINDOW) -> AggregatedWait:
    """Fresh recompute for a single hospital, bypassing the cache."""
    return aggregate(reports_in_window(db, [hospital_id], now, window), now, window)
