# waitmap/endpoints/hospitals.py
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from waitmap.database import get_db
from waitmap.models.report_models import HospitalOut, HospitalView
from waitmap.services import hospital_service
from waitmap.services.presentation import MarkerView, RenderContext, build_hospital_view, render_hospitals

router = APIRouter(prefix="/hospitals", tags=["Hospitals"])


def _views(db: Session, hospitals, now: datetime, lat: Optional[float] = None, lon: Optional[float] = None) -> List[HospitalView]:
    ids = [h.id for h in hospitals]
    aggregates = hospital_service.aggregated_waits(db, ids, now)
    recent = hospital_service.recent_reports(db, ids)

    views = []
    for h in hospitals:
        distance = None
        if lat is not None and lon is not None:
            distance = hospital_service.distance_km(lat, lon, h)
        views.append(build_hospital_view(HospitalOut.model_validate(h), aggregates[h.id], recent[h.id], now, distance))

    if lat is not None and lon is not None:
        views.sort(key=lambda v: v.distance_km)
    return views


@router.get("", response_model=List[HospitalView], summary="List hospitals with their aggregated wait")
def list_hospitals(
    q: str = "",
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    db: Session = Depends(get_db),
):
    """
    Hospitals whose name contains `q`, sorted by name, or by distance when
    both `lat` and `lon` are given.
    """
    now = datetime.now(timezone.utc)
    return _views(db, hospital_service.list_hospitals(db, q), now, lat, lon)


@router.get("/markers", response_model=List[MarkerView], summary="Map markers for matching hospitals")
def list_markers(q: str = "", db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc)
    hospitals = hospital_service.list_hospitals(db, q)
    ids = [h.id for h in hospitals]
    context = RenderContext()
    return render_hospitals(
        context,
        [HospitalOut.model_validate(h) for h in hospitals],
        hospital_service.aggregated_waits(db, ids, now),
        hospital_service.recent_reports(db, ids),
        now,
    )


@router.get("/{hospital_id}", response_model=HospitalView)
def get_hospital(hospital_id: int, db: Session = Depends(get_db)):
    hospital = hospital_service.get_hospital(db, hospital_id)
    if hospital is None:
        raise HTTPException(status_code=404, detail="Hospital not found.")
    return _views(db, [hospital], datetime.now(timezone.utc))[0]
