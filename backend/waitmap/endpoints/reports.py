# waitmap/endpoints/reports.py
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from waitmap.database import get_db
from waitmap.endpoints.ws_reports import ReportFeed, get_report_feed, insert_event
from waitmap.models.report_models import ReportDraft, ReportRecord
from waitmap.services import hospital_service
from waitmap.services.report_validation import validate_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hospitals", tags=["Reports"])


@router.get("/{hospital_id}/reports", response_model=List[ReportRecord])
def list_reports(hospital_id: int, limit: int = 5, db: Session = Depends(get_db)):
    if hospital_service.get_hospital(db, hospital_id) is None:
        raise HTTPException(status_code=404, detail="Hospital not found.")
    return hospital_service.recent_reports(db, [hospital_id], limit=max(1, min(limit, 50)))[hospital_id]


@router.post("/{hospital_id}/reports", response_model=ReportRecord, status_code=201)
def submit_report(
    hospital_id: int,
    draft: ReportDraft,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    feed: ReportFeed = Depends(get_report_feed),
):
    """
    Validate a wait/capacity submission, store it and notify the change feed.
    """
    if hospital_service.get_hospital(db, hospital_id) is None:
        raise HTTPException(status_code=404, detail="Hospital not found.")

    result = validate_report(draft.wait, draft.capacity, draft.comment, hospital_id=hospital_id)
    if not result.ok:
        logger.info(f"Rejected report for hospital {hospital_id}: {result.error.kind.value}")
        raise HTTPException(status_code=422, detail=result.error.model_dump(mode="json"))

    row = hospital_service.create_report(db, result.report)
    stored = ReportRecord.model_validate(row)

    aggregated = hospital_service.aggregated_wait_for(db, hospital_id, datetime.now(timezone.utc))
    background_tasks.add_task(
        feed.publish,
        insert_event(stored.model_dump(mode="json"), aggregated.model_dump(mode="json")),
    )
    return stored
