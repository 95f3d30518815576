# waitmap/models/report_models.py
from enum import IntEnum
from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class CapacityLevel(IntEnum):
    FULL = 0
    LIMITED = 1
    PLENTIFUL = 2


class ReportRecord(BaseModel):
    """A report as read back from the store."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    hospital_id: Optional[int] = None
    wait_minutes: Optional[int] = None
    capacity_enum: Optional[CapacityLevel] = None
    comment: Optional[str] = None
    created_at: datetime


class AggregatedWait(BaseModel):
    model_config = ConfigDict(frozen=True)

    est_wait: Optional[int] = None
    capacity_enum: Optional[CapacityLevel] = None
    report_count: int = 0
    last_updated: Optional[datetime] = None


class NormalizedReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    hospital_id: Optional[int] = None
    wait_minutes: Optional[int] = None
    capacity_enum: Optional[CapacityLevel] = None
    comment: Optional[str] = None


class ReportDraft(BaseModel):
    """Raw submission straight from the form, before validation."""
    wait: Optional[str] = None
    capacity: Optional[str] = None
    comment: Optional[str] = None


class HospitalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    lat: float
    lon: float
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


class HospitalView(HospitalOut):
    aggregated_wait: AggregatedWait
    band: str
    color: str
    capacity_text: str
    updated_text: str
    distance_km: Optional[float] = None
    recent_reports: List[ReportRecord] = []
