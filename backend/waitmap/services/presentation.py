# waitmap/services/presentation.py
"""
Turn aggregates into what the map draws: marker colour, band, popup text.

All state lives in a RenderContext owned by the caller; nothing here keeps
module-level markers or popups.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from waitmap.models.report_models import AggregatedWait, HospitalOut, HospitalView, ReportRecord
from waitmap.services.classification import band_color, capacity_text, classify_wait, format_age
from waitmap.services.humanizer import humanize_report, humanize_wait


class MarkerView(BaseModel):
    hospital_id: int
    name: str
    lat: float
    lon: float
    band: str
    color: str
    popup_title: str
    popup_lines: List[str]
    report_lines: List[str] = []


@dataclass
class RenderContext:
    markers: Dict[int, MarkerView] = field(default_factory=dict)
    open_popup: Optional[int] = None

    def clear(self):
        self.markers.clear()
        self.open_popup = None

    def toggle_popup(self, hospital_id: int) -> Optional[int]:
        if hospital_id not in self.markers:
            return self.open_popup
        self.open_popup = None if self.open_popup == hospital_id else hospital_id
        return self.open_popup


def build_marker(
    hospital: HospitalOut,
    aggregated: AggregatedWait,
    recent: Sequence[ReportRecord],
    now: datetime,
) -> MarkerView:
    band = classify_wait(aggregated.est_wait)
    return MarkerView(
        hospital_id=hospital.id,
        name=hospital.name,
        lat=hospital.lat,
        lon=hospital.lon,
        band=band.value,
        color=band_color(band),
        popup_title=hospital.name,
        popup_lines=humanize_wait(aggregated, now),
        report_lines=[humanize_report(r, now) for r in recent],
    )


def render_hospitals(
    context: RenderContext,
    hospitals: Sequence[HospitalOut],
    aggregates: Mapping[int, AggregatedWait],
    recent_reports: Mapping[int, Sequence[ReportRecord]],
    now: datetime,
) -> List[MarkerView]:
    """Replace every marker in the context with a fresh one per hospital."""
    context.clear()
    for h in hospitals:
        context.markers[h.id] = build_marker(
            h,
            aggregates.get(h.id, AggregatedWait()),
            recent_reports.get(h.id, []),
            now,
        )
    return list(context.markers.values())


def build_hospital_view(
    hospital: HospitalOut,
    aggregated: AggregatedWait,
    recent: Sequence[ReportRecord],
    now: datetime,
    distance_km: Optional[float] = None,
) -> HospitalView:
    band = classify_wait(aggregated.est_wait)
    return HospitalView(
        **hospital.model_dump(),
        aggregated_wait=aggregated,
        band=band.value,
        color=band_color(band),
        capacity_text=capacity_text(aggregated.capacity_enum),
        updated_text=format_age(aggregated.last_updated, now),
        distance_km=distance_km,
        recent_reports=list(recent),
    )
