# waitmap/services/classification.py
from datetime import datetime
from enum import Enum
from typing import Optional

from waitmap.services.aggregation import as_utc

# ------------------------------- Severity bands -------------------------------
class WaitBand(str, Enum):
    NO_DATA = "NoData"
    SHORT = "Short"
    MEDIUM = "Medium"
    LONG = "Long"
    VERY_LONG = "VeryLong"


# upper bound (inclusive) per band, checked in order
_BAND_LIMITS = [
    (30, WaitBand.SHORT),
    (60, WaitBand.MEDIUM),
    (120, WaitBand.LONG),
]

BAND_COLORS = {
    WaitBand.NO_DATA: "#808080",
    WaitBand.SHORT: "#4CAF50",
    WaitBand.MEDIUM: "#FFC107",
    WaitBand.LONG: "#FF9800",
    WaitBand.VERY_LONG: "#F44336",
}


def classify_wait(minutes: Optional[int]) -> WaitBand:
    if minutes is None:
        return WaitBand.NO_DATA
    for limit, band in _BAND_LIMITS:
        if minutes <= limit:
            return band
    return WaitBand.VERY_LONG


def band_color(band: WaitBand) -> str:
    return BAND_COLORS[band]


# ------------------------------- Capacity -------------------------------
CAPACITY_TEXT = {
    0: "Full – no beds available",
    1: "Limited beds available",
    2: "Plenty of beds available",
}
UNKNOWN_CAPACITY = "Unknown capacity"


def capacity_text(value) -> str:
    if value is None or isinstance(value, bool):
        return UNKNOWN_CAPACITY
    try:
        return CAPACITY_TEXT.get(int(value), UNKNOWN_CAPACITY)
    except (TypeError, ValueError):
        return UNKNOWN_CAPACITY


# ------------------------------- Staleness -------------------------------
def format_age(last_updated: Optional[datetime], now: datetime) -> str:
    """Elapsed time since last_updated as a short relative string."""
    if last_updated is None:
        return "no reports yet"
    last_updated = as_utc(last_updated)
    elapsed = (as_utc(now) - last_updated).total_seconds()
    minutes = int(elapsed // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return last_updated.date().isoformat()
