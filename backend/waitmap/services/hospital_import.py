# waitmap/services/hospital_import.py
import logging
import os
from typing import Dict, List, Optional

import pandas as pd
import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from waitmap.models.hospital import Hospital
from waitmap.services import redis_client

logger = logging.getLogger(__name__)

# ---------------------------
# Config
# ---------------------------
OVERPASS_URL = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
OSM_BBOX = os.getenv("OSM_BBOX", "8.8,7.1,9.5,7.8")  # south,west,north,east (Abuja)
REQUIRED_CSV_COLUMNS = {"name", "lat", "lon"}
OPTIONAL_CSV_COLUMNS = ("address", "phone", "website")


# ---------------------------
# OpenStreetMap
# ---------------------------
def overpass_query(bbox: str = OSM_BBOX) -> str:
    return f"""
[out:json][timeout:25];
node["amenity"="hospital"]({bbox});
out body;
"""


def fetch_osm_hospitals(bbox: str = OSM_BBOX) -> List[dict]:
    """Fetch hospital nodes from the Overpass API."""
    response = requests.post(
        OVERPASS_URL,
        data=overpass_query(bbox),
        headers={"Content-Type": "text/plain"},
        timeout=30,
    )
    response.raise_for_status()
    return response.json().get("elements", [])


def build_address(tags: Dict[str, str]) -> Optional[str]:
    if tags.get("addr:full"):
        return tags["addr:full"]
    parts = [tags.get("addr:housenumber"), tags.get("addr:street"), tags.get("addr:city")]
    address = " ".join(p for p in parts if p)
    return address or None


def hospital_rows_from_osm(elements: List[dict]) -> List[dict]:
    rows = []
    for item in elements:
        if item.get("lat") is None or item.get("lon") is None:
            continue
        tags = item.get("tags", {})
        rows.append({
            "name": tags.get("name") or "Unnamed hospital",
            "lat": item["lat"],
            "lon": item["lon"],
            "address": build_address(tags),
            "phone": tags.get("phone") or None,
            "website": tags.get("website") or None,
        })
    return rows


# ---------------------------
# CSV
# ---------------------------
def hospital_rows_from_dataframe(df: pd.DataFrame) -> List[dict]:
    """Turn a seed CSV frame (name, lat, lon[, address, phone, website]) into rows."""
    missing = REQUIRED_CSV_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"CSV must contain columns: {sorted(REQUIRED_CSV_COLUMNS)} (missing {sorted(missing)})")

    df = df.dropna(subset=list(REQUIRED_CSV_COLUMNS))
    rows = []
    for record in df.to_dict(orient="records"):
        row = {
            "name": str(record["name"]).strip(),
            "lat": float(record["lat"]),
            "lon": float(record["lon"]),
        }
        for col in OPTIONAL_CSV_COLUMNS:
            value = record.get(col)
            row[col] = None if value is None or pd.isna(value) else str(value)
        rows.append(row)
    return rows


def insert_hospitals(db: Session, rows: List[dict]) -> int:
    inserted = 0
    for row in rows:
        try:
            db.add(Hospital(**row))
            db.commit()
            inserted += 1
            logger.info(f"✅ Inserted {row['name']}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to insert {row.get('name')}: {e}")
    if inserted:
        redis_client.invalidate_aggregated_waits()
    return inserted
