# scripts/import_osm.py

import sys

import requests

from waitmap.database import Base, SessionLocal, engine
from waitmap.models import hospital  # noqa: F401
from waitmap.services.hospital_import import OSM_BBOX, fetch_osm_hospitals, hospital_rows_from_osm, insert_hospitals


def main():
    """Import hospitals from OpenStreetMap into the hospitals table."""
    try:
        print(f"🌍 Querying Overpass for hospitals in {OSM_BBOX} ...")
        elements = fetch_osm_hospitals(OSM_BBOX)
    except requests.RequestException as e:
        print(f"❌ Overpass error: {e}")
        sys.exit(1)

    rows = hospital_rows_from_osm(elements)
    if not rows:
        print("⚠️ No hospitals returned. Exiting.")
        return

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        inserted = insert_hospitals(db, rows)
    finally:
        db.close()

    print(f"✅ Imported {inserted}/{len(rows)} hospitals")

if __name__ == "__main__":
    main()
