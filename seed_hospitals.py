# seed_hospitals.py
import sys
from pathlib import Path

import pandas as pd

from waitmap.database import Base, SessionLocal, engine
from waitmap.models import hospital  # noqa: F401
from waitmap.services.hospital_import import hospital_rows_from_dataframe, insert_hospitals

CSV_PATH = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "hospitals.csv"

if not CSV_PATH.exists():
    print(f"❌ {CSV_PATH} not found!")
    sys.exit(1)

try:
    rows = hospital_rows_from_dataframe(pd.read_csv(CSV_PATH))
except ValueError as e:
    print(f"❌ {e}")
    sys.exit(1)

Base.metadata.create_all(bind=engine)

db = SessionLocal()
try:
    inserted = insert_hospitals(db, rows)
finally:
    db.close()

print(f"🎉 Hospital seeding completed! {inserted}/{len(rows)} inserted from {CSV_PATH}")
