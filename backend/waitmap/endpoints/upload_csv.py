from fastapi import APIRouter, UploadFile, File, Depends, HTTPException
import pandas as pd
from sqlalchemy.orm import Session

from waitmap.database import get_db
from waitmap.services.hospital_import import hospital_rows_from_dataframe, insert_hospitals

router = APIRouter(prefix="/hospitals", tags=["Hospitals"])

@router.post("/upload-csv")
async def upload_csv(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """
    Import hospitals from a CSV with columns name, lat, lon[, address, phone, website].
    """
    if not file.filename or not file.filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed.")

    try:
        df = pd.read_csv(file.file)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV: {e}")

    try:
        rows = hospital_rows_from_dataframe(df)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    inserted = insert_hospitals(db, rows)
    return {"filename": file.filename, "inserted": inserted, "rows": len(rows)}
