# waitmap/main.py
import logging
import os

from fastapi import FastAPI
from waitmap.database import Base, engine
from waitmap.endpoints.upload_csv import router as upload_csv_router
from waitmap.endpoints.hospitals import router as hospitals_router
from waitmap.endpoints.reports import router as reports_router
from waitmap.endpoints import ws_reports
from waitmap.models import hospital  # noqa: F401  registers tables with Base

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

MAPBOX_TOKEN = os.getenv("MAPBOX_TOKEN", "")
MAP_CENTER_LAT = float(os.getenv("MAP_CENTER_LAT", "9.07"))
MAP_CENTER_LON = float(os.getenv("MAP_CENTER_LON", "7.45"))
MAP_ZOOM = int(os.getenv("MAP_ZOOM", "12"))

app = FastAPI(title="WaitMap API", version="1.0.0")


@app.on_event("startup")
def startup_event():
    # Create database tables
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables ready")
    except Exception as e:
        logger.error(f"⚠️ Failed to create database tables: {e}")
        raise


# Include HTTP routers
app.include_router(upload_csv_router)
app.include_router(hospitals_router)
app.include_router(reports_router)

# Mount WebSocket change feed
app.add_api_websocket_route("/ws/reports", ws_reports.ws_reports)


@app.get("/")
def root():
    return {"message": "API is running"}


@app.get("/config")
def map_config():
    """Public settings the browser map needs at load time."""
    return {
        "mapbox_token": MAPBOX_TOKEN,
        "center": {"lat": MAP_CENTER_LAT, "lon": MAP_CENTER_LON},
        "zoom": MAP_ZOOM,
    }
