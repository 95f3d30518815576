# waitmap/endpoints/__init__.py

# Import routers from each endpoint file
from .hospitals import router as hospitals
from .reports import router as reports
from .upload_csv import router as upload_csv

__all__ = ["hospitals", "reports", "upload_csv"]
