from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

import os

# --- Database URL from environment ---
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:postgres@db:5432/waitmap")


def engine_options(url: str) -> dict:
    """Per-dialect create_engine options."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# --- SQLAlchemy setup ---
engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# --- DB Session Dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
