# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from waitmap.database import Base, get_db
from waitmap.models.hospital import Hospital  # import your models to register with Base


@pytest.fixture(scope="session")
def engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

@pytest.fixture(scope="session")
def tables(engine):
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)

@pytest.fixture
def db_session(engine, tables):
    """Provides a transactional scope around each test."""
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection)
    session = SessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture
def client(db_session):
    """TestClient with get_db pointed at the transactional session."""
    from waitmap.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def hospitals(db_session):
    rows = [
        Hospital(name="National Hospital Abuja", lat=9.0415, lon=7.4714, address="Central District"),
        Hospital(name="Garki Hospital", lat=9.0299, lon=7.4951),
        Hospital(name="Kubwa General Hospital", lat=9.1534, lon=7.3249),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows

@pytest.fixture
def now():
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
