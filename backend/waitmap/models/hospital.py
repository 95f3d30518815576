# waitmap/models/hospital.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from waitmap.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Hospital(Base):
    __tablename__ = "hospitals"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(64), nullable=True)
    website = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    reports = relationship("Report", back_populates="hospital", cascade="all, delete-orphan")


class Report(Base):
    """Append-only wait/capacity observation. Never updated once stored."""
    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint("wait_minutes IS NULL OR (wait_minutes >= 0 AND wait_minutes <= 720)", name="ck_reports_wait_range"),
        CheckConstraint("capacity_enum IS NULL OR capacity_enum IN (0, 1, 2)", name="ck_reports_capacity_enum"),
        CheckConstraint("comment IS NULL OR length(comment) <= 280", name="ck_reports_comment_length"),
        CheckConstraint("wait_minutes IS NOT NULL OR capacity_enum IS NOT NULL", name="ck_reports_has_data"),
    )
    id = Column(Integer, primary_key=True, index=True)
    hospital_id = Column(Integer, ForeignKey("hospitals.id", ondelete="CASCADE"), nullable=False, index=True)
    wait_minutes = Column(Integer, nullable=True)
    capacity_enum = Column(Integer, nullable=True)
    comment = Column(String(280), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    hospital = relationship("Hospital", back_populates="reports")
