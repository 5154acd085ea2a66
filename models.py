# models.py - SQLAlchemy models for submitted applications
from sqlalchemy import Column, Integer, String, Text, Float, JSON, TIMESTAMP
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
import datetime

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Application(Base):
    __tablename__ = "btr_applications"
    id = Column(Integer, primary_key=True)
    tc_no = Column(String(11), nullable=False, unique=True)
    full_name = Column(Text, nullable=False)
    branch = Column(Text)
    email = Column(Text, nullable=False, unique=True)
    phone = Column(Text)
    weekly_hours = Column(Float)
    certificate_date = Column(Text)
    norm_status = Column(Text)
    preferences = Column(JSONDocument)
    special_request = Column(Text)
    teacher_date = Column(Text)
    application_id = Column(String(32), nullable=False, unique=True)
    submission_date = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    academic_year = Column(String(16), nullable=False, default="2025-2026")
    semester = Column(String(32), nullable=False, default="I. Dönem")
    status = Column(String(32), nullable=False, default="pending")


class ApplicationCounter(Base):
    """Last sequence number handed out per application ID prefix (e.g. BTR-2025)."""
    __tablename__ = "application_counters"
    name = Column(String(32), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
