"""SQLAlchemy models mirroring the JSON catalog document."""
from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text

from .session import Base


class AdminAccount(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(String(32), nullable=False)


class DiseaseRecord(Base):
    __tablename__ = "diseases"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    symptoms = Column(Text, nullable=False, default="")
    treatment = Column(Text, nullable=False)
    created_at = Column(String(32), nullable=False)
    updated_at = Column(String(32), nullable=False)


class Counter(Base):
    """Monotonic id counters; a value is never handed out twice."""

    __tablename__ = "counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=1)
