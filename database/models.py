"""SQLAlchemy ORM models for stored calculation snapshots.

The engine itself is stateless; snapshots are how callers persist a bundle
next to the profile that produced it. Profile and bundle are stored as JSON
text so the schema does not follow every change to the result models.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


class CalculationSnapshot(Base):
    """ORM model for one computed `CalculationBundle`.

    `bmr` and `tdee` are copied out of the bundle so they can be queried
    without decoding JSON.
    """

    __tablename__ = "calculation_snapshots"
    id = Column(Integer, primary_key=True, index=True)
    profile_hash = Column(String(64), nullable=False, index=True)
    profile_json = Column(Text, nullable=False)
    bundle_json = Column(Text, nullable=False)
    bmr = Column(Integer, nullable=False)
    tdee = Column(Integer, nullable=False)
    confidence = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
