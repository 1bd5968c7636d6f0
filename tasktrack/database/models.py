"""SQLAlchemy database models for tasktrack."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from tasktrack.database.database import Base


class StoredBlobDB(Base):
    """One opaque value per key; the task collection lives under a single key."""

    __tablename__ = "stored_blobs"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
