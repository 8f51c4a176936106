"""Database models for feedback storage."""
from datetime import datetime, UTC
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now() -> datetime:
    """Current UTC time (naive, as SQLite stores it)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Feedback(Base):
    """Feedback database model."""

    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(String(100), nullable=False, index=True)
    text = Column(Text, nullable=False)
    sentiment = Column(String(20), nullable=True, index=True)  # positive, negative, neutral
    themes = Column(String(255), nullable=True)  # comma-joined theme tags
    urgency = Column(String(20), nullable=True, index=True)  # low, medium, high
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)

