"""Notification model for the kitchen activity feed."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String

from backoffice.database import Base


class Notification(Base):
    """A low-stock warning, cook confirmation or shortage report."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    tone = Column(String(10), nullable=False, default="info")  # "info" | "error"
    message = Column(String(1000), nullable=False)
    logged_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True)
