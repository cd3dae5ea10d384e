"""Audit log model."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String

from backoffice.database import Base


class AuditLog(Base):
    """Record of a user action or system event."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    user_email = Column(String(255), nullable=False, default="system")
    action = Column(String(500), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    details = Column(JSON, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True)
