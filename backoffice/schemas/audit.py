"""Audit log schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int | None
    user_email: str
    action: str
    category: str
    details: dict[str, Any] | None
    timestamp: datetime


class AuditStatsResponse(BaseModel):
    total: int
    by_category: dict[str, int]
    by_user: dict[str, int]
    recent_24h: int


class AuditCleanupResponse(BaseModel):
    deleted: int
    days_kept: int
