"""Audit log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backoffice.api.dependencies import require_role
from backoffice.config import get_settings
from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.user import User
from backoffice.schemas.audit import AuditCleanupResponse, AuditLogResponse, AuditStatsResponse
from backoffice.services.audit import (
    AuditCategory,
    cleanup_old_logs,
    get_audit_logs,
    get_audit_stats,
)

router = APIRouter(prefix="/api/v1/audit", tags=["audit"])


@router.get("", response_model=list[AuditLogResponse])
def list_audit_logs(
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
    category: AuditCategory | None = None,
):
    """Most recent audit entries, optionally filtered by category."""
    return get_audit_logs(db, limit, category)


@router.get("/stats", response_model=AuditStatsResponse)
def audit_stats(
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
):
    """Audit totals by category and user."""
    return get_audit_stats(db)


@router.delete("", response_model=AuditCleanupResponse)
def cleanup_audit_logs(
    current_user: Annotated[User, Depends(require_role(UserRole.ADMIN))],
    db: Annotated[Session, Depends(get_db)],
    days: Annotated[int | None, Query(ge=1)] = None,
):
    """Delete audit entries older than the retention period."""
    days_kept = days or get_settings().audit_retention_days
    return AuditCleanupResponse(deleted=cleanup_old_logs(db, days_kept), days_kept=days_kept)
