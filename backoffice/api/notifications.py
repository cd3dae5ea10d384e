"""Notification feed endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.dependencies import get_current_user, require_role
from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.user import User
from backoffice.schemas.notification import NotificationResponse
from backoffice.services.notification_service import clear_notifications, list_notifications

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
def get_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """Newest notifications first."""
    return list_notifications(db, limit)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_notifications(
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
):
    """Clear the notification feed."""
    clear_notifications(db)
