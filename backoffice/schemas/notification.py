"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    """Kitchen feed entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tone: str
    message: str
    logged_at: datetime
