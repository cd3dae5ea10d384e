"""Notification sink for the kitchen activity feed."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy.orm import Session

from backoffice.models.enums import NotificationTone
from backoffice.models.notification import Notification

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class NotificationEntry:
    """A notification to be written to the feed."""

    tone: NotificationTone
    message: str
    logged_at: str = field(default_factory=_now_iso)

    @classmethod
    def info(cls, message: str) -> "NotificationEntry":
        return cls(NotificationTone.INFO, message)

    @classmethod
    def error(cls, message: str) -> "NotificationEntry":
        return cls(NotificationTone.ERROR, message)


class NotificationSink(Protocol):
    """Fire-and-forget destination for notification entries."""

    def append(self, entry: NotificationEntry) -> None: ...


class SqlNotificationSink:
    """NotificationSink writing rows into the caller's session.

    Rows are only added to the session; they are committed with whatever
    transaction the caller has open.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(self, entry: NotificationEntry) -> None:
        self.db.add(
            Notification(
                tone=entry.tone.value,
                message=entry.message,
                logged_at=datetime.fromisoformat(entry.logged_at),
            )
        )


def list_notifications(db: Session, limit: int = 100) -> list[Notification]:
    """Newest notifications first."""
    return db.query(Notification).order_by(Notification.id.desc()).limit(limit).all()


def clear_notifications(db: Session) -> int:
    """Delete every notification and return how many were removed."""
    count = db.query(Notification).delete()
    db.commit()
    logger.info(f"Cleared {count} notifications")
    return count
