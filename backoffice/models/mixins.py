"""Mixins for SQLAlchemy models."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Rows are hidden by stamping ``deleted_at`` instead of being removed.

    Recipes use this so audit entries and cook history keep pointing at a
    row that still exists.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @classmethod
    def not_deleted(cls):
        """Filter clause selecting rows that have not been soft deleted."""
        return cls.deleted_at.is_(None)

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)
