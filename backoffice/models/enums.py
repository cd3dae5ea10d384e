"""Enums for model fields."""

from enum import StrEnum


class UserRole(StrEnum):
    """Back-office roles, from most to least privileged."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    STAFF = "Staff"

    @property
    def rank(self) -> int:
        return {UserRole.ADMIN: 3, UserRole.MANAGER: 2, UserRole.STAFF: 1}[self]

    def at_least(self, other: "UserRole") -> bool:
        """Check if this role carries at least the privileges of ``other``."""
        return self.rank >= other.rank


class NotificationTone(StrEnum):
    """Tone of a kitchen notification."""

    INFO = "info"
    ERROR = "error"
