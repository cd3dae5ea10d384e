"""User model."""

from sqlalchemy import Column, Integer, String

from backoffice.database import Base
from backoffice.models.enums import UserRole
from backoffice.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Back-office user for authentication and role checks."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.STAFF.value)

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role)
