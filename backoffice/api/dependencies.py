"""FastAPI dependencies for authentication, roles and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.user import User
from backoffice.services.auth import decode_access_token
from backoffice.services.inventory_service import InventoryService, SqlInventoryStore
from backoffice.services.kitchen_service import KitchenService
from backoffice.services.notification_service import SqlNotificationSink
from backoffice.services.recipe_service import RecipeService

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_role(minimum: UserRole):
    """Dependency factory allowing users whose role is at least ``minimum``."""

    def _dependency(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if not current_user.user_role.at_least(minimum):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{minimum.value} role required",
            )
        return current_user

    return _dependency


def get_inventory_service(
    db: Annotated[Session, Depends(get_db)],
) -> InventoryService:
    """Get inventory service with dependencies."""
    return InventoryService(db)


def get_recipe_service(
    db: Annotated[Session, Depends(get_db)],
) -> RecipeService:
    """Get recipe service with dependencies."""
    return RecipeService(db)


def get_kitchen_service(
    db: Annotated[Session, Depends(get_db)],
) -> KitchenService:
    """Get kitchen service backed by the request's session."""
    return KitchenService(SqlInventoryStore(db), SqlNotificationSink(db))
