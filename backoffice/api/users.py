"""User administration endpoints (Admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backoffice.api.dependencies import require_role
from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.user import User
from backoffice.schemas.auth import UserResponse, UserRoleUpdate
from backoffice.services.audit import log_user_deleted, log_user_role_changed

router = APIRouter(prefix="/api/v1/users", tags=["users"])

AdminUser = Annotated[User, Depends(require_role(UserRole.ADMIN))]


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _ensure_other_admin_remains(db: Session, user: User) -> None:
    if user.role != UserRole.ADMIN.value:
        return
    admins = db.query(User).filter(User.role == UserRole.ADMIN.value).count()
    if admins <= 1:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot remove the last Admin",
        )


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """List all back-office users."""
    return db.query(User).order_by(User.email).all()


@router.patch("/{user_id}", response_model=UserResponse)
def change_role(
    user_id: int,
    body: UserRoleUpdate,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """Change a user's role."""
    user = get_user_or_404(db, user_id)
    old_role = user.role
    if old_role == body.role.value:
        return user
    _ensure_other_admin_remains(db, user)

    user.role = body.role.value
    db.commit()
    db.refresh(user)
    log_user_role_changed(db, user.email, old_role, user.role, current_user)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """Remove a user account."""
    user = get_user_or_404(db, user_id)
    _ensure_other_admin_remains(db, user)
    email, role = user.email, user.role
    db.delete(user)
    db.commit()
    log_user_deleted(db, email, role, current_user)
