"""Audit logging for user actions and system events.

Audit writes never break the primary workflow: failures are logged and
swallowed, and the caller gets ``None`` back instead of an entry.
"""

import logging
from collections import Counter
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Any

from sqlalchemy.orm import Session

from backoffice.models.audit_log import AuditLog
from backoffice.models.user import User

logger = logging.getLogger(__name__)


class AuditCategory(StrEnum):
    """Audit log categories for filtering."""

    AUTH = "Authentication"
    ORDER = "Order Management"
    INVENTORY = "Inventory Management"
    RECIPE = "Recipe Management"
    USER = "User Management"
    PRICING = "Pricing Changes"
    SALES = "Sales Entry"
    SYSTEM = "System"


def _jsonable(value: Any) -> Any:
    # Dates are stored as ISO strings in the JSON details column
    return value.isoformat() if isinstance(value, (date, datetime)) else value


def log_audit(
    db: Session,
    action: str,
    category: AuditCategory,
    details: dict[str, Any] | None = None,
    user: User | None = None,
) -> AuditLog | None:
    """Record an audit entry; returns None if it could not be written."""
    try:
        entry = AuditLog(
            user_id=user.id if user else None,
            user_email=user.email if user else "system",
            action=action,
            category=category.value,
            details=details or {},
        )
        db.add(entry)
        db.commit()
        return entry
    except Exception as e:
        logger.error(f"Failed to log audit entry '{action}': {e}")
        db.rollback()
        return None


def log_login(db: Session, email: str, success: bool, user: User | None = None) -> AuditLog | None:
    action = f"User logged in: {email}" if success else f"Failed login attempt: {email}"
    return log_audit(db, action, AuditCategory.AUTH, {"email": email, "success": success}, user)


def log_inventory_added(db: Session, item, user: User | None = None) -> AuditLog | None:
    return log_audit(
        db,
        f"Added inventory item: {item.name}",
        AuditCategory.INVENTORY,
        {
            "item_id": item.id,
            "name": item.name,
            "quantity": item.quantity,
            "unit": item.unit,
            "cost": item.total_cost,
        },
        user,
    )


def log_inventory_updated(
    db: Session, item, before: dict[str, Any], user: User | None = None
) -> AuditLog | None:
    """Log the fields of ``item`` that differ from the ``before`` snapshot."""
    changes = {
        key: {"from": _jsonable(old), "to": _jsonable(getattr(item, key))}
        for key, old in before.items()
        if getattr(item, key) != old
    }
    return log_audit(
        db,
        f"Updated inventory item: {item.name}",
        AuditCategory.INVENTORY,
        {"item_id": item.id, "name": item.name, "changes": changes},
        user,
    )


def log_inventory_deleted(db: Session, item_id: int, name: str, user: User | None = None):
    return log_audit(
        db,
        f"Deleted inventory item: {name}",
        AuditCategory.INVENTORY,
        {"item_id": item_id, "name": name},
        user,
    )


def log_recipe_created(db: Session, recipe, user: User | None = None) -> AuditLog | None:
    return log_audit(
        db,
        f"Created recipe: {recipe.name}",
        AuditCategory.RECIPE,
        {"recipe_id": recipe.id, "name": recipe.name, "cost": recipe.total_cost},
        user,
    )


def log_recipe_deleted(db: Session, recipe, user: User | None = None) -> AuditLog | None:
    return log_audit(
        db,
        f"Deleted recipe: {recipe.name}",
        AuditCategory.RECIPE,
        {"recipe_id": recipe.id, "name": recipe.name},
        user,
    )


def log_recipe_cooked(
    db: Session, recipe, servings: int, ok: bool, user: User | None = None
) -> AuditLog | None:
    action = f"Cooked {recipe.name} (x{servings})" if ok else f"Cook failed: {recipe.name}"
    return log_audit(
        db,
        action,
        AuditCategory.ORDER,
        {"recipe_id": recipe.id, "servings": servings, "ok": ok},
        user,
    )


def log_pricing_changed(
    db: Session, ingredient: str, old_price: float, new_price: float, user: User | None = None
) -> AuditLog | None:
    return log_audit(
        db,
        f"Updated pricing for {ingredient}",
        AuditCategory.PRICING,
        {"ingredient": ingredient, "old_price": old_price, "new_price": new_price},
        user,
    )


def log_user_created(db: Session, email: str, role: str, user: User | None = None):
    return log_audit(db, f"Created user: {email}", AuditCategory.USER, {"email": email, "role": role}, user)


def log_user_role_changed(
    db: Session, email: str, old_role: str, new_role: str, user: User | None = None
) -> AuditLog | None:
    return log_audit(
        db,
        f"Changed role for {email}: {old_role} -> {new_role}",
        AuditCategory.USER,
        {"email": email, "old_role": old_role, "new_role": new_role},
        user,
    )


def log_user_deleted(db: Session, email: str, role: str, user: User | None = None):
    return log_audit(db, f"Deleted user: {email}", AuditCategory.USER, {"email": email, "role": role}, user)


def get_audit_logs(
    db: Session, limit: int = 100, category: AuditCategory | None = None
) -> list[AuditLog]:
    """Most recent audit entries first."""
    query = db.query(AuditLog)
    if category is not None:
        query = query.filter(AuditLog.category == category.value)
    return query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def get_audit_stats(db: Session) -> dict[str, Any]:
    """Totals by category and by user, plus entries from the last 24 hours."""
    logs = db.query(AuditLog).all()
    cutoff = datetime.now(UTC) - timedelta(days=1)
    return {
        "total": len(logs),
        "by_category": dict(Counter(log.category for log in logs)),
        "by_user": dict(Counter(log.user_email for log in logs)),
        "recent_24h": sum(1 for log in logs if log.timestamp and _aware(log.timestamp) > cutoff),
    }


def cleanup_old_logs(db: Session, days_to_keep: int = 90) -> int:
    """Delete entries older than ``days_to_keep`` days; returns the count."""
    cutoff = datetime.now(UTC) - timedelta(days=days_to_keep)
    deleted = db.query(AuditLog).filter(AuditLog.timestamp < cutoff).delete()
    db.commit()
    logger.info(f"Removed {deleted} audit entries older than {days_to_keep} days")
    return deleted
