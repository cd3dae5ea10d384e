"""SQLAlchemy models."""

from backoffice.models.audit_log import AuditLog
from backoffice.models.notification import Notification
from backoffice.models.recipe import Recipe, RecipeIngredient
from backoffice.models.stock_item import StockItem
from backoffice.models.user import User

__all__ = [
    "User",
    "StockItem",
    "Recipe",
    "RecipeIngredient",
    "Notification",
    "AuditLog",
]
