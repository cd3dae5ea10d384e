"""Pydantic schemas for API requests and responses."""

from backoffice.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from backoffice.schemas.inventory import StockItemCreate, StockItemResponse, StockItemUpdate
from backoffice.schemas.kitchen import CookRequest, CookResponse, ShortageEntry
from backoffice.schemas.recipe import RecipeCreate, RecipeResponse, RecipeUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "StockItemCreate",
    "StockItemUpdate",
    "StockItemResponse",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
    "CookRequest",
    "CookResponse",
    "ShortageEntry",
]
