"""Inventory schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backoffice.services.units import is_known_unit, normalize_unit


class StockItemCreate(BaseModel):
    """Add a stock item with its total batch cost."""

    name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=20)
    total_cost: float = Field(0, ge=0)
    reorder_threshold: float | None = Field(None, ge=0)  # base units (g, ml, ea)
    category: str | None = Field(None, max_length=100)
    expiry: date | None = None

    @field_validator("unit")
    @classmethod
    def unit_must_be_known(cls, value: str) -> str:
        if not is_known_unit(value):
            raise ValueError(f"Unsupported unit '{value}'; use g, kg, ml, l or ea")
        return normalize_unit(value)


class StockItemUpdate(BaseModel):
    """Edit a stock item; price per base unit is re-derived as needed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    quantity: float | None = Field(None, ge=0)
    unit: str | None = Field(None, min_length=1, max_length=20)
    total_cost: float | None = Field(None, ge=0)
    reorder_threshold: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    expiry: date | None = None

    @field_validator("unit")
    @classmethod
    def unit_must_be_known(cls, value: str | None) -> str | None:
        if value is not None and not is_known_unit(value):
            raise ValueError(f"Unsupported unit '{value}'; use g, kg, ml, l or ea")
        return normalize_unit(value) if value is not None else None


class PriceUpdate(BaseModel):
    """Set an item's price per base unit."""

    price_per_base_unit: float = Field(..., ge=0)


class StockItemResponse(BaseModel):
    """Stock item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str | None
    quantity: float
    unit: str
    unit_base: str
    total_cost: float
    price_per_base_unit: float
    reorder_threshold: float | None
    expiry: date | None
    created_at: datetime
    updated_at: datetime
