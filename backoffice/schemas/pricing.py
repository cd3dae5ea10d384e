"""Pricing schemas."""

from pydantic import BaseModel, Field


class PriceQuoteRequest(BaseModel):
    """Quote a selling price for a recipe."""

    recipe_id: int
    markup_factor: float | None = Field(None, description="Overrides the default markup when > 0")
    sell_price: float | None = Field(None, description="Custom price overriding the suggestion")
    log_decision: bool = False


class PriceQuoteResponse(BaseModel):
    recipe_id: int
    recipe_name: str
    cost: float
    markup_factor: float
    suggested_price: float
    final_price: float
    profit_margin_pct: float
    markup_pct: float
    low_margin: bool
