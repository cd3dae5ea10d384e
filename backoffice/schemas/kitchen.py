"""Cook and availability schemas."""

from pydantic import BaseModel, Field


class CookRequest(BaseModel):
    """Cook a recipe; servings below 1 are treated as 1."""

    servings: int = Field(1)


class ShortageEntry(BaseModel):
    """Why one ingredient blocks the cook."""

    name: str
    reason: str
    needed: float | None = None
    available: float | None = None
    unit: str | None = None
    ingredient_unit: str | None = None


class CookResponse(BaseModel):
    ok: bool
    servings: int
    shortages: list[ShortageEntry] | None = None


class IngredientAvailabilityResponse(BaseModel):
    name: str
    status: str
    needed: float
    available: float
    unit: str | None
    max_servings: int


class AvailabilityResponse(BaseModel):
    recipe_id: int
    servings: int
    can_cook: bool
    max_servings: int
    ingredients: list[IngredientAvailabilityResponse]
