"""Recipe schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Recipe Ingredient ---


class RecipeIngredientCreate(BaseModel):
    """An ingredient line: a stock item reference and/or a name."""

    stock_item_id: int | None = None
    name: str | None = Field(None, max_length=255)
    quantity: float = Field(..., ge=0)
    unit: str | None = Field(None, max_length=20)

    @model_validator(mode="after")
    def needs_reference_or_name(self) -> "RecipeIngredientCreate":
        if self.stock_item_id is None and not self.name:
            raise ValueError("Ingredient needs a stock_item_id or a name")
        return self


class RecipeIngredientResponse(BaseModel):
    """Recipe ingredient response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_item_id: int | None
    name: str
    quantity: float
    unit: str | None
    position: int


# --- Recipe ---


class RecipeCreate(BaseModel):
    """Create a new recipe."""

    name: str = Field(..., min_length=1, max_length=255)
    dish_type: str | None = Field(None, max_length=100)
    instructions: str | None = Field(None, max_length=50000)
    ingredients: list[RecipeIngredientCreate] = []


class RecipeUpdate(BaseModel):
    """Update a recipe; a given ingredient list replaces the current one."""

    name: str | None = Field(None, min_length=1, max_length=255)
    dish_type: str | None = Field(None, max_length=100)
    instructions: str | None = Field(None, max_length=50000)
    ingredients: list[RecipeIngredientCreate] | None = None


class RecipeResponse(BaseModel):
    """Recipe response with ingredients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    dish_type: str | None
    instructions: str | None
    total_cost: float
    ingredients: list[RecipeIngredientResponse]
    created_at: datetime
    updated_at: datetime


class RecipeListResponse(BaseModel):
    """Recipe summary for list views."""

    id: int
    name: str
    dish_type: str | None
    total_cost: float
    ingredient_count: int
