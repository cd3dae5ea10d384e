"""Recipe API endpoints, including cooking against inventory."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.api.dependencies import (
    get_current_user,
    get_kitchen_service,
    get_recipe_service,
    require_role,
)
from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.user import User
from backoffice.schemas.kitchen import (
    AvailabilityResponse,
    CookRequest,
    CookResponse,
    IngredientAvailabilityResponse,
    ShortageEntry,
)
from backoffice.schemas.recipe import (
    RecipeCreate,
    RecipeListResponse,
    RecipeResponse,
    RecipeUpdate,
)
from backoffice.services.audit import log_recipe_cooked, log_recipe_created, log_recipe_deleted
from backoffice.services.kitchen_service import KitchenService, clamp_servings
from backoffice.services.recipe_service import RecipeService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.get("", response_model=list[RecipeListResponse])
def list_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """List all recipes ordered by name."""
    return [
        RecipeListResponse(
            id=recipe.id,
            name=recipe.name,
            dish_type=recipe.dish_type,
            total_cost=recipe.total_cost,
            ingredient_count=len(recipe.ingredients),
        )
        for recipe in service.list_recipes()
    ]


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    recipe_data: RecipeCreate,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Create a recipe; its cost is cached from current inventory prices."""
    recipe = service.create_recipe(
        name=recipe_data.name,
        dish_type=recipe_data.dish_type,
        instructions=recipe_data.instructions,
        ingredients=[ing.model_dump() for ing in recipe_data.ingredients],
    )
    log_recipe_created(db, recipe, current_user)
    return recipe


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Get a recipe with its ingredients."""
    return service.get_recipe(recipe_id)


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: int,
    recipe_data: RecipeUpdate,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Update a recipe and re-cache its cost."""
    recipe = service.get_recipe(recipe_id)
    fields = recipe_data.model_dump(exclude_unset=True, exclude={"ingredients"})
    if fields.get("name") is None:
        fields.pop("name", None)
    ingredients = (
        [ing.model_dump() for ing in recipe_data.ingredients]
        if recipe_data.ingredients is not None
        else None
    )
    return service.update_recipe(recipe, fields, ingredients)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Soft delete a recipe."""
    recipe = service.get_recipe(recipe_id)
    service.delete_recipe(recipe)
    log_recipe_deleted(db, recipe, current_user)


@router.post("/{recipe_id}/recalculate", response_model=RecipeResponse)
def recalculate_recipe_cost(
    recipe_id: int,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Refresh the cached cost from current inventory prices."""
    return service.recalculate_cost(service.get_recipe(recipe_id))


@router.get("/{recipe_id}/availability", response_model=AvailabilityResponse)
def check_availability(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    recipes: Annotated[RecipeService, Depends(get_recipe_service)],
    kitchen: Annotated[KitchenService, Depends(get_kitchen_service)],
    servings: Annotated[int, Query()] = 1,
):
    """Report whether stock covers the recipe and how many servings it supports."""
    recipe = recipes.get_recipe(recipe_id)
    report = kitchen.check_availability(recipe, clamp_servings(servings))
    return AvailabilityResponse(
        recipe_id=recipe.id,
        servings=report.servings,
        can_cook=report.can_cook,
        max_servings=report.max_servings,
        ingredients=[
            IngredientAvailabilityResponse(
                name=line.name,
                status=line.status.value,
                needed=line.needed,
                available=line.available,
                unit=line.unit,
                max_servings=line.max_servings,
            )
            for line in report.ingredients
        ],
    )


@router.post("/{recipe_id}/cook", response_model=CookResponse)
def cook_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    recipes: Annotated[RecipeService, Depends(get_recipe_service)],
    kitchen: Annotated[KitchenService, Depends(get_kitchen_service)],
    body: CookRequest | None = None,
):
    """Deduct the recipe from inventory, all or nothing.

    Shortages are a normal outcome, returned with ``ok: false``.
    """
    recipe = recipes.get_recipe(recipe_id)
    servings = clamp_servings(body.servings if body else None)
    result = kitchen.cook_recipe(recipe, servings)
    log_recipe_cooked(db, recipe, servings, result.ok, current_user)

    if result.ok:
        return CookResponse(ok=True, servings=servings)
    return CookResponse(
        ok=False,
        servings=servings,
        shortages=[ShortageEntry(**s.to_dict()) for s in result.shortages],
    )
