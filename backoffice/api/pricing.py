"""Pricing calculator endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.api.dependencies import get_current_user, get_recipe_service
from backoffice.database import get_db
from backoffice.models.user import User
from backoffice.schemas.pricing import PriceQuoteRequest, PriceQuoteResponse
from backoffice.services import pricing
from backoffice.services.audit import AuditCategory, log_audit
from backoffice.services.recipe_service import RecipeService

router = APIRouter(prefix="/api/v1/pricing", tags=["pricing"])


@router.post("/quote", response_model=PriceQuoteResponse)
def quote_recipe_price(
    body: PriceQuoteRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    recipes: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Suggest a selling price for a recipe from its current ingredient cost."""
    recipe = recipes.get_recipe(body.recipe_id)
    result = pricing.quote(recipes.compute_cost(recipe), body.markup_factor, body.sell_price)

    if body.log_decision:
        log_audit(
            db,
            f"Pricing decision for {recipe.name}",
            AuditCategory.PRICING,
            {
                "recipe_id": recipe.id,
                "cost": result.cost,
                "price": result.final_price,
                "margin_pct": result.profit_margin_pct,
            },
            current_user,
        )

    return PriceQuoteResponse(recipe_id=recipe.id, recipe_name=recipe.name, **vars(result))
