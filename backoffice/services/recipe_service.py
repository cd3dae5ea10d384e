"""Recipe service: saving recipes with a cached cost."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from backoffice.models.recipe import Recipe, RecipeIngredient
from backoffice.models.stock_item import StockItem
from backoffice.services.costing import compute_recipe_cost
from backoffice.services.units import normalize_unit

logger = logging.getLogger(__name__)


class RecipeService:
    """Service for recipe-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = (
            self.db.query(Recipe)
            .filter(Recipe.id == recipe_id, Recipe.not_deleted())
            .first()
        )
        if not recipe:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
        return recipe

    def list_recipes(self) -> list[Recipe]:
        return self.db.query(Recipe).filter(Recipe.not_deleted()).order_by(Recipe.name).all()

    def create_recipe(
        self,
        name: str,
        ingredients: list[dict],
        dish_type: str | None = None,
        instructions: str | None = None,
    ) -> Recipe:
        recipe = Recipe(name=name.strip(), dish_type=dish_type, instructions=instructions)
        self._set_ingredients(recipe, ingredients)
        recipe.total_cost = self.compute_cost(recipe)
        self.db.add(recipe)
        self.db.commit()
        self.db.refresh(recipe)
        logger.info(f"Saved recipe '{recipe.name}' costing {recipe.total_cost:.2f}")
        return recipe

    def update_recipe(self, recipe: Recipe, fields: dict, ingredients: list[dict] | None) -> Recipe:
        """Update metadata and, when given, replace the ingredient list.

        The cached cost is recomputed on every save.
        """
        for key, value in fields.items():
            setattr(recipe, key, value)
        if ingredients is not None:
            recipe.ingredients.clear()
            self.db.flush()
            self._set_ingredients(recipe, ingredients)
        recipe.total_cost = self.compute_cost(recipe)
        self.db.commit()
        self.db.refresh(recipe)
        return recipe

    def recalculate_cost(self, recipe: Recipe) -> Recipe:
        """Refresh the cached cost from current inventory prices."""
        old_cost = recipe.total_cost
        recipe.total_cost = self.compute_cost(recipe)
        self.db.commit()
        self.db.refresh(recipe)
        logger.info(f"Recipe '{recipe.name}' cost {old_cost:.2f} -> {recipe.total_cost:.2f}")
        return recipe

    def delete_recipe(self, recipe: Recipe) -> None:
        recipe.soft_delete()
        self.db.commit()

    def compute_cost(self, recipe: Recipe) -> float:
        ids = {i.stock_item_id for i in recipe.ingredients if i.stock_item_id is not None}
        items = self.db.query(StockItem).filter(StockItem.id.in_(ids)).all() if ids else []
        return round(compute_recipe_cost(recipe.ingredients, {i.id: i for i in items}), 4)

    def _set_ingredients(self, recipe: Recipe, ingredients: list[dict]) -> None:
        for position, data in enumerate(ingredients):
            stock_item_id = data.get("stock_item_id")
            name = data.get("name")
            if stock_item_id is None and name:
                # Resolve name-only ingredients against inventory when possible
                match = self.db.query(StockItem).filter(StockItem.name == name.strip()).first()
                stock_item_id = match.id if match else None
            if not name and stock_item_id is not None:
                item = self.db.get(StockItem, stock_item_id)
                name = item.name if item else f"Item #{stock_item_id}"
            recipe.ingredients.append(
                RecipeIngredient(
                    stock_item_id=stock_item_id,
                    name=name or "",
                    quantity=float(data.get("quantity") or 0),
                    unit=normalize_unit(data.get("unit")) or None,
                    position=position,
                )
            )
