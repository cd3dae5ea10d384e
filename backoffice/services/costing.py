"""Price-per-base-unit and recipe cost calculations."""

import logging
import math
from collections.abc import Iterable, Mapping

from backoffice.services.units import base_unit, conversion_factor, convert_quantity

logger = logging.getLogger(__name__)


def compute_price_per_base_unit(total_cost, quantity, unit: str | None) -> float:
    """Compute the cost of one base unit from a total batch cost.

    A zero or non-finite denominator is replaced by 1, so the result degrades
    to the total cost instead of raising or producing infinity.
    """
    total = float(total_cost or 0)
    denominator = float(quantity or 0) * conversion_factor(unit)
    if denominator == 0 or not math.isfinite(denominator):
        logger.warning(
            f"Cannot normalize cost {total} over quantity {quantity} {unit}; "
            "using the total cost as the price per base unit"
        )
        denominator = 1.0
    return total / denominator


def total_cost_for_price(price_per_base_unit, quantity, unit: str | None) -> float:
    """Get the total batch cost that yields the given price per base unit."""
    denominator = float(quantity or 0) * conversion_factor(unit)
    if denominator == 0 or not math.isfinite(denominator):
        denominator = 1.0
    return float(price_per_base_unit or 0) * denominator


def price_per_base_unit_of(item) -> float:
    """Get an item's price per base unit, deriving it when it is not stored."""
    stored = getattr(item, "price_per_base_unit", None)
    if stored is not None and math.isfinite(stored):
        return float(stored)
    return compute_price_per_base_unit(item.total_cost, item.quantity, item.unit)


def ingredient_cost(ingredient, item) -> float:
    """Cost of one ingredient line against a stock item.

    The ingredient quantity is converted into the item's base unit; lines
    without a unit are taken to be in that base unit already.
    """
    target = base_unit(item.unit)
    qty_base = convert_quantity(ingredient.quantity, ingredient.unit or target, target)
    cost = qty_base * price_per_base_unit_of(item)
    return cost if math.isfinite(cost) else 0.0


def compute_recipe_cost(ingredients: Iterable, inventory_index: Mapping) -> float:
    """Sum the cost of every ingredient that resolves to a stock item.

    Unresolved ingredients and lines with non-finite intermediate values
    (including cross-family units) contribute zero.
    """
    total = 0.0
    for ingredient in ingredients:
        item = inventory_index.get(ingredient.stock_item_id)
        if item is None:
            continue
        total += ingredient_cost(ingredient, item)
    return total
