"""Tests for price-per-base-unit and recipe costing."""

import logging
import math
from types import SimpleNamespace

import pytest

from backoffice.models.recipe import RecipeIngredient
from backoffice.models.stock_item import StockItem
from backoffice.services.costing import (
    compute_price_per_base_unit,
    compute_recipe_cost,
    price_per_base_unit_of,
    total_cost_for_price,
)


def make_item(item_id, name, quantity, unit, total_cost, ppu=None):
    if ppu is None:
        ppu = compute_price_per_base_unit(total_cost, quantity, unit)
    return StockItem(
        id=item_id,
        name=name,
        quantity=quantity,
        unit=unit,
        unit_base=unit,
        total_cost=total_cost,
        price_per_base_unit=ppu,
    )


def line(stock_item_id, quantity, unit, name="Ingredient"):
    return RecipeIngredient(stock_item_id=stock_item_id, name=name, quantity=quantity, unit=unit)


class TestPricePerBaseUnit:
    def test_normalizes_to_base_unit(self):
        """200 for 20 kg is 0.01 per gram."""
        assert compute_price_per_base_unit(200, 20, "kg") == pytest.approx(0.01)

    def test_count_units(self):
        assert compute_price_per_base_unit(30, 12, "ea") == pytest.approx(2.5)

    def test_zero_quantity_degrades_to_total_cost(self, caplog):
        with caplog.at_level(logging.WARNING, logger="backoffice.services.costing"):
            assert compute_price_per_base_unit(50, 0, "kg") == 50
        assert "Cannot normalize cost" in caplog.text

    def test_non_finite_quantity_degrades_to_total_cost(self):
        assert compute_price_per_base_unit(50, math.inf, "g") == 50

    def test_total_cost_for_price_is_the_inverse(self):
        assert total_cost_for_price(0.01, 20, "kg") == pytest.approx(200)


def test_price_per_base_unit_of_uses_stored_value():
    item = make_item(1, "Butter", 4, "kg", 65.0, ppu=0.5)
    assert price_per_base_unit_of(item) == 0.5


def test_price_per_base_unit_of_derives_missing_value():
    item = SimpleNamespace(price_per_base_unit=None, total_cost=45.0, quantity=8, unit="l")
    assert price_per_base_unit_of(item) == pytest.approx(45.0 / 8000)


class TestRecipeCost:
    @pytest.fixture
    def index(self):
        return {
            1: make_item(1, "Flour", 20, "kg", 22.0),
            2: make_item(2, "Olive Oil", 10, "l", 120.0),
            3: make_item(3, "Eggs", 30, "ea", 7.5),
        }

    def test_sums_base_quantity_times_price(self, index):
        ingredients = [line(1, 0.3, "kg"), line(2, 20, "ml"), line(3, 2, "ea")]
        # 300 g * 0.0011 + 20 ml * 0.012 + 2 * 0.25
        assert compute_recipe_cost(ingredients, index) == pytest.approx(0.33 + 0.24 + 0.5)

    def test_unresolved_ingredients_contribute_zero(self, index):
        ingredients = [line(1, 1, "kg"), line(None, 5, "kg"), line(99, 5, "kg")]
        assert compute_recipe_cost(ingredients, index) == pytest.approx(1.1)

    def test_cross_family_lines_contribute_zero(self, index):
        ingredients = [line(1, 1, "kg"), line(3, 1, "l")]
        assert compute_recipe_cost(ingredients, index) == pytest.approx(1.1)

    def test_line_without_unit_is_in_base_unit(self, index):
        assert compute_recipe_cost([line(1, 500, None)], index) == pytest.approx(0.55)

    def test_empty_recipe_costs_nothing(self, index):
        assert compute_recipe_cost([], index) == 0
