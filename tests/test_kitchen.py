"""Tests for the kitchen deduction engine, run against in-memory stores."""

import logging
from contextlib import contextmanager

import pytest

from backoffice.models.enums import NotificationTone
from backoffice.models.recipe import Recipe, RecipeIngredient
from backoffice.models.stock_item import StockItem
from backoffice.services.costing import compute_price_per_base_unit
from backoffice.services.kitchen_service import (
    AvailabilityStatus,
    KitchenService,
    ShortageReason,
    clamp_servings,
    low_stock_notice,
    plan_deduction,
)

STOCK_FIELDS = ("quantity", "total_cost", "price_per_base_unit")


class FakeInventoryStore:
    """In-memory InventoryStore that restores its items when a transaction fails."""

    def __init__(self, items, fail_on_update=None):
        self.items = {item.id: item for item in items}
        self.fail_on_update = fail_on_update
        self.commits = 0

    def get_many(self, ids):
        return [self.items[i] for i in ids if i in self.items]

    def get(self, item_id):
        return self.items.get(item_id)

    def update(self, item_id, fields):
        if item_id == self.fail_on_update:
            raise RuntimeError("disk full")
        for key, value in fields.items():
            setattr(self.items[item_id], key, value)

    @contextmanager
    def transaction(self):
        snapshot = {
            item_id: {key: getattr(item, key) for key in STOCK_FIELDS}
            for item_id, item in self.items.items()
        }
        try:
            yield
            self.commits += 1
        except Exception:
            for item_id, values in snapshot.items():
                for key, value in values.items():
                    setattr(self.items[item_id], key, value)
            raise


class FakeSink:
    def __init__(self):
        self.entries = []

    def append(self, entry):
        self.entries.append(entry)

    @property
    def messages(self):
        return [entry.message for entry in self.entries]


class FailingSink:
    def append(self, entry):
        raise RuntimeError("notification feed unavailable")


def stock(item_id, name, quantity, unit, total_cost=0.0, reorder_threshold=None):
    return StockItem(
        id=item_id,
        name=name,
        quantity=quantity,
        unit=unit,
        unit_base=unit,
        total_cost=total_cost,
        price_per_base_unit=compute_price_per_base_unit(total_cost, quantity, unit),
        reorder_threshold=reorder_threshold,
    )


def recipe(name, *lines):
    return Recipe(
        name=name,
        ingredients=[
            RecipeIngredient(stock_item_id=item_id, name=ingredient, quantity=qty, unit=unit)
            for item_id, ingredient, qty, unit in lines
        ],
    )


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def flour():
    return stock(1, "Flour", 20, "kg", total_cost=22.0)


@pytest.fixture
def pizza():
    return recipe("Margherita Pizza", (1, "Flour", 0.3, "kg"))


class TestCookRecipe:
    def test_deducts_converted_quantity(self, flour, pizza, sink):
        """Cooking one pizza takes 0.3 kg from 20 kg of flour."""
        store = FakeInventoryStore([flour])
        result = KitchenService(store, sink).cook_recipe(pizza, 1)

        assert result.ok
        assert result.shortages == []
        assert flour.quantity == 19.7
        assert store.commits == 1
        assert sink.messages[-1] == "Cooked Margherita Pizza (x1)"

    def test_insufficient_stock_deducts_nothing(self, flour, pizza, sink):
        store = FakeInventoryStore([flour])
        result = KitchenService(store, sink).cook_recipe(pizza, 100)

        assert not result.ok
        assert [s.to_dict() for s in result.shortages] == [
            {
                "name": "Flour",
                "reason": "insufficient-stock",
                "needed": 30.0,
                "available": 20.0,
                "unit": "kg",
            }
        ]
        assert flour.quantity == 20
        assert sink.messages == ["Insufficient stock for Margherita Pizza: Flour"]
        assert sink.entries[0].tone == NotificationTone.ERROR

    def test_incompatible_units(self, sink):
        eggs = stock(2, "Eggs", 12, "ea")
        omelette = recipe("Omelette", (2, "Eggs", 1, "l"))
        result = KitchenService(FakeInventoryStore([eggs]), sink).cook_recipe(omelette, 1)

        assert not result.ok
        assert result.shortages[0].to_dict() == {
            "name": "Eggs",
            "reason": "incompatible-units",
            "unit": "ea",
            "ingredient_unit": "l",
        }
        assert eggs.quantity == 12

    def test_missing_inventory_item(self, flour, sink):
        bread = recipe("Bread", (1, "Flour", 0.5, "kg"), (42, "Yeast", 7, "g"))
        result = KitchenService(FakeInventoryStore([flour]), sink).cook_recipe(bread, 1)

        assert not result.ok
        assert [s.to_dict() for s in result.shortages] == [
            {"name": "Yeast", "reason": "missing-from-inventory"}
        ]
        assert flour.quantity == 20

    def test_unlinked_ingredient_is_missing(self, sink):
        salad = recipe("Salad", (None, "Lettuce", 1, "ea"))
        result = KitchenService(FakeInventoryStore([]), sink).cook_recipe(salad, 1)

        assert result.shortages[0].reason == ShortageReason.MISSING_FROM_INVENTORY

    def test_no_ingredients(self, sink):
        result = KitchenService(FakeInventoryStore([]), sink).cook_recipe(recipe("Water"), 1)

        assert not result.ok
        assert [s.to_dict() for s in result.shortages] == [
            {"name": "Water", "reason": "no-ingredients"}
        ]
        assert sink.messages == ['Recipe "Water" has no ingredients.']

    def test_one_short_ingredient_blocks_the_others(self, flour, sink):
        """All-or-nothing: the ingredient that does fit is not deducted either."""
        salt = stock(2, "Salt", 10, "g")
        bread = recipe("Bread", (1, "Flour", 0.5, "kg"), (2, "Salt", 50, "g"))
        result = KitchenService(FakeInventoryStore([flour, salt]), sink).cook_recipe(bread, 1)

        assert not result.ok
        assert [s.name for s in result.shortages] == ["Salt"]
        assert flour.quantity == 20
        assert salt.quantity == 10

    def test_lines_sharing_an_item_are_totalled(self, sink):
        """Two 100 g butter lines need 200 g, more than the 150 g in stock."""
        butter = stock(1, "Butter", 150, "g")
        cake = recipe("Cake", (1, "Butter", 100, "g"), (1, "Butter", 100, "g"))
        result = KitchenService(FakeInventoryStore([butter]), sink).cook_recipe(cake, 1)

        assert not result.ok
        assert [s.to_dict() for s in result.shortages] == [
            {
                "name": "Butter",
                "reason": "insufficient-stock",
                "needed": 200.0,
                "available": 150.0,
                "unit": "g",
            }
        ]
        assert butter.quantity == 150

    def test_lines_sharing_an_item_deduct_their_sum(self, sink):
        butter = stock(1, "Butter", 500, "g")
        cake = recipe("Cake", (1, "Butter", 100, "g"), (1, "Butter", 0.05, "kg"))
        result = KitchenService(FakeInventoryStore([butter]), sink).cook_recipe(cake, 1)

        assert result.ok
        assert butter.quantity == 350

    def test_servings_multiply_per_serving_quantity(self, sink):
        flour = stock(1, "Flour", 2, "kg")
        cake = recipe("Cake", (1, "Flour", 250, "g"))
        result = KitchenService(FakeInventoryStore([flour]), sink).cook_recipe(cake, 3)

        assert result.ok
        assert flour.quantity == 1.25
        assert sink.messages[-1] == "Cooked Cake (x3)"

    def test_zero_servings_deducts_nothing(self, flour, pizza, sink):
        """The engine trusts its caller; zero servings is a no-op cook."""
        result = KitchenService(FakeInventoryStore([flour]), sink).cook_recipe(pizza, 0)

        assert result.ok
        assert flour.quantity == 20

    def test_total_cost_follows_remaining_stock(self, flour, pizza, sink):
        KitchenService(FakeInventoryStore([flour]), sink).cook_recipe(pizza, 1)

        assert flour.price_per_base_unit == pytest.approx(0.0011)
        assert flour.total_cost == pytest.approx(19700 * 0.0011)

    def test_low_stock_notice_at_threshold(self, sink):
        butter = stock(1, "Butter", 500, "g", reorder_threshold=400)
        sauce = recipe("Sauce", (1, "Butter", 100, "g"))
        result = KitchenService(FakeInventoryStore([butter]), sink).cook_recipe(sauce, 1)

        assert result.ok
        assert "Low stock: Butter (400.0 g)" in sink.messages
        assert [n.message for n in result.notifications] == sink.messages

    def test_no_low_stock_notice_above_threshold(self, sink):
        butter = stock(1, "Butter", 500, "g", reorder_threshold=400)
        sauce = recipe("Sauce", (1, "Butter", 99, "g"))
        KitchenService(FakeInventoryStore([butter]), sink).cook_recipe(sauce, 1)

        assert butter.quantity == 401
        assert not any(m.startswith("Low stock") for m in sink.messages)

    def test_notification_failure_does_not_fail_the_cook(self, flour, pizza, caplog):
        with caplog.at_level(logging.ERROR, logger="backoffice.services.kitchen_service"):
            result = KitchenService(FakeInventoryStore([flour]), FailingSink()).cook_recipe(pizza, 1)

        assert result.ok
        assert flour.quantity == 19.7
        assert "Failed to write notification" in caplog.text

    def test_storage_failure_rolls_back_and_raises(self, flour, sink):
        salt = stock(2, "Salt", 1000, "g")
        bread = recipe("Bread", (1, "Flour", 0.5, "kg"), (2, "Salt", 10, "g"))
        store = FakeInventoryStore([flour, salt], fail_on_update=2)

        with pytest.raises(RuntimeError, match="disk full"):
            KitchenService(store, sink).cook_recipe(bread, 1)

        assert flour.quantity == 20
        assert salt.quantity == 1000
        assert store.commits == 0


def test_plan_deduction_is_pure(flour, pizza):
    plan = plan_deduction(pizza.ingredients, 2, {flour.id: flour})

    assert plan.ok
    assert [(s.item_id, s.new_quantity) for s in plan.steps] == [(1, 19.4)]
    assert flour.quantity == 20


@pytest.mark.parametrize(("given", "expected"), [(None, 1), (0, 1), (-3, 1), (2, 2), (2.7, 2)])
def test_clamp_servings(given, expected):
    assert clamp_servings(given) == expected


def test_low_stock_notice_ignores_unset_threshold():
    assert low_stock_notice(stock(1, "Salt", 1, "g"), 0) is None
    assert low_stock_notice(stock(1, "Salt", 1, "g", reorder_threshold=0), 0) is None


def test_low_stock_compares_in_base_units():
    flour = stock(1, "Flour", 20, "kg", reorder_threshold=5000)
    assert low_stock_notice(flour, 5) is not None
    assert low_stock_notice(flour, 5.001) is None


class TestCheckAvailability:
    def test_reports_max_servings(self, sink):
        flour = stock(1, "Flour", 2, "kg")
        oil = stock(2, "Olive Oil", 1, "l")
        focaccia = recipe("Focaccia", (1, "Flour", 500, "g"), (2, "Olive Oil", 300, "ml"))
        report = KitchenService(FakeInventoryStore([flour, oil]), sink).check_availability(
            focaccia, 2
        )

        assert report.can_cook
        assert report.max_servings == 3
        assert [i.max_servings for i in report.ingredients] == [4, 3]
        assert report.ingredients[0].available == 2000
        assert report.ingredients[0].unit == "g"

    def test_partial_and_missing_lines(self, sink):
        flour = stock(1, "Flour", 1, "kg")
        bread = recipe("Bread", (1, "Flour", 600, "g"), (9, "Yeast", 7, "g"))
        report = KitchenService(FakeInventoryStore([flour]), sink).check_availability(bread, 2)

        assert not report.can_cook
        assert report.max_servings == 0
        assert [i.status for i in report.ingredients] == [
            AvailabilityStatus.PARTIAL,
            AvailabilityStatus.MISSING,
        ]

    def test_incompatible_line(self, sink):
        eggs = stock(1, "Eggs", 12, "ea")
        report = KitchenService(FakeInventoryStore([eggs]), sink).check_availability(
            recipe("Omelette", (1, "Eggs", 1, "kg")), 1
        )

        assert report.ingredients[0].status == AvailabilityStatus.INCOMPATIBLE
        assert report.max_servings == 0

    def test_zero_quantity_lines_do_not_limit_servings(self, sink):
        salt = stock(1, "Salt", 1, "kg")
        report = KitchenService(FakeInventoryStore([salt]), sink).check_availability(
            recipe("Garnish", (1, "Salt", 0, "g")), 4
        )

        assert report.can_cook
        assert report.max_servings == 4

    def test_empty_recipe_cannot_be_cooked(self, sink):
        report = KitchenService(FakeInventoryStore([]), sink).check_availability(
            recipe("Water"), 1
        )

        assert not report.can_cook
        assert report.max_servings == 0

    def test_does_not_write(self, flour, pizza, sink):
        store = FakeInventoryStore([flour])
        KitchenService(store, sink).check_availability(pizza, 1)

        assert flour.quantity == 20
        assert sink.entries == []
        assert store.commits == 0
