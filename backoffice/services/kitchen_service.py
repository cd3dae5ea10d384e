"""Kitchen service: cook recipes against inventory.

Cooking converts every ingredient into its stock item's unit, checks that
all of them are available, and only then deducts the whole recipe in one
transaction. A recipe that is short on any ingredient deducts nothing.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from backoffice.services.costing import price_per_base_unit_of
from backoffice.services.inventory_service import InventoryStore
from backoffice.services.notification_service import NotificationEntry, NotificationSink
from backoffice.services.units import convert_quantity, to_base_quantity

logger = logging.getLogger(__name__)

# Reported and written quantities are rounded to this many decimals
QUANTITY_DECIMALS = 3


class ShortageReason(StrEnum):
    """Why an ingredient blocks a recipe from being cooked."""

    NO_INGREDIENTS = "no-ingredients"
    MISSING_FROM_INVENTORY = "missing-from-inventory"
    INCOMPATIBLE_UNITS = "incompatible-units"
    INSUFFICIENT_STOCK = "insufficient-stock"


class AvailabilityStatus(StrEnum):
    SUFFICIENT = "sufficient"
    PARTIAL = "partial"
    MISSING = "missing"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class Shortage:
    """One reason a recipe cannot be cooked at the requested servings."""

    name: str
    reason: ShortageReason
    needed: float | None = None
    available: float | None = None
    unit: str | None = None
    ingredient_unit: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "reason": self.reason.value}
        if self.reason == ShortageReason.INSUFFICIENT_STOCK:
            data.update(needed=self.needed, available=self.available, unit=self.unit)
        elif self.reason == ShortageReason.INCOMPATIBLE_UNITS:
            data.update(unit=self.unit, ingredient_unit=self.ingredient_unit)
        return data


@dataclass(frozen=True)
class DeductionStep:
    item_id: int
    new_quantity: float


@dataclass
class DeductionPlan:
    """Inventory updates computed before anything is written."""

    steps: list[DeductionStep] = field(default_factory=list)
    shortages: list[Shortage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.shortages


@dataclass
class CookResult:
    ok: bool
    shortages: list[Shortage] = field(default_factory=list)
    notifications: list[NotificationEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if not self.ok:
            data["shortages"] = [s.to_dict() for s in self.shortages]
        return data


@dataclass(frozen=True)
class IngredientAvailability:
    name: str
    status: AvailabilityStatus
    needed: float
    available: float
    unit: str | None
    max_servings: int


@dataclass
class AvailabilityReport:
    servings: int
    can_cook: bool
    max_servings: int
    ingredients: list[IngredientAvailability] = field(default_factory=list)


def clamp_servings(servings: int | float | None) -> int:
    """Servings as callers should pass them: at least 1, defaulting to 1."""
    if servings is None or not math.isfinite(servings) or servings < 1:
        return 1
    return int(servings)


def _round(value: float) -> float:
    return round(value, QUANTITY_DECIMALS)


def plan_deduction(
    ingredients: Iterable, servings: float, items_by_id: Mapping[int, Any]
) -> DeductionPlan:
    """Work out every stock update for a cook, recording shortages.

    Pure: reads the given items, writes nothing. Lines that share a stock
    item are totalled before comparing, so each item gets at most one step
    or one shortage. Comparisons use unrounded quantities; only reported
    and planned values are rounded.
    """
    plan = DeductionPlan()
    # Item id -> total needed in the item's unit, in first-seen order
    needed_by_item: dict[int, float] = {}
    incompatible: set[int] = set()
    for ingredient in ingredients:
        item = items_by_id.get(ingredient.stock_item_id)
        if item is None:
            plan.shortages.append(
                Shortage(name=ingredient.name, reason=ShortageReason.MISSING_FROM_INVENTORY)
            )
            continue

        needed = float(ingredient.quantity or 0) * servings
        # Recipe unit into the stock item's unit; NaN across families
        needed_in_item_unit = convert_quantity(needed, ingredient.unit or item.unit, item.unit)
        if not math.isfinite(needed_in_item_unit):
            plan.shortages.append(
                Shortage(
                    name=item.name,
                    reason=ShortageReason.INCOMPATIBLE_UNITS,
                    unit=item.unit,
                    ingredient_unit=ingredient.unit,
                )
            )
            incompatible.add(item.id)
            continue
        needed_by_item[item.id] = needed_by_item.get(item.id, 0.0) + needed_in_item_unit

    for item_id, needed in needed_by_item.items():
        if item_id in incompatible:
            continue
        item = items_by_id[item_id]
        available = float(item.quantity or 0)
        if available < needed:
            plan.shortages.append(
                Shortage(
                    name=item.name,
                    reason=ShortageReason.INSUFFICIENT_STOCK,
                    needed=_round(needed),
                    available=_round(available),
                    unit=item.unit,
                )
            )
            continue
        plan.steps.append(DeductionStep(item_id, _round(available - needed)))
    return plan


def low_stock_notice(item, new_quantity: float) -> NotificationEntry | None:
    """Low-stock warning when the new base quantity reaches the reorder threshold."""
    threshold = item.reorder_threshold
    if threshold is None or not math.isfinite(threshold) or threshold <= 0:
        return None
    if to_base_quantity(new_quantity, item.unit) <= threshold:
        return NotificationEntry.error(f"Low stock: {item.name} ({new_quantity} {item.unit})")
    return None


class KitchenService:
    """Service for cooking recipes and checking what the kitchen can make."""

    def __init__(self, store: InventoryStore, sink: NotificationSink):
        self.store = store
        self.sink = sink

    def cook_recipe(self, recipe, servings: float = 1) -> CookResult:
        """Deduct a recipe's ingredients for the given servings, all or nothing.

        Servings are used as given; callers clamp them with ``clamp_servings``.
        Business failures come back as ``CookResult(ok=False)``; only storage
        errors raise.
        """
        ingredients = list(recipe.ingredients or [])
        if not ingredients:
            result = CookResult(
                ok=False,
                shortages=[Shortage(name=recipe.name or "", reason=ShortageReason.NO_INGREDIENTS)],
                notifications=[
                    NotificationEntry.error(f'Recipe "{recipe.name or ""}" has no ingredients.')
                ],
            )
            self._emit_best_effort(result.notifications)
            return result

        items = self.store.get_many(i.stock_item_id for i in ingredients)
        items_by_id = {item.id: item for item in items}
        plan = plan_deduction(ingredients, servings, items_by_id)

        if not plan.ok:
            names = ", ".join(s.name for s in plan.shortages)
            result = CookResult(
                ok=False,
                shortages=plan.shortages,
                notifications=[
                    NotificationEntry.error(f"Insufficient stock for {recipe.name}: {names}")
                ],
            )
            logger.info(f"Cannot cook '{recipe.name}' x{servings}: short on {names}")
            self._emit_best_effort(result.notifications)
            return result

        result = CookResult(ok=True)
        with self.store.transaction():
            for step in plan.steps:
                item = items_by_id[step.item_id]
                price = price_per_base_unit_of(item)
                # Consumption keeps the unit price; the batch value shrinks with the stock
                self.store.update(
                    step.item_id,
                    {
                        "quantity": step.new_quantity,
                        "total_cost": price * to_base_quantity(step.new_quantity, item.unit),
                    },
                )
                notice = low_stock_notice(self.store.get(step.item_id), step.new_quantity)
                if notice is not None:
                    result.notifications.append(notice)
            result.notifications.append(
                NotificationEntry.info(f"Cooked {recipe.name} (x{servings})")
            )
            self._emit(result.notifications)

        logger.info(f"Cooked '{recipe.name}' x{servings}, updated {len(plan.steps)} stock items")
        return result

    def check_availability(self, recipe, servings: int = 1) -> AvailabilityReport:
        """Report per ingredient whether stock covers the given servings."""
        ingredients = list(recipe.ingredients or [])
        items_by_id = {
            item.id: item for item in self.store.get_many(i.stock_item_id for i in ingredients)
        }

        report = AvailabilityReport(servings=servings, can_cook=bool(ingredients), max_servings=0)
        limits: list[int] = []
        for ingredient in ingredients:
            per_serving = float(ingredient.quantity or 0)
            item = items_by_id.get(ingredient.stock_item_id)
            if item is None:
                status, available, unit, can_make = AvailabilityStatus.MISSING, 0.0, ingredient.unit, 0
            else:
                unit = ingredient.unit or item.unit
                available = convert_quantity(item.quantity, item.unit, unit)
                if not math.isfinite(available):
                    status, available, can_make = AvailabilityStatus.INCOMPATIBLE, 0.0, 0
                else:
                    can_make = math.floor(available / per_serving) if per_serving > 0 else 0
                    if available >= per_serving * servings:
                        status = AvailabilityStatus.SUFFICIENT
                    elif available > 0:
                        status = AvailabilityStatus.PARTIAL
                    else:
                        status = AvailabilityStatus.MISSING

            # Lines with no quantity never limit the servings
            if item is None or status == AvailabilityStatus.INCOMPATIBLE or per_serving > 0:
                limits.append(can_make)
            if status != AvailabilityStatus.SUFFICIENT:
                report.can_cook = False
            report.ingredients.append(
                IngredientAvailability(
                    name=ingredient.name,
                    status=status,
                    needed=_round(per_serving * servings),
                    available=_round(available),
                    unit=unit,
                    max_servings=can_make,
                )
            )

        if limits:
            report.max_servings = min(limits)
        elif ingredients:
            # Only zero-quantity lines: nothing limits the count asked for
            report.max_servings = servings
        return report

    def _emit(self, entries: Iterable[NotificationEntry]) -> None:
        for entry in entries:
            try:
                self.sink.append(entry)
            except Exception as e:
                # A failed notification never masks the cook outcome
                logger.error(f"Failed to write notification '{entry.message}': {e}")

    def _emit_best_effort(self, entries: list[NotificationEntry]) -> None:
        """Write notifications in their own transaction, swallowing failures."""
        try:
            with self.store.transaction():
                self._emit(entries)
        except Exception as e:
            logger.error(f"Failed to store notifications: {e}")
