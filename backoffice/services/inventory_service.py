"""Inventory store accessor and stock item maintenance."""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy.orm import Session

from backoffice.models.stock_item import StockItem
from backoffice.services.costing import compute_price_per_base_unit, total_cost_for_price
from backoffice.services.units import base_unit, normalize_unit, to_base_quantity

logger = logging.getLogger(__name__)

# Edits to any of these fields re-derive the price per base unit
PRICED_FIELDS = ("quantity", "unit", "total_cost")


class InventoryStore(Protocol):
    """Storage port the kitchen engine reads and deducts stock through."""

    def get_many(self, ids: Iterable[int]) -> list[StockItem]: ...

    def get(self, item_id: int) -> StockItem | None: ...

    def update(self, item_id: int, fields: dict[str, Any]) -> None: ...

    def transaction(self): ...


class SqlInventoryStore:
    """InventoryStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_many(self, ids: Iterable[int]) -> list[StockItem]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return []
        return self.db.query(StockItem).filter(StockItem.id.in_(wanted)).all()

    def get(self, item_id: int) -> StockItem | None:
        return self.db.get(StockItem, item_id)

    def update(self, item_id: int, fields: dict[str, Any]) -> None:
        item = self.get(item_id)
        if item is None:
            raise LookupError(f"Stock item {item_id} not found")
        for key, value in fields.items():
            setattr(item, key, value)
        self.db.flush()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything done in the block at once, or nothing."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class InventoryService:
    """Service for adding, editing and pricing stock items."""

    def __init__(self, db: Session):
        self.db = db

    def list_items(self) -> list[StockItem]:
        return self.db.query(StockItem).order_by(StockItem.name).all()

    def get_by_name(self, name: str) -> StockItem | None:
        return self.db.query(StockItem).filter(StockItem.name == name.strip()).first()

    def add_item(
        self,
        name: str,
        quantity: float,
        unit: str,
        total_cost: float,
        reorder_threshold: float | None = None,
        category: str | None = None,
        expiry=None,
    ) -> StockItem:
        """Add a stock item with its TOTAL batch cost.

        Stores the batch cost as given and derives the price per base unit.
        """
        key = normalize_unit(unit)
        item = StockItem(
            name=name.strip(),
            category=category,
            quantity=float(quantity or 0),
            unit=key,
            unit_base=base_unit(key),
            total_cost=float(total_cost or 0),
            price_per_base_unit=compute_price_per_base_unit(total_cost, quantity, key),
            reorder_threshold=reorder_threshold,
            expiry=expiry,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(
            f"Added stock item '{item.name}': {item.quantity} {item.unit} "
            f"at {item.price_per_base_unit:.6f}/{item.unit_base}"
        )
        return item

    def update_item(self, item: StockItem, patch: dict[str, Any]) -> StockItem:
        """Apply a manual edit, re-deriving the price when it depends on the edit."""
        if "unit" in patch and patch["unit"] is not None:
            patch = {**patch, "unit": normalize_unit(patch["unit"])}
        for key, value in patch.items():
            setattr(item, key, value)

        if any(field in patch for field in PRICED_FIELDS):
            item.unit_base = base_unit(item.unit)
            item.price_per_base_unit = compute_price_per_base_unit(
                item.total_cost, item.quantity, item.unit
            )

        self.db.commit()
        self.db.refresh(item)
        return item

    def set_price_per_base_unit(self, item: StockItem, price_per_base_unit: float) -> float:
        """Rewrite the batch cost so the item is priced at the given ppu.

        Returns the previous price per base unit.
        """
        old_price = item.price_per_base_unit
        new_cost = total_cost_for_price(price_per_base_unit, item.quantity, item.unit)
        self.update_item(item, {"total_cost": new_cost})
        return old_price

    def delete_item(self, item: StockItem) -> None:
        self.db.delete(item)
        self.db.commit()

    def low_stock_items(self) -> list[StockItem]:
        """Items whose base quantity is at or below their reorder threshold."""
        return [
            item
            for item in self.list_items()
            if item.reorder_threshold
            and item.reorder_threshold > 0
            and to_base_quantity(item.quantity, item.unit) <= item.reorder_threshold
        ]
