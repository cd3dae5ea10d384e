"""Inventory API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backoffice.api.dependencies import get_current_user, get_inventory_service, require_role
from backoffice.database import get_db
from backoffice.models.enums import UserRole
from backoffice.models.stock_item import StockItem
from backoffice.models.user import User
from backoffice.schemas.inventory import (
    PriceUpdate,
    StockItemCreate,
    StockItemResponse,
    StockItemUpdate,
)
from backoffice.services.audit import (
    log_inventory_added,
    log_inventory_deleted,
    log_inventory_updated,
    log_pricing_changed,
)
from backoffice.services.inventory_service import InventoryService

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])

# Fields compared for the audit trail on edits
AUDITED_FIELDS = ("name", "quantity", "unit", "total_cost", "reorder_threshold", "expiry")


def get_stock_item(db: Session, item_id: int) -> StockItem:
    """Get a stock item or raise 404."""
    item = db.get(StockItem, item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return item


@router.get("", response_model=list[StockItemResponse])
def list_stock_items(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """List all stock items ordered by name."""
    return service.list_items()


@router.get("/low-stock", response_model=list[StockItemResponse])
def list_low_stock(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """List items at or below their reorder threshold."""
    return service.low_stock_items()


@router.post("", response_model=StockItemResponse, status_code=status.HTTP_201_CREATED)
def create_stock_item(
    item_data: StockItemCreate,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """Add a stock item with its total batch cost."""
    existing = service.get_by_name(item_data.name)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Item '{existing.name}' already exists in inventory",
        )

    item = service.add_item(**item_data.model_dump())
    log_inventory_added(db, item, current_user)
    return item


@router.get("/{item_id}", response_model=StockItemResponse)
def get_stock_item_endpoint(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific stock item."""
    return get_stock_item(db, item_id)


@router.put("/{item_id}", response_model=StockItemResponse)
def update_stock_item(
    item_id: int,
    item_data: StockItemUpdate,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """Edit a stock item; the price per base unit follows quantity, unit and cost."""
    item = get_stock_item(db, item_id)
    patch = item_data.model_dump(exclude_unset=True)
    # Required columns cannot be cleared
    for field in ("name", "quantity", "unit", "total_cost"):
        if field in patch and patch[field] is None:
            del patch[field]

    if "name" in patch:
        clash = service.get_by_name(patch["name"])
        if clash and clash.id != item.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Item '{clash.name}' already exists in inventory",
            )
        patch["name"] = patch["name"].strip()

    before = {field: getattr(item, field) for field in AUDITED_FIELDS}
    item = service.update_item(item, patch)
    log_inventory_updated(db, item, before, current_user)
    return item


@router.put("/{item_id}/price", response_model=StockItemResponse)
def set_item_price(
    item_id: int,
    body: PriceUpdate,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """Set the price per base unit by rewriting the batch cost."""
    item = get_stock_item(db, item_id)
    old_price = service.set_price_per_base_unit(item, body.price_per_base_unit)
    log_pricing_changed(db, item.name, old_price, item.price_per_base_unit, current_user)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stock_item(
    item_id: int,
    current_user: Annotated[User, Depends(require_role(UserRole.MANAGER))],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """Delete a stock item. Recipes referencing it will report it as missing."""
    item = get_stock_item(db, item_id)
    name = item.name
    service.delete_item(item)
    log_inventory_deleted(db, item_id, name, current_user)
