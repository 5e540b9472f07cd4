"""Inventory access helpers."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from mise.clock import new_id, utcnow
from mise.config import get_settings
from mise.errors import NotFoundError
from mise.models.inventory import InventoryItem
from mise.reconcile.ledger import expiring_items, low_stock_items, search_inventory
from mise.reconcile.validation import parse_quantity, require_text

from .repository import get_store, store_scope

logger = logging.getLogger(__name__)

_UNSET = object()


def _index_of(items: List[InventoryItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFoundError(f"Inventory item {item_id} not found")


def list_inventory(query: Optional[str] = None, *, low_stock_only: bool = False) -> List[InventoryItem]:
    """Return inventory items, optionally filtered by name and low-stock state."""

    items = search_inventory(get_store().snapshot.inventory, query)
    if low_stock_only:
        items = low_stock_items(items)
    return items


def list_expiring_inventory(
    today: Optional[date] = None,
    within_days: Optional[int] = None,
) -> List[InventoryItem]:
    window = get_settings().expiry_warning_days if within_days is None else within_days
    return expiring_items(get_store().snapshot.inventory, today or date.today(), window)


def get_inventory_item(item_id: str) -> Optional[InventoryItem]:
    for item in get_store().snapshot.inventory:
        if item.id == item_id:
            return item
    return None


def create_inventory_item(
    *,
    name: str,
    quantity: Any,
    unit: str,
    alert_level: Any = 0,
    expiry_date: Optional[date] = None,
) -> InventoryItem:
    item = InventoryItem(
        id=new_id(),
        name=require_text(name, field="name"),
        quantity=parse_quantity(quantity),
        unit=require_text(unit, field="unit"),
        alert_level=parse_quantity(alert_level or 0, field="alertLevel"),
        expiry_date=expiry_date,
        last_checked=utcnow(),
    )
    with store_scope() as draft:
        draft.inventory.append(item)
    logger.debug("Created inventory item %s (%s)", item.id, item.name)
    return item


def update_inventory_item(
    item_id: str,
    *,
    name: Optional[str] = None,
    quantity: Any = None,
    unit: Optional[str] = None,
    alert_level: Any = None,
    expiry_date: Optional[date] | object = _UNSET,
) -> InventoryItem:
    changes: dict[str, Any] = {"last_checked": utcnow()}
    if name is not None:
        changes["name"] = require_text(name, field="name")
    if quantity is not None:
        changes["quantity"] = parse_quantity(quantity)
    if unit is not None:
        changes["unit"] = require_text(unit, field="unit")
    if alert_level is not None:
        changes["alert_level"] = parse_quantity(alert_level, field="alertLevel")
    if expiry_date is not _UNSET:
        changes["expiry_date"] = expiry_date

    with store_scope() as draft:
        index = _index_of(draft.inventory, item_id)
        updated = draft.inventory[index].model_copy(update=changes)
        draft.inventory[index] = updated
    return updated


def delete_inventory_item(item_id: str) -> None:
    with store_scope() as draft:
        index = _index_of(draft.inventory, item_id)
        del draft.inventory[index]


__all__ = [
    "create_inventory_item",
    "delete_inventory_item",
    "get_inventory_item",
    "list_expiring_inventory",
    "list_inventory",
    "update_inventory_item",
]
