"""Read-side queries over inventory stock levels."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from mise.models.inventory import InventoryItem
from mise.models.prep import IngredientShortage, PrepTask
from mise.models.recipe import Recipe
from mise.reconcile.deriver import derive_prep_tasks


def low_stock_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Items at or below their alert level."""

    return [item for item in items if item.is_low_stock]


def search_inventory(items: Iterable[InventoryItem], query: Optional[str]) -> List[InventoryItem]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.lower()]


def expiring_items(
    items: Iterable[InventoryItem],
    today: date,
    within_days: int = 7,
) -> List[InventoryItem]:
    """Items with an expiry date less than ``within_days`` away, soonest first."""

    flagged = [item for item in items if item.is_expiring_soon(today, within_days)]
    return sorted(flagged, key=lambda item: item.expiry_date)


def find_item_by_name(items: Iterable[InventoryItem], name: str) -> Optional[InventoryItem]:
    """First item whose name equals ``name`` exactly (case-sensitive)."""

    for item in items:
        if item.name == name:
            return item
    return None


def task_shortages(
    tasks: Iterable[PrepTask],
    inventory: Iterable[InventoryItem],
) -> List[IngredientShortage]:
    """Ingredients whose planned quantity across ``tasks`` exceeds the stock on hand.

    Quantities are summed per ingredient name and unit. Stock comes from the first item
    with exactly that name, the same match used for deductions; a missing item counts
    as zero available.
    """

    items = list(inventory)
    required: Dict[Tuple[str, str], float] = {}
    for task in tasks:
        key = (task.ingredient_name, task.unit)
        required[key] = required.get(key, 0.0) + task.quantity

    shortages: List[IngredientShortage] = []
    for (name, unit), needed in required.items():
        item = find_item_by_name(items, name)
        available = item.quantity if item is not None else 0.0
        if needed > available:
            shortages.append(
                IngredientShortage(ingredient_name=name, required=needed, available=available, unit=unit)
            )
    return shortages


def ingredient_shortages(
    recipes: Iterable[Recipe],
    batches: Mapping[str, float],
    inventory: Iterable[InventoryItem],
) -> List[IngredientShortage]:
    """Shortages that preparing ``batches`` of ``recipes`` would run into."""

    return task_shortages(derive_prep_tasks(recipes, batches), inventory)


__all__ = [
    "expiring_items",
    "find_item_by_name",
    "ingredient_shortages",
    "low_stock_items",
    "search_inventory",
    "task_shortages",
]
