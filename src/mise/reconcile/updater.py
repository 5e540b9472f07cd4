"""Fold completed prep work and meal consumption back into inventory levels."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from mise import metrics
from mise.clock import utcnow
from mise.models.inventory import InventoryItem
from mise.models.prep import PrepTask

logger = logging.getLogger(__name__)

Deduction = Tuple[str, float]


def apply_deductions(
    inventory: Iterable[InventoryItem],
    deductions: Iterable[Deduction],
    *,
    now: Optional[datetime] = None,
) -> List[InventoryItem]:
    """Subtract ``(ingredient_name, quantity)`` pairs from matching inventory items.

    Names are matched exactly against the first item with that name. Quantities are
    floored at zero and every touched item gets ``last_checked = now``. Names without a
    matching item are skipped. Deductions are not de-duplicated.
    """

    items = list(inventory)
    positions: Dict[str, int] = {}
    for index, item in enumerate(items):
        positions.setdefault(item.name, index)

    stamp = now or utcnow()
    for name, quantity in deductions:
        index = positions.get(name)
        if index is None:
            logger.debug("No inventory item named %r; deduction of %s skipped", name, quantity)
            metrics.INVENTORY_DEDUCTIONS.labels(result="unmatched").inc()
            continue

        item = items[index]
        remaining = item.quantity - quantity
        if remaining < 0:
            logger.warning(
                "Deduction of %s %s exceeds stock of %s (%s); clamping to 0",
                quantity,
                item.unit,
                item.name,
                item.quantity,
            )
            metrics.INVENTORY_DEDUCTIONS.labels(result="clamped").inc()
            remaining = 0.0
        else:
            metrics.INVENTORY_DEDUCTIONS.labels(result="applied").inc()
        items[index] = item.model_copy(update={"quantity": remaining, "last_checked": stamp})

    return items


def apply_completed_tasks(
    inventory: Iterable[InventoryItem],
    completed_tasks: Iterable[PrepTask],
    *,
    now: Optional[datetime] = None,
) -> List[InventoryItem]:
    """Deduct each completed task's ``completed_quantity`` from inventory.

    Callers must pass each task once; a task supplied twice is deducted twice.
    """

    deductions: List[Deduction] = []
    for task in completed_tasks:
        if not task.is_completed:
            logger.debug("Skipping incomplete task %s", task.id, extra={"task_id": task.id})
            continue
        deductions.append((task.ingredient_name, task.completed_quantity))
    return apply_deductions(inventory, deductions, now=now)


__all__ = ["Deduction", "apply_completed_tasks", "apply_deductions"]
