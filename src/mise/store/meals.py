"""Meal log access helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from mise.config import get_settings
from mise.errors import NotFoundError
from mise.models.meal import MealAdjustmentReason, MealLog
from mise.reconcile.meals import (
    log_meal,
    meal_ingredient_usage,
    record_meal_count_adjustment,
    search_meal_logs,
    sort_meal_logs,
)
from mise.reconcile.updater import apply_deductions

from .repository import get_store, store_scope

logger = logging.getLogger(__name__)


def _index_of(logs: List[MealLog], log_id: str) -> int:
    for index, log in enumerate(logs):
        if log.id == log_id:
            return index
    raise NotFoundError(f"Meal log {log_id} not found")


def list_meal_logs(query: Optional[str] = None, *, newest_first: bool = True) -> List[MealLog]:
    logs = search_meal_logs(get_store().snapshot.meal_logs, query)
    return sort_meal_logs(logs, newest_first=newest_first)


def get_meal_log(log_id: str) -> Optional[MealLog]:
    for log in get_store().snapshot.meal_logs:
        if log.id == log_id:
            return log
    return None


def create_meal_log(
    *,
    recipe_id: str,
    quantity: int | str,
    logged_at: datetime,
    notes: Optional[str] = None,
) -> MealLog:
    """Log servings of a catalog recipe.

    Inventory is only deducted when ``meal_log_deducts_inventory`` is enabled.
    """

    if logged_at.tzinfo is None:
        logged_at = logged_at.replace(tzinfo=timezone.utc)
    deduct = get_settings().meal_log_deducts_inventory

    with store_scope() as draft:
        recipe = next((entry for entry in draft.recipes if entry.id == recipe_id), None)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        log = log_meal(recipe, quantity, logged_at=logged_at, notes=notes)
        draft.meal_logs.insert(0, log)
        if deduct:
            draft.inventory = apply_deductions(draft.inventory, meal_ingredient_usage(log))
            logger.info("Deducted ingredients for meal log %s", log.id, extra={"meal_log_id": log.id})
    return log


def adjust_meal_log_count(
    log_id: str,
    remaining_count: float | str,
    reason: MealAdjustmentReason,
    notes: Optional[str] = None,
) -> MealLog:
    with store_scope() as draft:
        index = _index_of(draft.meal_logs, log_id)
        updated = record_meal_count_adjustment(draft.meal_logs[index], remaining_count, reason, notes)
        draft.meal_logs[index] = updated
    return updated


def delete_meal_log(log_id: str) -> None:
    with store_scope() as draft:
        index = _index_of(draft.meal_logs, log_id)
        del draft.meal_logs[index]


__all__ = [
    "adjust_meal_log_count",
    "create_meal_log",
    "delete_meal_log",
    "get_meal_log",
    "list_meal_logs",
]
