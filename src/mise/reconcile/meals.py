"""Meal logging and served-count adjustments."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from mise import metrics
from mise.clock import new_id, utcnow
from mise.errors import InvalidInputError
from mise.models.meal import MealAdjustmentReason, MealCountAdjustment, MealLog
from mise.models.recipe import Recipe
from mise.reconcile.updater import Deduction
from mise.reconcile.validation import parse_quantity

logger = logging.getLogger(__name__)


def log_meal(
    recipe: Recipe,
    quantity: int | str,
    *,
    logged_at: datetime,
    notes: Optional[str] = None,
) -> MealLog:
    """Record ``quantity`` servings of ``recipe``; the log owns a copy of the recipe."""

    servings = parse_quantity(quantity, field="quantity")
    if servings < 1 or not servings.is_integer():
        raise InvalidInputError("quantity must be a whole number of servings, at least 1")
    log = MealLog(
        id=new_id(),
        recipe=recipe.model_copy(deep=True),
        logged_at=logged_at,
        quantity=int(servings),
        notes=(notes or "").strip() or None,
        current_count=servings,
    )
    logger.info("Logged %d serving(s) of %s", log.quantity, recipe.name, extra={"meal_log_id": log.id})
    return log


def record_meal_count_adjustment(
    log: MealLog,
    remaining_count: float | str,
    reason: MealAdjustmentReason,
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> MealLog:
    """Append a count correction and move ``current_count`` to ``remaining_count``."""

    remaining = parse_quantity(remaining_count, field="remainingCount")
    adjustment = MealCountAdjustment(
        id=new_id(),
        timestamp=now or utcnow(),
        initial_count=log.current_count,
        remaining_count=remaining,
        difference=log.current_count - remaining,
        reason=reason,
        notes=(notes or "").strip() or None,
    )
    metrics.ADJUSTMENTS_RECORDED.labels(kind="meal_log", reason=reason).inc()
    return log.model_copy(
        update={"adjustments": [*log.adjustments, adjustment], "current_count": remaining}
    )


def meal_ingredient_usage(log: MealLog) -> List[Deduction]:
    """Ingredient quantities consumed by the logged servings."""

    return [
        (ingredient.name, ingredient.quantity * log.quantity)
        for ingredient in log.recipe.ingredients
    ]


def search_meal_logs(logs: Iterable[MealLog], query: Optional[str]) -> List[MealLog]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(logs)
    return [
        log
        for log in logs
        if needle in log.recipe.name.lower() or (log.notes and needle in log.notes.lower())
    ]


def sort_meal_logs(logs: Iterable[MealLog], *, newest_first: bool = True) -> List[MealLog]:
    return sorted(logs, key=lambda log: log.logged_at, reverse=newest_first)


__all__ = [
    "log_meal",
    "meal_ingredient_usage",
    "record_meal_count_adjustment",
    "search_meal_logs",
    "sort_meal_logs",
]
