"""Expansion of recipes into per-ingredient prep tasks and prep sheets."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from mise.clock import new_id
from mise.errors import InvalidInputError, NotFoundError, SheetClosedError
from mise.models.prep import PrepSheet, PrepTask, RecipeTaskGroup
from mise.models.recipe import Recipe

logger = logging.getLogger(__name__)

DEFAULT_TASK_MINUTES = 15

TaskKey = Tuple[str, str]


def derive_prep_tasks(
    recipes: Iterable[Recipe],
    batches: Mapping[str, float],
    *,
    estimated_times: Optional[Mapping[TaskKey, int]] = None,
    ingredient_minutes: Optional[Mapping[str, int]] = None,
    default_minutes: int = DEFAULT_TASK_MINUTES,
) -> List[PrepTask]:
    """Return one prep task per (recipe, ingredient) for every requested recipe.

    ``batches`` maps recipe ids to batch multipliers. Recipes missing from ``batches`` or
    requested with a zero multiplier produce no tasks. A task takes its minutes from
    ``estimated_times`` for its ``(recipe_id, ingredient_name)`` pair, then from
    ``ingredient_minutes`` for its ingredient, then from ``default_minutes``.
    """

    catalog = {recipe.id: recipe for recipe in recipes}
    unknown = [recipe_id for recipe_id in batches if recipe_id not in catalog]
    if unknown:
        raise NotFoundError(f"Unknown recipe id(s): {', '.join(sorted(unknown))}")
    if default_minutes <= 0:
        raise InvalidInputError("default task minutes must be positive")

    overrides = estimated_times or {}
    per_ingredient = ingredient_minutes or {}
    tasks: List[PrepTask] = []
    for recipe_id, multiplier in batches.items():
        if multiplier < 0:
            raise InvalidInputError(f"batch multiplier for recipe {recipe_id} cannot be negative")
        if multiplier == 0:
            continue
        recipe = catalog[recipe_id]
        for ingredient_name, quantity, unit in _merge_ingredients(recipe):
            minutes = overrides.get(
                (recipe.id, ingredient_name),
                per_ingredient.get(ingredient_name, default_minutes),
            )
            if minutes <= 0:
                raise InvalidInputError(
                    f"estimated time for {recipe.name}/{ingredient_name} must be positive"
                )
            tasks.append(
                PrepTask(
                    id=new_id(),
                    recipe_id=recipe.id,
                    recipe_name=recipe.name,
                    ingredient_name=ingredient_name,
                    quantity=quantity * multiplier,
                    unit=unit,
                    estimated_time=minutes,
                    order=len(tasks),
                )
            )

    logger.debug("Derived %d prep task(s) from %d recipe(s)", len(tasks), len(batches))
    return tasks


def _merge_ingredients(recipe: Recipe) -> List[Tuple[str, float, str]]:
    """Collapse repeated ingredient names so each yields a single task."""

    merged: Dict[str, Tuple[float, str]] = {}
    for ingredient in recipe.ingredients:
        if ingredient.name in merged:
            quantity, unit = merged[ingredient.name]
            if unit != ingredient.unit:
                raise InvalidInputError(
                    f"Recipe {recipe.name} lists {ingredient.name} in both {unit} and {ingredient.unit}"
                )
            merged[ingredient.name] = (quantity + ingredient.quantity, unit)
        else:
            merged[ingredient.name] = (ingredient.quantity, ingredient.unit)
    return [(name, quantity, unit) for name, (quantity, unit) in merged.items()]


def build_prep_sheet(
    recipes: Iterable[Recipe],
    batches: Mapping[str, float],
    *,
    sheet_date: date,
    sheet_id: Optional[str] = None,
    estimated_times: Optional[Mapping[TaskKey, int]] = None,
    ingredient_minutes: Optional[Mapping[str, int]] = None,
    default_minutes: int = DEFAULT_TASK_MINUTES,
) -> PrepSheet:
    """Create a new in-progress prep sheet for ``sheet_date``."""

    tasks = derive_prep_tasks(
        recipes,
        batches,
        estimated_times=estimated_times,
        ingredient_minutes=ingredient_minutes,
        default_minutes=default_minutes,
    )
    return PrepSheet(
        id=sheet_id or new_id(),
        date=sheet_date,
        weekday=sheet_date.strftime("%A"),
        tasks=tasks,
        total_estimated_time=sum(task.estimated_time for task in tasks),
        status="in-progress",
    )


def regenerate_prep_sheet(
    sheet: PrepSheet,
    recipes: Iterable[Recipe],
    batches: Mapping[str, float],
    *,
    estimated_times: Optional[Mapping[TaskKey, int]] = None,
    ingredient_minutes: Optional[Mapping[str, int]] = None,
    default_minutes: int = DEFAULT_TASK_MINUTES,
) -> PrepSheet:
    """Replace every task on ``sheet``; prior tasks, notes and adjustments are dropped.

    A completed sheet cannot be regenerated.
    """

    if sheet.status == "completed":
        raise SheetClosedError(f"Prep sheet {sheet.id} is completed")
    return build_prep_sheet(
        recipes,
        batches,
        sheet_date=sheet.date,
        sheet_id=sheet.id,
        estimated_times=estimated_times,
        ingredient_minutes=ingredient_minutes,
        default_minutes=default_minutes,
    )


def group_tasks_by_recipe(tasks: Sequence[PrepTask]) -> Dict[str, List[PrepTask]]:
    """Group tasks by recipe id; groups in first-seen order, tasks in sheet order."""

    groups: Dict[str, List[PrepTask]] = {}
    for task in sorted(tasks, key=lambda entry: entry.order):
        groups.setdefault(task.recipe_id, []).append(task)
    return groups


def summarize_task_groups(tasks: Sequence[PrepTask]) -> List[RecipeTaskGroup]:
    return [
        RecipeTaskGroup(
            recipe_id=recipe_id,
            recipe_name=group[0].recipe_name,
            tasks=group,
            total_time=sum(task.estimated_time for task in group),
            completed_tasks=sum(1 for task in group if task.is_completed),
        )
        for recipe_id, group in group_tasks_by_recipe(tasks).items()
    ]


def format_minutes(minutes: int) -> str:
    """Render a duration as ``45m``, ``1h`` or ``1h 30m``."""

    hours, remainder = divmod(max(int(minutes), 0), 60)
    if hours and remainder:
        return f"{hours}h {remainder}m"
    if hours:
        return f"{hours}h"
    return f"{remainder}m"


__all__ = [
    "DEFAULT_TASK_MINUTES",
    "build_prep_sheet",
    "derive_prep_tasks",
    "format_minutes",
    "group_tasks_by_recipe",
    "regenerate_prep_sheet",
    "summarize_task_groups",
]
