"""Inventory reconciliation engine: pure functions over kitchen models."""

from mise.reconcile.catalog import build_recipe, replace_recipe, scale_ingredients, search_recipes
from mise.reconcile.deriver import (
    build_prep_sheet,
    derive_prep_tasks,
    format_minutes,
    group_tasks_by_recipe,
    regenerate_prep_sheet,
    summarize_task_groups,
)
from mise.reconcile.ledger import (
    expiring_items,
    find_item_by_name,
    ingredient_shortages,
    low_stock_items,
    search_inventory,
    task_shortages,
)
from mise.reconcile.meals import (
    log_meal,
    meal_ingredient_usage,
    record_meal_count_adjustment,
    search_meal_logs,
    sort_meal_logs,
)
from mise.reconcile.tracker import (
    add_sheet_task_note,
    add_task_note,
    complete_prep_sheet,
    recompute_total_time,
    record_adjustment,
    record_task_adjustment,
    set_task_completion,
    summarize_prep_sheet,
    update_task_time,
)
from mise.reconcile.updater import apply_completed_tasks, apply_deductions

__all__ = [
    "add_sheet_task_note",
    "add_task_note",
    "apply_completed_tasks",
    "apply_deductions",
    "build_prep_sheet",
    "build_recipe",
    "complete_prep_sheet",
    "derive_prep_tasks",
    "expiring_items",
    "find_item_by_name",
    "format_minutes",
    "group_tasks_by_recipe",
    "ingredient_shortages",
    "log_meal",
    "low_stock_items",
    "meal_ingredient_usage",
    "recompute_total_time",
    "record_adjustment",
    "record_meal_count_adjustment",
    "record_task_adjustment",
    "regenerate_prep_sheet",
    "replace_recipe",
    "scale_ingredients",
    "search_inventory",
    "search_meal_logs",
    "search_recipes",
    "set_task_completion",
    "sort_meal_logs",
    "summarize_prep_sheet",
    "summarize_task_groups",
    "task_shortages",
    "update_task_time",
]
