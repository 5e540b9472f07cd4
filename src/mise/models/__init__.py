"""Pydantic models defining the kitchen data contracts."""

from mise.models.inventory import InventoryItem
from mise.models.meal import MealAdjustmentReason, MealCountAdjustment, MealLog
from mise.models.prep import (
    AdjustmentReason,
    IngredientShortage,
    PrepSheet,
    PrepSheetStatus,
    PrepSheetSummary,
    PrepTask,
    PrepTaskAdjustment,
    PrepTaskNote,
    RecipeTaskGroup,
)
from mise.models.recipe import Recipe, RecipeIngredient
from mise.models.snapshot import KitchenSnapshot

__all__ = [
    "AdjustmentReason",
    "IngredientShortage",
    "InventoryItem",
    "KitchenSnapshot",
    "MealAdjustmentReason",
    "MealCountAdjustment",
    "MealLog",
    "PrepSheet",
    "PrepSheetStatus",
    "PrepSheetSummary",
    "PrepTask",
    "PrepTaskAdjustment",
    "PrepTaskNote",
    "Recipe",
    "RecipeIngredient",
    "RecipeTaskGroup",
]
