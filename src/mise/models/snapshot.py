"""Whole-kitchen state snapshot."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mise.models.inventory import InventoryItem
from mise.models.meal import MealLog
from mise.models.prep import PrepSheet
from mise.models.recipe import Recipe


class KitchenSnapshot(BaseModel):
    """Everything the store holds at one instant."""

    inventory: list[InventoryItem] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    meal_logs: list[MealLog] = Field(default_factory=list, alias="mealLogs")
    prep_sheet: Optional[PrepSheet] = Field(default=None, alias="prepSheet")
    reconciled_task_ids: list[str] = Field(default_factory=list, alias="reconciledTaskIds")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["KitchenSnapshot"]
