"""Meal log models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mise.models.recipe import Recipe

MealAdjustmentReason = Literal["served", "wastage", "physical_count"]


class MealCountAdjustment(BaseModel):
    """Correction of the remaining servings of a logged meal."""

    id: str
    timestamp: datetime
    initial_count: float = Field(alias="initialCount")
    remaining_count: float = Field(alias="remainingCount")
    difference: float
    reason: MealAdjustmentReason
    notes: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_difference(self) -> "MealCountAdjustment":
        if self.difference != self.initial_count - self.remaining_count:
            raise ValueError("difference must equal initialCount - remainingCount")
        return self


class MealLog(BaseModel):
    """Servings of a recipe produced at a point in time."""

    id: str
    recipe: Recipe
    logged_at: datetime = Field(alias="date")
    quantity: int = Field(ge=1)
    notes: Optional[str] = Field(default=None)
    adjustments: list[MealCountAdjustment] = Field(default_factory=list)
    current_count: float = Field(ge=0, alias="currentCount")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["MealAdjustmentReason", "MealCountAdjustment", "MealLog"]
