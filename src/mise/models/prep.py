"""Prep sheet models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

AdjustmentReason = Literal["served", "wastage", "physical_count", "other"]
PrepSheetStatus = Literal["in-progress", "completed"]


class PrepTaskNote(BaseModel):
    """Free-form note attached to a prep task."""

    id: str
    content: str = Field(min_length=1)
    timestamp: datetime
    author: str
    is_urgent: bool = Field(default=False, alias="isUrgent")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PrepTaskAdjustment(BaseModel):
    """Recorded variance between the expected and observed quantity of a task."""

    id: str
    timestamp: datetime
    expected_quantity: float = Field(alias="expectedQuantity")
    actual_quantity: float = Field(alias="actualQuantity")
    difference: float
    reason: AdjustmentReason
    notes: str = Field(default="")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _check_difference(self) -> "PrepTaskAdjustment":
        if self.difference != self.expected_quantity - self.actual_quantity:
            raise ValueError("difference must equal expectedQuantity - actualQuantity")
        return self


class PrepTask(BaseModel):
    """One ingredient-preparation unit of work derived from a recipe."""

    id: str
    recipe_id: str = Field(alias="recipeId")
    recipe_name: str = Field(alias="recipeName")
    ingredient_name: str = Field(alias="ingredientName")
    quantity: float = Field(ge=0)
    unit: str
    estimated_time: int = Field(ge=0, alias="estimatedTime")
    is_completed: bool = Field(default=False, alias="isCompleted")
    completed_quantity: float = Field(default=0.0, ge=0, alias="completedQuantity")
    notes: list[PrepTaskNote] = Field(default_factory=list)
    adjustments: list[PrepTaskAdjustment] = Field(default_factory=list)
    order: int = Field(default=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PrepSheet(BaseModel):
    """A day's prep tasks plus aggregate time and status."""

    id: str
    date: date
    weekday: str
    tasks: list[PrepTask] = Field(default_factory=list)
    total_estimated_time: int = Field(default=0, ge=0, alias="totalEstimatedTime")
    status: PrepSheetStatus = Field(default="in-progress")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_total_time(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "totalEstimatedTime" in data or "total_estimated_time" in data:
            return data
        tasks = data.get("tasks") or []
        total = 0
        for task in tasks:
            if isinstance(task, PrepTask):
                total += task.estimated_time
            elif isinstance(task, dict):
                total += int(task.get("estimatedTime", task.get("estimated_time", 0)))
        return {**data, "totalEstimatedTime": total}

    @model_validator(mode="after")
    def _check_total_time(self) -> "PrepSheet":
        expected = sum(task.estimated_time for task in self.tasks)
        if self.total_estimated_time != expected:
            raise ValueError(
                f"totalEstimatedTime {self.total_estimated_time} does not match task sum {expected}"
            )
        return self


class PrepSheetSummary(BaseModel):
    """Progress figures for a prep sheet."""

    completed_tasks: int = Field(alias="completedTasks")
    total_tasks: int = Field(alias="totalTasks")
    completion_percentage: int = Field(alias="completionPercentage")
    remaining_time: int = Field(alias="remainingTime")
    total_estimated_time: int = Field(alias="totalEstimatedTime")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class IngredientShortage(BaseModel):
    """Planned prep that needs more of an ingredient than is in stock."""

    ingredient_name: str = Field(alias="ingredientName")
    required: float = Field(ge=0)
    available: float = Field(ge=0)
    unit: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def missing(self) -> float:
        return self.required - self.available


class RecipeTaskGroup(BaseModel):
    """Tasks of one recipe on a sheet, with group totals."""

    recipe_id: str = Field(alias="recipeId")
    recipe_name: str = Field(alias="recipeName")
    tasks: list[PrepTask] = Field(default_factory=list)
    total_time: int = Field(alias="totalTime")
    completed_tasks: int = Field(alias="completedTasks")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = [
    "AdjustmentReason",
    "IngredientShortage",
    "PrepSheet",
    "PrepSheetStatus",
    "PrepSheetSummary",
    "PrepTask",
    "PrepTaskAdjustment",
    "PrepTaskNote",
    "RecipeTaskGroup",
]
