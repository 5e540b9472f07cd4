"""Recipe catalog models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RecipeIngredient(BaseModel):
    """Amount of a named ingredient required for one batch of a recipe."""

    id: str
    name: str = Field(min_length=1)
    quantity: float = Field(ge=0)
    unit: str

    model_config = ConfigDict(frozen=True)


class Recipe(BaseModel):
    """Recipe with its ordered ingredient list."""

    id: str
    name: str = Field(min_length=1)
    description: str = Field(default="")
    category: str = Field(default="Uncategorized")
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["Recipe", "RecipeIngredient"]
