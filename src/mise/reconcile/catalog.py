"""Recipe catalog construction, replacement and search."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from mise.clock import new_id, utcnow
from mise.errors import InvalidInputError
from mise.models.recipe import Recipe, RecipeIngredient
from mise.reconcile.validation import parse_quantity, require_text

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Uncategorized"

IngredientInput = Union[RecipeIngredient, Mapping[str, Any]]


def make_ingredient(
    name: str,
    quantity: Any,
    unit: str,
    *,
    ingredient_id: Optional[str] = None,
) -> RecipeIngredient:
    return RecipeIngredient(
        id=ingredient_id or new_id(),
        name=require_text(name, field="ingredient name"),
        quantity=parse_quantity(quantity, field="ingredient quantity"),
        unit=require_text(unit, field="ingredient unit"),
    )


def _coerce_ingredients(ingredients: Sequence[IngredientInput]) -> List[RecipeIngredient]:
    coerced: List[RecipeIngredient] = []
    for entry in ingredients:
        if isinstance(entry, RecipeIngredient):
            coerced.append(entry)
            continue
        coerced.append(
            make_ingredient(
                entry.get("name"),
                entry.get("quantity"),
                entry.get("unit"),
                ingredient_id=entry.get("id"),
            )
        )
    if not coerced:
        raise InvalidInputError("a recipe needs at least one ingredient")
    return coerced


def build_recipe(
    *,
    name: str,
    ingredients: Sequence[IngredientInput],
    description: str = "",
    category: str = "",
    recipe_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Recipe:
    """Validate form input and return a new recipe."""

    return Recipe(
        id=recipe_id or new_id(),
        name=require_text(name, field="recipe name"),
        description=(description or "").strip(),
        category=(category or "").strip() or DEFAULT_CATEGORY,
        ingredients=_coerce_ingredients(ingredients),
        created_at=now or utcnow(),
    )


def replace_recipe(
    existing: Recipe,
    *,
    name: Optional[str] = None,
    ingredients: Optional[Sequence[IngredientInput]] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Recipe:
    """Return a new version of ``existing`` under the same id.

    Meal logs keep the snapshot they were created with, so replacing a catalog entry
    never rewrites history.
    """

    replacement = build_recipe(
        recipe_id=existing.id,
        name=existing.name if name is None else name,
        ingredients=existing.ingredients if ingredients is None else ingredients,
        description=existing.description if description is None else description,
        category=existing.category if category is None else category,
        now=now,
    )
    logger.debug("Replaced recipe %s (%s)", existing.id, replacement.name)
    return replacement


def search_recipes(recipes: Iterable[Recipe], query: Optional[str]) -> List[Recipe]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(recipes)
    return [
        recipe
        for recipe in recipes
        if needle in recipe.name.lower() or needle in recipe.category.lower()
    ]


def scale_ingredients(recipe: Recipe, multiplier: float) -> List[RecipeIngredient]:
    """Ingredient list of ``recipe`` for ``multiplier`` batches."""

    if multiplier < 0:
        raise InvalidInputError("batch multiplier cannot be negative")
    return [
        ingredient.model_copy(update={"quantity": ingredient.quantity * multiplier})
        for ingredient in recipe.ingredients
    ]


__all__ = [
    "DEFAULT_CATEGORY",
    "build_recipe",
    "make_ingredient",
    "replace_recipe",
    "scale_ingredients",
    "search_recipes",
]
