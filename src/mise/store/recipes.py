"""Recipe catalog access helpers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from mise.errors import NotFoundError
from mise.models.recipe import Recipe
from mise.reconcile.catalog import IngredientInput, build_recipe, replace_recipe, search_recipes

from .repository import get_store, store_scope


def _index_of(recipes: List[Recipe], recipe_id: str) -> int:
    for index, recipe in enumerate(recipes):
        if recipe.id == recipe_id:
            return index
    raise NotFoundError(f"Recipe {recipe_id} not found")


def list_recipes(query: Optional[str] = None) -> List[Recipe]:
    return search_recipes(get_store().snapshot.recipes, query)


def get_recipe(recipe_id: str) -> Optional[Recipe]:
    for recipe in get_store().snapshot.recipes:
        if recipe.id == recipe_id:
            return recipe
    return None


def create_recipe(
    *,
    name: str,
    ingredients: Sequence[IngredientInput],
    description: str = "",
    category: str = "",
) -> Recipe:
    recipe = build_recipe(
        name=name,
        ingredients=ingredients,
        description=description,
        category=category,
    )
    with store_scope() as draft:
        draft.recipes.append(recipe)
    return recipe


def update_recipe(
    recipe_id: str,
    *,
    name: Optional[str] = None,
    ingredients: Optional[Sequence[IngredientInput]] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
) -> Recipe:
    """Replace a recipe with a new version; existing meal logs keep their snapshot."""

    with store_scope() as draft:
        index = _index_of(draft.recipes, recipe_id)
        replacement = replace_recipe(
            draft.recipes[index],
            name=name,
            ingredients=ingredients,
            description=description,
            category=category,
        )
        draft.recipes[index] = replacement
    return replacement


def delete_recipe(recipe_id: str) -> None:
    with store_scope() as draft:
        index = _index_of(draft.recipes, recipe_id)
        del draft.recipes[index]


__all__ = ["create_recipe", "delete_recipe", "get_recipe", "list_recipes", "update_recipe"]
