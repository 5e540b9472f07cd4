"""Dependency definitions for the Mise API server."""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from fastapi import Depends, HTTPException, Request, status

from mise.config import get_settings
from mise.deferred import DeferredRunner
from mise.models.inventory import InventoryItem
from mise.models.meal import MealLog
from mise.models.prep import PrepSheet
from mise.models.recipe import Recipe
from mise.store.inventory import (
    create_inventory_item,
    delete_inventory_item,
    list_expiring_inventory,
    list_inventory,
    update_inventory_item,
)
from mise.store.meals import (
    adjust_meal_log_count,
    create_meal_log,
    delete_meal_log,
    list_meal_logs,
)
from mise.store.prep_sheets import get_prep_sheet
from mise.store.recipes import create_recipe, delete_recipe, list_recipes, update_recipe

InventoryProvider = Callable[[Optional[str], bool], List[InventoryItem]]
ExpiringInventoryProvider = Callable[[Optional[date], Optional[int]], List[InventoryItem]]
InventoryCreator = Callable[[dict], InventoryItem]
InventoryUpdater = Callable[[str, dict], InventoryItem]
InventoryDeleter = Callable[[str], None]
RecipeProvider = Callable[[Optional[str]], List[Recipe]]
RecipeCreator = Callable[[dict], Recipe]
RecipeUpdater = Callable[[str, dict], Recipe]
RecipeDeleter = Callable[[str], None]
PrepSheetProvider = Callable[[], Optional[PrepSheet]]
MealLogProvider = Callable[[Optional[str], bool], List[MealLog]]
MealLogCreator = Callable[[dict], MealLog]
MealLogAdjuster = Callable[[str, dict], MealLog]
MealLogDeleter = Callable[[str], None]


def get_inventory_provider() -> InventoryProvider:
    """Return the current inventory provider implementation."""

    return lambda query, low_stock_only: list_inventory(query, low_stock_only=low_stock_only)


def get_expiring_inventory_provider() -> ExpiringInventoryProvider:
    return lambda today, within_days: list_expiring_inventory(today, within_days)


def get_inventory_creator() -> InventoryCreator:
    return lambda payload: create_inventory_item(**payload)


def get_inventory_updater() -> InventoryUpdater:
    return lambda item_id, payload: update_inventory_item(item_id, **payload)


def get_inventory_deleter() -> InventoryDeleter:
    return lambda item_id: delete_inventory_item(item_id)


def get_recipe_provider() -> RecipeProvider:
    return list_recipes


def get_recipe_creator() -> RecipeCreator:
    return lambda payload: create_recipe(**payload)


def get_recipe_updater() -> RecipeUpdater:
    return lambda recipe_id, payload: update_recipe(recipe_id, **payload)


def get_recipe_deleter() -> RecipeDeleter:
    return delete_recipe


def get_prep_sheet_provider() -> PrepSheetProvider:
    return get_prep_sheet


def get_meal_log_provider() -> MealLogProvider:
    return lambda query, newest_first: list_meal_logs(query, newest_first=newest_first)


def get_meal_log_creator() -> MealLogCreator:
    return lambda payload: create_meal_log(**payload)


def get_meal_log_adjuster() -> MealLogAdjuster:
    return lambda log_id, payload: adjust_meal_log_count(log_id, **payload)


def get_meal_log_deleter() -> MealLogDeleter:
    return delete_meal_log


def get_deferred_runner(request: Request) -> DeferredRunner:
    """Return the runner owned by the application instance."""

    return request.app.state.deferred


def require_api_token(
    request: Request,
    settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
