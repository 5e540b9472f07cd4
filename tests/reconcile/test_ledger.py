"""Tests for inventory read-side queries."""

from __future__ import annotations

from datetime import date

from mise.models.recipe import Recipe, RecipeIngredient
from mise.reconcile.ledger import (
    expiring_items,
    find_item_by_name,
    ingredient_shortages,
    low_stock_items,
    search_inventory,
)
from mise.store.fixtures import load_snapshot


def _inventory():
    return load_snapshot().inventory


def test_low_stock_is_inclusive():
    items = [item.model_copy(update={"quantity": item.alert_level}) for item in _inventory()]

    assert low_stock_items(items) == items
    assert [item.name for item in low_stock_items(_inventory())] == ["Garlic"]


def test_search_is_case_insensitive_substring():
    assert [item.name for item in search_inventory(_inventory(), "OIL")] == ["Olive Oil"]
    assert len(search_inventory(_inventory(), "  ")) == 4


def test_expiring_items_sorted_by_expiry():
    names = [item.name for item in expiring_items(_inventory(), date(2025, 4, 28), 7)]

    # Tomatoes already expired, Garlic is three days out.
    assert names == ["Tomatoes", "Garlic"]


def test_expiring_window_is_exclusive():
    assert expiring_items(_inventory(), date(2025, 4, 3), 7) == []
    assert [item.name for item in expiring_items(_inventory(), date(2025, 4, 4), 7)] == ["Tomatoes"]


def test_find_item_by_name_is_exact():
    assert find_item_by_name(_inventory(), "Onions").id == "2"
    assert find_item_by_name(_inventory(), "onions") is None


def test_no_shortage_when_stock_covers_batch(tomato_sauce):
    assert ingredient_shortages([tomato_sauce], {"1": 1}, _inventory()) == []


def test_shortage_reports_required_and_available(tomato_sauce):
    shortages = ingredient_shortages([tomato_sauce], {"1": 3}, _inventory())

    assert len(shortages) == 1
    shortage = shortages[0]
    assert shortage.ingredient_name == "Tomatoes"
    assert shortage.required == 6
    assert shortage.available == 5
    assert shortage.unit == "kg"
    assert shortage.missing == 1


def test_shortage_sums_ingredient_across_recipes(tomato_sauce):
    salsa = Recipe(
        id="2",
        name="Salsa",
        ingredients=[RecipeIngredient(id="2-0", name="Tomatoes", quantity=2, unit="kg")],
        created_at=tomato_sauce.created_at,
    )

    shortages = ingredient_shortages([tomato_sauce, salsa], {"1": 1, "2": 2}, _inventory())

    assert [(entry.ingredient_name, entry.required) for entry in shortages] == [("Tomatoes", 6)]


def test_shortage_matches_names_exactly(tomato_sauce):
    lowercase = Recipe(
        id="3",
        name="Soffritto",
        ingredients=[
            RecipeIngredient(id="3-0", name="onions", quantity=1, unit="kg"),
            RecipeIngredient(id="3-1", name="Shallots", quantity=0.2, unit="kg"),
        ],
        created_at=tomato_sauce.created_at,
    )

    shortages = ingredient_shortages([lowercase], {"3": 1}, _inventory())

    assert [(entry.ingredient_name, entry.available) for entry in shortages] == [
        ("onions", 0),
        ("Shallots", 0),
    ]
