"""Tests for inventory access helpers backed by the kitchen store."""

from __future__ import annotations

from datetime import date

import pytest

from mise.errors import InvalidInputError, NotFoundError
from mise.store.inventory import (
    create_inventory_item,
    delete_inventory_item,
    get_inventory_item,
    list_expiring_inventory,
    list_inventory,
    update_inventory_item,
)


def test_list_inventory_seeds_defaults():
    items = list_inventory()

    assert [item.name for item in items] == ["Tomatoes", "Onions", "Garlic", "Olive Oil"]
    assert [item.name for item in list_inventory(low_stock_only=True)] == ["Garlic"]
    assert [item.name for item in list_inventory("oni")] == ["Onions"]


def test_create_update_delete_item():
    created = create_inventory_item(name="Basil", quantity="0.3", unit="kg", alert_level=0.1)

    assert created.id
    assert get_inventory_item(created.id) == created

    updated = update_inventory_item(created.id, quantity=0.1, expiry_date=date(2025, 5, 2))
    assert updated.quantity == 0.1
    assert updated.is_low_stock
    assert updated.expiry_date == date(2025, 5, 2)
    assert updated.last_checked >= created.last_checked

    cleared = update_inventory_item(created.id, expiry_date=None)
    assert cleared.expiry_date is None

    delete_inventory_item(created.id)
    assert get_inventory_item(created.id) is None


def test_invalid_input_leaves_inventory_unchanged():
    with pytest.raises(InvalidInputError):
        create_inventory_item(name="Basil", quantity="lots", unit="kg")
    with pytest.raises(InvalidInputError):
        update_inventory_item("1", quantity=-2)

    assert len(list_inventory()) == 4
    assert get_inventory_item("1").quantity == 5


def test_missing_item_raises_not_found():
    with pytest.raises(NotFoundError):
        update_inventory_item("missing", quantity=1)
    with pytest.raises(NotFoundError):
        delete_inventory_item("missing")


def test_expiring_inventory_uses_configured_window(monkeypatch):
    from mise.config import get_settings

    assert [item.name for item in list_expiring_inventory(date(2025, 4, 20))] == ["Tomatoes"]

    monkeypatch.setenv("MISE_EXPIRY_WARNING_DAYS", "14")
    get_settings.cache_clear()
    assert [item.name for item in list_expiring_inventory(date(2025, 4, 20))] == ["Tomatoes", "Garlic"]
