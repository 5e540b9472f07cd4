"""Tests for the in-memory kitchen store lifecycle."""

from __future__ import annotations

import json

import pytest

from mise.config import get_settings
from mise.store import KitchenStore, get_store
from mise.store.fixtures import DEFAULT_KITCHEN, load_snapshot


def test_transaction_commits_on_success():
    store = KitchenStore(load_snapshot())

    with store.transaction() as draft:
        draft.recipes.clear()

    assert store.snapshot.recipes == []
    assert store.initial.recipes
    assert store.version == 1


def test_transaction_discards_draft_on_error():
    store = KitchenStore(load_snapshot())

    with pytest.raises(RuntimeError):
        with store.transaction() as draft:
            draft.inventory.clear()
            raise RuntimeError("boom")

    assert len(store.snapshot.inventory) == 4
    assert store.version == 0


def test_reset_restores_initial_snapshot():
    store = KitchenStore(load_snapshot())
    with store.transaction() as draft:
        draft.meal_logs.clear()

    store.reset()

    assert store.snapshot == store.initial


def test_shared_store_loads_fixtures_file(tmp_path, monkeypatch):
    fixtures = tmp_path / "kitchen.json"
    payload = {**DEFAULT_KITCHEN, "inventory": DEFAULT_KITCHEN["inventory"][:1], "prepSheet": None}
    fixtures.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setenv("MISE_FIXTURES_PATH", str(fixtures))
    get_settings.cache_clear()

    store = get_store()

    assert [item.name for item in store.snapshot.inventory] == ["Tomatoes"]
    assert store.snapshot.prep_sheet is None
    assert get_store() is store


def test_missing_fixtures_file_falls_back_to_defaults(tmp_path):
    snapshot = load_snapshot(tmp_path / "absent.json")

    assert len(snapshot.inventory) == 4
