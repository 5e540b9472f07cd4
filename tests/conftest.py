"""Shared pytest fixtures for the Mise test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mise.config import get_settings
from mise.models.recipe import Recipe, RecipeIngredient
from mise.server.app import create_app
from mise.store import reset_store_state

_MISE_ENV = (
    "MISE_FIXTURES_PATH",
    "MISE_API_TOKEN",
    "MISE_LOG_FORMAT",
    "MISE_SIMULATED_LATENCY",
    "MISE_DEFAULT_TASK_MINUTES",
    "MISE_EXPIRY_WARNING_DAYS",
    "MISE_MEAL_LOG_DEDUCTS_INVENTORY",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Give each test default settings and a freshly seeded kitchen store."""

    for key in _MISE_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    reset_store_state()
    yield
    reset_store_state()
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def tomato_sauce() -> Recipe:
    return Recipe(
        id="1",
        name="Tomato Sauce",
        description="Classic Italian tomato sauce for pasta",
        category="Sauces",
        ingredients=[
            RecipeIngredient(id="i1", name="Tomatoes", quantity=2, unit="kg"),
            RecipeIngredient(id="i2", name="Onions", quantity=0.5, unit="kg"),
        ],
        created_at=datetime(2025, 2, 20, 14, 30, tzinfo=timezone.utc),
    )
