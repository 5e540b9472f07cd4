"""Sample kitchen data used to seed the store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from mise.models.snapshot import KitchenSnapshot

logger = logging.getLogger(__name__)

_TOMATO_SAUCE = {
    "id": "1",
    "name": "Tomato Sauce",
    "description": "Classic Italian tomato sauce for pasta",
    "category": "Sauces",
    "ingredients": [
        {"id": "1", "name": "Tomatoes", "quantity": 2, "unit": "kg"},
        {"id": "2", "name": "Onions", "quantity": 0.5, "unit": "kg"},
    ],
    "createdAt": "2025-02-20T14:30:00Z",
}

DEFAULT_KITCHEN: dict[str, Any] = {
    "inventory": [
        {
            "id": "1",
            "name": "Tomatoes",
            "quantity": 5,
            "unit": "kg",
            "alertLevel": 2,
            "expiryDate": "2025-04-10",
            "lastChecked": "2025-03-15T10:30:00Z",
        },
        {
            "id": "2",
            "name": "Onions",
            "quantity": 3,
            "unit": "kg",
            "alertLevel": 1,
            "expiryDate": None,
            "lastChecked": "2025-03-15T10:30:00Z",
        },
        {
            "id": "3",
            "name": "Garlic",
            "quantity": 0.4,
            "unit": "kg",
            "alertLevel": 0.5,
            "expiryDate": "2025-05-01",
            "lastChecked": "2025-03-15T10:30:00Z",
        },
        {
            "id": "4",
            "name": "Olive Oil",
            "quantity": 2,
            "unit": "L",
            "alertLevel": 0.5,
            "expiryDate": None,
            "lastChecked": "2025-03-15T10:30:00Z",
        },
    ],
    "recipes": [_TOMATO_SAUCE],
    "mealLogs": [
        {
            "id": "log1",
            "recipe": _TOMATO_SAUCE,
            "date": "2025-04-22T12:00:00Z",
            "quantity": 3,
            "notes": "Lunch prep",
            "adjustments": [],
            "currentCount": 2.5,
        }
    ],
    "prepSheet": {
        "id": "sheet-2025-04-22",
        "date": "2025-04-22",
        "weekday": "Tuesday",
        "status": "in-progress",
        "tasks": [
            {
                "id": "task1",
                "recipeId": "1",
                "recipeName": "Tomato Sauce",
                "ingredientName": "Tomatoes",
                "quantity": 2,
                "unit": "kg",
                "estimatedTime": 20,
                "order": 0,
            },
            {
                "id": "task2",
                "recipeId": "1",
                "recipeName": "Tomato Sauce",
                "ingredientName": "Onions",
                "quantity": 0.5,
                "unit": "kg",
                "estimatedTime": 10,
                "order": 1,
            },
        ],
    },
}


def snapshot_from_payload(payload: Mapping[str, Any]) -> KitchenSnapshot:
    return KitchenSnapshot.model_validate(payload)


def load_snapshot(path: Path | None = None) -> KitchenSnapshot:
    """Read a fixtures JSON file, falling back to the built-in sample kitchen."""

    if path is None:
        return snapshot_from_payload(DEFAULT_KITCHEN)
    if not path.exists():
        logger.warning("Fixtures file %s not found; using built-in sample data", path)
        return snapshot_from_payload(DEFAULT_KITCHEN)
    return snapshot_from_payload(json.loads(path.read_text(encoding="utf-8")))


__all__ = ["DEFAULT_KITCHEN", "load_snapshot", "snapshot_from_payload"]
