"""Integration tests for the recipe endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers

PESTO = {
    "name": "Pesto",
    "description": "Basil pesto",
    "ingredients": [
        {"name": "Basil", "quantity": 0.2, "unit": "kg"},
        {"name": "Olive Oil", "quantity": 0.1, "unit": "L"},
    ],
}


def test_recipe_lifecycle(client):
    response = client.post("/recipes", json=PESTO, headers=auth_headers())
    assert response.status_code == status.HTTP_201_CREATED
    created = response.json()
    assert created["category"] == "Uncategorized"
    assert "createdAt" in created

    response = client.put(
        f"/recipes/{created['id']}",
        json={"category": "Sauces"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["category"] == "Sauces"

    names = [recipe["name"] for recipe in client.get("/recipes", params={"q": "sauces"}).json()]
    assert names == ["Tomato Sauce", "Pesto"]

    response = client.delete(f"/recipes/{created['id']}", headers=auth_headers())
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert len(client.get("/recipes").json()) == 1


def test_recipe_requires_ingredients(client):
    response = client.post("/recipes", json={**PESTO, "ingredients": []}, headers=auth_headers())

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_recipe_rejects_blank_ingredient_name(client):
    payload = {**PESTO, "ingredients": [{"name": "", "quantity": 1, "unit": "kg"}]}

    response = client.post("/recipes", json=payload, headers=auth_headers())

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_unknown_recipe_returns_404(client):
    response = client.delete("/recipes/missing", headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND
