"""Tests for deriving prep tasks and sheets from recipes."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from mise.errors import InvalidInputError, NotFoundError, SheetClosedError
from mise.models.recipe import Recipe, RecipeIngredient
from mise.reconcile.deriver import (
    build_prep_sheet,
    derive_prep_tasks,
    format_minutes,
    group_tasks_by_recipe,
    regenerate_prep_sheet,
    summarize_task_groups,
)
from mise.reconcile.tracker import complete_prep_sheet


def _recipe(recipe_id: str, name: str, *ingredients: tuple[str, float, str]) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name,
        ingredients=[
            RecipeIngredient(id=f"{recipe_id}-{index}", name=item, quantity=qty, unit=unit)
            for index, (item, qty, unit) in enumerate(ingredients)
        ],
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def test_sheet_scales_ingredients_by_batch(tomato_sauce):
    sheet = build_prep_sheet([tomato_sauce], {"1": 2}, sheet_date=date(2025, 4, 22))

    assert sheet.weekday == "Tuesday"
    assert sheet.status == "in-progress"
    assert [(task.ingredient_name, task.quantity) for task in sheet.tasks] == [
        ("Tomatoes", 4),
        ("Onions", 1),
    ]
    assert [task.order for task in sheet.tasks] == [0, 1]
    assert all(task.estimated_time == 15 for task in sheet.tasks)
    assert sheet.total_estimated_time == 30


def test_estimated_time_overrides_apply_per_ingredient(tomato_sauce):
    tasks = derive_prep_tasks(
        [tomato_sauce],
        {"1": 1},
        estimated_times={("1", "Tomatoes"): 20},
        default_minutes=10,
    )

    assert [task.estimated_time for task in tasks] == [20, 10]


def test_zero_multiplier_produces_no_tasks(tomato_sauce):
    sheet = build_prep_sheet([tomato_sauce], {"1": 0}, sheet_date=date(2025, 4, 22))

    assert sheet.tasks == []
    assert sheet.total_estimated_time == 0


def test_unknown_recipe_is_rejected(tomato_sauce):
    with pytest.raises(NotFoundError):
        derive_prep_tasks([tomato_sauce], {"missing": 1})


def test_negative_multiplier_is_rejected(tomato_sauce):
    with pytest.raises(InvalidInputError):
        derive_prep_tasks([tomato_sauce], {"1": -1})


def test_repeated_ingredient_is_merged():
    recipe = _recipe("2", "Salsa", ("Tomatoes", 1, "kg"), ("Lime", 2, "pc"), ("Tomatoes", 0.5, "kg"))

    tasks = derive_prep_tasks([recipe], {"2": 2})

    assert [(task.ingredient_name, task.quantity) for task in tasks] == [("Tomatoes", 3), ("Lime", 4)]


def test_repeated_ingredient_with_conflicting_units_is_rejected():
    recipe = _recipe("2", "Salsa", ("Tomatoes", 1, "kg"), ("Tomatoes", 3, "pc"))

    with pytest.raises(InvalidInputError):
        derive_prep_tasks([recipe], {"2": 1})


def test_regenerate_keeps_sheet_identity(tomato_sauce):
    sheet = build_prep_sheet([tomato_sauce], {"1": 1}, sheet_date=date(2025, 4, 22), sheet_id="sheet-1")

    regenerated = regenerate_prep_sheet(sheet, [tomato_sauce], {"1": 3})

    assert regenerated.id == "sheet-1"
    assert regenerated.date == date(2025, 4, 22)
    assert regenerated.tasks[0].quantity == 6
    assert {task.id for task in regenerated.tasks}.isdisjoint({task.id for task in sheet.tasks})


def test_groups_follow_task_order(tomato_sauce):
    salsa = _recipe("2", "Salsa", ("Lime", 2, "pc"))
    sheet = build_prep_sheet([tomato_sauce, salsa], {"2": 1, "1": 1}, sheet_date=date(2025, 4, 22))

    groups = group_tasks_by_recipe(sheet.tasks)
    assert list(groups) == ["2", "1"]

    summaries = summarize_task_groups(sheet.tasks)
    assert summaries[1].recipe_name == "Tomato Sauce"
    assert summaries[1].total_time == 30
    assert summaries[1].completed_tasks == 0


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(45, "45m"), (60, "1h"), (90, "1h 30m"), (0, "0m")],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_ingredient_minutes_sit_between_overrides_and_default(tomato_sauce):
    garlic = _recipe("2", "Aioli", ("Garlic", 0.1, "kg"), ("Olive Oil", 0.5, "L"))

    tasks = derive_prep_tasks(
        [tomato_sauce, garlic],
        {"1": 1, "2": 1},
        estimated_times={("1", "Tomatoes"): 25},
        ingredient_minutes={"Tomatoes": 20, "Onions": 12, "Garlic": 8},
        default_minutes=10,
    )

    assert [(task.ingredient_name, task.estimated_time) for task in tasks] == [
        ("Tomatoes", 25),
        ("Onions", 12),
        ("Garlic", 8),
        ("Olive Oil", 10),
    ]


def test_completed_sheet_cannot_be_regenerated(tomato_sauce):
    sheet = build_prep_sheet([tomato_sauce], {"1": 1}, sheet_date=date(2025, 4, 22), sheet_id="sheet-1")
    closed = complete_prep_sheet(sheet)

    with pytest.raises(SheetClosedError):
        regenerate_prep_sheet(closed, [tomato_sauce], {"1": 3})
