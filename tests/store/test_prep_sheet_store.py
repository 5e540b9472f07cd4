"""Tests for prep sheet workflow and reconciliation on save."""

from __future__ import annotations

from datetime import date

import pytest

from mise.errors import NotFoundError, SheetClosedError
from mise.models.snapshot import KitchenSnapshot
from mise.store import get_store
from mise.store.inventory import get_inventory_item
from mise.store.prep_sheets import (
    add_prep_task_adjustment,
    add_prep_task_note,
    close_prep_sheet,
    generate_prep_sheet,
    get_prep_sheet,
    prep_sheet_shortages,
    reset_prep_sheet,
    save_prep_sheet,
    set_prep_task_completion,
    update_prep_task_time,
)


def _stock(name: str) -> float:
    return next(item.quantity for item in get_store().snapshot.inventory if item.name == name)


def test_save_deducts_completed_tasks():
    set_prep_task_completion("task1", True)

    result = save_prep_sheet()

    assert [task.id for task in result.reconciled_tasks] == ["task1"]
    assert _stock("Tomatoes") == 3
    assert _stock("Onions") == 3
    assert get_inventory_item("1").last_checked.year >= 2025


def test_save_reconciles_each_task_once():
    set_prep_task_completion("task1", True)
    save_prep_sheet()

    assert save_prep_sheet().reconciled_tasks == []
    set_prep_task_completion("task1", False)
    set_prep_task_completion("task1", True)
    save_prep_sheet()

    assert _stock("Tomatoes") == 3
    assert get_store().snapshot.reconciled_task_ids == ["task1"]


def test_save_clamps_over_deduction():
    set_prep_task_completion("task1", True, 6)

    save_prep_sheet()

    assert _stock("Tomatoes") == 0


def test_completion_alone_does_not_touch_inventory():
    set_prep_task_completion("task1", True)
    set_prep_task_completion("task2", True)

    assert _stock("Tomatoes") == 5
    assert _stock("Onions") == 3


def test_reset_restores_sheet_and_inventory():
    set_prep_task_completion("task1", True)
    update_prep_task_time("task2", 45)
    save_prep_sheet()

    restored = reset_prep_sheet()

    assert restored.id == "sheet-2025-04-22"
    assert not restored.tasks[0].is_completed
    assert restored.total_estimated_time == 30
    assert _stock("Tomatoes") == 5
    assert get_store().snapshot.reconciled_task_ids == []


def test_notes_adjustments_and_time_updates_persist():
    add_prep_task_note("task1", "Check ripeness", "chef", is_urgent=True)
    add_prep_task_adjustment("task1", 1.8, "wastage", "bruised")
    update_prep_task_time("task1", "30")

    task = get_prep_sheet().tasks[0]
    assert task.notes[0].is_urgent
    assert task.adjustments[0].difference == pytest.approx(0.2)
    assert get_prep_sheet().total_estimated_time == 40


def test_generate_for_same_date_keeps_id_and_clears_reconciliation():
    set_prep_task_completion("task1", True)
    save_prep_sheet()

    sheet = generate_prep_sheet({"1": 2}, sheet_date=date(2025, 4, 22))

    assert sheet.id == "sheet-2025-04-22"
    assert [task.quantity for task in sheet.tasks] == [4, 1]
    assert get_store().snapshot.reconciled_task_ids == []


def test_generate_for_new_date_creates_new_sheet():
    sheet = generate_prep_sheet({"1": 1}, sheet_date=date(2025, 5, 1), estimated_times={("1", "Onions"): 5})

    assert sheet.id != "sheet-2025-04-22"
    assert sheet.weekday == "Thursday"
    assert sheet.total_estimated_time == 20
    assert get_prep_sheet() == sheet


def test_closed_sheet_rejects_changes_and_keeps_state():
    closed = close_prep_sheet()

    assert closed.status == "completed"
    with pytest.raises(SheetClosedError):
        set_prep_task_completion("task1", True)
    assert not get_prep_sheet().tasks[0].is_completed


def test_operations_without_sheet_raise_not_found():
    get_store().load(KitchenSnapshot(inventory=get_store().snapshot.inventory))

    assert get_prep_sheet() is None
    with pytest.raises(NotFoundError):
        save_prep_sheet()
    with pytest.raises(NotFoundError):
        set_prep_task_completion("task1", True)
    with pytest.raises(NotFoundError):
        prep_sheet_shortages()


def test_closed_sheet_cannot_be_regenerated_for_same_date():
    closed = close_prep_sheet()

    with pytest.raises(SheetClosedError):
        generate_prep_sheet({"1": 3}, sheet_date=date(2025, 4, 22))

    current = get_prep_sheet()
    assert current.status == "completed"
    assert [task.id for task in current.tasks] == [task.id for task in closed.tasks]


def test_generate_applies_ingredient_minutes():
    sheet = generate_prep_sheet(
        {"1": 1},
        sheet_date=date(2025, 5, 1),
        estimated_times={("1", "Onions"): 5},
        ingredient_minutes={"Tomatoes": 30, "Onions": 12},
    )

    assert [task.estimated_time for task in sheet.tasks] == [30, 5]


def test_shortages_cover_open_tasks_only():
    assert prep_sheet_shortages() == []

    sheet = generate_prep_sheet({"1": 3}, sheet_date=date(2025, 4, 22))
    shortages = prep_sheet_shortages()
    assert [(entry.ingredient_name, entry.required, entry.available) for entry in shortages] == [
        ("Tomatoes", 6, 5)
    ]

    set_prep_task_completion(sheet.tasks[0].id, True)
    save_prep_sheet()

    assert prep_sheet_shortages() == []
