"""Basic smoke tests for the seeded kitchen."""

from datetime import date

from mise.reconcile import build_prep_sheet
from mise.store import get_store


def test_seeded_store_builds_prep_sheet() -> None:
    snapshot = get_store().snapshot
    sheet = build_prep_sheet(snapshot.recipes, {"1": 1}, sheet_date=date(2025, 4, 22))

    assert sheet.weekday == "Tuesday"
    assert [task.ingredient_name for task in sheet.tasks] == ["Tomatoes", "Onions"]
