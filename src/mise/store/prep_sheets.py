"""Prep sheet access helpers and inventory reconciliation on save."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Mapping, Optional

from mise.config import get_settings
from mise.errors import NotFoundError
from mise.models.inventory import InventoryItem
from mise.models.prep import AdjustmentReason, IngredientShortage, PrepSheet, PrepTask
from mise.reconcile.deriver import TaskKey, build_prep_sheet, regenerate_prep_sheet
from mise.reconcile.ledger import task_shortages
from mise.reconcile.tracker import (
    add_sheet_task_note,
    complete_prep_sheet,
    record_task_adjustment,
    set_task_completion,
    update_task_time,
)
from mise.reconcile.updater import apply_completed_tasks

from .repository import KitchenDraft, get_store, store_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrepSheetSaveResult:
    """Outcome of reconciling a prep sheet into inventory."""

    sheet: PrepSheet
    reconciled_tasks: List[PrepTask]
    inventory: List[InventoryItem]


def _require_sheet(draft: KitchenDraft) -> PrepSheet:
    if draft.prep_sheet is None:
        raise NotFoundError("No prep sheet has been generated")
    return draft.prep_sheet


def get_prep_sheet() -> Optional[PrepSheet]:
    return get_store().snapshot.prep_sheet


def generate_prep_sheet(
    batches: Mapping[str, float],
    *,
    sheet_date: Optional[date] = None,
    estimated_times: Optional[Mapping[TaskKey, int]] = None,
    ingredient_minutes: Optional[Mapping[str, int]] = None,
) -> PrepSheet:
    """Derive a fresh sheet from the recipe catalog, replacing any existing sheet.

    Regenerating a sheet for the same date keeps the sheet id and drops its previous
    tasks along with their reconciliation state. A completed sheet for the same date
    raises ``SheetClosedError``; only a reset brings it back.
    """

    settings = get_settings()
    target_date = sheet_date or date.today()
    with store_scope() as draft:
        current = draft.prep_sheet
        if current is not None and current.date == target_date:
            sheet = regenerate_prep_sheet(
                current,
                draft.recipes,
                batches,
                estimated_times=estimated_times,
                ingredient_minutes=ingredient_minutes,
                default_minutes=settings.default_task_minutes,
            )
            previous_ids = {task.id for task in current.tasks}
            draft.reconciled_task_ids = [
                task_id for task_id in draft.reconciled_task_ids if task_id not in previous_ids
            ]
        else:
            sheet = build_prep_sheet(
                draft.recipes,
                batches,
                sheet_date=target_date,
                estimated_times=estimated_times,
                ingredient_minutes=ingredient_minutes,
                default_minutes=settings.default_task_minutes,
            )
            draft.reconciled_task_ids = []
        draft.prep_sheet = sheet
    logger.info(
        "Generated prep sheet %s with %d task(s)",
        sheet.id,
        len(sheet.tasks),
        extra={"sheet_id": sheet.id},
    )
    return sheet


def set_prep_task_completion(
    task_id: str,
    is_completed: bool,
    completed_quantity: Optional[float] = None,
) -> PrepSheet:
    with store_scope() as draft:
        draft.prep_sheet = set_task_completion(
            _require_sheet(draft), task_id, is_completed, completed_quantity
        )
    return draft.prep_sheet


def update_prep_task_time(task_id: str, minutes: int | float | str) -> PrepSheet:
    with store_scope() as draft:
        draft.prep_sheet = update_task_time(_require_sheet(draft), task_id, minutes)
    return draft.prep_sheet


def add_prep_task_adjustment(
    task_id: str,
    actual_quantity: float,
    reason: AdjustmentReason,
    notes: str = "",
    *,
    expected_quantity: Optional[float] = None,
) -> PrepSheet:
    with store_scope() as draft:
        draft.prep_sheet = record_task_adjustment(
            _require_sheet(draft),
            task_id,
            actual_quantity,
            reason,
            notes,
            expected_quantity=expected_quantity,
        )
    return draft.prep_sheet


def add_prep_task_note(task_id: str, content: str, author: str, is_urgent: bool = False) -> PrepSheet:
    with store_scope() as draft:
        draft.prep_sheet = add_sheet_task_note(_require_sheet(draft), task_id, content, author, is_urgent)
    return draft.prep_sheet


def save_prep_sheet() -> PrepSheetSaveResult:
    """Deduct completed, not yet reconciled tasks from inventory.

    Each task is reconciled at most once. A task un-completed after reconciliation keeps
    its deduction; completing it again does not deduct a second time.
    """

    with store_scope() as draft:
        sheet = _require_sheet(draft)
        already = set(draft.reconciled_task_ids)
        pending = [task for task in sheet.tasks if task.is_completed and task.id not in already]
        draft.inventory = apply_completed_tasks(draft.inventory, pending)
        draft.reconciled_task_ids = [*draft.reconciled_task_ids, *(task.id for task in pending)]
        result = PrepSheetSaveResult(
            sheet=sheet,
            reconciled_tasks=pending,
            inventory=list(draft.inventory),
        )
    logger.info(
        "Prep sheet %s saved; %d task(s) reconciled into inventory",
        sheet.id,
        len(pending),
        extra={"sheet_id": sheet.id},
    )
    return result


def reset_prep_sheet() -> Optional[PrepSheet]:
    """Revert the sheet and inventory to the initially loaded state."""

    return get_store().reset_prep_sheet().prep_sheet


def prep_sheet_shortages() -> List[IngredientShortage]:
    """Shortages for the current sheet's tasks that have not been reconciled yet."""

    snapshot = get_store().snapshot
    if snapshot.prep_sheet is None:
        raise NotFoundError("No prep sheet has been generated")
    reconciled = set(snapshot.reconciled_task_ids)
    pending = [task for task in snapshot.prep_sheet.tasks if task.id not in reconciled]
    return task_shortages(pending, snapshot.inventory)


def close_prep_sheet() -> PrepSheet:
    with store_scope() as draft:
        draft.prep_sheet = complete_prep_sheet(_require_sheet(draft))
    return draft.prep_sheet


__all__ = [
    "PrepSheetSaveResult",
    "add_prep_task_adjustment",
    "add_prep_task_note",
    "close_prep_sheet",
    "generate_prep_sheet",
    "get_prep_sheet",
    "prep_sheet_shortages",
    "reset_prep_sheet",
    "save_prep_sheet",
    "set_prep_task_completion",
    "update_prep_task_time",
]
