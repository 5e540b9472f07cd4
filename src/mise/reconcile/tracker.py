"""Completion state, time estimates, notes and variance adjustments on prep sheets.

Every function returns a new model instance; nothing here touches inventory. Folding
completed work back into stock is the job of :mod:`mise.reconcile.updater`.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable, Optional

from mise import metrics
from mise.clock import new_id, utcnow
from mise.errors import NotFoundError, SheetClosedError
from mise.models.prep import (
    AdjustmentReason,
    PrepSheet,
    PrepSheetSummary,
    PrepTask,
    PrepTaskAdjustment,
    PrepTaskNote,
)
from mise.reconcile.validation import parse_minutes, parse_quantity, require_text

logger = logging.getLogger(__name__)


def find_task(sheet: PrepSheet, task_id: str) -> PrepTask:
    for task in sheet.tasks:
        if task.id == task_id:
            return task
    raise NotFoundError(f"Prep task {task_id} not found on sheet {sheet.id}")


def _ensure_open(sheet: PrepSheet) -> None:
    if sheet.status == "completed":
        raise SheetClosedError(f"Prep sheet {sheet.id} is completed")


def _replace_task(
    sheet: PrepSheet,
    task_id: str,
    change: Callable[[PrepTask], PrepTask],
) -> PrepSheet:
    _ensure_open(sheet)
    target = find_task(sheet, task_id)
    tasks = [change(task) if task.id == target.id else task for task in sheet.tasks]
    return sheet.model_copy(update={"tasks": tasks})


def recompute_total_time(sheet: PrepSheet) -> PrepSheet:
    total = sum(task.estimated_time for task in sheet.tasks)
    return sheet.model_copy(update={"total_estimated_time": total})


def set_task_completion(
    sheet: PrepSheet,
    task_id: str,
    is_completed: bool,
    completed_quantity: Optional[float] = None,
) -> PrepSheet:
    """Mark a task complete (recording the quantity produced) or incomplete.

    Completing without an explicit quantity records the planned quantity. Marking a task
    incomplete resets its completed quantity to zero; inventory already reconciled for
    the task is not restored.
    """

    if is_completed and completed_quantity is not None:
        completed_quantity = parse_quantity(completed_quantity, field="completedQuantity")

    def change(task: PrepTask) -> PrepTask:
        if not is_completed:
            return task.model_copy(update={"is_completed": False, "completed_quantity": 0.0})
        produced = task.quantity if completed_quantity is None else completed_quantity
        return task.model_copy(update={"is_completed": True, "completed_quantity": produced})

    updated = _replace_task(sheet, task_id, change)
    logger.debug(
        "Task %s completion=%s",
        task_id,
        is_completed,
        extra={"sheet_id": sheet.id, "task_id": task_id},
    )
    return updated


def update_task_time(sheet: PrepSheet, task_id: str, minutes: int | float | str) -> PrepSheet:
    """Set a task's estimated minutes and recompute the sheet total."""

    parsed = parse_minutes(minutes)
    updated = _replace_task(
        sheet,
        task_id,
        lambda task: task.model_copy(update={"estimated_time": parsed}),
    )
    return recompute_total_time(updated)


def record_adjustment(
    task: PrepTask,
    expected_quantity: float,
    actual_quantity: float,
    reason: AdjustmentReason,
    notes: str = "",
    *,
    now: Optional[datetime] = None,
) -> PrepTask:
    """Append a variance record to ``task``; ``difference`` may be negative."""

    expected = parse_quantity(expected_quantity, field="expectedQuantity")
    actual = parse_quantity(actual_quantity, field="actualQuantity")
    adjustment = PrepTaskAdjustment(
        id=new_id(),
        timestamp=now or utcnow(),
        expected_quantity=expected,
        actual_quantity=actual,
        difference=expected - actual,
        reason=reason,
        notes=(notes or "").strip(),
    )
    metrics.ADJUSTMENTS_RECORDED.labels(kind="prep_task", reason=reason).inc()
    return task.model_copy(update={"adjustments": [*task.adjustments, adjustment]})


def record_task_adjustment(
    sheet: PrepSheet,
    task_id: str,
    actual_quantity: float,
    reason: AdjustmentReason,
    notes: str = "",
    *,
    expected_quantity: Optional[float] = None,
    now: Optional[datetime] = None,
) -> PrepSheet:
    """Record an adjustment on a task of ``sheet``; expected defaults to the planned quantity."""

    return _replace_task(
        sheet,
        task_id,
        lambda task: record_adjustment(
            task,
            task.quantity if expected_quantity is None else expected_quantity,
            actual_quantity,
            reason,
            notes,
            now=now,
        ),
    )


def add_task_note(
    task: PrepTask,
    content: str,
    author: str,
    is_urgent: bool = False,
    *,
    now: Optional[datetime] = None,
) -> PrepTask:
    note = PrepTaskNote(
        id=new_id(),
        content=require_text(content, field="note"),
        timestamp=now or utcnow(),
        author=require_text(author, field="author"),
        is_urgent=is_urgent,
    )
    return task.model_copy(update={"notes": [*task.notes, note]})


def add_sheet_task_note(
    sheet: PrepSheet,
    task_id: str,
    content: str,
    author: str,
    is_urgent: bool = False,
    *,
    now: Optional[datetime] = None,
) -> PrepSheet:
    return _replace_task(
        sheet,
        task_id,
        lambda task: add_task_note(task, content, author, is_urgent, now=now),
    )


def complete_prep_sheet(sheet: PrepSheet) -> PrepSheet:
    """Close the sheet; a completed sheet cannot be reopened."""

    if sheet.status == "completed":
        return sheet
    logger.info("Prep sheet %s completed", sheet.id, extra={"sheet_id": sheet.id})
    return sheet.model_copy(update={"status": "completed"})


def summarize_prep_sheet(sheet: PrepSheet) -> PrepSheetSummary:
    total = len(sheet.tasks)
    completed = sum(1 for task in sheet.tasks if task.is_completed)
    return PrepSheetSummary(
        completed_tasks=completed,
        total_tasks=total,
        completion_percentage=math.floor(completed * 100 / total + 0.5) if total else 0,
        remaining_time=sum(task.estimated_time for task in sheet.tasks if not task.is_completed),
        total_estimated_time=sheet.total_estimated_time,
    )


__all__ = [
    "add_sheet_task_note",
    "add_task_note",
    "complete_prep_sheet",
    "find_task",
    "recompute_total_time",
    "record_adjustment",
    "record_task_adjustment",
    "set_task_completion",
    "summarize_prep_sheet",
    "update_task_time",
]
