"""In-memory kitchen store with an explicit load/reset lifecycle."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, List, Optional

from mise.config import get_settings
from mise.models.inventory import InventoryItem
from mise.models.meal import MealLog
from mise.models.prep import PrepSheet
from mise.models.recipe import Recipe
from mise.models.snapshot import KitchenSnapshot
from mise.store.fixtures import load_snapshot

logger = logging.getLogger(__name__)


@dataclass
class KitchenDraft:
    """Mutable working copy handed out by :meth:`KitchenStore.transaction`."""

    inventory: List[InventoryItem] = field(default_factory=list)
    recipes: List[Recipe] = field(default_factory=list)
    meal_logs: List[MealLog] = field(default_factory=list)
    prep_sheet: Optional[PrepSheet] = None
    reconciled_task_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: KitchenSnapshot) -> "KitchenDraft":
        return cls(
            inventory=list(snapshot.inventory),
            recipes=list(snapshot.recipes),
            meal_logs=list(snapshot.meal_logs),
            prep_sheet=snapshot.prep_sheet,
            reconciled_task_ids=list(snapshot.reconciled_task_ids),
        )

    def to_snapshot(self) -> KitchenSnapshot:
        return KitchenSnapshot(
            inventory=self.inventory,
            recipes=self.recipes,
            meal_logs=self.meal_logs,
            prep_sheet=self.prep_sheet,
            reconciled_task_ids=self.reconciled_task_ids,
        )


class KitchenStore:
    """Holds the current kitchen snapshot plus the snapshot it was loaded from."""

    def __init__(self, snapshot: Optional[KitchenSnapshot] = None) -> None:
        self._lock = threading.Lock()
        self._initial = snapshot or KitchenSnapshot()
        self._current = self._initial
        self._version = 0

    @property
    def snapshot(self) -> KitchenSnapshot:
        return self._current

    @property
    def initial(self) -> KitchenSnapshot:
        return self._initial

    @property
    def version(self) -> int:
        """Number of committed changes since construction."""

        return self._version

    def load(self, snapshot: KitchenSnapshot) -> None:
        """Replace both the current and the initial snapshot."""

        with self._lock:
            self._initial = snapshot
            self._current = snapshot
            self._version += 1
        logger.info(
            "Kitchen store loaded: %d inventory item(s), %d recipe(s), %d meal log(s)",
            len(snapshot.inventory),
            len(snapshot.recipes),
            len(snapshot.meal_logs),
        )

    def reset(self) -> None:
        """Discard every change since the last load."""

        with self._lock:
            self._current = self._initial
            self._version += 1
        logger.info("Kitchen store reset to initial snapshot")

    def reset_prep_sheet(self) -> KitchenSnapshot:
        """Restore prep sheet, inventory and reconciliation state from the initial snapshot.

        Recipes and meal logs keep their current state.
        """

        with self.transaction() as draft:
            draft.prep_sheet = self._initial.prep_sheet
            draft.inventory = list(self._initial.inventory)
            draft.reconciled_task_ids = list(self._initial.reconciled_task_ids)
        return self._current

    @contextmanager
    def transaction(self) -> Generator[KitchenDraft, None, None]:
        """Yield a draft; commit it atomically on success, drop it on error."""

        with self._lock:
            draft = KitchenDraft.from_snapshot(self._current)
            yield draft
            self._current = draft.to_snapshot()
            self._version += 1


_store: KitchenStore | None = None
_store_guard = threading.Lock()


def get_store(fixtures_path: Path | None = None) -> KitchenStore:
    """Return the shared store, seeding it from fixtures on first use."""
    global _store

    with _store_guard:
        if _store is None:
            settings = get_settings()
            _store = KitchenStore(load_snapshot(fixtures_path or settings.fixtures_path))
        return _store


@contextmanager
def store_scope() -> Generator[KitchenDraft, None, None]:
    """Open a transaction on the shared store."""

    with get_store().transaction() as draft:
        yield draft


def reset_store_state() -> None:
    """Drop the shared store (intended for testing)."""
    global _store

    with _store_guard:
        _store = None


__all__ = [
    "KitchenDraft",
    "KitchenStore",
    "get_store",
    "reset_store_state",
    "store_scope",
]
