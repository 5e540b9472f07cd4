"""Exceptions raised by the reconciliation engine and the kitchen store."""

from __future__ import annotations


class KitchenError(ValueError):
    """Base class for recoverable kitchen-operation failures."""


class NotFoundError(KitchenError):
    """Referenced inventory item, recipe, task, sheet or meal log does not exist."""


class InvalidInputError(KitchenError):
    """User input failed validation; no state was changed."""


class SheetClosedError(KitchenError):
    """The prep sheet is completed and can no longer be modified."""


__all__ = ["KitchenError", "NotFoundError", "InvalidInputError", "SheetClosedError"]
