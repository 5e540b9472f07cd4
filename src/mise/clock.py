"""Time and identifier sources shared by the engine and the store."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


__all__ = ["new_id", "utcnow"]
