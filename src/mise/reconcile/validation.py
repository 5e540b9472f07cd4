"""Parsing of raw form input into validated numbers and strings."""

from __future__ import annotations

import math
from typing import Union

from mise.errors import InvalidInputError

RawNumber = Union[str, int, float]


def require_text(value: str | None, *, field: str) -> str:
    """Return ``value`` stripped, rejecting missing or blank input."""

    if value is None or not str(value).strip():
        raise InvalidInputError(f"{field} is required")
    return str(value).strip()


def parse_quantity(raw: RawNumber | None, *, field: str = "quantity") -> float:
    """Parse a non-negative quantity from user input."""

    if raw is None or isinstance(raw, bool):
        raise InvalidInputError(f"{field} must be a number")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidInputError(f"{field} is required")
        try:
            value = float(text)
        except ValueError as exc:
            raise InvalidInputError(f"{field} must be a number, got {raw!r}") from exc
    else:
        value = float(raw)

    if not math.isfinite(value):
        raise InvalidInputError(f"{field} must be a finite number")
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative")
    return value


def parse_minutes(raw: RawNumber | None, *, field: str = "estimatedTime") -> int:
    """Parse a positive whole number of minutes."""

    value = parse_quantity(raw, field=field)
    if value <= 0 or not value.is_integer():
        raise InvalidInputError(f"{field} must be a positive whole number of minutes")
    return int(value)


__all__ = ["parse_minutes", "parse_quantity", "require_text"]
