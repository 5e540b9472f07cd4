"""Shared helpers for integration tests."""

from __future__ import annotations

from mise.config import get_settings


def auth_headers() -> dict[str, str]:
    token = get_settings().api_token
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def find_by_name(items: list[dict], name: str) -> dict:
    return next(item for item in items if item["name"] == name)
