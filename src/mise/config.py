"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    fixtures_path: Optional[Path] = Field(
        default=None,
        description="JSON file used to seed the in-memory kitchen store.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    simulated_latency_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Delay applied to deferred save/reset/log actions.",
    )
    default_task_minutes: int = Field(
        default=15,
        ge=1,
        description="Estimated minutes assigned to derived prep tasks without an override.",
    )
    expiry_warning_days: int = Field(
        default=7,
        ge=0,
        description="Items expiring within this many days are flagged as expiring soon.",
    )
    meal_log_deducts_inventory: bool = Field(
        default=False,
        description="Deduct recipe ingredients from inventory when a meal is logged.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (fixtures_path := _env("MISE_FIXTURES_PATH")):
        payload["fixtures_path"] = Path(fixtures_path)
    if (api_token := _env("MISE_API_TOKEN")):
        payload["api_token"] = api_token
    if (log_level := _env("MISE_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("MISE_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("MISE_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (latency := _env("MISE_SIMULATED_LATENCY")):
        try:
            payload["simulated_latency_seconds"] = float(latency)
        except ValueError:
            pass
    if (task_minutes := _env("MISE_DEFAULT_TASK_MINUTES")):
        try:
            payload["default_task_minutes"] = int(task_minutes)
        except ValueError:
            pass
    if (expiry_days := _env("MISE_EXPIRY_WARNING_DAYS")):
        try:
            payload["expiry_warning_days"] = int(expiry_days)
        except ValueError:
            pass
    if (meal_deduct := _env("MISE_MEAL_LOG_DEDUCTS_INVENTORY")):
        payload["meal_log_deducts_inventory"] = _coerce_bool(meal_deduct)
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
