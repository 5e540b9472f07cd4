"""Logging setup for the API and CLI, with API token redaction."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List

REDACTED = "[redacted]"

# Extra attributes callers attach via ``extra=``; copied into JSON output when present.
CONTEXT_FIELDS = ("request_id", "sheet_id", "task_id", "meal_log_id")

_TOKEN_PATTERNS = (
    re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE),
    re.compile(r"(api_token=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(X-API-Key[=:]\s*)([^&\s]+)", re.IGNORECASE),
)


def redact(message: str, secrets: Iterable[str] = ()) -> str:
    """Mask auth token patterns and any literal secret values in ``message``."""

    for pattern in _TOKEN_PATTERNS:
        message = pattern.sub(r"\1" + REDACTED, message)
    for secret in secrets:
        if secret:
            message = message.replace(secret, REDACTED)
    return message


class SecretRedactionFilter(logging.Filter):
    """Rewrite log records so configured secrets never reach a handler."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets: List[str] = [secret.strip() for secret in secrets if secret and secret.strip()]

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        message = record.getMessage()
        cleaned = redact(message, self._secrets)
        if cleaned != message:
            record.msg = cleaned
            record.args = ()

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if isinstance(value, str):
                setattr(record, field, redact(value, self._secrets))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including kitchen context fields."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if (value := getattr(record, field, None)) is not None:
                payload[field] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single root handler using plain or JSON output."""

    numeric_level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if (fmt or "plain").lower() == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)

    redaction = SecretRedactionFilter(secrets)
    handler.addFilter(redaction)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.setLevel(numeric_level)
        logger.propagate = True
        logger.addFilter(redaction)
