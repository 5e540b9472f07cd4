"""Prometheus metrics definitions for Mise."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "mise_http_requests_total",
    "Total number of HTTP requests processed by the Mise API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "mise_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Mise API",
    ["method", "path"],
)

INVENTORY_DEDUCTIONS = Counter(
    "mise_inventory_deductions_total",
    "Inventory deductions by outcome (applied, clamped, unmatched)",
    ["result"],
)

ADJUSTMENTS_RECORDED = Counter(
    "mise_adjustments_recorded_total",
    "Variance adjustments recorded against prep tasks and meal logs",
    ["kind", "reason"],
)

DEFERRED_ACTIONS = Counter(
    "mise_deferred_actions_total",
    "Deferred store actions by key family and outcome",
    ["key", "status"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "INVENTORY_DEDUCTIONS",
    "ADJUSTMENTS_RECORDED",
    "DEFERRED_ACTIONS",
]
