"""Integration tests for metrics endpoint."""

from __future__ import annotations

from tests.integration.utils import auth_headers


def test_metrics_endpoint_available(client):
    client.get("/inventory")

    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "mise_http_requests_total" in body


def test_reconciliation_metrics_recorded(client):
    client.put("/prep-sheet/tasks/task1/completion", json={"isCompleted": True}, headers=auth_headers())
    client.post("/prep-sheet/save", headers=auth_headers())

    body = client.get("/metrics").content.decode()
    assert 'mise_inventory_deductions_total{result="applied"}' in body
    assert 'mise_deferred_actions_total{key="prep-sheet",status="completed"}' in body


def test_health_endpoint(client):
    assert client.get("/health").json()["status"] == "ok"
