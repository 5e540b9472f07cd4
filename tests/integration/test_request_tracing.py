"""Integration tests covering request ID propagation."""

from __future__ import annotations


def test_request_id_echoed_on_prep_sheet_reads(client):
    response = client.get("/prep-sheet", headers={"X-Request-ID": "prep-check-1"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "prep-check-1"


def test_request_id_generated_for_rejected_requests(client):
    response = client.put("/prep-sheet/tasks/missing/time", json={"estimatedTime": 10})

    assert response.status_code == 404
    generated = response.headers.get("X-Request-ID")
    assert generated
    assert len(generated) == 32
