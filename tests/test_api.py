from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from planning_app.main import SCENARIOS, app
from planning_app.sample_data import build_sample_scenario


@pytest.fixture
def client():
    SCENARIOS.clear()
    yield TestClient(app)
    SCENARIOS.clear()


def _payload():
    return {"scenario": build_sample_scenario().model_dump(mode="json")}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_scenario_round_trip(client):
    created = client.post("/scenarios", json=_payload())
    assert created.status_code == 200
    assert created.json() == {"scenario_id": "sample"}
    assert client.get("/scenarios").json() == {"scenarios": ["sample"]}

    projection = client.get("/scenarios/sample")
    assert projection.status_code == 200
    result = projection.json()["result"]
    assert result["scenario_id"] == "base"
    assert len(result["treasury"]["months"]) == 60


def test_unknown_scenario_is_404(client):
    assert client.get("/scenarios/missing").status_code == 404
    assert client.post("/run", json={"scenario_id": "missing"}).status_code == 404


def test_run_variant_inline(client):
    payload = _payload()
    payload["variant"] = "ambitious"
    response = client.post("/run", json=payload)
    assert response.status_code == 200
    assert response.json()["result"]["scenario_id"] == "ambitious"


def test_compare_variants(client):
    client.post("/scenarios", json=_payload())
    body = client.get("/scenarios/sample/compare").json()
    assert body["scenario_ids"] == ["sample"]
    assert {row["scenario_id"] for row in body["rows"]} == {"conservative", "base", "ambitious"}


def test_invalid_snapshot_is_rejected(client):
    payload = _payload()
    payload["scenario"]["treasury"]["revenue_seasonality"]["weights"] = [1.0] * 5
    assert client.post("/scenarios", json=payload).status_code == 422


def test_valuation_endpoint(client):
    response = client.post(
        "/valuation",
        json={
            "metrics": {"revenue": 1000000, "ebitda": 100000},
            "methods": ["revenue_multiple", "ebitda_multiple"],
        },
    )
    body = response.json()
    assert [item["value"] for item in body["results"]] == [3000000, 800000]
    assert body["average_valuation"] == pytest.approx(1900000)


def test_dilution_endpoint(client):
    response = client.post("/dilution", json={"settings": {"total_raise": 500000}, "reference_ebitda": 100000})
    result = response.json()["result"]
    assert result["pre_money"] == 600000
    assert result["dilution"] == pytest.approx(500000 / 1100000)
