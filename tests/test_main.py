"""
Tests for the EcoHabit impact API.

Run with:
    pytest tests/test_main.py -v
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the EcoHabit impact API!"}


def test_health_check():
    response = client.get("/api/v1/impact/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ---------------------------------------------------------------------------
# POST /api/v1/impact/estimate
# ---------------------------------------------------------------------------

def test_estimate_biking_by_km():
    response = client.post(
        "/api/v1/impact/estimate",
        json={"action_type": "biking", "description": "Rode to work", "quantity": 10, "unit": "km"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["recognized"] is True
    assert data["impact"] == {"co2_saved_kg": 2.1, "water_saved_liters": 20.0, "trees_preserved": 0.02}
    assert data["points"] == 28
    assert data["category"] == "Transportation"
    assert data["description"]["trees_description"] == "20g tree-equivalent preserved"


def test_estimate_defaults_quantity_and_unit():
    response = client.post("/api/v1/impact/estimate", json={"action_type": "recycling", "unit": None})
    assert response.status_code == 200
    data = response.json()
    assert data["quantity"] == 1.0
    assert data["unit"] == "times"
    assert data["impact"]["co2_saved_kg"] == 1.5


def test_estimate_unknown_type_is_zero_not_error():
    response = client.post(
        "/api/v1/impact/estimate",
        json={"action_type": "skydiving", "quantity": 5, "unit": "times"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["recognized"] is False
    assert data["impact"] == {"co2_saved_kg": 0.0, "water_saved_liters": 0.0, "trees_preserved": 0.0}
    assert data["points"] == 1
    assert data["category"] == "Other"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"action_type": ""},
        {"action_type": "biking", "quantity": -2},
        {"action_type": "biking", "quantity": 0},
        {"action_type": "recycling", "quantity": 1e308, "unit": "kg"},
        {"action_type": "biking", "quantity": 1_000_001},
    ],
)
def test_estimate_rejects_invalid_requests(payload):
    response = client.post("/api/v1/impact/estimate", json=payload)
    assert response.status_code == 422


def test_estimate_accepts_largest_quantity():
    response = client.post(
        "/api/v1/impact/estimate",
        json={"action_type": "recycling", "quantity": 1_000_000, "unit": "kg"},
    )
    assert response.status_code == 200
    assert response.json()["impact"]["co2_saved_kg"] == 2132000.0


@patch("app.api.v1.impact_endpoints.impact_estimator")
def test_estimate_unexpected_error_returns_500(mock_estimator):
    mock_estimator.estimate_all.side_effect = RuntimeError("boom")
    response = client.post("/api/v1/impact/estimate", json={"action_type": "biking"})
    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "IMPACT_ESTIMATE_FAILED"


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def test_list_action_types():
    response = client.get("/api/v1/impact/action-types")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 12
    biking = next(t for t in data if t["action_type"] == "biking")
    assert biking == {
        "action_type": "biking",
        "category": "Transportation",
        "units": ["km", "times"],
        "point_multiplier": 1.2,
    }


def test_rate_table_info():
    response = client.get("/api/v1/impact/rates")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "2024.1"
    assert data["action_types"] == 12
    assert data["recycling_blend"] == {"paper": 0.4, "plastic": 0.3, "glass": 0.2, "metal": 0.1}
    assert data["shower_baseline_minutes"] == 5.0
