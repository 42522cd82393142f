"""Integration tests for the paycheck calculation REST endpoint."""

from __future__ import annotations

import json
from http import HTTPStatus
from pathlib import Path
from typing import Dict, Iterable

import pytest
from flask.testing import FlaskClient

DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "regression_scenarios.json"


def _load_scenarios() -> Iterable[Dict[str, object]]:
    with DATA_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.mark.parametrize("scenario", _load_scenarios(), ids=lambda item: item["name"])
def test_calculation_endpoint_matches_regression_scenarios(
    client: FlaskClient, scenario: Dict[str, object]
) -> None:
    """Each regression scenario should remain stable over time."""

    response = client.post("/api/v1/calculations", json=scenario["payload"])
    assert response.status_code == HTTPStatus.OK

    payload = response.get_json()
    expected = scenario["expectations"]

    assert payload["meta"] == expected["meta"]
    for key, value in expected["result"].items():
        assert payload["result"][key] == pytest.approx(value), key


def test_calculation_endpoint_reads_year_from_query(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations?year=2024", json={"income": 60000})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["year"] == 2024


def test_calculation_endpoint_returns_bad_request_for_non_json(client: FlaskClient) -> None:
    """Invalid payloads should return a structured 400 response."""

    response = client.post(
        "/api/v1/calculations",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert "JSON" in payload["message"].upper()


def test_calculation_endpoint_handles_validation_errors(client: FlaskClient) -> None:
    """Domain validation errors should surface as 400 responses."""

    response = client.post(
        "/api/v1/calculations",
        json={"year": 2025, "income": -1},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "cannot be negative" in payload["message"].lower()


def test_calculation_endpoint_rejects_out_of_range_hours(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"year": 2025, "income": 20, "period": "hour", "hours": 200},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


@pytest.mark.parametrize("body", ['{"year": 2025, "income": 1e999}', '{"year": 2025, "income": NaN}'])
def test_calculation_endpoint_rejects_non_finite_income(client: FlaskClient, body: str) -> None:
    response = client.post(
        "/api/v1/calculations",
        data=body,
        content_type="application/json",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "finite number" in payload["message"]


def test_calculation_endpoint_reports_overflowing_income(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"year": 2025, "income": 1e308, "period": "month"},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


def test_calculation_endpoint_rejects_unknown_period(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"year": 2025, "income": 20, "period": "fortnight"},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "period" in response.get_json()["message"]


def test_calculation_endpoint_reports_unsupported_year(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json={"year": 1999, "income": 1000})

    assert response.status_code == HTTPStatus.NOT_FOUND
    payload = response.get_json()
    assert payload["error"] == "unsupported_year"
    assert payload["year"] == 1999
    assert payload["supported_years"] == [2024, 2025, 2026]


def test_calculation_endpoint_combines_allowance_and_ruling(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={
            "year": 2026,
            "income": 7000,
            "period": "month",
            "holiday_allowance": True,
            "ruling": {"enabled": True, "type": "young"},
        },
    )

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()["result"]
    assert result["gross_year"] == pytest.approx(84000.0)
    assert result["gross_allowance"] == pytest.approx(6222.22)
    assert result["tax_free_year"] > 0
    assert result["net_allowance"] > 0
