"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from dutchtax.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_returns_a_copy(app: Flask) -> None:
    body = {"year": 2025, "income": 5000, "period": "month"}

    with app.test_request_context("/api/v1/calculations", method="POST", json=body):
        payload = parse_calculation_payload(request)

    assert payload == body


def test_parse_payload_renames_camel_case_fields(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json={"income": 1000, "holidayAllowance": True, "socialSecurity": False},
    ):
        payload = parse_calculation_payload(request)

    assert payload == {"income": 1000, "holiday_allowance": True, "social_security": False}


def test_parse_payload_reads_year_from_query(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=2024", method="POST", json={"income": 1000}
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2024


def test_parse_payload_prefers_body_year(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=2024",
        method="POST",
        json={"income": 1000, "year": 2025},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2025


def test_parse_payload_rejects_invalid_year_query(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations?year=soon", method="POST", json={"income": 1000}
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    """Non-object JSON payloads should trigger BadRequest responses."""

    with app.test_request_context(
        "/api/v1/calculations",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_missing_body(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations", method="POST", data="x", content_type="text/plain"
    ):
        with pytest.raises(BadRequest, match="valid JSON"):
            parse_calculation_payload(request)
