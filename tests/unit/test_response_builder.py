"""Unit tests for response formatting helpers."""

from __future__ import annotations

import pytest
from flask import Flask

from dutchtax.backend.services.response_builder import build_calculation_response


def test_build_calculation_response_returns_json(app: Flask) -> None:
    """Formatting helper should generate a JSON response tuple."""

    body = {"result": {"net_year": 43712.8}, "meta": {"year": 2025, "period": "year"}}

    with app.app_context():
        response, status = build_calculation_response(body)

    assert status == 200
    assert response.get_json() == body


def test_build_calculation_response_requires_result(app: Flask) -> None:
    with app.app_context():
        with pytest.raises(ValueError):
            build_calculation_response({"meta": {}})
