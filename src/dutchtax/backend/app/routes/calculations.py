"""REST endpoints for paycheck calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from dutchtax.backend.app.services.calculation_service import calculate_tax
from dutchtax.backend.services.request_parser import parse_calculation_payload
from dutchtax.backend.services.response_builder import build_calculation_response

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Calculate a paycheck for the submitted JSON payload.

    Unsupported years and invalid input propagate to the application's error
    handlers, which turn them into problem responses.
    """

    payload = parse_calculation_payload(request)
    result = calculate_tax(payload)

    return build_calculation_response(result)
