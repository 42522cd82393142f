"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

# Fields that older clients sent with camelCase names
_FIELD_ALIASES = {
    "holidayAllowance": "holiday_allowance",
    "socialSecurity": "social_security",
}


def _normalise_keys(payload: dict[str, Any]) -> None:
    for alias, name in _FIELD_ALIASES.items():
        if alias in payload and name not in payload:
            payload[name] = payload.pop(alias)


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``.

    A ``year`` query parameter is used when the body does not name one.
    """

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _normalise_keys(payload)

    year_param = req.args.get("year")
    if year_param and payload.get("year") is None:
        try:
            payload["year"] = int(year_param)
        except ValueError as exc:
            raise BadRequest("Query parameter 'year' must be an integer") from exc

    return payload
