"""Expose the configured rate tables to API clients.

Front-ends use these endpoints to populate the year selector and to show the
brackets that a calculation will apply, without duplicating the YAML data.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from dutchtax.backend.app.services.calculators import (
    Percentage,
    format_percentage,
    resolve_rate,
)
from dutchtax.backend.config.year_config import (
    BracketTable,
    RateSelector,
    TaxBracket,
    TaxRates,
    default_rate_provider,
)
from dutchtax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    provider = default_rate_provider()
    return {
        "version": get_project_version(),
        "supported_years": list(provider.get_supported_years()),
        "default_year": provider.get_current_year(),
    }


def _serialise_bracket(bracket: TaxBracket) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "bracket": bracket.order,
        "min": bracket.lower_bound,
        "max": bracket.upper_bound,
        "rate": bracket.rate,
    }
    if isinstance(resolve_rate(bracket.rate), Percentage):
        payload["label"] = format_percentage(bracket.rate)
    for selector, key in ((RateSelector.SOCIAL, "social"), (RateSelector.OLDER, "older")):
        if bracket.rate_for(selector) != bracket.rate:
            payload[key] = bracket.rate_for(selector)
    return payload


def _serialise_table(table: BracketTable) -> list[dict[str, Any]]:
    return [_serialise_bracket(bracket) for bracket in table]


def _serialise_rates(rates: TaxRates) -> dict[str, Any]:
    thresholds = rates.ruling_thresholds
    return {
        "year": rates.year,
        "tables": {name: _serialise_table(table) for name, table in rates.tables().items()},
        "ruling": {
            "thresholds": {
                "normal": thresholds.normal,
                "young": thresholds.young,
                "research": thresholds.research,
            },
            "max_salary": rates.ruling_max_salary,
        },
        "low_wage_threshold": rates.low_wage_threshold,
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    payload = get_configuration_metadata()
    return jsonify(payload), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years together with the working-time constants."""

    provider = default_rate_provider()
    payload = {
        "years": list(provider.get_supported_years()),
        "default_year": provider.get_current_year(),
        "working_weeks": provider.get_working_weeks(),
        "working_days": provider.get_working_days(),
        "default_working_hours": provider.get_default_working_hours(),
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/rates")
def get_year_rates(year: int) -> tuple[Any, int]:
    """Return every bracket table configured for ``year``.

    Unknown years raise ``UnsupportedYearError`` which the application maps
    to a 404 problem response.
    """

    rates = default_rate_provider().get_tax_rates_for_year(year)
    return jsonify(_serialise_rates(rates)), 200
