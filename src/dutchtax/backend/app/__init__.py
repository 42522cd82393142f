"""Application factory for the DutchTax paycheck API."""

from __future__ import annotations

import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from dutchtax.backend.exceptions import UnsupportedYearError

from .http import problem_response, unsupported_year_problem
from .routes import register_routes
from .routes.config import get_configuration_metadata

_LOGGER = logging.getLogger(__name__)

ALLOWED_ORIGINS_ENV = "DUTCHTAX_ALLOWED_ORIGINS"


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def _register_error_handlers(app: Flask) -> None:
    """Map request and domain errors onto JSON problem responses."""

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(UnsupportedYearError)
    def handle_unsupported_year(error: UnsupportedYearError):
        return unsupported_year_problem(error).to_response()

    # UnsupportedYearError keeps its own handler above
    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)

    allowed_origins = _parse_allowed_origins(os.getenv(ALLOWED_ORIGINS_ENV))
    if not allowed_origins:
        _LOGGER.warning(
            "%s is empty; cross-origin requests will be rejected.", ALLOWED_ORIGINS_ENV
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )

    register_routes(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Report liveness together with the configured tax years."""

        return jsonify({"status": "ok", **get_configuration_metadata()})

    return app


__all__ = ["create_app"]
