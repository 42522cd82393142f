"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from dutchtax.backend.app import create_app  # noqa: E402
from dutchtax.backend.config.year_config import (  # noqa: E402
    TaxRates,
    YamlRateProvider,
    default_rate_provider,
)


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def provider() -> YamlRateProvider:
    """Return the provider over the bundled rate files."""

    return default_rate_provider()


@pytest.fixture()
def rates_2025(provider: YamlRateProvider) -> TaxRates:
    return provider.get_tax_rates_for_year(2025)
