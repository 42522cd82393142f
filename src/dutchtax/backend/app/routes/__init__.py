"""Blueprint registrations for application routes."""

from flask import Blueprint, Flask

from .calculations import blueprint as calculations_blueprint
from .config import blueprint as config_blueprint

BLUEPRINTS: tuple[Blueprint, ...] = (calculations_blueprint, config_blueprint)


def register_routes(app: Flask) -> None:
    """Register every API blueprint with ``app``."""

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
