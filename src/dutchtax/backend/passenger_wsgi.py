"""WSGI entrypoint for deploying the DutchTax API behind Passenger."""

from dutchtax.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
