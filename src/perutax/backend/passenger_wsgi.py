"""WSGI entrypoint for deploying the PeruTax backend behind Passenger."""

from perutax.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
