"""WSGI entrypoint for deploying the Statutax backend behind Passenger."""

import logging

from statutax.backend.app import create_app

logging.basicConfig(level=logging.INFO)

# Passenger expects a module-level variable named ``application``.
application = create_app()
