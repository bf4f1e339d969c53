"""Application factory for the PeruTax backend services."""

from __future__ import annotations

import os
from warnings import warn

from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, NotFound

from .http import problem_from_http_error, problem_response


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    # Routes pull in the calculation services, which in turn import the
    # models of this package.
    from .routes import register_routes
    from .routes.config import get_configuration_metadata

    app = Flask(__name__)
    app.json.sort_keys = False

    allowed_origins = _parse_allowed_origins(os.getenv("PERUTAX_ALLOWED_ORIGINS"))

    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        return {"status": "ok", **get_configuration_metadata()}

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        return problem_from_http_error(
            error, "bad_request", default_message="Invalid request"
        ).to_response()

    @app.errorhandler(NotFound)
    def handle_not_found(error: NotFound):
        return problem_from_http_error(error, "not_found").to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    return app
