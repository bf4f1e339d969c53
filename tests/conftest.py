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

from perutax.backend.app import create_app  # noqa: E402
from perutax.backend.config.year_config import BracketTable  # noqa: E402

REFERENCE_UIT = 4400.0
REFERENCE_BRACKETS = [
    {"width": 5, "rate": 0.08},
    {"width": 15, "rate": 0.14},
    {"width": 15, "rate": 0.17},
    {"width": 10, "rate": 0.20},
    {"width": None, "rate": 0.30},
]


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
def reference_table() -> BracketTable:
    """The five-bracket table in force since 2015."""

    return BracketTable.model_validate(REFERENCE_BRACKETS)
