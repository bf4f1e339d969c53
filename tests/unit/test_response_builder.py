"""Unit tests for response formatting helpers."""

from __future__ import annotations

from flask import Flask

from perutax.backend.services.response_builder import build_calculation_response


def test_build_calculation_response_returns_json(app: Flask) -> None:
    with app.app_context():
        response, status = build_calculation_response({"summary": {"tax_total": 0}})

    assert status == 200
    assert response.get_json() == {"summary": {"tax_total": 0}}
    assert "Content-Language" not in response.headers


def test_build_calculation_response_sets_content_language(app: Flask) -> None:
    with app.app_context():
        response, _ = build_calculation_response({"meta": {"locale": "en"}})

    assert response.headers["Content-Language"] == "en"
