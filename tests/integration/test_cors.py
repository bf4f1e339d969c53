"""Cross-origin access to the calculation API from embedding sites."""

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

from perutax.backend.app import create_app

CALCULATOR_ORIGIN = "https://calculadora.example.pe"
UNLISTED_ORIGIN = "https://unlisted.example.com"


@pytest.fixture()
def cors_client(monkeypatch: pytest.MonkeyPatch) -> FlaskClient:
    monkeypatch.setenv("PERUTAX_ALLOWED_ORIGINS", f" {CALCULATOR_ORIGIN} ,,")

    app = create_app()
    app.config.update(TESTING=True)
    return app.test_client()


def test_calculation_preflight_allows_json_posts(cors_client: FlaskClient) -> None:
    response = cors_client.options(
        "/api/v1/calculations",
        headers={
            "Origin": CALCULATOR_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == HTTPStatus.OK
    assert response.headers.get("Access-Control-Allow-Origin") == CALCULATOR_ORIGIN
    assert "POST" in response.headers.get("Access-Control-Allow-Methods", "")
    allowed_headers = response.headers.get("Access-Control-Allow-Headers", "")
    assert "content-type" in allowed_headers.lower()


def test_calculation_response_carries_allow_origin(cors_client: FlaskClient) -> None:
    response = cors_client.post(
        "/api/v1/calculations",
        json={"year": 2021, "gross_yearly_income": 60_000},
        headers={"Origin": CALCULATOR_ORIGIN},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["summary"]["tax_total"] == pytest.approx(1_376)
    assert response.headers.get("Access-Control-Allow-Origin") == CALCULATOR_ORIGIN


def test_unlisted_origin_gets_no_cors_headers(cors_client: FlaskClient) -> None:
    response = cors_client.post(
        "/api/v1/calculations",
        json={"year": 2021, "gross_yearly_income": 60_000},
        headers={"Origin": UNLISTED_ORIGIN},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_health_endpoint_is_outside_the_cors_scope(cors_client: FlaskClient) -> None:
    response = cors_client.get("/health", headers={"Origin": CALCULATOR_ORIGIN})

    assert response.status_code == HTTPStatus.OK
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_missing_allow_list_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PERUTAX_ALLOWED_ORIGINS", raising=False)

    with pytest.warns(UserWarning, match="No allowed origins configured"):
        create_app()
