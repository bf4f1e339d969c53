"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

from perutax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"version": get_project_version()}


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    years = {entry["year"]: entry for entry in payload["years"]}
    assert set(years) == set(range(2012, 2023))
    assert payload["default_year"] == 2022
    assert years[2021]["unit_value"] == pytest.approx(4_400)
    assert years[2021]["unit_value_label"] == "S/ 4,400"


def test_year_endpoint_describes_brackets(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2021")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["locale"] == "es"
    assert payload["description"] == "Valor de la UIT para el ejercicio 2021"

    brackets = payload["brackets"]
    assert [entry["width_in_units"] for entry in brackets] == [5, 15, 15, 10, None]
    assert brackets[0]["label"] == "Hasta 5 UIT"
    assert brackets[-1]["label"] == "Desde 45 UIT"
    assert brackets[-1]["range"] == {"min": 198_000, "max": None}

    deductions = payload["deductions"]
    assert deductions["first"]["limit"] == pytest.approx(105_600)
    assert deductions["second"]["expected_amount"] == pytest.approx(30_800)


def test_year_endpoint_honours_locale(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2022?locale=en")

    payload = response.get_json()
    assert payload["locale"] == "en"
    assert payload["brackets"][1]["label"] == "5 UIT → 20 UIT"
    assert payload["unit_value"] == pytest.approx(4_600)


def test_year_endpoint_missing_year(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/1999")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"
    assert response.mimetype == "application/problem+json"
    assert response.get_json()["year"] == 1999
    assert response.get_json()["status"] == 404
