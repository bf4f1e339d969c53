"""Expose fiscal year configuration consumed by the front-end.

The year selector needs the list of supported years with their UIT values,
and the results view can render bracket and deduction descriptions without
duplicating the YAML-backed rules.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from perutax.backend.app.http import problem_response
from perutax.backend.app.localization import get_translator
from perutax.backend.config.year_config import (
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from perutax.backend.services.calculation_service import range_label, serialise_range
from perutax.backend.services.calculators import (
    brackets_to_ranges,
    format_money,
    format_percentage,
)
from perutax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_year_summary(config: YearConfiguration) -> dict[str, Any]:
    return {
        "year": config.year,
        "unit_value": config.unit_value,
        "unit_value_label": format_money(config.unit_value),
    }


def _serialise_year(config: YearConfiguration, locale: str | None) -> dict[str, Any]:
    translator = get_translator(locale)
    ranges = brackets_to_ranges(config.brackets)

    brackets = [
        {
            "width_in_units": bracket.width_in_units,
            "rate": bracket.rate,
            "rate_label": format_percentage(bracket.rate),
            "range_in_units": serialise_range(bracket_range),
            "range": serialise_range(bracket_range.scaled(config.unit_value)),
            "label": range_label(bracket_range, translator),
        }
        for bracket, bracket_range in zip(config.brackets.brackets, ranges)
    ]

    first = config.deductions.first
    second = config.deductions.second

    return {
        **_serialise_year_summary(config),
        "locale": translator.locale,
        "description": translator.format("config.unit_value", year=config.year),
        "brackets": brackets,
        "deductions": {
            "first": {
                "percentage": first.percentage,
                "limit_in_units": first.limit_in_units,
                "limit": first.limit_in_units * config.unit_value,
            },
            "second": {
                "amount_in_units": second.amount_in_units,
                "expected_amount": second.amount_in_units * config.unit_value,
            },
        },
        "meta": dict(config.meta),
    }


@blueprint.get("/meta")
def get_meta():
    """Return the application version."""

    return jsonify({"version": get_project_version()})


@blueprint.get("/years")
def list_years():
    """List supported fiscal years with their UIT values."""

    years = [
        _serialise_year_summary(load_year_configuration(year))
        for year in available_years()
    ]
    default_year = years[-1]["year"] if years else None
    return jsonify({"years": years, "default_year": default_year})


@blueprint.get("/<int:year>")
def get_year(year: int):
    """Return the bracket table and deduction parameters for ``year``."""

    try:
        configuration = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response(
            "not_found", status=404, message=str(exc), year=year
        ).to_response()

    return jsonify(_serialise_year(configuration, request.args.get("locale")))
