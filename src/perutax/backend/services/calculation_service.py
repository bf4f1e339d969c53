"""Orchestrate request validation, year lookup and the income tax calculation.

The calculation service turns an API payload into the three inputs of the
core computation (unit value, gross income and bracket table), runs it and
decorates the result with localized labels so the front-end only has to lay
out rows. Profiling hooks and payload validation live here to give the rest
of the application a simple ``calculate_tax`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from perutax.backend.app.localization import Translator, get_translator
from perutax.backend.app.models import (
    BracketRange,
    CalculationInput,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    format_validation_error,
)
from perutax.backend.config.year_config import (
    YearConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    compute_income_tax,
    format_money,
    format_percentage,
    format_units,
    round_rate,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("PERUTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int | None) -> YearConfiguration:
    if year is None:
        year = default_year()
        if year is None:
            raise ValueError("No fiscal years are configured")
    try:
        return load_year_configuration(year)
    except FileNotFoundError as exc:
        raise ValueError(f"Fiscal year {year} is not supported") from exc


def _normalise_payload(
    request: CalculationRequest, config: YearConfiguration
) -> CalculationInput:
    return CalculationInput(
        year=config.year,
        locale=request.locale or "es",
        gross_yearly_income=request.effective_gross_income,
        income_source="breakdown" if request.use_breakdown else "direct",
        breakdown_item_count=len(request.breakdown_items) if request.use_breakdown else 0,
    )


def range_label(bracket_range: BracketRange, translator: Translator) -> str:
    """Describe a bracket range in tax units (``Hasta 5 UIT``)."""

    if bracket_range.is_open_ended:
        return translator.format(
            "brackets.range.from", min=format_units(bracket_range.min)
        )
    if bracket_range.min == 0:
        return translator.format(
            "brackets.range.up_to", max=format_units(bracket_range.max)
        )
    return translator.format(
        "brackets.range.between",
        min=format_units(bracket_range.min),
        max=format_units(bracket_range.max),
    )


def serialise_range(bracket_range: BracketRange) -> dict[str, float | None]:
    """Return a JSON-safe range; open upper bounds become ``None``."""

    return {
        "min": bracket_range.min,
        "max": None if bracket_range.is_open_ended else bracket_range.max,
    }


def _serialise_brackets(
    result: CalculationResult, translator: Translator
) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    for bracket in result.bracket_results:
        entries.append(
            {
                "range_in_units": serialise_range(bracket.range_in_units),
                "range": serialise_range(bracket.range_in_units.scaled(result.unit_value)),
                "label": range_label(bracket.range_in_units, translator),
                "rate": bracket.rate,
                "rate_label": format_percentage(bracket.rate),
                "taxable_amount": bracket.taxable_amount,
                "taxes": bracket.taxes,
            }
        )
    return entries


def _serialise_deductions(
    result: CalculationResult, translator: Translator
) -> dict[str, Any]:
    first = result.deductions.first
    second = result.deductions.second
    return {
        "first": {
            "label": translator.format(
                "deductions.first", percentage=format_percentage(first.percentage)
            ),
            "percentage": first.percentage,
            "limit_in_units": first.limit_in_units,
            "limit": first.limit,
            "limit_label": translator.format(
                "deductions.first_limit",
                units=format_units(first.limit_in_units),
                amount=format_money(first.limit),
            ),
            "deducted_amount": first.deducted_amount,
        },
        "second": {
            "label": translator.format(
                "deductions.second", units=format_units(second.amount_in_units)
            ),
            "amount_in_units": second.amount_in_units,
            "expected_amount": second.expected_amount,
            "deducted_amount": second.deducted_amount,
        },
        "total": result.deductions.total,
    }


def _build_summary(result: CalculationResult, translator: Translator) -> dict[str, Any]:
    gross_income = result.taxable_amounts.initial_amount
    tax_total = result.total_taxes
    effective_tax_rate = tax_total / gross_income if gross_income > 0 else 0.0

    return {
        "gross_income": gross_income,
        "total_deductions": result.deductions.total,
        "taxable_income": result.taxable_amounts.final_amount,
        "tax_total": tax_total,
        "net_income": gross_income - tax_total,
        "effective_tax_rate": round_rate(effective_tax_rate),
        "labels": {
            "gross_income": translator("summary.gross_income"),
            "total_deductions": translator("summary.total_deductions"),
            "taxable_income": translator("summary.taxable_income"),
            "tax_total": translator("summary.tax_total"),
            "net_income": translator("summary.net_income"),
            "effective_tax_rate": translator("summary.effective_tax_rate"),
        },
    }


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the income tax breakdown for the provided payload."""

    request_model = _parse_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request_model.year)

    with _profile_section("normalise_payload", timings):
        normalised = _normalise_payload(request_model, config)

    translator = get_translator(normalised.locale)

    with _profile_section("income_tax", timings):
        result = compute_income_tax(
            config.unit_value,
            normalised.gross_yearly_income,
            config.brackets,
            config.deductions,
        )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    meta_payload: dict[str, Any] = {
        "year": normalised.year,
        "locale": translator.locale,
        "unit_value": config.unit_value,
        "income_source": normalised.income_source,
    }
    if normalised.income_source == "breakdown":
        meta_payload["breakdown_item_count"] = normalised.breakdown_item_count

    response_model = CalculationResponse.model_validate(
        {
            "summary": _build_summary(result, translator),
            "deductions": _serialise_deductions(result, translator),
            "taxable_amounts": {
                "initial_amount": result.taxable_amounts.initial_amount,
                "after_first_deduction": result.taxable_amounts.after_first_deduction,
                "after_second_deduction": result.taxable_amounts.after_second_deduction,
                "final_amount": result.taxable_amounts.final_amount,
            },
            "brackets": _serialise_brackets(result, translator),
            "meta": meta_payload,
        }
    )

    return response_model.model_dump(mode="json")


__all__ = ["calculate_tax", "range_label", "serialise_range"]
