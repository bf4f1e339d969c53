"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .year_config import (
    BracketTable,
    ConfigurationError,
    DeductionConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_unit_value(unit_value: float) -> list[str]:
    if unit_value > 0:
        return []
    return [_format_scope("uit", f"unit value {unit_value} must be positive")]


def _validate_brackets(table: BracketTable) -> list[str]:
    errors: list[str] = []

    for index, bracket in enumerate(table.brackets):
        scope = f"brackets[{index}]"
        if bracket.rate < 0 or bracket.rate > 1:
            errors.append(
                _format_scope(scope, f"rate {bracket.rate} must be between 0 and 1")
            )
        if bracket.is_open_ended and index != len(table) - 1:
            errors.append(
                _format_scope(scope, "only the final bracket may be open-ended")
            )

    if not table.is_open_ended:
        errors.append(
            _format_scope(
                "brackets",
                (
                    "final bracket has a bounded width; income above "
                    f"{table.finite_width_in_units:g} units would not be taxed"
                ),
            )
        )

    rates = [bracket.rate for bracket in table.brackets]
    if rates != sorted(rates):
        errors.append(
            _format_scope("brackets", "rates should not decrease between brackets")
        )

    return errors


def _validate_deductions(config: DeductionConfig) -> list[str]:
    errors: list[str] = []

    percentage = config.first.percentage
    if percentage < 0 or percentage > 1:
        errors.append(
            _format_scope(
                "deductions.first",
                f"percentage {percentage} must be between 0 and 1",
            )
        )
    if config.first.limit_in_units <= 0:
        errors.append(_format_scope("deductions.first", "limit must be positive"))
    if config.second.amount_in_units <= 0:
        errors.append(_format_scope("deductions.second", "amount must be positive"))

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_unit_value(config.unit_value))
    errors.extend(_validate_brackets(config.brackets))
    errors.extend(_validate_deductions(config.deductions))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year.

    A year whose file fails schema validation is reported with the loader
    error as its only issue. A broken manifest still raises.
    """

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        try:
            config = load_year_configuration(year)
        except ConfigurationError as error:
            results[int(year)] = [str(error)]
            continue
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured fiscal years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    try:
        years = args.years or available_years()
    except (FileNotFoundError, ConfigurationError) as error:
        print(f"[manifest] failed to load configuration manifest: {error}")
        return 1

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK (UIT {config.unit_value:g})")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
