"""Pydantic models describing the fiscal year configuration schema."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """A single progressive bracket whose width is expressed in tax units.

    A ``width_in_units`` of ``None`` marks the open-ended top bracket. YAML
    ``.inf`` values are accepted and normalised to ``None``.
    """

    width_in_units: float | None = Field(default=None, alias="width")
    rate: float

    @field_validator("width_in_units", mode="before")
    @classmethod
    def _normalise_open_width(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and math.isinf(value) and value > 0:
            return None
        return value

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Tax rates must be between 0 and 1")
        if self.width_in_units is not None and not self.width_in_units > 0:
            raise ConfigurationError("Bracket widths must be positive values")
        return self

    @property
    def is_open_ended(self) -> bool:
        return self.width_in_units is None

    @property
    def capacity_in_units(self) -> float:
        """Return the bracket width, ``math.inf`` for the open-ended bracket."""

        if self.width_in_units is None:
            return math.inf
        return self.width_in_units


class BracketTable(ImmutableModel):
    """Ordered bracket table, lowest income first.

    Construction fails when the table is empty or when an open-ended bracket
    appears anywhere but in the last position.
    """

    brackets: tuple[TaxBracket, ...]

    @model_validator(mode="before")
    @classmethod
    def _wrap_sequence(cls, data: Any) -> Any:
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            return {"brackets": tuple(data)}
        return data

    @model_validator(mode="after")
    def _validate_sequence(self) -> BracketTable:
        if not self.brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        for bracket in self.brackets[:-1]:
            if bracket.is_open_ended:
                raise ConfigurationError(
                    "Only the final tax bracket may have an open upper bound"
                )
        return self

    def __len__(self) -> int:
        return len(self.brackets)

    @property
    def is_open_ended(self) -> bool:
        return self.brackets[-1].is_open_ended

    @property
    def finite_width_in_units(self) -> float:
        """Sum of the widths of all bounded brackets."""

        return sum(
            bracket.width_in_units
            for bracket in self.brackets
            if bracket.width_in_units is not None
        )


class FirstDeductionRule(ImmutableModel):
    """Percentage deduction capped at a number of tax units."""

    percentage: float = 0.2
    limit_in_units: float = Field(default=24, alias="limit")

    @model_validator(mode="after")
    def _validate_values(self) -> FirstDeductionRule:
        if self.percentage < 0:
            raise ConfigurationError("Deduction percentages must be non-negative")
        if self.limit_in_units < 0:
            raise ConfigurationError("Deduction limits must be non-negative")
        return self


class SecondDeductionRule(ImmutableModel):
    """Fixed deduction of a number of tax units."""

    amount_in_units: float = Field(default=7, alias="amount")

    @model_validator(mode="after")
    def _validate_values(self) -> SecondDeductionRule:
        if self.amount_in_units < 0:
            raise ConfigurationError("Deduction amounts must be non-negative")
        return self


class DeductionConfig(ImmutableModel):
    """Deduction parameters applied before bracket allocation."""

    first: FirstDeductionRule = Field(default_factory=FirstDeductionRule)
    second: SecondDeductionRule = Field(default_factory=SecondDeductionRule)


class YearConfiguration(ImmutableModel):
    """Complete configuration for a fiscal year."""

    year: int
    unit_value: float = Field(alias="uit")
    brackets: BracketTable
    deductions: DeductionConfig = Field(default_factory=DeductionConfig)
    meta: Mapping[str, Any] = Field(default_factory=dict)

    @field_validator("meta", mode="before")
    @classmethod
    def _default_meta(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def _validate_unit_value(self) -> YearConfiguration:
        if not self.unit_value > 0:
            raise ConfigurationError("The tax unit value must be positive")
        return self


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BracketTable",
    "ConfigurationError",
    "DeductionConfig",
    "FirstDeductionRule",
    "ImmutableModel",
    "SecondDeductionRule",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
]
