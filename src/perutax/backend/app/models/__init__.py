"""Typed request/response models shared across the calculation services.

Inputs are validated with Pydantic while the derived results of a
calculation are plain frozen dataclasses: they are created fresh for every
call, never mutated afterwards and cheap to compare, which keeps the core
arithmetic free of any framework dependency.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from .api import (
    BracketResultEntry,
    BreakdownItemInput,
    CalculationRequest,
    CalculationResponse,
    DeductionsEntry,
    RangeEntry,
    ResponseMeta,
    Summary,
    SummaryLabels,
    TaxableAmountsEntry,
    format_validation_error,
)

__all__ = [
    "BracketAllocation",
    "BracketRange",
    "BracketResult",
    "BracketResultEntry",
    "BreakdownItemInput",
    "CalculationInput",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "Deductions",
    "DeductionsEntry",
    "FirstDeduction",
    "RangeEntry",
    "ResponseMeta",
    "SecondDeduction",
    "Summary",
    "SummaryLabels",
    "TaxableAmounts",
    "TaxableAmountsEntry",
    "format_validation_error",
]


class CalculationInput(BaseModel):
    """Validated and normalised user input for tax calculations."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    locale: str
    gross_yearly_income: float
    income_source: str = "direct"
    breakdown_item_count: int = 0


@dataclass(frozen=True)
class FirstDeduction:
    """Percentage deduction capped at ``limit_in_units`` tax units."""

    percentage: float
    limit_in_units: float
    limit: float
    deducted_amount: float


@dataclass(frozen=True)
class SecondDeduction:
    """Fixed deduction of ``amount_in_units`` tax units."""

    amount_in_units: float
    expected_amount: float
    deducted_amount: float


@dataclass(frozen=True)
class Deductions:
    first: FirstDeduction
    second: SecondDeduction

    @property
    def total(self) -> float:
        return self.first.deducted_amount + self.second.deducted_amount


@dataclass(frozen=True)
class TaxableAmounts:
    """Running ledger of the taxable base after each deduction."""

    initial_amount: float
    after_first_deduction: float
    after_second_deduction: float
    final_amount: float


@dataclass(frozen=True)
class BracketRange:
    """Bracket bounds in tax units; ``max`` is ``math.inf`` when unbounded."""

    min: float
    max: float

    @property
    def is_open_ended(self) -> bool:
        return math.isinf(self.max)

    def scaled(self, unit_value: float) -> BracketRange:
        """Return the same range expressed in currency."""

        return BracketRange(min=self.min * unit_value, max=self.max * unit_value)


@dataclass(frozen=True)
class BracketResult:
    range_in_units: BracketRange
    rate: float
    taxable_amount: float
    taxes: float


@dataclass(frozen=True)
class BracketAllocation:
    results: tuple[BracketResult, ...]
    total_taxes: float


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of a single income tax calculation."""

    unit_value: float
    deductions: Deductions
    taxable_amounts: TaxableAmounts
    bracket_results: tuple[BracketResult, ...]
    total_taxes: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
