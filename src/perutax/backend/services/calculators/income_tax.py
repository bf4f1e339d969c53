"""Entry point combining the deduction and bracket stages."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from perutax.backend.app.models import CalculationResult
from perutax.backend.config.year_config import BracketTable, DeductionConfig, TaxBracket

from .brackets import apply_taxes
from .deductions import apply_deductions

BracketTableLike = BracketTable | Sequence[TaxBracket | Mapping[str, Any]]


def build_bracket_table(brackets: BracketTableLike) -> BracketTable:
    """Return ``brackets`` as a validated :class:`BracketTable`.

    Existing tables are returned untouched; anything else is validated, so a
    malformed table fails here rather than producing inconsistent ranges.
    """

    if isinstance(brackets, BracketTable):
        return brackets
    return BracketTable.model_validate(list(brackets))


def compute_income_tax(
    unit_value: float,
    gross_yearly_income: float,
    bracket_table: BracketTableLike,
    deductions: DeductionConfig | None = None,
) -> CalculationResult:
    """Compute the yearly income tax owed on ``gross_yearly_income``.

    Callers are expected to pass a positive ``unit_value``. Non-finite
    incomes are not rejected and propagate through the arithmetic.
    """

    table = build_bracket_table(bracket_table)

    applied_deductions, taxable_amounts = apply_deductions(
        gross_yearly_income, unit_value, deductions
    )
    allocation = apply_taxes(taxable_amounts.final_amount, unit_value, table)

    return CalculationResult(
        unit_value=unit_value,
        deductions=applied_deductions,
        taxable_amounts=taxable_amounts,
        bracket_results=allocation.results,
        total_taxes=allocation.total_taxes,
    )
