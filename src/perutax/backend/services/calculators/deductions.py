"""Deductions applied to gross work income before bracket allocation."""

from __future__ import annotations

from perutax.backend.app.models import (
    Deductions,
    FirstDeduction,
    SecondDeduction,
    TaxableAmounts,
)
from perutax.backend.config.year_config import DeductionConfig

from .utils import round_half_up

DEFAULT_DEDUCTIONS = DeductionConfig()


def apply_deductions(
    gross_income: float,
    unit_value: float,
    rules: DeductionConfig | None = None,
) -> tuple[Deductions, TaxableAmounts]:
    """Apply the percentage deduction and then the fixed unit deduction.

    The first deduction is rounded to whole soles; the second one is not.
    Negative income is accepted: the first deduction is then negative too and
    the second deduction absorbs whatever remains, leaving a final amount of
    zero.
    """

    rules = rules or DEFAULT_DEDUCTIONS
    first_rule = rules.first
    second_rule = rules.second

    limit = first_rule.limit_in_units * unit_value
    first_deducted = round_half_up(min(gross_income * first_rule.percentage, limit))
    after_first = gross_income - first_deducted

    expected_amount = second_rule.amount_in_units * unit_value
    second_deducted = min(expected_amount, after_first)
    after_second = after_first - second_deducted

    deductions = Deductions(
        first=FirstDeduction(
            percentage=first_rule.percentage,
            limit_in_units=first_rule.limit_in_units,
            limit=limit,
            deducted_amount=first_deducted,
        ),
        second=SecondDeduction(
            amount_in_units=second_rule.amount_in_units,
            expected_amount=expected_amount,
            deducted_amount=second_deducted,
        ),
    )
    taxable_amounts = TaxableAmounts(
        initial_amount=gross_income,
        after_first_deduction=after_first,
        after_second_deduction=after_second,
        final_amount=after_second,
    )
    return deductions, taxable_amounts
