"""Progressive bracket allocation."""

from __future__ import annotations

import math
from collections.abc import Sequence

from perutax.backend.app.models import BracketAllocation, BracketRange, BracketResult
from perutax.backend.config.year_config import BracketTable, TaxBracket

from .utils import round_half_up


def _brackets_of(brackets: BracketTable | Sequence[TaxBracket]) -> Sequence[TaxBracket]:
    if isinstance(brackets, BracketTable):
        return brackets.brackets
    return brackets


def brackets_to_ranges(
    brackets: BracketTable | Sequence[TaxBracket],
) -> list[BracketRange]:
    """Convert bracket widths into contiguous ranges expressed in tax units."""

    ranges: list[BracketRange] = []
    lower_bound = 0.0

    for bracket in _brackets_of(brackets):
        upper_bound = lower_bound + bracket.capacity_in_units
        ranges.append(BracketRange(min=lower_bound, max=upper_bound))
        lower_bound = upper_bound

    return ranges


def apply_taxes(
    taxable_base: float,
    unit_value: float,
    brackets: BracketTable | Sequence[TaxBracket],
) -> BracketAllocation:
    """Distribute ``taxable_base`` across ``brackets`` from the lowest up.

    The full capacity of each bounded bracket is subtracted from the
    remaining income, even when only part of it was used. Income beyond the
    last bounded bracket of a table without an open-ended bracket is left
    untaxed.
    """

    entries = _brackets_of(brackets)
    ranges = brackets_to_ranges(entries)

    remaining = taxable_base
    total_taxes = 0.0
    results: list[BracketResult] = []

    for bracket, bracket_range in zip(entries, ranges):
        capacity = bracket.capacity_in_units * unit_value
        taxable_amount = 0.0

        if remaining > 0:
            if math.isinf(capacity):
                taxable_amount = remaining
            else:
                taxable_amount = min(capacity, remaining)
                remaining -= capacity

        taxes = round_half_up(bracket.rate * taxable_amount)
        total_taxes += taxes
        results.append(
            BracketResult(
                range_in_units=bracket_range,
                rate=bracket.rate,
                taxable_amount=taxable_amount,
                taxes=taxes,
            )
        )

    return BracketAllocation(results=tuple(results), total_taxes=total_taxes)
