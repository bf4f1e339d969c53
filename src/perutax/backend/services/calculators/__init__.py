"""Domain-specific calculation helpers."""

from .brackets import apply_taxes, brackets_to_ranges
from .deductions import apply_deductions
from .income_tax import build_bracket_table, compute_income_tax
from .utils import (
    format_money,
    format_percentage,
    format_units,
    round_half_up,
    round_rate,
)

__all__ = [
    "apply_deductions",
    "apply_taxes",
    "brackets_to_ranges",
    "build_bracket_table",
    "compute_income_tax",
    "format_money",
    "format_percentage",
    "format_units",
    "round_half_up",
    "round_rate",
]
