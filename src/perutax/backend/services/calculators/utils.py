"""Utility helpers for calculator modules."""

from __future__ import annotations

import math


def round_half_up(value: float) -> float:
    """Round ``value`` to the nearest integer currency unit, halves upwards.

    Halves move towards positive infinity (``-2.5`` rounds to ``-2``).
    Non-finite values are returned unchanged.
    """

    if not math.isfinite(value):
        return value
    lower = math.floor(value)
    # Compare the fractional part directly; ``floor(value + 0.5)`` rounds
    # 0.49999999999999994 up because the addition itself rounds.
    return float(lower + 1 if value - lower >= 0.5 else lower)


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_units(value: float) -> str:
    """Render a tax unit count without trailing zeros (``5``, ``7.5``)."""

    return f"{value:g}"


def format_money(amount: float, symbol: str = "S/") -> str:
    """Format ``amount`` as soles with thousands separators.

    Negative amounts keep the sign in front of the symbol (``- S/ 1,000``).
    """

    if amount < 0:
        return f"- {symbol} {_group_thousands(abs(amount))}"
    return f"{symbol} {_group_thousands(amount)}"


def _group_thousands(amount: float) -> str:
    # Up to three decimals, trailing zeros dropped (``1,234.5``).
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
