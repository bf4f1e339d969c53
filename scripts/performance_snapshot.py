#!/usr/bin/env python3
"""Collect baseline timings for the calculation service."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from perutax.backend.config.year_config import available_years  # noqa: E402
from perutax.backend.services.calculation_service import calculate_tax  # noqa: E402

SAMPLE_PAYLOADS = {
    "direct": {"year": 2021, "locale": "es", "gross_yearly_income": 150_000},
    "breakdown": {
        "year": 2021,
        "locale": "en",
        "use_breakdown": True,
        "breakdown_items": [
            {"label": "Salary", "amount": 96_000},
            {"label": "Bonus", "amount": 16_000},
            {"label": "Fees", "amount": 24_000},
        ],
    },
}


def measure(payload: dict[str, object], iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated calculations of ``payload``."""

    calculate_tax(payload)  # Warm the configuration cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_tax(payload)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("PERUTAX_PROFILE_ITERATIONS", "200"))
    report = {
        "supported_years": list(available_years()),
        "scenarios": {
            name: measure(payload, iterations)
            for name, payload in SAMPLE_PAYLOADS.items()
        },
    }
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
