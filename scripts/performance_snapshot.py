#!/usr/bin/env python3
"""Time repeated paycheck calculations to spot performance regressions."""

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

from dutchtax.backend.app.services.calculation_service import calculate_tax  # noqa: E402

SAMPLE_PAYLOADS = {
    "monthly_salary": {"year": 2025, "income": 5000, "period": "month"},
    "ruling_with_allowance": {
        "year": 2025,
        "income": 80000,
        "period": "year",
        "holiday_allowance": True,
        "ruling": {"enabled": True, "type": "normal"},
    },
    "retired_hourly": {
        "year": 2025,
        "income": 25,
        "period": "hour",
        "hours": 24,
        "older": True,
    },
}


def measure(payload: dict[str, object], iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated calculations of ``payload``."""

    calculate_tax(payload)  # Warm the rate cache
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
    iterations = int(os.getenv("DUTCHTAX_PROFILE_ITERATIONS", "500"))
    report = {name: measure(payload, iterations) for name, payload in SAMPLE_PAYLOADS.items()}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
