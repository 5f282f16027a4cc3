#!/usr/bin/env python3
"""Time repeated engine calls to catch performance regressions."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter
from typing import Callable

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from statutax.backend.app.services.calculation_service import (  # noqa: E402
    compute_corporate_tax,
    compute_gst,
    compute_payroll,
    compute_personal_tax,
)
from statutax.backend.app.services.portfolio_service import compute_portfolio  # noqa: E402

SAMPLE_PORTFOLIO = [
    {"company_id": f"client-{index}", "jurisdiction": jurisdiction, "revenue": 5e7, "profit": 8e6}
    for index, jurisdiction in enumerate(["India", "USA", "UK", "Australia"] * 5)
]

SCENARIOS: dict[str, Callable[[], object]] = {
    "personal_india": lambda: compute_personal_tax(
        {"salary": 1_800_000, "other_income": 40_000},
        {"section_80c": 150_000, "section_80d": 25_000, "hra": 120_000},
        "India",
    ),
    "personal_usa": lambda: compute_personal_tax({"salary": 145_000}, {}, "USA"),
    "corporate_uk": lambda: compute_corporate_tax(400_000, 120_000, "UK"),
    "payroll": lambda: compute_payroll(1_200_000, 40, 50, 60_000),
    "gst": lambda: compute_gst(11_800, 18, "inclusive"),
    "portfolio": lambda: compute_portfolio(SAMPLE_PORTFOLIO),
}


def measure(call: Callable[[], object], iterations: int) -> dict[str, float]:
    """Return timing statistics for ``iterations`` repeated calls."""

    call()  # Warm the rule-table cache
    start = perf_counter()
    for _ in range(iterations):
        call()
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("STATUTAX_PROFILE_ITERATIONS", "200"))
    report = {name: measure(call, iterations) for name, call in SCENARIOS.items()}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
