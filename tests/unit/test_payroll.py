"""Unit tests for the statutory payroll calculator."""

from __future__ import annotations

import pytest

from statutax.backend.app.services.calculation_service import compute_payroll
from statutax.backend.errors import (
    ComputationInvariantError,
    InvalidInputError,
    UnsupportedJurisdictionError,
)


def test_high_salary_caps_provident_fund_and_skips_esi() -> None:
    breakdown = compute_payroll(1_200_000, 40, 50, 60_000)

    assert breakdown.basic == pytest.approx(40_000)
    assert breakdown.hra == pytest.approx(20_000)
    assert breakdown.special_allowance == pytest.approx(35_000)
    assert breakdown.other_allowances == pytest.approx(5_000)
    assert breakdown.gross_monthly == pytest.approx(100_000)
    # Provident fund is computed on the 15,000 monthly wage ceiling.
    assert breakdown.employee_pf == pytest.approx(1_800)
    assert breakdown.employer_pf == pytest.approx(1_800)
    assert not breakdown.esi_applicable
    assert breakdown.employee_esi == 0
    assert breakdown.employer_esi == 0
    assert breakdown.net_salary == pytest.approx(98_200)
    assert breakdown.employer_cost == pytest.approx(101_800)
    assert breakdown.annual_employer_cost == pytest.approx(1_221_600)


def test_low_salary_attracts_state_insurance() -> None:
    breakdown = compute_payroll(240_000, 50, 40)

    assert breakdown.gross_monthly == pytest.approx(20_000)
    assert breakdown.esi_applicable
    assert breakdown.employee_esi == pytest.approx(150)
    assert breakdown.employer_esi == pytest.approx(650)
    assert breakdown.employee_pf == pytest.approx(1_200)
    assert breakdown.total_deductions == pytest.approx(1_350)
    assert breakdown.net_salary == pytest.approx(18_650)
    assert breakdown.employer_cost == pytest.approx(21_850)


def test_esi_threshold_is_inclusive() -> None:
    breakdown = compute_payroll(252_000, 50, 0)

    assert breakdown.gross_monthly == pytest.approx(21_000)
    assert breakdown.esi_applicable


@pytest.mark.parametrize(
    ("ctc", "basic_pct", "hra_pct", "other"),
    [
        (600_000, 30, 0, 0),
        (900_000, 45, 40, 25_000),
        (1_800_000, 60, 50, 120_000),
        (3_500_000, 50, 100, 0),
    ],
)
def test_monthly_components_sum_to_ctc(
    ctc: float, basic_pct: float, hra_pct: float, other: float
) -> None:
    breakdown = compute_payroll(ctc, basic_pct, hra_pct, other)

    components = (
        breakdown.basic
        + breakdown.hra
        + breakdown.special_allowance
        + breakdown.other_allowances
    )
    assert components == pytest.approx(ctc / 12)
    assert breakdown.gross_monthly == pytest.approx(ctc / 12)
    assert breakdown.special_allowance >= 0


def test_negative_special_allowance_is_an_invariant_violation() -> None:
    with pytest.raises(ComputationInvariantError, match="special allowance"):
        compute_payroll(100_000, 60, 100)


def test_allowances_exceeding_ctc_are_rejected() -> None:
    with pytest.raises(ComputationInvariantError):
        compute_payroll(500_000, 50, 50, 200_000)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"ctc": 0, "basic_pct": 40, "hra_pct": 50}, "greater than zero"),
        ({"ctc": 600_000, "basic_pct": 25, "hra_pct": 50}, "basic_pct"),
        ({"ctc": 600_000, "basic_pct": 40, "hra_pct": 120}, "hra_pct"),
        (
            {"ctc": 600_000, "basic_pct": 40, "hra_pct": 50, "other_allowances": -1},
            "cannot be negative",
        ),
    ],
)
def test_invalid_payroll_inputs(kwargs: dict[str, float], message: str) -> None:
    with pytest.raises(InvalidInputError, match=message):
        compute_payroll(**kwargs)


def test_payroll_requires_published_rules() -> None:
    with pytest.raises(UnsupportedJurisdictionError):
        compute_payroll(600_000, 40, 50, jurisdiction="USA")
