"""Salary structure and statutory payroll contributions."""

from __future__ import annotations

import logging

from statutax.backend.app.models import PayrollBreakdown
from statutax.backend.config.rule_tables import (
    ContributionRates,
    Jurisdiction,
    PercentageBounds,
    payroll_rules_for,
)
from statutax.backend.errors import ComputationInvariantError, InvalidInputError

from .utils import require_non_negative

_LOGGER = logging.getLogger(__name__)

_MONTHS = 12


def _check_bounds(name: str, value: float, bounds: PercentageBounds) -> None:
    if not bounds.contains(value):
        raise InvalidInputError(
            f"Field '{name}' must be between {bounds.minimum:g} and {bounds.maximum:g}"
        )


def _provident_fund(annual_basic: float, rates: ContributionRates) -> tuple[float, float]:
    wage_base = annual_basic
    if rates.monthly_salary_cap is not None:
        wage_base = min(annual_basic, rates.monthly_salary_cap * _MONTHS)
    return (
        rates.employee_rate * wage_base / _MONTHS,
        rates.employer_rate * wage_base / _MONTHS,
    )


def _state_insurance(
    gross_monthly: float, rates: ContributionRates
) -> tuple[float, float, bool]:
    limit = rates.monthly_eligibility_limit
    if limit is not None and gross_monthly > limit:
        return 0.0, 0.0, False
    return (
        rates.employee_rate * gross_monthly,
        rates.employer_rate * gross_monthly,
        True,
    )


def calculate_payroll(
    ctc: float,
    basic_pct: float,
    hra_pct: float,
    other_allowances: float = 0.0,
    jurisdiction: Jurisdiction | str = Jurisdiction.INDIA,
    fiscal_year: str | None = None,
) -> PayrollBreakdown:
    """Split an annual cost-to-company into monthly salary lines.

    ``basic_pct`` is a percentage of CTC and ``hra_pct`` a percentage of the
    basic salary. Every monetary field on the result is monthly except
    ``annual_ctc``.
    """

    require_non_negative(
        {
            "ctc": ctc,
            "basic_pct": basic_pct,
            "hra_pct": hra_pct,
            "other_allowances": other_allowances,
        }
    )
    if ctc <= 0:
        raise InvalidInputError("Field 'ctc' must be greater than zero")

    rules = payroll_rules_for(jurisdiction, fiscal_year)
    _check_bounds("basic_pct", basic_pct, rules.basic_pct)
    _check_bounds("hra_pct", hra_pct, rules.hra_pct)

    annual_basic = ctc * basic_pct / 100
    annual_hra = annual_basic * hra_pct / 100
    annual_special = ctc - annual_basic - annual_hra - other_allowances
    if annual_special < 0:
        raise ComputationInvariantError(
            "Basic, HRA and other allowances exceed the cost to company; "
            f"special allowance would be {annual_special:.2f}"
        )

    basic = annual_basic / _MONTHS
    hra = annual_hra / _MONTHS
    special_allowance = annual_special / _MONTHS
    monthly_other = other_allowances / _MONTHS
    gross_monthly = basic + hra + special_allowance + monthly_other

    employee_pf, employer_pf = _provident_fund(annual_basic, rules.provident_fund)
    employee_esi, employer_esi, esi_applicable = _state_insurance(
        gross_monthly, rules.state_insurance
    )

    total_deductions = employee_pf + employee_esi
    breakdown = PayrollBreakdown(
        annual_ctc=ctc,
        basic_pct=basic_pct,
        hra_pct=hra_pct,
        basic=basic,
        hra=hra,
        special_allowance=special_allowance,
        other_allowances=monthly_other,
        gross_monthly=gross_monthly,
        employee_pf=employee_pf,
        employee_esi=employee_esi,
        employer_pf=employer_pf,
        employer_esi=employer_esi,
        esi_applicable=esi_applicable,
        total_deductions=total_deductions,
        net_salary=gross_monthly - total_deductions,
        employer_cost=gross_monthly + employer_pf + employer_esi,
    )

    _LOGGER.debug(
        "Payroll for CTC %.2f: net %.2f, employer cost %.2f",
        ctc,
        breakdown.net_salary,
        breakdown.employer_cost,
    )
    return breakdown


__all__ = ["calculate_payroll"]
