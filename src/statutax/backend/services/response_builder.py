"""Utilities for serialising calculation responses.

Results are serialised at full precision; the ``display`` blocks carry the
rounded, currency-formatted strings a client shows to the user.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import jsonify

from statutax.backend.app.formatting import (
    format_currency,
    format_percentage,
    round_currency,
)
from statutax.backend.app.models import (
    ComparativeTaxReport,
    EntityType,
    GstBreakdown,
    Jurisdiction,
    PayrollBreakdown,
    TaxCalculationResult,
    serialise,
)
from statutax.backend.app.services.portfolio_service import PortfolioSummary

ResponseTuple = Tuple[Any, int]

_RESULT_AMOUNTS = (
    "gross_income",
    "total_deductions",
    "taxable_income",
    "base_tax",
    "surcharge",
    "cess",
    "tax_payable",
)

_PAYROLL_AMOUNTS = (
    "basic",
    "hra",
    "special_allowance",
    "other_allowances",
    "gross_monthly",
    "employee_pf",
    "employee_esi",
    "employer_pf",
    "employer_esi",
    "total_deductions",
    "net_salary",
    "employer_cost",
)

_GST_AMOUNTS = ("base_amount", "gst_amount", "total_amount", "cgst", "sgst", "igst")


def build_calculation_response(payload: Mapping[str, Any]) -> ResponseTuple:
    """Return a Flask JSON response for the calculation ``payload``."""

    return jsonify(payload), 200


def _display_result(result: TaxCalculationResult, jurisdiction: Jurisdiction) -> dict[str, str]:
    display = {
        name: format_currency(getattr(result, name), jurisdiction)
        for name in _RESULT_AMOUNTS
    }
    display["effective_rate"] = format_percentage(result.effective_rate)
    return display


def summarise_report(report: ComparativeTaxReport) -> str:
    """Return a one-line description of the recommended outcome."""

    result = report.recommended_result
    tax = format_currency(result.tax_payable, report.jurisdiction)

    if report.entity_type is EntityType.COMPANY:
        profit = format_currency(result.taxable_income, report.jurisdiction)
        return (
            f"For a company with a profit of {profit}, the estimated tax is {tax} "
            "including any applicable surcharge and cess."
        )

    summary = f"Based on your inputs, your estimated tax liability is {tax}."
    if report.has_dual_regime:
        summary += f" The {report.recommended_regime.value} Regime is recommended."
    return summary


def build_report_payload(report: ComparativeTaxReport) -> dict[str, Any]:
    """Serialise a regime comparison with its display strings and summary."""

    payload = serialise(report)
    payload["has_dual_regime"] = report.has_dual_regime
    payload["summary"] = summarise_report(report)
    payload["display"] = {
        "old_regime": _display_result(report.old_regime, report.jurisdiction),
        "new_regime": _display_result(report.new_regime, report.jurisdiction),
    }
    return payload


def build_payroll_payload(breakdown: PayrollBreakdown) -> dict[str, Any]:
    """Serialise a payroll breakdown with rupee-formatted monthly lines."""

    payload = serialise(breakdown)
    payload["annual_employer_cost"] = breakdown.annual_employer_cost
    display = {
        name: format_currency(getattr(breakdown, name), Jurisdiction.INDIA, decimals=2)
        for name in _PAYROLL_AMOUNTS
    }
    display["annual_ctc"] = format_currency(breakdown.annual_ctc, Jurisdiction.INDIA)
    display["annual_employer_cost"] = format_currency(
        breakdown.annual_employer_cost, Jurisdiction.INDIA
    )
    payload["display"] = display
    return payload


def build_gst_payload(breakdown: GstBreakdown) -> dict[str, Any]:
    """Serialise a GST conversion with rounded display amounts."""

    payload = serialise(breakdown)
    display = {
        name: format_currency(getattr(breakdown, name), Jurisdiction.INDIA, decimals=2)
        for name in _GST_AMOUNTS
    }
    display["rate"] = format_percentage(breakdown.rate)
    payload["display"] = display
    payload["rounded"] = {
        name: round_currency(getattr(breakdown, name)) for name in _GST_AMOUNTS
    }
    return payload


def build_portfolio_payload(summary: PortfolioSummary) -> dict[str, Any]:
    """Serialise every company estimate plus per-jurisdiction totals."""

    companies = []
    for entry in summary.entries:
        company = {"company_id": entry.company_id, "name": entry.name}
        company.update(build_report_payload(entry.report))
        companies.append(company)

    totals = []
    for total in summary.totals:
        item = serialise(total)
        item["display"] = {
            "revenue": format_currency(total.revenue, total.jurisdiction),
            "profit": format_currency(total.profit, total.jurisdiction),
            "tax_payable": format_currency(total.tax_payable, total.jurisdiction),
        }
        totals.append(item)

    return {
        "company_count": summary.company_count,
        "companies": companies,
        "totals": totals,
    }


__all__ = [
    "ResponseTuple",
    "build_calculation_response",
    "build_gst_payload",
    "build_payroll_payload",
    "build_portfolio_payload",
    "build_report_payload",
    "summarise_report",
]
