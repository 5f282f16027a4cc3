"""Unit tests for response formatting helpers."""

from __future__ import annotations

import pytest
from flask import Flask

from statutax.backend.app.services.calculation_service import (
    compute_corporate_tax,
    compute_gst,
    compute_payroll,
    compute_personal_tax,
)
from statutax.backend.services.response_builder import (
    build_calculation_response,
    build_gst_payload,
    build_payroll_payload,
    build_report_payload,
    summarise_report,
)


def test_build_calculation_response_returns_json(app: Flask) -> None:
    """Formatting helper should generate a JSON response tuple."""

    with app.app_context():
        response, status = build_calculation_response({"foo": "bar"})

    assert status == 200
    assert response.get_json() == {"foo": "bar"}


def test_report_payload_carries_display_strings() -> None:
    report = compute_personal_tax({"salary": 800_000}, {}, "India")

    payload = build_report_payload(report)

    assert payload["recommended_regime"] == "New"
    assert payload["jurisdiction"] == "India"
    assert payload["has_dual_regime"] is True
    assert payload["new_regime"]["tax_payable"] == pytest.approx(31_200)
    assert payload["display"]["new_regime"]["tax_payable"] == "₹31,200"
    assert payload["display"]["old_regime"]["tax_payable"] == "₹65,000"
    assert payload["display"]["new_regime"]["effective_rate"] == "3.90%"
    assert isinstance(payload["optimization_tips"], list)


def test_summary_for_dual_regime_names_recommendation() -> None:
    report = compute_personal_tax({"salary": 800_000}, {}, "India")

    assert summarise_report(report) == (
        "Based on your inputs, your estimated tax liability is ₹31,200. "
        "The New Regime is recommended."
    )


def test_summary_for_single_regime_omits_recommendation() -> None:
    report = compute_personal_tax({"salary": 60_000}, {}, "UK")

    assert summarise_report(report) == (
        "Based on your inputs, your estimated tax liability is £11,432."
    )


def test_summary_for_company_mentions_profit() -> None:
    report = compute_corporate_tax(1_000_000, 200_000, "USA")

    assert summarise_report(report).startswith(
        "For a company with a profit of $200,000, the estimated tax is $42,000"
    )


def test_payroll_payload_formats_monthly_lines() -> None:
    payload = build_payroll_payload(compute_payroll(1_200_000, 40, 50, 60_000))

    assert payload["annual_employer_cost"] == pytest.approx(1_221_600)
    assert payload["display"]["net_salary"] == "₹98,200.00"
    assert payload["display"]["annual_ctc"] == "₹12,00,000"


def test_gst_payload_rounds_only_for_display() -> None:
    payload = build_gst_payload(compute_gst(1_000, 18, "inclusive"))

    assert payload["base_amount"] == pytest.approx(1_000 / 1.18)
    assert payload["rounded"]["base_amount"] == 847.46
    assert payload["display"]["gst_amount"] == "₹152.54"
    assert payload["display"]["rate"] == "18.00%"
    assert payload["supply_type"] == "intra_state"
