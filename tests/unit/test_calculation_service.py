"""Unit tests for the calculation service entry points."""

from __future__ import annotations

import logging

import pytest

from statutax.backend.app.models import GstDirection, IncomeProfile, SupplyType
from statutax.backend.app.services import calculation_service
from statutax.backend.app.services.calculation_service import (
    evaluate_corporate,
    evaluate_gst,
    evaluate_payroll,
    evaluate_personal,
    validate_payload,
)
from statutax.backend.errors import InvalidInputError, UnsupportedJurisdictionError


def test_evaluate_personal_uses_nested_profiles() -> None:
    report = evaluate_personal(
        {
            "jurisdiction": "India",
            "fiscal_year": "2023-24",
            "income": {"salary": 800_000},
            "deductions": {"section_80c": 0},
        }
    )

    assert report.fiscal_year == "2023-24"
    assert report.new_regime.tax_payable == pytest.approx(31_200)


def test_evaluate_personal_defaults_to_latest_fiscal_year() -> None:
    report = evaluate_personal({"jurisdiction": "UK", "income": {"salary": 60_000}})

    assert report.fiscal_year == "2023-24"


def test_evaluate_personal_rejects_unknown_fields() -> None:
    with pytest.raises(InvalidInputError, match="income.bonus"):
        evaluate_personal({"jurisdiction": "India", "income": {"bonus": 10}})


def test_evaluate_personal_rejects_unknown_jurisdiction() -> None:
    with pytest.raises(UnsupportedJurisdictionError):
        evaluate_personal({"jurisdiction": "Wakanda", "income": {"salary": 10}})


def test_evaluate_corporate_reports_negative_revenue_concisely() -> None:
    with pytest.raises(InvalidInputError, match="revenue: value cannot be negative"):
        evaluate_corporate({"jurisdiction": "USA", "revenue": -5, "profit": 0})


def test_evaluate_payroll_requires_ctc() -> None:
    with pytest.raises(InvalidInputError, match="ctc"):
        evaluate_payroll({"basic_pct": 40, "hra_pct": 50})


def test_evaluate_gst_parses_enums() -> None:
    breakdown = evaluate_gst(
        {"amount": 10_000, "rate": 18, "direction": "exclusive", "supply": "inter_state"}
    )

    assert breakdown.supply_type is SupplyType.INTER_STATE
    assert breakdown.igst == pytest.approx(1_800)
    assert not breakdown.is_inclusive
    assert GstDirection("inclusive") is GstDirection.INCLUSIVE


def test_validate_payload_passes_models_through() -> None:
    profile = IncomeProfile(salary=1)

    assert validate_payload(IncomeProfile, profile) is profile


def test_validate_payload_requires_mapping() -> None:
    with pytest.raises(InvalidInputError, match="mapping"):
        validate_payload(IncomeProfile, ["salary", 1])


def test_profiling_logs_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("STATUTAX_PROFILE_CALCULATIONS", "yes")
    caplog.set_level(logging.DEBUG, logger=calculation_service.__name__)

    calculation_service.compute_corporate_tax(1_000_000, 100_000, "USA")

    assert any("compute_corporate_tax timings" in message for message in caplog.messages)


def test_profiling_disabled_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STATUTAX_PROFILE_CALCULATIONS", raising=False)

    assert not calculation_service._profiling_enabled()
