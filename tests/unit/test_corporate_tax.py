"""Unit tests for the corporate tax calculator."""

from __future__ import annotations

import pytest

from statutax.backend.app.models import EntityType, RecommendedRegime
from statutax.backend.app.services.calculation_service import compute_corporate_tax
from statutax.backend.errors import InvalidInputError, UnsupportedJurisdictionError


def test_india_large_company_pays_surcharge_and_cess() -> None:
    """Revenue of 300 crore and profit of 12 crore owe about 3.4944 crore."""

    report = compute_corporate_tax(3_000_000_000, 120_000_000, "India")
    result = report.new_regime

    assert result.base_tax == pytest.approx(30_000_000)
    assert result.surcharge == pytest.approx(3_600_000)
    assert result.cess == pytest.approx(1_344_000)
    assert result.tax_payable == pytest.approx(34_944_000)
    assert report.entity_type is EntityType.COMPANY
    assert report.recommended_regime is RecommendedRegime.NOT_APPLICABLE
    assert report.old_regime == report.new_regime


def test_india_lower_surcharge_tier() -> None:
    report = compute_corporate_tax(100_000_000, 50_000_000, "India")

    assert report.new_regime.tax_payable == pytest.approx(13_910_000)


def test_india_revenue_above_tier_uses_higher_rate() -> None:
    report = compute_corporate_tax(5_000_000_000, 5_000_000, "India")

    assert report.new_regime.base_tax == pytest.approx(1_500_000)
    assert report.new_regime.surcharge == 0


def test_usa_flat_rate_and_effective_rate_on_revenue() -> None:
    report = compute_corporate_tax(1_000_000, 200_000, "USA")
    result = report.new_regime

    assert result.tax_payable == pytest.approx(42_000)
    assert result.cess == 0
    assert result.effective_rate == pytest.approx(4.2)
    assert result.total_deductions == pytest.approx(800_000)
    assert result.taxable_income == pytest.approx(200_000)


@pytest.mark.parametrize(
    ("profit", "expected"),
    [
        (40_000, 7_600),
        (50_000, 9_500),
        (100_000, 22_750),
        (250_000, 62_500),
        (300_000, 75_000),
    ],
)
def test_uk_small_profits_and_marginal_relief(profit: float, expected: float) -> None:
    report = compute_corporate_tax(1_000_000, profit, "UK")

    assert report.new_regime.tax_payable == pytest.approx(expected)


def test_australia_base_rate_entity() -> None:
    small = compute_corporate_tax(10_000_000, 1_000_000, "Australia", passive_income_share=0.1)
    passive = compute_corporate_tax(10_000_000, 1_000_000, "Australia", passive_income_share=0.9)
    large = compute_corporate_tax(60_000_000, 1_000_000, "Australia")

    assert small.new_regime.tax_payable == pytest.approx(250_000)
    assert passive.new_regime.tax_payable == pytest.approx(300_000)
    assert large.new_regime.tax_payable == pytest.approx(300_000)


def test_zero_revenue_yields_zero_effective_rate() -> None:
    report = compute_corporate_tax(0, 0, "USA")

    assert report.new_regime.tax_payable == 0
    assert report.new_regime.effective_rate == 0


def test_zero_revenue_with_profit_is_taxed_at_zero_effective_rate() -> None:
    report = compute_corporate_tax(0, 1_000_000, "India")
    result = report.new_regime

    assert result.tax_payable > 0
    assert result.tax_payable == pytest.approx(260_000)
    assert result.effective_rate == 0
    assert result.total_deductions == 0


def test_negative_profit_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        compute_corporate_tax(1_000, -1, "India")


def test_passive_income_share_must_be_a_fraction() -> None:
    with pytest.raises(InvalidInputError, match="between 0 and 1"):
        compute_corporate_tax(1_000, 100, "Australia", passive_income_share=1.5)


def test_unknown_jurisdiction_is_rejected() -> None:
    with pytest.raises(UnsupportedJurisdictionError, match="No rule table available"):
        compute_corporate_tax(1_000, 100, "Narnia")


def test_company_tips_come_from_rule_table() -> None:
    report = compute_corporate_tax(1_000, 100, "USA")

    assert len(report.optimization_tips) == 3
    assert "R&D" in report.optimization_tips[0]
