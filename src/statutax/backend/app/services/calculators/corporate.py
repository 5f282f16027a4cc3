"""Corporate tax with revenue tiers, reliefs, surcharge and cess."""

from __future__ import annotations

import logging

from statutax.backend.app.models import ComparativeTaxReport, TaxCalculationResult
from statutax.backend.config.rule_tables import (
    CorporateRates,
    EntityType,
    Jurisdiction,
    regimes_for,
    rules_for,
)
from statutax.backend.errors import ComputationInvariantError, InvalidInputError

from .recommender import recommend
from .utils import effective_rate, require_non_negative, surcharge_rate

_LOGGER = logging.getLogger(__name__)


def _base_tax(
    revenue: float,
    profit: float,
    passive_income_share: float,
    rates: CorporateRates,
) -> float:
    base_rate_entity = rates.base_rate_entity
    if base_rate_entity is not None and base_rate_entity.applies(revenue, passive_income_share):
        return profit * base_rate_entity.rate

    small_profits = rates.small_profits
    if small_profits is not None and profit <= small_profits.profit_upper:
        return profit * small_profits.rate

    tax = profit * rates.rate_for_revenue(revenue)
    if rates.marginal_relief is not None:
        tax -= rates.marginal_relief.relief_for(profit)
    return max(0.0, tax)


def calculate_corporate_tax(
    revenue: float,
    profit: float,
    jurisdiction: Jurisdiction | str,
    fiscal_year: str | None = None,
    passive_income_share: float = 0.0,
) -> ComparativeTaxReport:
    """Estimate company tax; the effective rate is measured against revenue."""

    require_non_negative(
        {
            "revenue": revenue,
            "profit": profit,
            "passive_income_share": passive_income_share,
        }
    )
    if passive_income_share > 1:
        raise InvalidInputError("Field 'passive_income_share' must be between 0 and 1")

    member = Jurisdiction.parse(jurisdiction)
    regimes = regimes_for(member, EntityType.COMPANY, fiscal_year)
    if len(regimes) != 1:
        raise ComputationInvariantError(
            f"Company rules for {member.value} must define exactly one regime"
        )
    rule_set = rules_for(member, EntityType.COMPANY, regimes[0], fiscal_year)
    rates = rule_set.corporate
    if rates is None:  # pragma: no cover - rejected by the schema
        raise ComputationInvariantError(f"Company rules for {member.value} lack corporate rates")

    base_tax = _base_tax(revenue, profit, passive_income_share, rates)
    surcharge = base_tax * surcharge_rate(profit, rule_set.surcharge_tiers)
    pre_cess = base_tax + surcharge
    cess = pre_cess * rule_set.cess_rate if pre_cess > 0 else 0.0
    tax_payable = pre_cess + cess

    result = TaxCalculationResult(
        gross_income=revenue,
        total_deductions=max(0.0, revenue - profit),
        taxable_income=profit,
        base_tax=base_tax,
        surcharge=surcharge,
        cess=cess,
        tax_payable=tax_payable,
        effective_rate=effective_rate(tax_payable, revenue),
    )
    recommendation = recommend(tax_payable, tax_payable, has_dual_regime=False)

    _LOGGER.debug(
        "Corporate tax for %s (%s): %.2f on profit %.2f",
        member.value,
        rule_set.fiscal_year,
        tax_payable,
        profit,
    )

    return ComparativeTaxReport(
        jurisdiction=member,
        entity_type=EntityType.COMPANY,
        fiscal_year=rule_set.fiscal_year,
        currency=rule_set.currency,
        old_regime=result,
        new_regime=result,
        recommended_regime=recommendation.regime,
        recommendation_reason=recommendation.reason,
        optimization_tips=rule_set.optimization_tips,
    )


__all__ = ["calculate_corporate_tax"]
