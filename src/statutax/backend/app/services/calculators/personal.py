"""Personal income tax across the regimes a jurisdiction offers."""

from __future__ import annotations

import logging
import math

from statutax.backend.app.models import (
    ComparativeTaxReport,
    DeductionProfile,
    IncomeProfile,
    RecommendedRegime,
    TaxCalculationResult,
)
from statutax.backend.config.rule_tables import (
    DeductionField,
    EntityType,
    Jurisdiction,
    JurisdictionRuleSet,
    Regime,
    regimes_for,
    rules_for,
)
from statutax.backend.errors import ComputationInvariantError

from .recommender import recommend
from .utils import (
    calculate_progressive_tax,
    effective_rate,
    require_non_negative,
    surcharge_rate,
)

_LOGGER = logging.getLogger(__name__)


def _claimed(deductions: DeductionProfile, rule_set: JurisdictionRuleSet) -> float:
    total = 0.0
    for field in DeductionField:
        if not rule_set.permits(field):
            continue
        amount = getattr(deductions, field.value)
        cap = rule_set.cap_for(field)
        if cap is not None:
            amount = min(amount, cap)
        total += amount
    return total


def calculate_regime(
    income: IncomeProfile,
    deductions: DeductionProfile,
    rule_set: JurisdictionRuleSet,
) -> TaxCalculationResult:
    """Compute the liability under a single regime's rules."""

    gross_income = income.gross_income

    standard = rule_set.standard_deduction
    standard_amount = standard.amount
    if standard.salary_only and income.salary <= 0:
        standard_amount = 0.0

    total_deductions = standard_amount + _claimed(deductions, rule_set)
    taxable_income = max(0.0, gross_income - total_deductions)

    threshold = rule_set.rebate_threshold
    if threshold is not None and taxable_income <= threshold:
        base_tax = 0.0
    else:
        base_tax = calculate_progressive_tax(taxable_income, rule_set.slabs())

    surcharge = base_tax * surcharge_rate(taxable_income, rule_set.surcharge_tiers)
    pre_cess = base_tax + surcharge
    # A zero liability never picks up a cess-only charge.
    cess = pre_cess * rule_set.cess_rate if pre_cess > 0 else 0.0
    tax_payable = pre_cess + cess

    if tax_payable < 0 or not math.isfinite(tax_payable):
        raise ComputationInvariantError(
            f"Computed tax {tax_payable!r} for {rule_set.regime.value} regime is invalid"
        )

    return TaxCalculationResult(
        gross_income=gross_income,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        base_tax=base_tax,
        surcharge=surcharge,
        cess=cess,
        tax_payable=tax_payable,
        effective_rate=effective_rate(tax_payable, gross_income),
    )


def calculate_personal_tax(
    income: IncomeProfile,
    deductions: DeductionProfile,
    jurisdiction: Jurisdiction | str,
    fiscal_year: str | None = None,
) -> ComparativeTaxReport:
    """Compare every regime available to individuals in ``jurisdiction``."""

    require_non_negative(income.model_dump())
    require_non_negative(deductions.model_dump())

    member = Jurisdiction.parse(jurisdiction)
    regimes = regimes_for(member, EntityType.INDIVIDUAL, fiscal_year)
    rule_sets = {
        regime: rules_for(member, EntityType.INDIVIDUAL, regime, fiscal_year)
        for regime in regimes
    }
    results = {
        regime: calculate_regime(income, deductions, rule_set)
        for regime, rule_set in rule_sets.items()
    }

    if len(regimes) == 1:
        regime = regimes[0]
        old_result = new_result = results[regime]
        recommendation = recommend(
            old_result.tax_payable, new_result.tax_payable, has_dual_regime=False
        )
        tips_source = rule_sets[regime]
    else:
        if set(regimes) != {Regime.OLD, Regime.NEW}:
            raise ComputationInvariantError(
                f"Dual-regime comparison for {member.value} requires Old and New rules"
            )
        old_result = results[Regime.OLD]
        new_result = results[Regime.NEW]
        recommendation = recommend(
            old_result.tax_payable, new_result.tax_payable, has_dual_regime=True
        )
        chosen = (
            Regime.OLD if recommendation.regime is RecommendedRegime.OLD else Regime.NEW
        )
        tips_source = rule_sets[chosen]

    _LOGGER.debug(
        "Personal tax for %s (%s): %s recommended",
        member.value,
        tips_source.fiscal_year,
        recommendation.regime.value,
    )

    return ComparativeTaxReport(
        jurisdiction=member,
        entity_type=EntityType.INDIVIDUAL,
        fiscal_year=tips_source.fiscal_year,
        currency=tips_source.currency,
        old_regime=old_result,
        new_regime=new_result,
        recommended_regime=recommendation.regime,
        recommendation_reason=recommendation.reason,
        optimization_tips=tips_source.optimization_tips,
    )


__all__ = ["calculate_personal_tax", "calculate_regime"]
