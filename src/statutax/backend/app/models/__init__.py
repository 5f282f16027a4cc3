"""Value objects shared by the calculators, services and HTTP layer.

Inputs are frozen Pydantic models (see :mod:`.api`) so callers can build them
from plain mappings; derived results are frozen dataclasses rebuilt on every
call. None of them carries identity or is mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from statutax.backend.config.schema import EntityType, Jurisdiction, Regime

from .api import (
    CorporateTaxRequest,
    DeductionProfile,
    GstDirection,
    GstRequest,
    IncomeProfile,
    PayrollRequest,
    PersonalTaxRequest,
    PortfolioCompanyInput,
    PortfolioRequest,
    SupplyType,
    format_validation_error,
)

__all__ = [
    "ComparativeTaxReport",
    "CorporateTaxRequest",
    "DeductionProfile",
    "EntityType",
    "GstBreakdown",
    "GstDirection",
    "GstRequest",
    "IncomeProfile",
    "Jurisdiction",
    "PayrollBreakdown",
    "PayrollRequest",
    "PersonalTaxRequest",
    "PortfolioCompanyInput",
    "PortfolioRequest",
    "RecommendedRegime",
    "Regime",
    "SupplyType",
    "TaxCalculationResult",
    "format_validation_error",
    "serialise",
]


class RecommendedRegime(str, Enum):
    """Outcome of comparing regimes."""

    OLD = "Old"
    NEW = "New"
    NOT_APPLICABLE = "N/A"


def serialise(value: Any) -> Any:
    """Convert result dataclasses into JSON-ready structures."""

    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        return {field.name: serialise(getattr(value, field.name)) for field in fields(value)}
    if isinstance(value, (list, tuple)):
        return [serialise(item) for item in value]
    if isinstance(value, dict):
        return {str(serialise(key)): serialise(item) for key, item in value.items()}
    return value


@dataclass(frozen=True)
class TaxCalculationResult:
    """Figures for one regime. ``effective_rate`` is a percentage."""

    gross_income: float
    total_deductions: float
    taxable_income: float
    base_tax: float
    surcharge: float
    cess: float
    tax_payable: float
    effective_rate: float


@dataclass(frozen=True)
class ComparativeTaxReport:
    """Old/new regime results with the recommendation between them."""

    jurisdiction: Jurisdiction
    entity_type: EntityType
    fiscal_year: str
    currency: str
    old_regime: TaxCalculationResult
    new_regime: TaxCalculationResult
    recommended_regime: RecommendedRegime
    recommendation_reason: str
    optimization_tips: tuple[str, ...]

    @property
    def has_dual_regime(self) -> bool:
        return self.recommended_regime is not RecommendedRegime.NOT_APPLICABLE

    @property
    def recommended_result(self) -> TaxCalculationResult:
        if self.recommended_regime is RecommendedRegime.OLD:
            return self.old_regime
        return self.new_regime


@dataclass(frozen=True)
class PayrollBreakdown:
    """Monthly salary components, statutory contributions and aggregates."""

    annual_ctc: float
    basic_pct: float
    hra_pct: float
    basic: float
    hra: float
    special_allowance: float
    other_allowances: float
    gross_monthly: float
    employee_pf: float
    employee_esi: float
    employer_pf: float
    employer_esi: float
    esi_applicable: bool
    total_deductions: float
    net_salary: float
    employer_cost: float

    @property
    def annual_employer_cost(self) -> float:
        return self.employer_cost * 12


@dataclass(frozen=True)
class GstBreakdown:
    """Base, tax and total amounts for one GST conversion."""

    base_amount: float
    gst_amount: float
    total_amount: float
    rate: float
    is_inclusive: bool
    supply_type: SupplyType
    cgst: float
    sgst: float
    igst: float
