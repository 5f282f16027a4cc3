"""Pydantic models describing the fiscal year rule table schema."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from statutax.backend.errors import UnsupportedJurisdictionError


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class Jurisdiction(str, Enum):
    """Jurisdictions with published rule tables."""

    INDIA = "India"
    USA = "USA"
    UK = "UK"
    AUSTRALIA = "Australia"

    @classmethod
    def parse(cls, value: Any) -> Jurisdiction:
        """Resolve ``value`` to a member, rejecting anything unknown."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key == member.value.lower() or key in _JURISDICTION_ALIASES[member]:
                    return member
        raise UnsupportedJurisdictionError(value)


_JURISDICTION_ALIASES: dict[Jurisdiction, frozenset[str]] = {
    Jurisdiction.INDIA: frozenset({"in", "ind"}),
    Jurisdiction.USA: frozenset({"us", "united states", "united states of america"}),
    Jurisdiction.UK: frozenset({"gb", "united kingdom", "great britain"}),
    Jurisdiction.AUSTRALIA: frozenset({"au", "aus"}),
}


class EntityType(str, Enum):
    """Taxpayer categories covered by the rule tables."""

    INDIVIDUAL = "Individual"
    COMPANY = "Company"


class Regime(str, Enum):
    """Named rule sets a taxpayer may elect between."""

    NEW = "New"
    OLD = "Old"
    STANDARD = "Standard"


class DeductionField(str, Enum):
    """Itemised deduction inputs a regime may permit."""

    SECTION_80C = "section_80c"
    SECTION_80D = "section_80d"
    HRA = "hra"
    OTHER = "other_deductions"


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _check_rate(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax slab; the lower bound is implied."""

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        _check_rate(self.rate, "Tax rates")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        return self


class StandardDeduction(ImmutableModel):
    """Flat deduction granted before slab tax is computed."""

    amount: float = 0.0
    salary_only: bool = False

    @model_validator(mode="after")
    def _validate_amount(self) -> StandardDeduction:
        if self.amount < 0:
            raise ConfigurationError("Standard deduction must be non-negative")
        return self


class SurchargeTier(ImmutableModel):
    """Additional percentage of base tax once profit exceeds ``threshold``."""

    threshold: float
    rate: float

    @model_validator(mode="after")
    def _validate_tier(self) -> SurchargeTier:
        if self.threshold < 0:
            raise ConfigurationError("Surcharge thresholds must be non-negative")
        _check_rate(self.rate, "Surcharge rates")
        return self


class RevenueRateTier(ImmutableModel):
    """Corporate rate that applies while revenue stays at or below ``upper``."""

    revenue_upper: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_tier(self) -> RevenueRateTier:
        _check_rate(self.rate, "Corporate rates")
        if self.revenue_upper is not None and self.revenue_upper <= 0:
            raise ConfigurationError("Revenue tier bounds must be positive values")
        return self


class SmallProfitsRate(ImmutableModel):
    """Reduced rate for profits at or below ``profit_upper``."""

    profit_upper: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> SmallProfitsRate:
        _check_rate(self.rate, "Small profits rate")
        if self.profit_upper <= 0:
            raise ConfigurationError("Small profits limit must be positive")
        return self


class MarginalRelief(ImmutableModel):
    """Relief of ``fraction * (upper - profit)`` for profits inside the band."""

    lower: float
    upper: float
    fraction: float

    @model_validator(mode="after")
    def _validate_band(self) -> MarginalRelief:
        if self.lower < 0 or self.upper <= self.lower:
            raise ConfigurationError("Marginal relief band must be an increasing range")
        _check_rate(self.fraction, "Marginal relief fraction")
        return self

    def relief_for(self, profit: float) -> float:
        if self.lower < profit <= self.upper:
            return self.fraction * (self.upper - profit)
        return 0.0


class BaseRateEntity(ImmutableModel):
    """Lower company rate for small trading companies."""

    turnover_below: float
    max_passive_income_share: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> BaseRateEntity:
        if self.turnover_below <= 0:
            raise ConfigurationError("Base rate entity turnover limit must be positive")
        _check_rate(self.max_passive_income_share, "Passive income share")
        _check_rate(self.rate, "Base rate entity rate")
        return self

    def applies(self, turnover: float, passive_income_share: float) -> bool:
        return (
            turnover < self.turnover_below
            and passive_income_share <= self.max_passive_income_share
        )


class CorporateRates(ImmutableModel):
    """Rate selection rules for company entities."""

    rate_tiers: Sequence[RevenueRateTier]
    small_profits: SmallProfitsRate | None = None
    marginal_relief: MarginalRelief | None = None
    base_rate_entity: BaseRateEntity | None = None

    @model_validator(mode="after")
    def _validate_tiers(self) -> CorporateRates:
        if not self.rate_tiers:
            raise ConfigurationError("Corporate rules require at least one rate tier")
        last_upper: float | None = None
        for tier in self.rate_tiers[:-1]:
            upper = tier.revenue_upper
            if upper is None:
                raise ConfigurationError("Only the final revenue tier may be open-ended")
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Revenue tiers must be in ascending order")
            last_upper = upper
        if self.rate_tiers[-1].revenue_upper is not None:
            raise ConfigurationError("Final revenue tier must have an open upper bound")
        return self

    def rate_for_revenue(self, revenue: float) -> float:
        for tier in self.rate_tiers:
            if tier.revenue_upper is None or revenue <= tier.revenue_upper:
                return tier.rate
        return self.rate_tiers[-1].rate  # pragma: no cover - final tier is open


class RegimeRules(ImmutableModel):
    """Rules for one regime of an entity type within a jurisdiction."""

    regime: Regime
    brackets: Sequence[TaxBracket] = Field(default_factory=tuple, alias="tax_brackets")
    rebate_threshold: float | None = None
    standard_deduction: StandardDeduction = Field(default_factory=StandardDeduction)
    allowed_deductions: Sequence[DeductionField] = Field(default_factory=tuple)
    deduction_caps: Mapping[DeductionField, float] = Field(default_factory=dict)
    cess_rate: float = 0.0
    surcharge_tiers: Sequence[SurchargeTier] = Field(default_factory=tuple)
    corporate: CorporateRates | None = None
    optimization_tips: Sequence[str] = Field(default_factory=tuple)

    @field_validator("allowed_deductions", "optimization_tips", mode="before")
    @classmethod
    def _coerce_sequences(cls, value: Any) -> Sequence[Any]:
        if value is None:
            return ()
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return tuple(value)
        raise ConfigurationError("Expected a list of values")

    @model_validator(mode="after")
    def _validate_rules(self) -> RegimeRules:
        _check_rate(self.cess_rate, "Cess rate")
        if self.rebate_threshold is not None and self.rebate_threshold < 0:
            raise ConfigurationError("Rebate thresholds must be non-negative")
        for field_name, cap in self.deduction_caps.items():
            if cap < 0:
                raise ConfigurationError(f"Deduction cap for '{field_name.value}' must be non-negative")
        thresholds = [tier.threshold for tier in self.surcharge_tiers]
        if thresholds != sorted(set(thresholds)):
            raise ConfigurationError("Surcharge tiers must be strictly ascending by threshold")
        if not 3 <= len(self.optimization_tips) <= 5:
            raise ConfigurationError("Each regime must list between 3 and 5 optimization tips")
        return self


class ContributionRates(ImmutableModel):
    """Employee and employer contribution rates for a statutory scheme."""

    employee_rate: float = 0.0
    employer_rate: float = 0.0
    monthly_salary_cap: float | None = None
    monthly_eligibility_limit: float | None = None

    @model_validator(mode="after")
    def _validate_rates(self) -> ContributionRates:
        if self.employee_rate < 0:
            raise ConfigurationError("Contribution rates must be non-negative")
        if self.employer_rate < 0:
            raise ConfigurationError("Contribution rates must be non-negative")
        if self.monthly_salary_cap is not None and self.monthly_salary_cap < 0:
            raise ConfigurationError("Contribution salary caps must be non-negative")
        if self.monthly_eligibility_limit is not None and self.monthly_eligibility_limit < 0:
            raise ConfigurationError("Contribution eligibility limits must be non-negative")
        return self


class PercentageBounds(ImmutableModel):
    """Inclusive bounds for a user-supplied percentage."""

    minimum: float
    maximum: float

    @model_validator(mode="after")
    def _validate_bounds(self) -> PercentageBounds:
        if self.minimum < 0 or self.maximum < self.minimum:
            raise ConfigurationError("Percentage bounds must be a non-negative range")
        return self

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


class PayrollConfig(ImmutableModel):
    """Statutory payroll rules for a jurisdiction."""

    provident_fund: ContributionRates
    state_insurance: ContributionRates
    basic_pct: PercentageBounds
    hra_pct: PercentageBounds


class GstConfig(ImmutableModel):
    """Indirect tax rate set."""

    rates: Sequence[float]

    @field_validator("rates", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Sequence[float]:
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return tuple(sorted({float(entry) for entry in value}))
        raise ConfigurationError("GST configuration must include a list of 'rates'")

    @model_validator(mode="after")
    def _validate_rates(self) -> GstConfig:
        if not self.rates:
            raise ConfigurationError("GST configuration requires at least one rate")
        if any(rate < 0 or rate >= 100 for rate in self.rates):
            raise ConfigurationError("GST rates must be percentages in [0, 100)")
        return self


class JurisdictionConfig(ImmutableModel):
    """All rule tables for a single jurisdiction."""

    currency: str
    individual: Sequence[RegimeRules] = Field(default_factory=tuple)
    company: Sequence[RegimeRules] = Field(default_factory=tuple)
    payroll: PayrollConfig | None = None
    gst: GstConfig | None = None

    @model_validator(mode="after")
    def _validate_entities(self) -> JurisdictionConfig:
        for entity_type, entries in (
            (EntityType.INDIVIDUAL, self.individual),
            (EntityType.COMPANY, self.company),
        ):
            seen: set[Regime] = set()
            for entry in entries:
                if entry.regime in seen:
                    raise ConfigurationError(
                        f"Duplicate {entry.regime.value} regime for {entity_type.value}"
                    )
                seen.add(entry.regime)
                if entity_type is EntityType.INDIVIDUAL:
                    _validate_bracket_sequence(entry.brackets)
                elif entry.corporate is None:
                    raise ConfigurationError("Company regimes require a 'corporate' block")
        return self

    def regimes(self, entity_type: EntityType) -> Sequence[RegimeRules]:
        if entity_type == EntityType.INDIVIDUAL:
            return self.individual
        if entity_type == EntityType.COMPANY:
            return self.company
        raise ValueError(f"Unknown entity type: {entity_type!r}")


def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")
    last_upper: float | None = None
    last_rate = -1.0
    for bracket in brackets[:-1]:
        upper = bracket.upper_bound
        if upper is None:
            raise ConfigurationError("Only the final tax bracket may be open-ended")
        if last_upper is not None and upper <= last_upper:
            raise ConfigurationError("Tax brackets must be in ascending order")
        last_upper = upper
    if brackets[-1].upper_bound is not None:
        raise ConfigurationError("Final tax bracket must have an open upper bound")
    for bracket in brackets:
        if bracket.rate < last_rate:
            raise ConfigurationError("Tax rates must not decrease with income")
        last_rate = bracket.rate


class FiscalYearConfiguration(ImmutableModel):
    """Structured representation of a fiscal year's rule tables."""

    fiscal_year: str
    meta: Mapping[str, Any] = Field(default_factory=dict)
    jurisdictions: Mapping[Jurisdiction, JurisdictionConfig]

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        jurisdictions = prepared.get("jurisdictions")
        if not isinstance(jurisdictions, Mapping) or not jurisdictions:
            raise ConfigurationError("Configuration must include a 'jurisdictions' section")
        prepared["fiscal_year"] = str(prepared.get("fiscal_year", ""))
        return prepared

    @model_validator(mode="after")
    def _validate_year(self) -> Self:
        if not self.fiscal_year:
            raise ConfigurationError("Configuration must declare its 'fiscal_year'")
        return self


class FiscalYearManifestEntry(ImmutableModel):
    """Entry describing a supported fiscal year in the manifest."""

    fiscal_year: str
    filename: str | None = None
    status: str = "active"

    @field_validator("fiscal_year", mode="before")
    @classmethod
    def _coerce_label(cls, value: Any) -> str:
        return str(value)

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"fy{self.fiscal_year}.yaml"


class FiscalYearManifest(ImmutableModel):
    """Manifest describing the available fiscal year rule tables."""

    fiscal_years: Sequence[FiscalYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> FiscalYearManifest:
        seen: set[str] = set()
        for entry in self.fiscal_years:
            if entry.fiscal_year in seen:
                raise ConfigurationError(
                    f"Duplicate fiscal year {entry.fiscal_year} declared in the manifest"
                )
            seen.add(entry.fiscal_year)
        return self

    def get_entry(self, fiscal_year: str) -> FiscalYearManifestEntry:
        for entry in self.fiscal_years:
            if entry.fiscal_year == fiscal_year:
                return entry
        raise KeyError(fiscal_year)

    @computed_field
    @property
    def supported_fiscal_years(self) -> tuple[str, ...]:
        return tuple(sorted(entry.fiscal_year for entry in self.fiscal_years))


__all__ = [
    "BaseRateEntity",
    "ConfigurationError",
    "ContributionRates",
    "CorporateRates",
    "DeductionField",
    "EntityType",
    "FiscalYearConfiguration",
    "FiscalYearManifest",
    "FiscalYearManifestEntry",
    "GstConfig",
    "ImmutableModel",
    "Jurisdiction",
    "JurisdictionConfig",
    "MarginalRelief",
    "PayrollConfig",
    "PercentageBounds",
    "Regime",
    "RegimeRules",
    "RevenueRateTier",
    "SmallProfitsRate",
    "StandardDeduction",
    "SurchargeTier",
    "TaxBracket",
    "ValidationError",
]
