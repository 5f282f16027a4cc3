"""Rule table loader wrapping the shared schema models."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Sequence

import yaml
from pydantic import ValidationError

from statutax.backend.errors import UnsupportedJurisdictionError

from .schema import (
    BaseRateEntity,
    ConfigurationError,
    ContributionRates,
    CorporateRates,
    DeductionField,
    EntityType,
    FiscalYearConfiguration,
    FiscalYearManifest,
    FiscalYearManifestEntry,
    GstConfig,
    Jurisdiction,
    JurisdictionConfig,
    MarginalRelief,
    PayrollConfig,
    PercentageBounds,
    Regime,
    RegimeRules,
    RevenueRateTier,
    SmallProfitsRate,
    StandardDeduction,
    SurchargeTier,
    TaxBracket,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


@dataclass(frozen=True)
class Slab:
    """A progressive bracket with its lower bound made explicit."""

    lower: float
    upper: float | None
    rate: float


@dataclass(frozen=True)
class JurisdictionRuleSet:
    """Rules resolved for one jurisdiction, entity type and regime."""

    fiscal_year: str
    jurisdiction: Jurisdiction
    entity_type: EntityType
    currency: str
    rules: RegimeRules

    @property
    def regime(self) -> Regime:
        return self.rules.regime

    @property
    def rebate_threshold(self) -> float | None:
        return self.rules.rebate_threshold

    @property
    def standard_deduction(self) -> StandardDeduction:
        return self.rules.standard_deduction

    @property
    def cess_rate(self) -> float:
        return self.rules.cess_rate

    @property
    def surcharge_tiers(self) -> Sequence[SurchargeTier]:
        return self.rules.surcharge_tiers

    @property
    def corporate(self) -> CorporateRates | None:
        return self.rules.corporate

    @property
    def optimization_tips(self) -> tuple[str, ...]:
        return tuple(self.rules.optimization_tips)

    def slabs(self) -> Iterator[Slab]:
        """Yield contiguous slabs starting at zero."""

        lower = 0.0
        for bracket in self.rules.brackets:
            yield Slab(lower=lower, upper=bracket.upper_bound, rate=bracket.rate)
            if bracket.upper_bound is not None:
                lower = bracket.upper_bound

    def permits(self, field: DeductionField) -> bool:
        return field in self.rules.allowed_deductions

    def cap_for(self, field: DeductionField) -> float | None:
        return self.rules.deduction_caps.get(field)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> FiscalYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return FiscalYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[FiscalYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().fiscal_years


def available_fiscal_years() -> Sequence[str]:
    """Return the fiscal years declared in the manifest."""

    return load_manifest().supported_fiscal_years


def default_fiscal_year() -> str:
    """Return the most recent fiscal year declared in the manifest."""

    years = available_fiscal_years()
    if not years:
        raise ConfigurationError("Configuration manifest declares no fiscal years")
    return years[-1]


@lru_cache(maxsize=8)
def load_fiscal_year(fiscal_year: str) -> FiscalYearConfiguration:
    """Load rule tables for ``fiscal_year`` from disk."""

    try:
        manifest_entry = load_manifest().get_entry(fiscal_year)
    except KeyError as exc:
        raise FileNotFoundError(
            f"Configuration for fiscal year {fiscal_year} not declared in manifest"
        ) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for fiscal year {fiscal_year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("fiscal_year", fiscal_year)

    try:
        configuration = FiscalYearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Configuration validation failed for {fiscal_year}: {error}"
        ) from error

    if configuration.fiscal_year != fiscal_year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {fiscal_year}, "
            f"found {configuration.fiscal_year}"
        )

    return configuration


def resolve_fiscal_year(fiscal_year: str | None) -> FiscalYearConfiguration:
    """Load ``fiscal_year`` or the default year when it is omitted."""

    return load_fiscal_year(fiscal_year or default_fiscal_year())


def jurisdiction_config(
    jurisdiction: Jurisdiction | str, fiscal_year: str | None = None
) -> JurisdictionConfig:
    """Return every rule table declared for ``jurisdiction``."""

    member = Jurisdiction.parse(jurisdiction)
    configuration = resolve_fiscal_year(fiscal_year)
    entry = configuration.jurisdictions.get(member)
    if entry is None:
        raise UnsupportedJurisdictionError(member)
    return entry


def _entity_type(jurisdiction: object, value: EntityType | str) -> EntityType:
    try:
        return EntityType(value)
    except ValueError:
        raise UnsupportedJurisdictionError(jurisdiction, value) from None


def _regime(
    jurisdiction: object, entity_type: EntityType, value: Regime | str
) -> Regime:
    try:
        return Regime(value)
    except ValueError:
        raise UnsupportedJurisdictionError(jurisdiction, entity_type, value) from None


def regimes_for(
    jurisdiction: Jurisdiction | str,
    entity_type: EntityType | str,
    fiscal_year: str | None = None,
) -> tuple[Regime, ...]:
    """Return the regimes available to ``entity_type`` in priority order."""

    member = Jurisdiction.parse(jurisdiction)
    entity = _entity_type(member, entity_type)
    entries = jurisdiction_config(member, fiscal_year).regimes(entity)
    if not entries:
        raise UnsupportedJurisdictionError(member, entity)
    return tuple(entry.regime for entry in entries)


def rules_for(
    jurisdiction: Jurisdiction | str,
    entity_type: EntityType | str,
    regime: Regime | str,
    fiscal_year: str | None = None,
) -> JurisdictionRuleSet:
    """Look up the rule set for a jurisdiction/entity/regime triple.

    Raises :class:`UnsupportedJurisdictionError` when the combination has no
    table entry; there is no fallback to another jurisdiction or regime.
    """

    member = Jurisdiction.parse(jurisdiction)
    entity = _entity_type(member, entity_type)
    wanted = _regime(member, entity, regime)
    configuration = resolve_fiscal_year(fiscal_year)
    entry = configuration.jurisdictions.get(member)
    if entry is None:
        raise UnsupportedJurisdictionError(member, entity, wanted)

    for rules in entry.regimes(entity):
        if rules.regime == wanted:
            return JurisdictionRuleSet(
                fiscal_year=configuration.fiscal_year,
                jurisdiction=member,
                entity_type=entity,
                currency=entry.currency,
                rules=rules,
            )
    raise UnsupportedJurisdictionError(member, entity, wanted)


def payroll_rules_for(
    jurisdiction: Jurisdiction | str, fiscal_year: str | None = None
) -> PayrollConfig:
    """Return statutory payroll rules, failing when none are published."""

    entry = jurisdiction_config(jurisdiction, fiscal_year)
    if entry.payroll is None:
        raise UnsupportedJurisdictionError(jurisdiction, "Payroll")
    return entry.payroll


def gst_rules_for(
    jurisdiction: Jurisdiction | str, fiscal_year: str | None = None
) -> GstConfig:
    """Return the indirect tax rate set, failing when none is published."""

    entry = jurisdiction_config(jurisdiction, fiscal_year)
    if entry.gst is None:
        raise UnsupportedJurisdictionError(jurisdiction, "GST")
    return entry.gst


__all__ = [
    "BaseRateEntity",
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "ContributionRates",
    "CorporateRates",
    "DeductionField",
    "EntityType",
    "FiscalYearConfiguration",
    "FiscalYearManifest",
    "FiscalYearManifestEntry",
    "GstConfig",
    "Jurisdiction",
    "JurisdictionConfig",
    "JurisdictionRuleSet",
    "MANIFEST_FILE",
    "MarginalRelief",
    "PayrollConfig",
    "PercentageBounds",
    "Regime",
    "RegimeRules",
    "RevenueRateTier",
    "Slab",
    "SmallProfitsRate",
    "StandardDeduction",
    "SurchargeTier",
    "TaxBracket",
    "available_fiscal_years",
    "default_fiscal_year",
    "gst_rules_for",
    "jurisdiction_config",
    "load_fiscal_year",
    "load_manifest",
    "manifest_entries",
    "payroll_rules_for",
    "regimes_for",
    "resolve_fiscal_year",
    "rules_for",
]
