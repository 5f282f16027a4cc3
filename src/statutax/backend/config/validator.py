"""Utilities for validating rule table data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Sequence

from .rule_tables import (
    ContributionRates,
    EntityType,
    FiscalYearConfiguration,
    GstConfig,
    JurisdictionConfig,
    PayrollConfig,
    Regime,
    RegimeRules,
    available_fiscal_years,
    load_fiscal_year,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_contributions(scope: str, contributions: ContributionRates) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "employee": contributions.employee_rate,
        "employer": contributions.employer_rate,
    }.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(
                    scope,
                    f"{label} contribution rate {value} must be between 0 and 1",
                )
            )

    return errors


def _validate_payroll(scope: str, payroll: PayrollConfig) -> list[str]:
    errors: list[str] = []

    errors.extend(
        _validate_contributions(f"{scope}.provident_fund", payroll.provident_fund)
    )
    errors.extend(
        _validate_contributions(f"{scope}.state_insurance", payroll.state_insurance)
    )

    if payroll.provident_fund.monthly_salary_cap is None:
        errors.append(
            _format_scope(f"{scope}.provident_fund", "a monthly wage ceiling is required")
        )
    if payroll.state_insurance.monthly_eligibility_limit is None:
        errors.append(
            _format_scope(
                f"{scope}.state_insurance", "a monthly eligibility limit is required"
            )
        )

    if payroll.basic_pct.maximum > 100:
        errors.append(
            _format_scope(f"{scope}.basic_pct", "basic salary cannot exceed 100% of CTC")
        )
    if payroll.hra_pct.maximum > 100:
        errors.append(
            _format_scope(f"{scope}.hra_pct", "HRA cannot exceed 100% of basic salary")
        )

    return errors


def _validate_gst(scope: str, gst: GstConfig) -> list[str]:
    errors: list[str] = []
    if any(rate > 40 for rate in gst.rates):
        errors.append(_format_scope(scope, "GST rates above 40% look like a typo"))
    return errors


def _validate_tips(scope: str, tips: Iterable[str]) -> list[str]:
    errors: list[str] = []
    for index, tip in enumerate(tips):
        if not tip or not tip.strip():
            errors.append(_format_scope(scope, f"optimization tip {index} is empty"))
    return errors


def _validate_regime(scope: str, rules: RegimeRules, entity_type: EntityType) -> list[str]:
    errors: list[str] = []

    if entity_type is EntityType.INDIVIDUAL:
        if rules.corporate is not None:
            errors.append(_format_scope(scope, "individual regimes cannot define corporate rates"))
        brackets = list(rules.brackets)
        if brackets and brackets[0].rate > 0 and rules.rebate_threshold:
            errors.append(
                _format_scope(scope, "a rebate threshold with a taxed first slab is ambiguous")
            )
        for field_name in rules.deduction_caps:
            if field_name not in rules.allowed_deductions:
                errors.append(
                    _format_scope(
                        scope,
                        f"cap declared for '{field_name.value}' which the regime does not permit",
                    )
                )
    elif rules.brackets:
        errors.append(_format_scope(scope, "company regimes use corporate rates, not slabs"))

    errors.extend(_validate_tips(scope, rules.optimization_tips))
    return errors


def _validate_jurisdiction(scope: str, config: JurisdictionConfig) -> list[str]:
    errors: list[str] = []

    if len(config.currency) != 3 or not config.currency.isupper():
        errors.append(_format_scope(scope, f"currency '{config.currency}' is not an ISO code"))

    for entity_type in EntityType:
        entries = config.regimes(entity_type)
        if not entries:
            errors.append(
                _format_scope(scope, f"no {entity_type.value.lower()} regimes declared")
            )
            continue
        regimes = [entry.regime for entry in entries]
        if len(regimes) > 1 and regimes[0] is not Regime.NEW:
            errors.append(
                _format_scope(
                    f"{scope}.{entity_type.value.lower()}",
                    "the statutory default (New) regime must be listed first",
                )
            )
        if len(regimes) == 1 and regimes[0] is not Regime.STANDARD:
            errors.append(
                _format_scope(
                    f"{scope}.{entity_type.value.lower()}",
                    "a single regime should be declared as Standard",
                )
            )
        for entry in entries:
            errors.extend(
                _validate_regime(
                    f"{scope}.{entity_type.value.lower()}.{entry.regime.value}",
                    entry,
                    entity_type,
                )
            )

    if config.payroll is not None:
        errors.extend(_validate_payroll(f"{scope}.payroll", config.payroll))
    if config.gst is not None:
        errors.extend(_validate_gst(f"{scope}.gst", config.gst))

    return errors


def validate_fiscal_year_configuration(config: FiscalYearConfiguration) -> list[str]:
    """Return human-readable issues detected in ``config``."""

    errors: list[str] = []
    for jurisdiction, entry in config.jurisdictions.items():
        errors.extend(_validate_jurisdiction(jurisdiction.value, entry))
    return errors


def validate_all_fiscal_years(
    fiscal_years: Sequence[str] | None = None,
) -> dict[str, list[str]]:
    """Validate all configured fiscal years and return issues keyed by year."""

    targets = fiscal_years or available_fiscal_years()
    results: dict[str, list[str]] = {}

    for fiscal_year in targets:
        config = load_fiscal_year(fiscal_year)
        results[fiscal_year] = validate_fiscal_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured rule tables and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "fiscal_years",
        nargs="*",
        help="Specific fiscal years to validate, e.g. 2023-24 (defaults to all)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    fiscal_years = args.fiscal_years or available_fiscal_years()

    if not fiscal_years:
        parser.print_help()
        return 1

    exit_code = 0

    for fiscal_year in fiscal_years:
        try:
            config = load_fiscal_year(fiscal_year)
        except FileNotFoundError as error:
            print(f"[{fiscal_year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_fiscal_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{fiscal_year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{fiscal_year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
