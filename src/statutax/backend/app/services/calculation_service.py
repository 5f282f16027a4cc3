"""Orchestrate request validation and the tax and statutory calculators.

The ``compute_*`` functions form the in-process contract: they accept plain
numbers (or mappings for the income and deduction profiles), resolve the rule
tables for the requested fiscal year and return frozen result objects. The
``evaluate_*`` helpers sit in front of them for the HTTP layer, validating a
decoded JSON payload against the request models first.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from statutax.backend.app.models import (
    ComparativeTaxReport,
    CorporateTaxRequest,
    DeductionProfile,
    GstBreakdown,
    GstDirection,
    GstRequest,
    IncomeProfile,
    Jurisdiction,
    PayrollBreakdown,
    PayrollRequest,
    PersonalTaxRequest,
    SupplyType,
    format_validation_error,
)
from statutax.backend.errors import InvalidInputError

from .calculators import (
    calculate_corporate_tax,
    calculate_gst,
    calculate_payroll,
    calculate_personal_tax,
)

_LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("STATUTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None) -> None:
    if timings is None:
        return
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def validate_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``model``, raising :class:`InvalidInputError`."""

    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidInputError("Payload must be a mapping")
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc)) from exc


def compute_personal_tax(
    income: IncomeProfile | Mapping[str, Any],
    deductions: DeductionProfile | Mapping[str, Any] | None,
    jurisdiction: Jurisdiction | str,
    *,
    fiscal_year: str | None = None,
) -> ComparativeTaxReport:
    """Compare the personal tax regimes available in ``jurisdiction``."""

    income_profile = validate_payload(IncomeProfile, income)
    deduction_profile = validate_payload(DeductionProfile, deductions or {})

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    with _profile_section("personal", timings):
        report = calculate_personal_tax(
            income_profile, deduction_profile, jurisdiction, fiscal_year
        )
    _log_timings("compute_personal_tax", timings)
    return report


def compute_corporate_tax(
    revenue: float,
    profit: float,
    jurisdiction: Jurisdiction | str,
    *,
    fiscal_year: str | None = None,
    passive_income_share: float = 0.0,
) -> ComparativeTaxReport:
    """Estimate company tax for ``jurisdiction``."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    with _profile_section("corporate", timings):
        report = calculate_corporate_tax(
            revenue,
            profit,
            jurisdiction,
            fiscal_year=fiscal_year,
            passive_income_share=passive_income_share,
        )
    _log_timings("compute_corporate_tax", timings)
    return report


def compute_payroll(
    ctc: float,
    basic_pct: float,
    hra_pct: float,
    other_allowances: float = 0.0,
    *,
    jurisdiction: Jurisdiction | str = Jurisdiction.INDIA,
    fiscal_year: str | None = None,
) -> PayrollBreakdown:
    """Break an annual cost-to-company into monthly payroll lines."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    with _profile_section("payroll", timings):
        breakdown = calculate_payroll(
            ctc,
            basic_pct,
            hra_pct,
            other_allowances,
            jurisdiction=jurisdiction,
            fiscal_year=fiscal_year,
        )
    _log_timings("compute_payroll", timings)
    return breakdown


def compute_gst(
    amount: float,
    rate: float,
    direction: GstDirection | str,
    *,
    supply: SupplyType | str = SupplyType.INTRA_STATE,
    fiscal_year: str | None = None,
) -> GstBreakdown:
    """Convert between GST-inclusive and GST-exclusive amounts."""

    return calculate_gst(amount, rate, direction, supply=supply, fiscal_year=fiscal_year)


def evaluate_personal(payload: Mapping[str, Any]) -> ComparativeTaxReport:
    request_model = validate_payload(PersonalTaxRequest, payload)
    return compute_personal_tax(
        request_model.income,
        request_model.deductions,
        request_model.jurisdiction,
        fiscal_year=request_model.fiscal_year,
    )


def evaluate_corporate(payload: Mapping[str, Any]) -> ComparativeTaxReport:
    request_model = validate_payload(CorporateTaxRequest, payload)
    return compute_corporate_tax(
        request_model.revenue,
        request_model.profit,
        request_model.jurisdiction,
        fiscal_year=request_model.fiscal_year,
        passive_income_share=request_model.passive_income_share,
    )


def evaluate_payroll(payload: Mapping[str, Any]) -> PayrollBreakdown:
    request_model = validate_payload(PayrollRequest, payload)
    return compute_payroll(
        request_model.ctc,
        request_model.basic_pct,
        request_model.hra_pct,
        request_model.other_allowances,
        jurisdiction=request_model.jurisdiction,
        fiscal_year=request_model.fiscal_year,
    )


def evaluate_gst(payload: Mapping[str, Any]) -> GstBreakdown:
    request_model = validate_payload(GstRequest, payload)
    return calculate_gst(
        request_model.amount,
        request_model.rate,
        request_model.direction,
        supply=request_model.supply,
        jurisdiction=request_model.jurisdiction,
        fiscal_year=request_model.fiscal_year,
    )


__all__ = [
    "compute_corporate_tax",
    "compute_gst",
    "compute_payroll",
    "compute_personal_tax",
    "evaluate_corporate",
    "evaluate_gst",
    "evaluate_payroll",
    "evaluate_personal",
    "validate_payload",
]
