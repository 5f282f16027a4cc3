"""Corporate estimates for a batch of client companies.

Each company is independent, so the estimates are evaluated on a thread pool
and joined before aggregation. Totals are grouped per jurisdiction because
the amounts are in different currencies.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from statutax.backend.app.models import (
    ComparativeTaxReport,
    Jurisdiction,
    PortfolioCompanyInput,
    PortfolioRequest,
)
from statutax.backend.errors import InvalidInputError

from .calculation_service import compute_corporate_tax, validate_payload

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class PortfolioEntry:
    company_id: str
    name: str | None
    report: ComparativeTaxReport


@dataclass(frozen=True)
class JurisdictionTotals:
    """Aggregated figures for the companies filed in one jurisdiction."""

    jurisdiction: Jurisdiction
    currency: str
    company_count: int
    revenue: float
    profit: float
    tax_payable: float


@dataclass(frozen=True)
class PortfolioSummary:
    entries: tuple[PortfolioEntry, ...]
    totals: tuple[JurisdictionTotals, ...]

    @property
    def company_count(self) -> int:
        return len(self.entries)


def _configured_workers() -> int:
    raw = os.getenv("STATUTAX_PORTFOLIO_WORKERS", "").strip()
    if not raw:
        return DEFAULT_MAX_WORKERS
    try:
        workers = int(raw)
    except ValueError:
        _LOGGER.warning(
            "Ignoring non-integer STATUTAX_PORTFOLIO_WORKERS=%r", raw
        )
        return DEFAULT_MAX_WORKERS
    return max(1, workers)


def _coerce_company(value: PortfolioCompanyInput | Mapping[str, Any]) -> PortfolioCompanyInput:
    return validate_payload(PortfolioCompanyInput, value)


def _evaluate(company: PortfolioCompanyInput, fiscal_year: str | None) -> PortfolioEntry:
    report = compute_corporate_tax(
        company.revenue,
        company.profit,
        company.jurisdiction,
        fiscal_year=fiscal_year,
        passive_income_share=company.passive_income_share,
    )
    return PortfolioEntry(company_id=company.company_id, name=company.name, report=report)


def _aggregate(entries: Sequence[PortfolioEntry]) -> tuple[JurisdictionTotals, ...]:
    grouped: dict[Jurisdiction, list[PortfolioEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.report.jurisdiction, []).append(entry)

    totals = []
    for jurisdiction, members in grouped.items():
        results = [member.report.recommended_result for member in members]
        totals.append(
            JurisdictionTotals(
                jurisdiction=jurisdiction,
                currency=members[0].report.currency,
                company_count=len(members),
                revenue=sum(result.gross_income for result in results),
                profit=sum(result.taxable_income for result in results),
                tax_payable=sum(result.tax_payable for result in results),
            )
        )
    return tuple(totals)


def compute_portfolio(
    companies: Sequence[PortfolioCompanyInput | Mapping[str, Any]],
    *,
    fiscal_year: str | None = None,
    max_workers: int | None = None,
) -> PortfolioSummary:
    """Estimate corporate tax for every company and aggregate the results.

    Entries keep the order of ``companies``. The first failing company's
    error propagates and no partial summary is returned.
    """

    members = [_coerce_company(company) for company in companies]
    if not members:
        raise InvalidInputError("Portfolio must include at least one company")

    identifiers = [member.company_id for member in members]
    if len(set(identifiers)) != len(identifiers):
        raise InvalidInputError("Portfolio company identifiers must be unique")

    workers = max_workers if max_workers is not None else _configured_workers()
    workers = max(1, min(workers, len(members)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        entries = tuple(executor.map(lambda member: _evaluate(member, fiscal_year), members))

    _LOGGER.debug(
        "Evaluated %d portfolio companies with %d workers", len(entries), workers
    )
    return PortfolioSummary(entries=entries, totals=_aggregate(entries))


def evaluate_portfolio(payload: Mapping[str, Any]) -> PortfolioSummary:
    request_model = validate_payload(PortfolioRequest, payload)
    return compute_portfolio(request_model.companies, fiscal_year=request_model.fiscal_year)


__all__ = [
    "JurisdictionTotals",
    "PortfolioEntry",
    "PortfolioSummary",
    "compute_portfolio",
    "evaluate_portfolio",
]
