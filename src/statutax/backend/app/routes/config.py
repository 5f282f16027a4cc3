"""Expose rule-table metadata consumed by API clients.

These endpoints publish the YAML-backed fiscal year configuration so that a
client can populate jurisdiction pickers, GST rate lists and payroll bounds
without duplicating the rules.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from statutax.backend.app.formatting import CURRENCY_SYMBOLS, format_rate
from statutax.backend.app.http import problem_response
from statutax.backend.config.rule_tables import (
    EntityType,
    Jurisdiction,
    JurisdictionConfig,
    RegimeRules,
    available_fiscal_years,
    load_fiscal_year,
    manifest_entries,
)
from statutax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    supported = list(available_fiscal_years())
    default_year = supported[-1] if supported else None
    return {
        "version": get_project_version(),
        "supported_fiscal_years": supported,
        "default_fiscal_year": default_year,
        "jurisdictions": [member.value for member in Jurisdiction],
    }


def _serialise_regime(rules: RegimeRules) -> dict[str, Any]:
    payload = rules.model_dump(mode="json", exclude={"brackets", "corporate"})
    payload["brackets"] = [
        {
            "upper": bracket.upper_bound,
            "rate": bracket.rate,
            "rate_label": format_rate(bracket.rate),
        }
        for bracket in rules.brackets
    ]
    if rules.corporate is not None:
        payload["corporate"] = rules.corporate.model_dump(mode="json")
    return payload


def _serialise_jurisdiction(member: Jurisdiction, entry: JurisdictionConfig) -> dict[str, Any]:
    return {
        "jurisdiction": member.value,
        "currency": entry.currency,
        "currency_symbol": CURRENCY_SYMBOLS[member],
        "individual": [
            _serialise_regime(rules) for rules in entry.regimes(EntityType.INDIVIDUAL)
        ],
        "company": [
            _serialise_regime(rules) for rules in entry.regimes(EntityType.COMPANY)
        ],
        "payroll": entry.payroll.model_dump(mode="json") if entry.payroll else None,
        "gst": entry.gst.model_dump(mode="json") if entry.gst else None,
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    payload = get_configuration_metadata()
    return jsonify(payload), 200


@blueprint.get("/fiscal-years")
def list_fiscal_years() -> tuple[Any, int]:
    """Return all configured fiscal years with their manifest status."""

    metadata = get_configuration_metadata()
    payload = {
        "fiscal_years": [
            entry.model_dump(mode="json", exclude_none=True)
            for entry in manifest_entries()
        ],
        "default_fiscal_year": metadata["default_fiscal_year"],
        "supported_fiscal_years": metadata["supported_fiscal_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<fiscal_year>/jurisdictions")
def list_jurisdictions(fiscal_year: str) -> tuple[Any, int]:
    """Expose every jurisdiction's rule tables for ``fiscal_year``."""

    try:
        configuration = load_fiscal_year(fiscal_year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    payload = {
        "fiscal_year": configuration.fiscal_year,
        "meta": dict(configuration.meta),
        "jurisdictions": [
            _serialise_jurisdiction(member, entry)
            for member, entry in configuration.jurisdictions.items()
        ],
    }
    return jsonify(payload), 200
