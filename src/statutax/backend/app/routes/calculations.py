"""REST endpoints for tax and statutory calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from statutax.backend.services import (
    build_calculation_response,
    build_gst_payload,
    build_payroll_payload,
    build_portfolio_payload,
    build_report_payload,
    evaluate_corporate,
    evaluate_gst,
    evaluate_payroll,
    evaluate_personal,
    evaluate_portfolio,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1/calculations")


@blueprint.post("/personal")
def create_personal_calculation() -> tuple[Any, int]:
    """Compare the personal tax regimes for the submitted income profile."""

    payload = parse_calculation_payload(request)
    report = evaluate_personal(payload)

    return build_calculation_response(build_report_payload(report))


@blueprint.post("/corporate")
def create_corporate_calculation() -> tuple[Any, int]:
    """Estimate company tax for the submitted revenue and profit."""

    payload = parse_calculation_payload(request)
    report = evaluate_corporate(payload)

    return build_calculation_response(build_report_payload(report))


@blueprint.post("/payroll")
def create_payroll_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    breakdown = evaluate_payroll(payload)

    return build_calculation_response(build_payroll_payload(breakdown))


@blueprint.post("/gst")
def create_gst_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    breakdown = evaluate_gst(payload)

    return build_calculation_response(build_gst_payload(breakdown))


@blueprint.post("/portfolio")
def create_portfolio_calculation() -> tuple[Any, int]:
    """Estimate corporate tax for a batch of client companies."""

    payload = parse_calculation_payload(request)
    summary = evaluate_portfolio(payload)

    return build_calculation_response(build_portfolio_payload(summary))
