"""Service-layer helpers for the Statutax backend."""

from statutax.backend.app.services.calculation_service import (
    evaluate_corporate,
    evaluate_gst,
    evaluate_payroll,
    evaluate_personal,
)
from statutax.backend.app.services.portfolio_service import evaluate_portfolio

from .request_parser import parse_calculation_payload
from .response_builder import (
    build_calculation_response,
    build_gst_payload,
    build_payroll_payload,
    build_portfolio_payload,
    build_report_payload,
    summarise_report,
)

__all__ = [
    "build_calculation_response",
    "build_gst_payload",
    "build_payroll_payload",
    "build_portfolio_payload",
    "build_report_payload",
    "evaluate_corporate",
    "evaluate_gst",
    "evaluate_payroll",
    "evaluate_personal",
    "evaluate_portfolio",
    "parse_calculation_payload",
    "summarise_report",
]
