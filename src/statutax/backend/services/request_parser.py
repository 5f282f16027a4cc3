"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _resolve_fiscal_year(req: Request, payload: dict[str, Any]) -> None:
    """Fill ``fiscal_year`` from the query string when the body omits it."""

    if payload.get("fiscal_year") not in (None, ""):
        return

    fiscal_year = req.args.get("fiscal_year")
    if fiscal_year and fiscal_year.strip():
        payload["fiscal_year"] = fiscal_year.strip()


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_fiscal_year(req, payload)

    return payload
