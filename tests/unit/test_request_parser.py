"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from statutax.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_uses_query_fiscal_year(app: Flask) -> None:
    """The query string should supply the fiscal year when the body omits it."""

    with app.test_request_context(
        "/api/v1/calculations/personal?fiscal_year=2023-24",
        method="POST",
        json={"jurisdiction": "India"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["fiscal_year"] == "2023-24"


def test_parse_payload_preserves_explicit_fiscal_year(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/personal?fiscal_year=2099-00",
        method="POST",
        json={"jurisdiction": "India", "fiscal_year": "2023-24"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["fiscal_year"] == "2023-24"


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    """Non-object JSON payloads should trigger BadRequest responses."""

    with app.test_request_context(
        "/api/v1/calculations/gst",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/gst",
        method="POST",
        data="{broken",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest, match="valid JSON"):
            parse_calculation_payload(request)
