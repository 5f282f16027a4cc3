"""Unit tests for GST conversions."""

from __future__ import annotations

import pytest

from statutax.backend.app.models import GstDirection, SupplyType
from statutax.backend.app.services.calculation_service import compute_gst
from statutax.backend.config.rule_tables import gst_rules_for
from statutax.backend.errors import InvalidInputError


def test_exclusive_amount_adds_tax() -> None:
    breakdown = compute_gst(10_000, 18, GstDirection.EXCLUSIVE)

    assert breakdown.base_amount == pytest.approx(10_000)
    assert breakdown.gst_amount == pytest.approx(1_800)
    assert breakdown.total_amount == pytest.approx(11_800)
    assert not breakdown.is_inclusive
    assert breakdown.cgst == pytest.approx(900)
    assert breakdown.sgst == pytest.approx(900)
    assert breakdown.igst == 0


def test_inclusive_amount_extracts_tax() -> None:
    breakdown = compute_gst(11_800, 18, "inclusive")

    assert breakdown.total_amount == pytest.approx(11_800)
    assert breakdown.base_amount == pytest.approx(10_000)
    assert breakdown.gst_amount == pytest.approx(1_800)
    assert breakdown.is_inclusive


def test_inter_state_supply_books_integrated_tax() -> None:
    breakdown = compute_gst(10_000, 12, "exclusive", supply=SupplyType.INTER_STATE)

    assert breakdown.igst == pytest.approx(1_200)
    assert breakdown.cgst == 0
    assert breakdown.sgst == 0
    assert breakdown.supply_type is SupplyType.INTER_STATE


@pytest.mark.parametrize("rate", list(gst_rules_for("India").rates))
@pytest.mark.parametrize("amount", [1, 999.99, 125_000])
def test_exclusive_then_inclusive_recovers_base(rate: float, amount: float) -> None:
    exclusive = compute_gst(amount, rate, "exclusive")
    inclusive = compute_gst(exclusive.total_amount, rate, "inclusive")

    assert inclusive.base_amount == pytest.approx(amount)
    assert exclusive.total_amount == pytest.approx(
        exclusive.base_amount * (1 + rate / 100)
    )


def test_zero_rate_adds_nothing() -> None:
    breakdown = compute_gst(5_000, 0, "exclusive")

    assert breakdown.gst_amount == 0
    assert breakdown.total_amount == pytest.approx(5_000)


def test_unlisted_rate_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="not one of"):
        compute_gst(1_000, 7, "exclusive")


def test_negative_amount_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="cannot be negative"):
        compute_gst(-10, 18, "exclusive")


def test_unknown_direction_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="direction"):
        compute_gst(100, 18, "sideways")
