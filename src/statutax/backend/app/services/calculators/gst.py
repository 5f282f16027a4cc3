"""Goods and services tax conversions between inclusive and exclusive amounts."""

from __future__ import annotations

from statutax.backend.app.models import GstBreakdown, GstDirection, SupplyType
from statutax.backend.config.rule_tables import Jurisdiction, gst_rules_for
from statutax.backend.errors import InvalidInputError

from .utils import require_non_negative


def calculate_gst(
    amount: float,
    rate: float,
    direction: GstDirection | str,
    supply: SupplyType | str = SupplyType.INTRA_STATE,
    jurisdiction: Jurisdiction | str = Jurisdiction.INDIA,
    fiscal_year: str | None = None,
) -> GstBreakdown:
    """Convert ``amount`` at ``rate`` percent in the requested direction.

    Intra-state supplies split the tax into equal central and state halves;
    inter-state supplies book the whole amount as integrated tax.
    """

    require_non_negative({"amount": amount, "rate": rate})

    try:
        direction = GstDirection(direction)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown GST direction: {direction!r}") from exc
    try:
        supply = SupplyType(supply)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown supply type: {supply!r}") from exc

    rates = gst_rules_for(jurisdiction, fiscal_year).rates
    if float(rate) not in rates:
        allowed = ", ".join(f"{value:g}" for value in rates)
        raise InvalidInputError(f"GST rate {rate:g}% is not one of: {allowed}")

    multiplier = rate / 100
    if direction is GstDirection.INCLUSIVE:
        total_amount = amount
        base_amount = amount / (1 + multiplier)
        gst_amount = total_amount - base_amount
    else:
        base_amount = amount
        gst_amount = amount * multiplier
        total_amount = base_amount + gst_amount

    if supply is SupplyType.INTRA_STATE:
        cgst = sgst = gst_amount / 2
        igst = 0.0
    else:
        cgst = sgst = 0.0
        igst = gst_amount

    return GstBreakdown(
        base_amount=base_amount,
        gst_amount=gst_amount,
        total_amount=total_amount,
        rate=rate,
        is_inclusive=direction is GstDirection.INCLUSIVE,
        supply_type=supply,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
    )


__all__ = ["calculate_gst"]
