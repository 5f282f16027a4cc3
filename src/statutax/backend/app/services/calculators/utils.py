"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

from statutax.backend.config.rule_tables import Slab, SurchargeTier
from statutax.backend.errors import InvalidInputError


def calculate_progressive_tax(amount: float, slabs: Iterable[Slab]) -> float:
    """Calculate progressive tax for ``amount`` across ``slabs``.

    Each slab whose lower bound sits below ``amount`` contributes
    ``rate * (min(amount, upper) - lower)``.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    for slab in slabs:
        if slab.lower >= amount:
            break
        upper = amount if slab.upper is None else min(amount, slab.upper)
        total += (upper - slab.lower) * slab.rate

    return total


def effective_rate(tax: float, base: float) -> float:
    """Return ``tax`` as a percentage of ``base`` rounded to two decimals."""

    if base <= 0:
        return 0.0
    return round(tax / base * 100, 2)


def require_non_negative(values: Mapping[str, float]) -> None:
    """Raise :class:`InvalidInputError` for negative or non-finite amounts."""

    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidInputError(f"Field '{name}' must be a finite number")
        if value < 0:
            raise InvalidInputError(f"Field '{name}' cannot be negative")


def surcharge_rate(amount: float, tiers: Sequence[SurchargeTier]) -> float:
    """Return the rate of the highest tier whose threshold ``amount`` exceeds."""

    rate = 0.0
    for tier in tiers:
        if amount > tier.threshold:
            rate = tier.rate
    return rate
