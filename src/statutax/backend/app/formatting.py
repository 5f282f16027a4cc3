"""Display helpers for currency amounts and rates.

Calculators keep full precision; rounding happens only here, when figures
are turned into strings for a response or a report.
"""

from __future__ import annotations

from statutax.backend.config.schema import Jurisdiction

CURRENCY_SYMBOLS = {
    Jurisdiction.INDIA: "₹",
    Jurisdiction.USA: "$",
    Jurisdiction.UK: "£",
    Jurisdiction.AUSTRALIA: "A$",
}


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def _group_indian(digits: str) -> str:
    """Group an integer digit string as lakhs and crores (12,34,567)."""

    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(
    amount: float, jurisdiction: Jurisdiction | str, decimals: int = 0
) -> str:
    """Render ``amount`` with the jurisdiction's symbol and digit grouping."""

    member = Jurisdiction.parse(jurisdiction)
    rounded = round(amount, decimals)
    negative = rounded < 0
    text = f"{abs(rounded):.{decimals}f}"
    whole, _, fraction = text.partition(".")

    if member is Jurisdiction.INDIA:
        grouped = _group_indian(whole)
    else:
        grouped = f"{int(whole):,}"

    if fraction:
        grouped = f"{grouped}.{fraction}"

    sign = "-" if negative else ""
    return f"{sign}{CURRENCY_SYMBOLS[member]}{grouped}"


def format_percentage(value: float) -> str:
    """Render a value that is already a percentage, e.g. ``4.16%``."""

    return f"{value:.2f}%"


def format_rate(value: float) -> str:
    """Return a human-readable percentage label for a fractional ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


__all__ = [
    "CURRENCY_SYMBOLS",
    "format_currency",
    "format_percentage",
    "format_rate",
    "round_currency",
]
