"""Rupee formatting helpers.

    format_currency(123456.5)     -> "₹1,23,456.50"
    format_quantity(Decimal("2")) -> "2L"
    parse_currency("₹1,250.00")   -> Decimal("1250.00")
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.core.config import settings

CENT = Decimal("0.01")


def to_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Coerce ``value`` to Decimal, returning None for blanks and junk."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two (lakh / crore grouping)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Decimal | float | int | str | None) -> str:
    value = to_decimal(amount)
    symbol = settings.CURRENCY_SYMBOL
    if value is None:
        return f"{symbol}0.00"
    q = round_money(value)
    sign = "-" if q < 0 else ""
    whole, _, fraction = f"{abs(q):.2f}".partition(".")
    return f"{sign}{symbol}{_group_indian(whole)}.{fraction}"


def format_quantity(quantity: Decimal | float | int | str | None) -> str:
    value = to_decimal(quantity)
    if value is None:
        return "0L"
    normalized = value.normalize()
    text = f"{normalized:f}" if normalized != normalized.to_integral() else str(int(normalized))
    return f"{text}L"


def parse_currency(text: str | None) -> Decimal:
    cleaned = (text or "").replace(settings.CURRENCY_SYMBOL, "").replace(",", "").strip()
    return to_decimal(cleaned) or Decimal("0")
