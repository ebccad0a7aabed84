"""
GST decomposition for dairy sales.

Sale prices are entered GST-inclusive; the tax part is split back out using
the product's rate. Exclusive amounts are grossed up the other way.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.utils.currency import format_currency, round_money, to_decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MAX_PRODUCT_GST_RATE = Decimal("30")


@dataclass(frozen=True)
class TaxBreakdown:
    base: Decimal
    tax: Decimal
    total: Decimal

    def as_dict(self) -> dict[str, Decimal]:
        return {"base": self.base, "tax": self.tax, "total": self.total}


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    breakdown: str


def _num(value: Decimal | float | int | str | None) -> Decimal:
    return to_decimal(value) or ZERO


def from_inclusive(amount: Decimal | float | int | str, rate: Decimal | float | int | str) -> TaxBreakdown:
    """Split a GST-inclusive amount into base and tax.

    ``total`` is the input amount passed through unrounded.
    """
    gross = _num(amount)
    r = _num(rate)
    base = gross / (1 + r / HUNDRED)
    tax = gross - base
    return TaxBreakdown(base=round_money(base), tax=round_money(tax), total=gross)


def from_exclusive(amount: Decimal | float | int | str, rate: Decimal | float | int | str) -> TaxBreakdown:
    net = _num(amount)
    tax = round_money(net * _num(rate) / HUNDRED)
    return TaxBreakdown(base=net, tax=tax, total=round_money(net + tax))


def sale_totals(
    quantity: Decimal | float | int | str,
    unit_price: Decimal | float | int | str,
    rate: Decimal | float | int | str,
) -> SaleTotals:
    """Totals for a counter sale where ``unit_price`` already includes GST."""
    total = round_money(_num(quantity) * _num(unit_price))
    split = from_inclusive(total, rate)
    return SaleTotals(
        subtotal=split.base,
        gst_amount=split.tax,
        total_amount=total,
        breakdown=format_gst_breakdown(total, rate),
    )


def format_gst_breakdown(inclusive_amount: Decimal | float | int | str, rate: Decimal | float | int | str) -> str:
    r = _num(rate)
    split = from_inclusive(inclusive_amount, r)
    return f"Base: {format_currency(split.base)} + GST({r.normalize():f}%): {format_currency(split.tax)}"


def is_valid_gst_rate(rate: Decimal | float | int | str | None) -> bool:
    r = to_decimal(rate)
    return r is not None and ZERO <= r <= MAX_PRODUCT_GST_RATE
