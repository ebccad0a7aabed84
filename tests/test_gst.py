"""Tests for GST decomposition."""
from decimal import Decimal

import pytest

from app.services.gst_service import (
    format_gst_breakdown,
    from_exclusive,
    from_inclusive,
    is_valid_gst_rate,
    sale_totals,
)


class TestFromInclusive:
    def test_splits_base_and_tax(self):
        split = from_inclusive(Decimal("105"), Decimal("5"))
        assert split.base == Decimal("100.00")
        assert split.tax == Decimal("5.00")
        assert split.total == Decimal("105")

    def test_zero_rate_is_all_base(self):
        split = from_inclusive(Decimal("60"), 0)
        assert split.base == Decimal("60.00")
        assert split.tax == Decimal("0.00")

    @pytest.mark.parametrize("amount", ["0", "1", "99.99", "123.45", "1000", "7.77"])
    @pytest.mark.parametrize("rate", ["0", "5", "12", "18", "28", "99.5"])
    def test_base_plus_tax_equals_amount(self, amount, rate):
        split = from_inclusive(Decimal(amount), Decimal(rate))
        assert abs(split.base + split.tax - Decimal(amount)) <= Decimal("0.01")

    def test_accepts_floats_and_strings(self):
        assert from_inclusive(112.0, "12").base == Decimal("100.00")


class TestFromExclusive:
    def test_grosses_up(self):
        split = from_exclusive(100, 5)
        assert split.as_dict() == {"base": Decimal("100"), "tax": Decimal("5.00"), "total": Decimal("105.00")}

    def test_rounds_tax_half_up(self):
        # 12% of 10.125 is 1.215
        split = from_exclusive(Decimal("10.125"), 12)
        assert split.tax == Decimal("1.22")


@pytest.mark.parametrize("amount", ["105", "99.99", "1", "1234.56"])
@pytest.mark.parametrize("rate", ["5", "12", "18"])
def test_inclusive_then_exclusive_returns_amount(amount, rate):
    base = from_inclusive(Decimal(amount), Decimal(rate)).base
    assert abs(from_exclusive(base, Decimal(rate)).total - Decimal(amount)) <= Decimal("0.01")


def test_sale_totals_treat_unit_price_as_inclusive():
    totals = sale_totals(Decimal("2"), Decimal("560"), Decimal("12"))
    assert totals.total_amount == Decimal("1120.00")
    assert totals.subtotal == Decimal("1000.00")
    assert totals.gst_amount == Decimal("120.00")
    assert totals.breakdown == "Base: ₹1,000.00 + GST(12%): ₹120.00"


def test_breakdown_string_keeps_fractional_rate():
    assert format_gst_breakdown(105, Decimal("5.00")) == "Base: ₹100.00 + GST(5%): ₹5.00"
    assert "GST(2.5%)" in format_gst_breakdown(205, Decimal("2.5"))


@pytest.mark.parametrize(
    "rate,expected",
    [(0, True), (5, True), ("18", True), (30, True), (31, False), (-1, False), (None, False), ("abc", False)],
)
def test_gst_rate_validity(rate, expected):
    assert is_valid_gst_rate(rate) is expected
