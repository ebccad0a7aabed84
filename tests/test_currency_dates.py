import datetime as dt
from decimal import Decimal

import pytest

from app.utils.currency import format_currency, format_quantity, parse_currency, round_money
from app.utils.dates import (
    date_range_ago,
    format_date_for_database,
    format_date_ist,
    format_datetime_ist,
    format_timestamp_ist,
    parse_local_date,
)


@pytest.mark.parametrize(
    "amount,expected",
    [
        (123456.5, "₹1,23,456.50"),
        (Decimal("100"), "₹100.00"),
        (1500, "₹1,500.00"),
        (10000000, "₹1,00,00,000.00"),
        (-1500, "-₹1,500.00"),
        ("2.345", "₹2.35"),
        (0, "₹0.00"),
        (None, "₹0.00"),
        ("junk", "₹0.00"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_round_money_half_up():
    assert round_money(Decimal("0.125")) == Decimal("0.13")
    assert round_money(Decimal("0.124")) == Decimal("0.12")


@pytest.mark.parametrize(
    "quantity,expected",
    [(Decimal("2.50"), "2.5L"), (Decimal("2.00"), "2L"), (10, "10L"), (None, "0L")],
)
def test_format_quantity(quantity, expected):
    assert format_quantity(quantity) == expected


def test_parse_currency():
    assert parse_currency("₹1,250.00") == Decimal("1250.00")
    assert parse_currency("") == Decimal("0")
    assert parse_currency(None) == Decimal("0")


class TestDates:
    def test_format_date(self):
        assert format_date_ist(dt.date(2024, 3, 5)) == "05/03/2024"
        assert format_date_ist("2024-03-05T00:00:00") == "05/03/2024"
        assert format_date_ist(None) == ""

    def test_utc_evening_is_next_business_day(self):
        # 20:00 UTC is 01:30 the next morning in Kolkata
        assert format_date_ist(dt.datetime(2024, 3, 5, 20, 0)) == "06/03/2024"

    def test_format_datetime_and_timestamp(self):
        moment = dt.datetime(2024, 3, 5, 4, 30, tzinfo=dt.timezone.utc)
        assert format_datetime_ist(moment) == "05/03/2024, 10:00"
        assert format_timestamp_ist(moment) == "05/03/2024 at 10:00"
        assert format_datetime_ist(None) == ""

    def test_parse_local_date_ignores_time(self):
        assert parse_local_date("2024-03-05") == dt.date(2024, 3, 5)
        assert parse_local_date("2024-03-05T23:59:00Z") == dt.date(2024, 3, 5)

    def test_database_format(self):
        assert format_date_for_database(dt.date(2024, 3, 5)) == "2024-03-05"
        assert format_date_for_database(dt.datetime(2024, 3, 5, 20, 0, tzinfo=dt.timezone.utc)) == "2024-03-06"

    def test_date_range_ago(self):
        assert date_range_ago(7, end=dt.date(2024, 3, 10)) == (dt.date(2024, 3, 3), dt.date(2024, 3, 10))
