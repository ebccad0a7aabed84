import datetime as dt
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.subscription_pattern import (
    base_quantity,
    days_since_pattern_start,
    pattern_day,
    pattern_preview,
    pattern_quantity,
)

ANCHOR = dt.date(2024, 3, 1)


def _pattern_sub(day1="1.5", day2="0.5", start=ANCHOR):
    return SimpleNamespace(
        subscription_type="Pattern",
        daily_quantity=None,
        pattern_day1_quantity=Decimal(day1),
        pattern_day2_quantity=Decimal(day2),
        pattern_start_date=start,
    )


@pytest.mark.parametrize(
    "offset,expected",
    [(0, 1), (1, 2), (2, 1), (3, 2), (30, 1), (-1, 2), (-2, 1), (-3, 2)],
)
def test_pattern_day_alternates_from_anchor(offset, expected):
    assert pattern_day(ANCHOR, ANCHOR + dt.timedelta(days=offset)) == expected


def test_pattern_day_across_month_and_leap_day():
    # 2024-02-29 exists; 2024-03-01 is one day later
    assert pattern_day(dt.date(2024, 2, 28), dt.date(2024, 3, 1)) == 1
    assert pattern_day(dt.date(2024, 2, 28), dt.date(2024, 2, 29)) == 2


def test_pattern_quantity_follows_day():
    sub = _pattern_sub()
    assert pattern_quantity(sub, ANCHOR) == Decimal("1.5")
    assert pattern_quantity(sub, ANCHOR + dt.timedelta(days=1)) == Decimal("0.5")
    assert pattern_quantity(sub, ANCHOR - dt.timedelta(days=1)) == Decimal("0.5")


def test_days_since_pattern_start():
    sub = _pattern_sub()
    assert days_since_pattern_start(sub, ANCHOR + dt.timedelta(days=5)) == 5
    assert days_since_pattern_start(_pattern_sub(start=None), ANCHOR) == 0


def test_base_quantity_by_type():
    daily = SimpleNamespace(
        subscription_type="Daily",
        daily_quantity=Decimal("2"),
        pattern_day1_quantity=None,
        pattern_day2_quantity=None,
        pattern_start_date=None,
    )
    assert base_quantity(daily, ANCHOR) == Decimal("2")
    assert base_quantity(_pattern_sub(), ANCHOR + dt.timedelta(days=1)) == Decimal("0.5")


def test_unknown_type_or_missing_anchor_gives_zero():
    weekly = _pattern_sub()
    weekly.subscription_type = "Weekly"
    assert base_quantity(weekly, ANCHOR) == Decimal("0")
    assert base_quantity(_pattern_sub(start=None), ANCHOR) == Decimal("0")


def test_preview_lists_alternating_days():
    preview = pattern_preview(_pattern_sub(day1="2", day2="1"), ANCHOR, days=4)
    assert [p["quantity"] for p in preview] == [Decimal("2"), Decimal("1"), Decimal("2"), Decimal("1")]
    assert [p["pattern_day"] for p in preview] == [1, 2, 1, 2]
    assert preview[0]["date"] == ANCHOR
    assert preview[0]["day_name"] == "Fri"


def test_preview_defaults_to_two_weeks_and_skips_daily():
    assert len(pattern_preview(_pattern_sub(), ANCHOR)) == 14
    daily = _pattern_sub()
    daily.subscription_type = "Daily"
    assert pattern_preview(daily, ANCHOR) == []
