"""Two-day alternating delivery patterns.

A pattern subscription delivers ``pattern_day1_quantity`` on its anchor date,
``pattern_day2_quantity`` the day after, and keeps alternating. Days before
the anchor follow the same alternation backwards (floor modulo), so the day
before the anchor is a day-2 delivery.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Protocol

from app.models.models import SubscriptionType

ZERO = Decimal("0")
PREVIEW_DAYS = 14


class PatternSubscription(Protocol):
    subscription_type: str
    daily_quantity: Decimal | None
    pattern_day1_quantity: Decimal | None
    pattern_day2_quantity: Decimal | None
    pattern_start_date: dt.date | None


def _is_pattern(subscription: PatternSubscription) -> bool:
    return subscription.subscription_type == SubscriptionType.PATTERN.value


def pattern_day(anchor: dt.date, target: dt.date) -> int:
    # Python's % already floors, so negative offsets stay in {0, 1}
    return (target - anchor).days % 2 + 1


def days_since_pattern_start(subscription: PatternSubscription, target: dt.date) -> int:
    if not subscription.pattern_start_date:
        return 0
    return (target - subscription.pattern_start_date).days


def pattern_quantity(subscription: PatternSubscription, target: dt.date) -> Decimal:
    if not _is_pattern(subscription) or not subscription.pattern_start_date:
        return ZERO
    if pattern_day(subscription.pattern_start_date, target) == 1:
        return Decimal(subscription.pattern_day1_quantity or 0)
    return Decimal(subscription.pattern_day2_quantity or 0)


def base_quantity(subscription: PatternSubscription, target: dt.date) -> Decimal:
    """Planned quantity for ``target`` before any modifications."""
    if subscription.subscription_type == SubscriptionType.DAILY.value:
        return Decimal(subscription.daily_quantity or 0)
    if _is_pattern(subscription):
        return pattern_quantity(subscription, target)
    return ZERO


def pattern_preview(
    subscription: PatternSubscription,
    start: dt.date,
    days: int = PREVIEW_DAYS,
) -> list[dict[str, Any]]:
    if not _is_pattern(subscription) or not subscription.pattern_start_date:
        return []
    preview = []
    for offset in range(days):
        day = start + dt.timedelta(days=offset)
        preview.append(
            {
                "date": day,
                "quantity": pattern_quantity(subscription, day),
                "pattern_day": pattern_day(subscription.pattern_start_date, day),
                "day_name": day.strftime("%a"),
            }
        )
    return preview
