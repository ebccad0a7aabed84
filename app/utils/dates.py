"""Business-calendar date helpers.

Order, sale and payment dates are calendar dates in the business timezone
(``BUSINESS_TIMEZONE``, Asia/Kolkata by default). Dates travel as plain
``YYYY-MM-DD`` strings and are parsed without any timezone conversion so a
date never shifts by a day on the way in or out.
"""
from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo

from app.core.config import settings


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def now_ist() -> dt.datetime:
    return dt.datetime.now(business_tz())


def today_ist() -> dt.date:
    return now_ist().date()


def _localize(value: dt.datetime) -> dt.datetime:
    # Naive datetimes coming back from the database are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(business_tz())


def format_date_ist(value: dt.date | dt.datetime | str | None) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        value = parse_local_date(value)
    if isinstance(value, dt.datetime):
        value = _localize(value).date()
    return value.strftime("%d/%m/%Y")


def format_datetime_ist(value: dt.datetime | None) -> str:
    if value is None:
        return ""
    return _localize(value).strftime("%d/%m/%Y, %H:%M")


def format_timestamp_ist(value: dt.datetime | None) -> str:
    if value is None:
        return ""
    return _localize(value).strftime("%d/%m/%Y at %H:%M")


def format_date_for_database(value: dt.date | dt.datetime) -> str:
    if isinstance(value, dt.datetime):
        value = _localize(value).date()
    return value.isoformat()


def parse_local_date(text: str) -> dt.date:
    """Parse ``YYYY-MM-DD`` (a trailing time part is ignored)."""
    return dt.date.fromisoformat(text.strip()[:10])


def add_days(value: dt.date, days: int) -> dt.date:
    return value + dt.timedelta(days=days)


def date_range_ago(days: int, *, end: dt.date | None = None) -> tuple[dt.date, dt.date]:
    """Return ``(start, end)`` covering the last ``days`` days up to ``end``."""
    end = end or today_ist()
    return add_days(end, -days), end
