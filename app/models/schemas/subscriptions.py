"""Subscription and modification schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.models import ModificationType, SubscriptionType


class SubscriptionCreate(BaseModel):
    customer_id: str
    product_id: str
    subscription_type: SubscriptionType
    daily_quantity: Decimal | None = None
    pattern_day1_quantity: Decimal | None = None
    pattern_day2_quantity: Decimal | None = None
    pattern_start_date: dt.date | None = None
    is_active: bool = True


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    product_id: str
    subscription_type: str
    daily_quantity: Decimal | None = None
    pattern_day1_quantity: Decimal | None = None
    pattern_day2_quantity: Decimal | None = None
    pattern_start_date: dt.date | None = None
    is_active: bool


class PatternPreviewDay(BaseModel):
    date: dt.date
    quantity: Decimal
    pattern_day: int
    day_name: str


class ModificationCreate(BaseModel):
    customer_id: str
    product_id: str
    modification_type: ModificationType
    start_date: dt.date
    end_date: dt.date
    quantity_change: Decimal | None = None
    reason: str | None = Field(None, max_length=500)


class ModificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    product_id: str
    modification_type: str
    start_date: dt.date
    end_date: dt.date
    quantity_change: Decimal | None = None
    reason: str | None = None
    is_active: bool


class ActiveToggle(BaseModel):
    is_active: bool
