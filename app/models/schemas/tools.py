"""Calculator endpoint schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class GSTRequest(BaseModel):
    amount: Decimal = Field(..., ge=0)
    rate: Decimal = Field(..., ge=0, lt=100)
    mode: Literal["inclusive", "exclusive"] = "inclusive"


class GSTOut(BaseModel):
    base: Decimal
    tax: Decimal
    total: Decimal
    breakdown: str
    formatted_total: str


class PatternDayOut(BaseModel):
    anchor: dt.date
    target: dt.date
    pattern_day: int
