"""Sale and payment schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.models import SaleType


class SaleCreate(BaseModel):
    customer_id: str | None = None
    product_id: str
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0)
    sale_type: SaleType = SaleType.CASH
    sale_date: dt.date
    notes: str | None = None


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str | None = None
    product_id: str
    quantity: Decimal
    unit_price: Decimal
    total_amount: Decimal
    gst_amount: Decimal
    sale_type: str
    sale_date: dt.date
    payment_status: str
    notes: str | None = None


class SalesStats(BaseModel):
    total_sales: int
    cash_sales: int
    credit_sales: int
    qr_sales: int
    total_amount: Decimal
    cash_amount: Decimal
    credit_amount: Decimal
    qr_amount: Decimal
    gst_amount: Decimal
    pending_credit_amount: Decimal
    billed_credit_amount: Decimal
    completed_credit_amount: Decimal


class PaymentCreate(BaseModel):
    customer_id: str
    amount: Decimal = Field(..., gt=0)
    payment_date: dt.date
    payment_method: str | None = Field(None, max_length=50)
    period_start: dt.date | None = None
    period_end: dt.date | None = None
    notes: str | None = Field(None, max_length=500)


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    amount: Decimal
    payment_date: dt.date
    payment_method: str | None = None
    period_start: dt.date | None = None
    period_end: dt.date | None = None
    notes: str | None = None


class PaymentStats(BaseModel):
    total_payments: int
    total_amount: Decimal
    average_amount: Decimal
    by_method: dict[str, Decimal]
