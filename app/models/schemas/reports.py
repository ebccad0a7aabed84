"""Production, route delivery and outstanding balance reports."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

ZERO = Decimal("0")


class ProductLine(BaseModel):
    name: str
    total_quantity: Decimal = ZERO
    total_value: Decimal = ZERO
    order_count: int = 0


class RouteLine(BaseModel):
    name: str
    morning_orders: int = 0
    evening_orders: int = 0
    total_quantity: Decimal = ZERO
    total_value: Decimal = ZERO


class TimeSlotLine(BaseModel):
    orders: int = 0
    quantity: Decimal = ZERO
    value: Decimal = ZERO


class ProductionSummary(BaseModel):
    order_date: dt.date
    total_orders: int
    total_value: Decimal
    product_breakdown: dict[str, ProductLine]
    route_breakdown: dict[str, RouteLine]
    time_slot_breakdown: dict[str, TimeSlotLine]


class RouteStop(BaseModel):
    customer_name: str
    contact_person: str = ""
    address: str = ""
    phone: str = ""
    product_name: str
    quantity: Decimal
    total_amount: Decimal


class RouteProductLine(BaseModel):
    name: str
    quantity: Decimal = ZERO
    value: Decimal = ZERO


class RouteDeliveryReport(BaseModel):
    order_date: dt.date
    route_id: str
    route_name: str
    delivery_time: str
    stops: list[RouteStop]
    total_orders: int
    total_quantity: Decimal
    total_value: Decimal
    product_breakdown: dict[str, RouteProductLine]


class CustomerOutstanding(BaseModel):
    customer_id: str
    billing_name: str
    opening_balance: Decimal
    delivered_amount: Decimal
    credit_sales_amount: Decimal
    payments_amount: Decimal
    outstanding: Decimal
    unapplied_credit: Decimal
    requires_review: bool = False
    warnings: list[str] = Field(default_factory=list)


class OutstandingReport(BaseModel):
    as_of: dt.date | None = None
    customers: list[CustomerOutstanding]
    total_outstanding: Decimal
    total_unapplied_credit: Decimal
