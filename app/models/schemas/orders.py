"""Daily order and delivery schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.models import DeliveryStatus


class OrderLine(BaseModel):
    """One planned delivery, before or after it is saved."""

    model_config = ConfigDict(from_attributes=True)

    customer_id: str
    product_id: str
    order_date: dt.date
    planned_quantity: Decimal
    unit_price: Decimal
    total_amount: Decimal
    route_id: str | None = None
    delivery_time: str | None = None
    status: str
    customer_name: str | None = None
    product_name: str | None = None
    route_name: str | None = None


class OrderBucket(BaseModel):
    quantity: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


class DailyOrderOut(OrderLine):
    id: str


class OrderPreview(BaseModel):
    order_date: dt.date
    orders: list[OrderLine]
    total_orders: int
    total_quantity: Decimal
    total_amount: Decimal
    by_route: dict[str, OrderBucket]
    by_product: dict[str, OrderBucket]


class GenerateOrdersResult(BaseModel):
    order_date: dt.date
    created: int
    total_amount: Decimal


class DeliveryCreate(BaseModel):
    daily_order_id: str | None = None
    customer_id: str | None = None
    product_id: str | None = None
    order_date: dt.date | None = None
    route_id: str | None = None
    delivery_time: str | None = None
    planned_quantity: Decimal | None = None
    actual_quantity: Decimal = Field(..., ge=0)
    unit_price: Decimal | None = Field(None, gt=0)
    delivery_status: DeliveryStatus = DeliveryStatus.DELIVERED
    delivery_notes: str | None = None
    delivery_person: str | None = None
    delivered_at: dt.datetime | None = None


class DeliveryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    daily_order_id: str | None = None
    customer_id: str
    product_id: str
    route_id: str | None = None
    order_date: dt.date
    delivery_time: str | None = None
    planned_quantity: Decimal | None = None
    actual_quantity: Decimal | None = None
    unit_price: Decimal
    total_amount: Decimal
    delivery_status: str
    delivery_notes: str | None = None
    delivered_at: dt.datetime | None = None
    delivery_person: str | None = None


class CustomQuantity(BaseModel):
    order_id: str
    actual_quantity: Decimal = Field(..., ge=0)


class BulkDeliveryIn(BaseModel):
    """Confirm many generated orders at once.

    In ``planned`` mode every order is delivered at its planned quantity; in
    ``custom`` mode ``custom_quantities`` overrides it per order.
    """

    order_ids: list[str] = Field(..., min_length=1)
    delivery_mode: Literal["planned", "custom"] = "planned"
    custom_quantities: list[CustomQuantity] = Field(default_factory=list)
    delivery_notes: str | None = None
    delivery_person: str | None = None
    delivered_at: dt.datetime | None = None


class DeliveryStats(BaseModel):
    total_orders: int
    delivered_orders: int
    pending_orders: int
    total_planned_quantity: Decimal
    total_actual_quantity: Decimal
    completion_rate: int
    quantity_variance: Decimal
