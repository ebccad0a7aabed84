"""Route, customer and product schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.models import CustomerPaymentMethod, CustomerStatus, DeliveryTime


class RouteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    personnel_name: str | None = None


class RouteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    personnel_name: str | None = None


class RouteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    personnel_name: str | None = None


class CustomerCreate(BaseModel):
    billing_name: str = Field(..., min_length=1, max_length=100)
    contact_person: str | None = None
    address: str | None = None
    phone_primary: str | None = Field(None, max_length=20)
    phone_secondary: str | None = Field(None, max_length=20)
    phone_tertiary: str | None = Field(None, max_length=20)
    route_id: str | None = None
    delivery_time: DeliveryTime = DeliveryTime.MORNING
    payment_method: CustomerPaymentMethod = CustomerPaymentMethod.MONTHLY
    billing_cycle_day: int = Field(1, ge=1, le=31)
    opening_balance: Decimal = Field(Decimal("0"), ge=0)
    status: CustomerStatus = CustomerStatus.ACTIVE


class CustomerUpdate(BaseModel):
    billing_name: str | None = Field(None, min_length=1, max_length=100)
    contact_person: str | None = None
    address: str | None = None
    phone_primary: str | None = Field(None, max_length=20)
    phone_secondary: str | None = Field(None, max_length=20)
    phone_tertiary: str | None = Field(None, max_length=20)
    route_id: str | None = None
    delivery_time: DeliveryTime | None = None
    payment_method: CustomerPaymentMethod | None = None
    billing_cycle_day: int | None = Field(None, ge=1, le=31)
    opening_balance: Decimal | None = Field(None, ge=0)
    status: CustomerStatus | None = None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    billing_name: str
    contact_person: str | None = None
    address: str | None = None
    phone_primary: str | None = None
    phone_secondary: str | None = None
    phone_tertiary: str | None = None
    route_id: str | None = None
    delivery_time: str
    payment_method: str
    billing_cycle_day: int
    opening_balance: Decimal
    status: str
    created_at: dt.datetime | None = None


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=30)
    current_price: Decimal = Field(..., gt=0)
    unit: str = "liter"
    gst_rate: Decimal = Field(Decimal("0"), ge=0, le=30)
    unit_of_measure: str = "liter"
    is_subscription_product: bool = True


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    current_price: Decimal | None = Field(None, gt=0)
    unit: str | None = None
    gst_rate: Decimal | None = Field(None, ge=0, le=30)
    unit_of_measure: str | None = None
    is_subscription_product: bool | None = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    current_price: Decimal
    unit: str
    gst_rate: Decimal
    unit_of_measure: str
    is_subscription_product: bool
