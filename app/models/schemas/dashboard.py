"""Dashboard card schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel


class DayOperations(BaseModel):
    """Operational totals for a single business day."""
    date: dt.date
    orders_count: int
    orders_quantity: Decimal
    orders_value: Decimal
    pending_orders: int
    deliveries_count: int
    delivered_quantity: Decimal
    delivery_revenue: Decimal
    sales_count: int
    sales_revenue: Decimal
    payments_count: int
    payments_amount: Decimal
    active_modifications: int


class WeekComparison(BaseModel):
    this_week_revenue: Decimal
    last_week_revenue: Decimal
    revenue_change: float  # Percentage change from last week
    this_week_deliveries: int
    last_week_deliveries: int
    deliveries_change: float


class TopCustomer(BaseModel):
    customer_id: str
    billing_name: str
    revenue: Decimal
    transactions: int


class RoutePerformance(BaseModel):
    route_id: str | None
    route_name: str
    active_customers: int
    deliveries: int
    quantity: Decimal
    revenue: Decimal


class CustomerCounts(BaseModel):
    total_customers: int
    active_customers: int
    inactive_customers: int
    active_subscriptions: int


class DashboardOut(BaseModel):
    """Complete dashboard payload."""
    generated_at: dt.datetime
    today: DayOperations
    yesterday: DayOperations
    week: WeekComparison
    top_customers: list[TopCustomer]
    routes: list[RoutePerformance]
    customers: CustomerCounts
