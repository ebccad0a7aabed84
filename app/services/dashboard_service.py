"""
Dashboard aggregation.

All windows are business-calendar dates:
- today / yesterday: single-day operations
- week: the last 7 days against the 7 days before them
- top customers: last 30 days of deliveries plus sales
- routes: last 7 days of deliveries
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from app.models.models import CustomerStatus, OrderStatus
from app.models.schemas.dashboard import (
    CustomerCounts,
    DashboardOut,
    DayOperations,
    RoutePerformance,
    TopCustomer,
    WeekComparison,
)
from app.repositories.base import DairyRepository
from app.utils.dates import add_days, now_ist, today_ist

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
TOP_CUSTOMERS = 5


def percent_change(current: Decimal | int, previous: Decimal | int) -> float:
    """Percentage change from ``previous`` to ``current``; 0 when there is no baseline."""
    if not previous:
        return 0.0
    return round(float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100), 2)


class DashboardService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def day_operations(self, day: dt.date) -> DayOperations:
        orders = self.repo.list_orders(day)
        deliveries = self.repo.list_deliveries(day)
        sales = self.repo.list_sales(day, day)
        payments = self.repo.list_payments(day, day)
        return DayOperations(
            date=day,
            orders_count=len(orders),
            orders_quantity=sum((o.planned_quantity for o in orders), ZERO),
            orders_value=sum((o.total_amount for o in orders), ZERO),
            pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING.value),
            deliveries_count=len(deliveries),
            delivered_quantity=sum((d.actual_quantity or ZERO for d in deliveries), ZERO),
            delivery_revenue=sum((d.total_amount or ZERO for d in deliveries), ZERO),
            sales_count=len(sales),
            sales_revenue=sum((s.total_amount for s in sales), ZERO),
            payments_count=len(payments),
            payments_amount=sum((p.amount for p in payments), ZERO),
            active_modifications=len(self.repo.modifications_active_on(day)),
        )

    def week_comparison(self, today: dt.date) -> WeekComparison:
        week_start = add_days(today, -7)
        this_week = self.repo.list_deliveries(week_start, today)
        last_week = self.repo.list_deliveries(add_days(today, -14), add_days(week_start, -1))
        this_revenue = sum((d.total_amount or ZERO for d in this_week), ZERO)
        last_revenue = sum((d.total_amount or ZERO for d in last_week), ZERO)
        return WeekComparison(
            this_week_revenue=this_revenue,
            last_week_revenue=last_revenue,
            revenue_change=percent_change(this_revenue, last_revenue),
            this_week_deliveries=len(this_week),
            last_week_deliveries=len(last_week),
            deliveries_change=percent_change(len(this_week), len(last_week)),
        )

    def top_customers(self, today: dt.date, limit: int = TOP_CUSTOMERS) -> list[TopCustomer]:
        start = add_days(today, -30)
        totals: dict[str, list] = {}
        records = [*self.repo.list_deliveries(start, today), *self.repo.list_sales(start, today)]
        for record in records:
            if not record.customer_id:
                continue
            entry = totals.setdefault(record.customer_id, [ZERO, 0])
            entry[0] += record.total_amount or ZERO
            entry[1] += 1

        names = {c.id: c.billing_name for c in self.repo.list_customers()}
        ranked = sorted(totals.items(), key=lambda item: (-item[1][0], names.get(item[0], "")))
        return [
            TopCustomer(
                customer_id=customer_id,
                billing_name=names.get(customer_id, "Unknown"),
                revenue=revenue,
                transactions=count,
            )
            for customer_id, (revenue, count) in ranked[:limit]
        ]

    def route_performance(self, today: dt.date) -> list[RoutePerformance]:
        deliveries = self.repo.list_deliveries(add_days(today, -7), today)
        result = []
        for route in self.repo.list_routes():
            on_route = [d for d in deliveries if d.route_id == route.id]
            result.append(
                RoutePerformance(
                    route_id=route.id,
                    route_name=route.name,
                    active_customers=len({d.customer_id for d in on_route}),
                    deliveries=len(on_route),
                    quantity=sum((d.actual_quantity or ZERO for d in on_route), ZERO),
                    revenue=sum((d.total_amount or ZERO for d in on_route), ZERO),
                )
            )
        return result

    def customer_counts(self) -> CustomerCounts:
        customers = self.repo.list_customers()
        active = sum(1 for c in customers if c.status == CustomerStatus.ACTIVE.value)
        return CustomerCounts(
            total_customers=len(customers),
            active_customers=active,
            inactive_customers=len(customers) - active,
            active_subscriptions=len(self.repo.list_subscriptions(active_only=True)),
        )

    def build(self, today: dt.date | None = None) -> DashboardOut:
        today = today or today_ist()
        dashboard = DashboardOut(
            generated_at=now_ist(),
            today=self.day_operations(today),
            yesterday=self.day_operations(add_days(today, -1)),
            week=self.week_comparison(today),
            top_customers=self.top_customers(today),
            routes=self.route_performance(today),
            customers=self.customer_counts(),
        )
        logger.debug("Dashboard built for %s", today)
        return dashboard
