"""
Daily order generation.

Turns the active subscription book into one order per customer and product
for a date: the subscription's base quantity (daily or 2-day pattern),
adjusted by any modification covering that date, priced at the product's
current price.
"""
from __future__ import annotations

import datetime as dt
import logging
import time
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from app import metrics
from app.core.exceptions import NoOrdersToGenerateError, OrdersAlreadyExistError
from app.models.models import DailyOrder, Modification, ModificationType, OrderStatus
from app.models.schemas.orders import GenerateOrdersResult, OrderBucket, OrderLine, OrderPreview
from app.repositories.base import DairyRepository
from app.services.subscription_pattern import base_quantity
from app.utils.currency import round_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def apply_modifications(quantity: Decimal, modifications: Iterable[Modification]) -> Decimal:
    """Adjust a planned quantity by the modifications covering the day.

    A skip wins over everything else; increases and decreases add up and the
    result never drops below zero. Notes do not change the quantity.
    """
    final = quantity
    for mod in modifications:
        kind = mod.modification_type
        if kind == ModificationType.SKIP.value:
            return ZERO
        if kind == ModificationType.INCREASE.value:
            final += mod.quantity_change or ZERO
        elif kind == ModificationType.DECREASE.value:
            final -= mod.quantity_change or ZERO
    return max(ZERO, final)


class OrderService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def plan(self, order_date: dt.date) -> list[dict[str, Any]]:
        """Compute the orders for ``order_date`` without saving them."""
        subscriptions = self.repo.deliverable_subscriptions()
        if not subscriptions:
            raise NoOrdersToGenerateError(order_date.isoformat(), reason="No active subscriptions found")

        by_pair: dict[tuple[str, str], list[Modification]] = {}
        for mod in self.repo.modifications_active_on(order_date):
            by_pair.setdefault((mod.customer_id, mod.product_id), []).append(mod)

        rows = []
        for sub in subscriptions:
            customer, product = sub.customer, sub.product
            if customer is None or product is None:
                continue
            planned = base_quantity(sub, order_date)
            quantity = apply_modifications(planned, by_pair.get((customer.id, product.id), []))
            if quantity <= 0:
                continue
            rows.append(
                {
                    "customer_id": customer.id,
                    "product_id": product.id,
                    "order_date": order_date,
                    "planned_quantity": quantity,
                    "unit_price": product.current_price,
                    "total_amount": round_money(quantity * product.current_price),
                    "route_id": customer.route_id,
                    "delivery_time": customer.delivery_time,
                    "status": OrderStatus.GENERATED.value,
                    "customer_name": customer.billing_name,
                    "product_name": product.name,
                    "product_code": product.code,
                    "route_name": customer.route.name if customer.route else "",
                }
            )
        return rows

    def preview(self, order_date: dt.date) -> OrderPreview:
        try:
            rows = self.plan(order_date)
        except NoOrdersToGenerateError:
            rows = []

        by_route: dict[str, OrderBucket] = {}
        by_product: dict[str, OrderBucket] = {}
        for row in rows:
            route_key = row["route_name"] or f"Route {row['route_id']}"
            for buckets, key in ((by_route, route_key), (by_product, row["product_code"])):
                bucket = buckets.setdefault(key, OrderBucket())
                bucket.quantity += row["planned_quantity"]
                bucket.amount += row["total_amount"]

        return OrderPreview(
            order_date=order_date,
            orders=[OrderLine.model_validate(row) for row in rows],
            total_orders=len(rows),
            total_quantity=sum((r["planned_quantity"] for r in rows), ZERO),
            total_amount=sum((r["total_amount"] for r in rows), ZERO),
            by_route=by_route,
            by_product=by_product,
        )

    def generate(self, order_date: dt.date) -> GenerateOrdersResult:
        started = time.perf_counter()
        day = order_date.isoformat()
        if self.repo.count_orders(order_date) > 0:
            metrics.order_generation_refused("already_exists")
            raise OrdersAlreadyExistError(day)

        try:
            rows = self.plan(order_date)
        except NoOrdersToGenerateError:
            metrics.order_generation_refused("no_subscriptions")
            raise
        if not rows:
            metrics.order_generation_refused("nothing_to_generate")
            raise NoOrdersToGenerateError(day)

        columns = {c.key for c in DailyOrder.__table__.columns}
        orders = self.repo.create_orders([{k: v for k, v in row.items() if k in columns} for row in rows])
        total = sum((o.total_amount for o in orders), ZERO)
        metrics.orders_generated(len(orders), time.perf_counter() - started)
        logger.info("Generated %d orders for %s (total %s)", len(orders), day, total)
        return GenerateOrdersResult(order_date=order_date, created=len(orders), total_amount=total)

    def list_orders(self, order_date: dt.date) -> list[DailyOrder]:
        return self.repo.list_orders(order_date)

    def delete_orders(self, order_date: dt.date) -> int:
        deleted = self.repo.delete_orders(order_date)
        logger.info("Deleted %d orders for %s", deleted, order_date.isoformat())
        return deleted
