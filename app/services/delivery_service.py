"""Delivery confirmations against generated orders, plus extra items."""
from __future__ import annotations

import datetime as dt
import logging
from decimal import ROUND_HALF_UP, Decimal

from app.core.exceptions import OrderNotDeliverableError, ValidationFailedError
from app.models.models import DailyOrder, Delivery, DeliveryStatus, OrderStatus
from app.models.schemas.orders import BulkDeliveryIn, DeliveryCreate, DeliveryStats
from app.repositories.base import DairyRepository, RepositoryScope
from app.repositories.sql import repository_scope
from app.services.bulk_runner import BulkResult, run_bulk
from app.utils.currency import round_money
from app.utils.dates import now_ist

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class DeliveryService:
    def __init__(self, repo: DairyRepository, scope: RepositoryScope | None = None):
        self.repo = repo
        self.scope = scope or repository_scope

    def record(self, payload: DeliveryCreate) -> Delivery:
        data = payload.model_dump(exclude_none=True)
        data["delivery_status"] = payload.delivery_status.value

        if payload.daily_order_id:
            order = self.repo.get_order(payload.daily_order_id)
            if order.status == OrderStatus.DELIVERED.value:
                raise OrderNotDeliverableError(order.id, order.status)
            for key in ("customer_id", "product_id", "order_date", "route_id", "delivery_time", "unit_price"):
                data.setdefault(key, getattr(order, key))
            data.setdefault("planned_quantity", order.planned_quantity)
        else:
            # Additional item delivered without an order
            missing = [k for k in ("customer_id", "product_id", "order_date") if not data.get(k)]
            if missing:
                raise ValidationFailedError(
                    f"Missing {', '.join(missing)} for a delivery without an order",
                    field=missing[0],
                    code="ORD351",
                )
            customer = self.repo.get_customer(data["customer_id"])
            product = self.repo.get_product(data["product_id"])
            data.setdefault("unit_price", product.current_price)
            data.setdefault("route_id", customer.route_id)
            data.setdefault("delivery_time", customer.delivery_time)

        data["total_amount"] = round_money(payload.actual_quantity * data["unit_price"])
        if payload.delivery_status == DeliveryStatus.DELIVERED:
            data.setdefault("delivered_at", now_ist())
        else:
            data.pop("delivered_at", None)

        delivery = self.repo.create_delivery(data)
        if payload.daily_order_id and payload.delivery_status == DeliveryStatus.DELIVERED:
            self.repo.update_order(payload.daily_order_id, {"status": OrderStatus.DELIVERED.value})
        logger.info("Delivery %s recorded for customer %s", delivery.id, delivery.customer_id)
        return delivery

    async def record_bulk(self, payload: BulkDeliveryIn, concurrency: int | None = None) -> BulkResult:
        """Deliver a batch of generated orders, one row per order id."""
        overrides: dict[str, Decimal] = {}
        if payload.delivery_mode == "custom":
            overrides = {cq.order_id: cq.actual_quantity for cq in payload.custom_quantities}
        delivered_at = payload.delivered_at or now_ist()

        def submit(index: int, order_id: str) -> str:
            with self.scope() as repo:
                order = repo.get_order(order_id)
                if order.status != OrderStatus.GENERATED.value:
                    raise OrderNotDeliverableError(order.id, order.status)
                delivery = DeliveryService(repo).record(
                    DeliveryCreate(
                        daily_order_id=order.id,
                        actual_quantity=overrides.get(order.id, order.planned_quantity),
                        delivery_notes=payload.delivery_notes or None,
                        delivery_person=payload.delivery_person or None,
                        delivered_at=delivered_at,
                    )
                )
                return delivery.id

        return await run_bulk(payload.order_ids, submit, label="Delivery", concurrency=concurrency)

    def list(self, start: dt.date, end: dt.date | None = None) -> list[Delivery]:
        return self.repo.list_deliveries(start, end)

    def undelivered(self, day: dt.date | None = None) -> list[DailyOrder]:
        """Generated orders still waiting for delivery, by route and time slot."""
        return self.repo.find_orders(day, status=OrderStatus.GENERATED.value)

    def stats(self, day: dt.date | None = None) -> DeliveryStats:
        orders = self.repo.find_orders(day)
        deliveries = [d for d in self.repo.list_deliveries(day) if d.daily_order_id]

        delivered = sum(1 for o in orders if o.status == OrderStatus.DELIVERED.value)
        pending = sum(1 for o in orders if o.status == OrderStatus.GENERATED.value)
        planned = sum((o.planned_quantity for o in orders), ZERO)
        actual = sum((d.actual_quantity or ZERO for d in deliveries), ZERO)
        rate = 0
        if orders:
            rate = int((Decimal(delivered) * 100 / len(orders)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        return DeliveryStats(
            total_orders=len(orders),
            delivered_orders=delivered,
            pending_orders=pending,
            total_planned_quantity=planned,
            total_actual_quantity=actual,
            completion_rate=rate,
            quantity_variance=actual - planned,
        )
