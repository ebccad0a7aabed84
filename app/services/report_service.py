"""
Daily operation reports built from generated orders.

- production: what the dairy must prepare for a date, by product, route and
  time slot
- route delivery: the stop list for one route and time slot

Only orders still in ``Generated`` status are counted; delivered orders have
already left the plant.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from app.models.models import DeliveryTime, OrderStatus
from app.models.schemas.reports import (
    ProductionSummary,
    ProductLine,
    RouteDeliveryReport,
    RouteLine,
    RouteProductLine,
    RouteStop,
    TimeSlotLine,
)
from app.repositories.base import DairyRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_ROUTE = "Unknown Route"


class ReportService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def production_summary(self, day: dt.date) -> ProductionSummary:
        orders = self.repo.find_orders(day, status=OrderStatus.GENERATED.value)
        products: dict[str, ProductLine] = {}
        routes: dict[str, RouteLine] = {}
        slots = {slot.value.lower(): TimeSlotLine() for slot in DeliveryTime}
        total_value = ZERO

        for order in orders:
            total_value += order.total_amount

            code = order.product.code if order.product else "Unknown"
            name = order.product.name if order.product else UNKNOWN_PRODUCT
            line = products.setdefault(code, ProductLine(name=name))
            line.total_quantity += order.planned_quantity
            line.total_value += order.total_amount
            line.order_count += 1

            route_key = order.route_id or "unassigned"
            route = routes.setdefault(route_key, RouteLine(name=order.route.name if order.route else UNKNOWN_ROUTE))
            route.total_quantity += order.planned_quantity
            route.total_value += order.total_amount
            if order.delivery_time == DeliveryTime.MORNING.value:
                route.morning_orders += 1
            else:
                route.evening_orders += 1

            slot = slots[(order.delivery_time or DeliveryTime.MORNING.value).lower()]
            slot.orders += 1
            slot.quantity += order.planned_quantity
            slot.value += order.total_amount

        logger.info("Production summary for %s: %d orders", day, len(orders))
        return ProductionSummary(
            order_date=day,
            total_orders=len(orders),
            total_value=total_value,
            product_breakdown=products,
            route_breakdown=routes,
            time_slot_breakdown=slots,
        )

    def route_delivery_report(self, day: dt.date, route_id: str, delivery_time: DeliveryTime) -> RouteDeliveryReport:
        route = self.repo.get_route(route_id)
        orders = [
            o
            for o in self.repo.find_orders(day, status=OrderStatus.GENERATED.value)
            if o.route_id == route_id and o.delivery_time == delivery_time.value
        ]

        stops = []
        products: dict[str, RouteProductLine] = {}
        for order in orders:
            customer = order.customer
            product_name = order.product.name if order.product else UNKNOWN_PRODUCT
            stops.append(
                RouteStop(
                    customer_name=customer.billing_name if customer else "Unknown Customer",
                    contact_person=(customer.contact_person if customer else None) or "",
                    address=(customer.address if customer else None) or "",
                    phone=(customer.phone_primary if customer else None) or "",
                    product_name=product_name,
                    quantity=order.planned_quantity,
                    total_amount=order.total_amount,
                )
            )
            code = order.product.code if order.product else "Unknown"
            line = products.setdefault(code, RouteProductLine(name=product_name))
            line.quantity += order.planned_quantity
            line.value += order.total_amount

        return RouteDeliveryReport(
            order_date=day,
            route_id=route.id,
            route_name=route.name,
            delivery_time=delivery_time.value,
            stops=stops,
            total_orders=len(orders),
            total_quantity=sum((o.planned_quantity for o in orders), ZERO),
            total_value=sum((o.total_amount for o in orders), ZERO),
            product_breakdown=products,
        )
