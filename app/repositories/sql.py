"""SQLAlchemy implementation of ``DairyRepository``.

Every write commits on its own; a failed write is rolled back and re-raised
as ``StoreError`` so a bulk batch loses only the offending row.
"""
from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, StoreError
from app.db.base_class import Base
from app.db.session import SessionLocal
from app.models.models import (
    Customer,
    CustomerStatus,
    DailyOrder,
    Delivery,
    Modification,
    Payment,
    Product,
    Route,
    Sale,
    Subscription,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class SqlDairyRepository:
    def __init__(self, db: Session):
        self.db = db

    # ----------------------------- helpers -----------------------------

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("%s rejected by database: %s", operation, exc.orig)
            raise StoreError(f"Could not {operation}: conflicting or missing related record", operation) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("%s failed", operation)
            raise StoreError(f"Could not {operation}", operation) from exc

    def _create(self, model: type[ModelT], data: dict[str, Any], operation: str) -> ModelT:
        record = model(**data)
        self.db.add(record)
        self._commit(operation)
        return record

    def _get(self, model: type[ModelT], entity: str, record_id: str) -> ModelT:
        record = self.db.get(model, record_id)
        if record is None:
            raise NotFoundError(entity, record_id)
        return record

    def _update(self, model: type[ModelT], entity: str, record_id: str, data: dict[str, Any]) -> ModelT:
        record = self._get(model, entity, record_id)
        for key, value in data.items():
            setattr(record, key, value)
        self._commit(f"update {entity}")
        return record

    # ----------------------------- routes -----------------------------

    def create_route(self, data: dict[str, Any]) -> Route:
        return self._create(Route, data, "create route")

    def get_route(self, route_id: str) -> Route:
        return self._get(Route, "route", route_id)

    def update_route(self, route_id: str, data: dict[str, Any]) -> Route:
        return self._update(Route, "route", route_id, data)

    def list_routes(self) -> list[Route]:
        return self.db.query(Route).order_by(Route.name).all()

    # ----------------------------- customers -----------------------------

    def create_customer(self, data: dict[str, Any]) -> Customer:
        return self._create(Customer, data, "create customer")

    def get_customer(self, customer_id: str) -> Customer:
        return self._get(Customer, "customer", customer_id)

    def update_customer(self, customer_id: str, data: dict[str, Any]) -> Customer:
        return self._update(Customer, "customer", customer_id, data)

    def list_customers(self, status: str | None = None, route_id: str | None = None) -> list[Customer]:
        query = self.db.query(Customer)
        if status:
            query = query.filter(Customer.status == status)
        if route_id:
            query = query.filter(Customer.route_id == route_id)
        return query.order_by(Customer.billing_name).all()

    # ----------------------------- products -----------------------------

    def create_product(self, data: dict[str, Any]) -> Product:
        return self._create(Product, data, "create product")

    def get_product(self, product_id: str) -> Product:
        return self._get(Product, "product", product_id)

    def update_product(self, product_id: str, data: dict[str, Any]) -> Product:
        return self._update(Product, "product", product_id, data)

    def list_products(self) -> list[Product]:
        return self.db.query(Product).order_by(Product.name).all()

    def product_gst_rates(self, product_ids: Iterable[str]) -> dict[str, Decimal]:
        ids = sorted({pid for pid in product_ids if pid})
        if not ids:
            return {}
        try:
            rows = self.db.query(Product.id, Product.gst_rate).filter(Product.id.in_(ids)).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to fetch product GST rates: {exc}", "fetch gst rates") from exc
        return {pid: Decimal(rate or 0) for pid, rate in rows}

    # ----------------------------- subscriptions -----------------------------

    def create_subscription(self, data: dict[str, Any]) -> Subscription:
        return self._create(Subscription, data, "create subscription")

    def get_subscription(self, subscription_id: str) -> Subscription:
        return self._get(Subscription, "subscription", subscription_id)

    def update_subscription(self, subscription_id: str, data: dict[str, Any]) -> Subscription:
        return self._update(Subscription, "subscription", subscription_id, data)

    def list_subscriptions(self, customer_id: str | None = None, active_only: bool = False) -> list[Subscription]:
        query = self.db.query(Subscription)
        if customer_id:
            query = query.filter(Subscription.customer_id == customer_id)
        if active_only:
            query = query.filter(Subscription.is_active.is_(True))
        return query.order_by(Subscription.created_at).all()

    def deliverable_subscriptions(self) -> list[Subscription]:
        """Active subscriptions whose customer is Active."""
        return (
            self.db.query(Subscription)
            .join(Customer, Subscription.customer_id == Customer.id)
            .filter(Subscription.is_active.is_(True))
            .filter(Customer.status == CustomerStatus.ACTIVE.value)
            .all()
        )

    # ----------------------------- modifications -----------------------------

    def create_modification(self, data: dict[str, Any]) -> Modification:
        return self._create(Modification, data, "create modification")

    def get_modification(self, modification_id: str) -> Modification:
        return self._get(Modification, "modification", modification_id)

    def update_modification(self, modification_id: str, data: dict[str, Any]) -> Modification:
        return self._update(Modification, "modification", modification_id, data)

    def list_modifications(self, customer_id: str | None = None, active_only: bool = False) -> list[Modification]:
        query = self.db.query(Modification)
        if customer_id:
            query = query.filter(Modification.customer_id == customer_id)
        if active_only:
            query = query.filter(Modification.is_active.is_(True))
        return query.order_by(Modification.start_date.desc()).all()

    def modifications_active_on(self, day: dt.date) -> list[Modification]:
        return (
            self.db.query(Modification)
            .filter(Modification.is_active.is_(True))
            .filter(Modification.start_date <= day)
            .filter(Modification.end_date >= day)
            .all()
        )

    # ----------------------------- sales -----------------------------

    def create_sale(self, data: dict[str, Any]) -> Sale:
        return self._create(Sale, data, "create sale")

    def get_sale(self, sale_id: str) -> Sale:
        return self._get(Sale, "sale", sale_id)

    def list_sales(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        sale_type: str | None = None,
        customer_id: str | None = None,
    ) -> list[Sale]:
        query = self.db.query(Sale)
        if start:
            query = query.filter(Sale.sale_date >= start)
        if end:
            query = query.filter(Sale.sale_date <= end)
        if sale_type:
            query = query.filter(Sale.sale_type == sale_type)
        if customer_id:
            query = query.filter(Sale.customer_id == customer_id)
        return query.order_by(Sale.sale_date.desc(), Sale.created_at.desc()).all()

    # ----------------------------- payments -----------------------------

    def create_payment(self, data: dict[str, Any]) -> Payment:
        return self._create(Payment, data, "create payment")

    def get_payment(self, payment_id: str) -> Payment:
        return self._get(Payment, "payment", payment_id)

    def list_payments(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        customer_id: str | None = None,
    ) -> list[Payment]:
        query = self.db.query(Payment)
        if start:
            query = query.filter(Payment.payment_date >= start)
        if end:
            query = query.filter(Payment.payment_date <= end)
        if customer_id:
            query = query.filter(Payment.customer_id == customer_id)
        return query.order_by(Payment.payment_date.desc()).all()

    # ----------------------------- orders -----------------------------

    def create_orders(self, rows: Sequence[dict[str, Any]]) -> list[DailyOrder]:
        """Insert a day's orders in one transaction."""
        orders = [DailyOrder(**row) for row in rows]
        self.db.add_all(orders)
        self._commit("create daily orders")
        return orders

    def get_order(self, order_id: str) -> DailyOrder:
        return self._get(DailyOrder, "order", order_id)

    def update_order(self, order_id: str, data: dict[str, Any]) -> DailyOrder:
        return self._update(DailyOrder, "order", order_id, data)

    def list_orders(self, start: dt.date, end: dt.date | None = None) -> list[DailyOrder]:
        return (
            self.db.query(DailyOrder)
            .filter(DailyOrder.order_date >= start)
            .filter(DailyOrder.order_date <= (end or start))
            .order_by(DailyOrder.order_date, DailyOrder.route_id, DailyOrder.delivery_time)
            .all()
        )

    def find_orders(self, day: dt.date | None = None, status: str | None = None) -> list[DailyOrder]:
        query = self.db.query(DailyOrder)
        if day:
            query = query.filter(DailyOrder.order_date == day)
        if status:
            query = query.filter(DailyOrder.status == status)
        return query.order_by(DailyOrder.route_id, DailyOrder.delivery_time, DailyOrder.customer_id).all()

    def count_orders(self, day: dt.date) -> int:
        return self.db.query(DailyOrder).filter(DailyOrder.order_date == day).count()

    def delete_orders(self, day: dt.date) -> int:
        deleted = (
            self.db.query(DailyOrder)
            .filter(DailyOrder.order_date == day)
            .delete(synchronize_session=False)
        )
        self._commit("delete daily orders")
        return deleted

    # ----------------------------- deliveries -----------------------------

    def create_delivery(self, data: dict[str, Any]) -> Delivery:
        return self._create(Delivery, data, "create delivery")

    def list_deliveries(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        customer_id: str | None = None,
    ) -> list[Delivery]:
        """Deliveries in a date range; a lone ``start`` means that single day."""
        query = self.db.query(Delivery)
        if start:
            query = query.filter(Delivery.order_date >= start).filter(Delivery.order_date <= (end or start))
        elif end:
            query = query.filter(Delivery.order_date <= end)
        if customer_id:
            query = query.filter(Delivery.customer_id == customer_id)
        return query.order_by(Delivery.order_date, Delivery.created_at).all()


@contextmanager
def repository_scope() -> Iterator[SqlDairyRepository]:
    """A repository on a fresh session, closed on exit."""
    db = SessionLocal()
    try:
        yield SqlDairyRepository(db)
    finally:
        db.close()
