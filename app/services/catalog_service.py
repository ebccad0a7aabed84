"""Routes, customers and products."""
from __future__ import annotations

import logging

from app.core.exceptions import ValidationFailedError
from app.models.models import Customer, Product, Route
from app.models.schemas.catalog import (
    CustomerCreate,
    CustomerUpdate,
    ProductCreate,
    ProductUpdate,
    RouteCreate,
    RouteUpdate,
)
from app.repositories.base import DairyRepository

logger = logging.getLogger(__name__)


def _values(payload, *, partial: bool) -> dict:
    data = payload.model_dump(exclude_unset=partial, mode="python")
    # Enum members are stored by value
    return {k: getattr(v, "value", v) for k, v in data.items()}


class CatalogService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def create_route(self, payload: RouteCreate) -> Route:
        return self.repo.create_route(_values(payload, partial=False))

    def update_route(self, route_id: str, payload: RouteUpdate) -> Route:
        return self.repo.update_route(route_id, _values(payload, partial=True))

    def create_customer(self, payload: CustomerCreate) -> Customer:
        if payload.route_id:
            self.repo.get_route(payload.route_id)
        customer = self.repo.create_customer(_values(payload, partial=False))
        logger.info("Customer %s created (%s)", customer.id, customer.billing_name)
        return customer

    def update_customer(self, customer_id: str, payload: CustomerUpdate) -> Customer:
        data = _values(payload, partial=True)
        if data.get("route_id"):
            self.repo.get_route(data["route_id"])
        return self.repo.update_customer(customer_id, data)

    def create_product(self, payload: ProductCreate) -> Product:
        code = payload.code.strip().upper()
        if any(p.code == code for p in self.repo.list_products()):
            raise ValidationFailedError(f"Product code {code} already exists", field="code", code="CAT101")
        data = _values(payload, partial=False)
        data["code"] = code
        return self.repo.create_product(data)

    def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        return self.repo.update_product(product_id, _values(payload, partial=True))
