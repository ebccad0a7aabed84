"""Storage and auth boundaries.

Services talk to persistence only through ``DairyRepository`` and to the
identity provider only through ``AuthGateway``. Either side can be swapped
(SQL, a hosted backend, an in-memory fake in tests) without touching the
calculators or the bulk runner. Implementations report failures as
``StoreError`` with a human-readable message.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from app.core.exceptions import StoreError
from app.core.security import AssuranceLevel
from app.models.models import (
    Customer,
    DailyOrder,
    Delivery,
    MFAFactor,
    Modification,
    Payment,
    Product,
    Route,
    Sale,
    Subscription,
    User,
)

__all__ = [
    "AuthGateway",
    "AuthSession",
    "ChallengeTicket",
    "DairyRepository",
    "Enrollment",
    "RepositoryScope",
    "StoreError",
]


class DairyRepository(Protocol):
    # Routes / customers / products
    def create_route(self, data: dict[str, Any]) -> Route: ...
    def get_route(self, route_id: str) -> Route: ...
    def update_route(self, route_id: str, data: dict[str, Any]) -> Route: ...
    def list_routes(self) -> list[Route]: ...

    def create_customer(self, data: dict[str, Any]) -> Customer: ...
    def get_customer(self, customer_id: str) -> Customer: ...
    def update_customer(self, customer_id: str, data: dict[str, Any]) -> Customer: ...
    def list_customers(self, status: str | None = None, route_id: str | None = None) -> list[Customer]: ...

    def create_product(self, data: dict[str, Any]) -> Product: ...
    def get_product(self, product_id: str) -> Product: ...
    def update_product(self, product_id: str, data: dict[str, Any]) -> Product: ...
    def list_products(self) -> list[Product]: ...
    def product_gst_rates(self, product_ids: Iterable[str]) -> dict[str, Decimal]: ...

    # Subscriptions / modifications
    def create_subscription(self, data: dict[str, Any]) -> Subscription: ...
    def get_subscription(self, subscription_id: str) -> Subscription: ...
    def update_subscription(self, subscription_id: str, data: dict[str, Any]) -> Subscription: ...
    def list_subscriptions(self, customer_id: str | None = None, active_only: bool = False) -> list[Subscription]: ...
    def deliverable_subscriptions(self) -> list[Subscription]: ...

    def create_modification(self, data: dict[str, Any]) -> Modification: ...
    def get_modification(self, modification_id: str) -> Modification: ...
    def update_modification(self, modification_id: str, data: dict[str, Any]) -> Modification: ...
    def list_modifications(self, customer_id: str | None = None, active_only: bool = False) -> list[Modification]: ...
    def modifications_active_on(self, day: dt.date) -> list[Modification]: ...

    # Sales / payments
    def create_sale(self, data: dict[str, Any]) -> Sale: ...
    def get_sale(self, sale_id: str) -> Sale: ...
    def list_sales(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        sale_type: str | None = None,
        customer_id: str | None = None,
    ) -> list[Sale]: ...

    def create_payment(self, data: dict[str, Any]) -> Payment: ...
    def get_payment(self, payment_id: str) -> Payment: ...
    def list_payments(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        customer_id: str | None = None,
    ) -> list[Payment]: ...

    # Orders / deliveries
    def create_orders(self, rows: Sequence[dict[str, Any]]) -> list[DailyOrder]: ...
    def get_order(self, order_id: str) -> DailyOrder: ...
    def update_order(self, order_id: str, data: dict[str, Any]) -> DailyOrder: ...
    def list_orders(self, start: dt.date, end: dt.date | None = None) -> list[DailyOrder]: ...
    def find_orders(self, day: dt.date | None = None, status: str | None = None) -> list[DailyOrder]: ...
    def count_orders(self, day: dt.date) -> int: ...
    def delete_orders(self, day: dt.date) -> int: ...

    def create_delivery(self, data: dict[str, Any]) -> Delivery: ...
    def list_deliveries(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        customer_id: str | None = None,
    ) -> list[Delivery]: ...


# Opens a repository on its own session; bulk rows each get one.
RepositoryScope = Callable[[], AbstractContextManager[DairyRepository]]


@dataclass(frozen=True)
class AuthSession:
    user: User
    access_token: str
    expires_at: dt.datetime
    aal: AssuranceLevel
    mfa_required: bool


@dataclass(frozen=True)
class Enrollment:
    factor: MFAFactor
    secret: str
    uri: str


@dataclass(frozen=True)
class ChallengeTicket:
    challenge_id: str
    factor_id: str
    expires_at: dt.datetime


class AuthGateway(Protocol):
    def sign_in_with_password(self, email: str, password: str) -> AuthSession: ...
    def enroll_totp(self, user_id: str, friendly_name: str | None = None) -> Enrollment: ...
    def list_factors(self, user_id: str) -> list[MFAFactor]: ...
    def challenge(self, user_id: str, factor_id: str) -> ChallengeTicket: ...
    def verify(self, user_id: str, factor_id: str, challenge_id: str, code: str) -> AuthSession: ...
    def assurance_level(self, user_id: str, current: AssuranceLevel) -> tuple[AssuranceLevel, AssuranceLevel]: ...
