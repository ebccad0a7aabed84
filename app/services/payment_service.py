"""Customer payments."""
from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Sequence
from decimal import Decimal

from app import metrics
from app.core.exceptions import ValidationFailedError
from app.models.models import Payment
from app.models.schemas.bulk import PaymentDraft
from app.models.schemas.sales import PaymentCreate, PaymentStats
from app.repositories.base import DairyRepository, RepositoryScope
from app.repositories.sql import repository_scope
from app.services.bulk_runner import BulkResult, run_bulk
from app.services.bulk_summary import UNSPECIFIED_METHOD
from app.utils.currency import round_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def validate_payment(payload: PaymentCreate) -> None:
    if payload.amount <= 0:
        raise ValidationFailedError("Payment amount must be positive", field="amount", code="SAL251")
    if payload.period_start and payload.period_end and payload.period_end < payload.period_start:
        raise ValidationFailedError(
            "Period end date must be after or equal to period start date",
            field="period_end",
            code="SAL252",
        )


class PaymentService:
    def __init__(self, repo: DairyRepository, scope: RepositoryScope | None = None):
        self.repo = repo
        self.scope = scope or repository_scope

    def create(self, payload: PaymentCreate) -> Payment:
        validate_payment(payload)
        self.repo.get_customer(payload.customer_id)
        payment = self.repo.create_payment(payload.model_dump())
        metrics.payment_recorded()
        logger.info("Payment %s of %s from customer %s", payment.id, payment.amount, payment.customer_id)
        return payment

    async def create_bulk(self, rows: Sequence[PaymentDraft], concurrency: int | None = None) -> BulkResult:
        def submit(index: int, row: PaymentDraft) -> str:
            payload = PaymentCreate.model_validate(row.model_dump(exclude_none=True))
            with self.scope() as repo:
                return PaymentService(repo).create(payload).id

        return await run_bulk(rows, submit, label="Payment", concurrency=concurrency)

    def list(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        customer_id: str | None = None,
    ) -> list[Payment]:
        return self.repo.list_payments(start, end, customer_id)

    def stats(self, start: dt.date | None = None, end: dt.date | None = None) -> PaymentStats:
        payments = self.repo.list_payments(start, end)
        total = sum((p.amount for p in payments), ZERO)
        by_method: dict[str, Decimal] = {}
        for p in payments:
            method = p.payment_method or UNSPECIFIED_METHOD
            by_method[method] = by_method.get(method, ZERO) + p.amount
        return PaymentStats(
            total_payments=len(payments),
            total_amount=total,
            average_amount=round_money(total / len(payments)) if payments else ZERO,
            by_method=dict(sorted(by_method.items())),
        )
