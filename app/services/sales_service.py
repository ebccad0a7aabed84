"""Manual sales: counter (Cash/QR) and credit sales with GST split out."""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections.abc import Sequence
from decimal import Decimal

from app import metrics
from app.core.exceptions import NotFoundError, StoreError, ValidationFailedError
from app.models.models import Sale, SalePaymentStatus, SaleType
from app.models.schemas.bulk import SaleDraft
from app.models.schemas.sales import SaleCreate, SalesStats
from app.repositories.base import DairyRepository, RepositoryScope
from app.repositories.sql import repository_scope
from app.services.bulk_runner import BulkResult, run_bulk
from app.services.gst_service import sale_totals

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def payment_status_for(sale_type: SaleType) -> SalePaymentStatus:
    if sale_type.settles_immediately:
        return SalePaymentStatus.COMPLETED
    return SalePaymentStatus.PENDING


class SalesService:
    def __init__(self, repo: DairyRepository, scope: RepositoryScope | None = None):
        self.repo = repo
        self.scope = scope or repository_scope

    def _check(self, payload: SaleCreate) -> None:
        if payload.sale_type == SaleType.CREDIT and not payload.customer_id:
            raise ValidationFailedError("Customer is required for credit sales", field="customer_id", code="SAL201")
        if payload.sale_type == SaleType.CASH and payload.customer_id:
            raise ValidationFailedError("Cash sales should not have a customer", field="customer_id", code="SAL202")

    def create_sale(self, payload: SaleCreate, gst_rate: Decimal | None = None) -> Sale:
        """Record a sale; ``unit_price`` is GST inclusive.

        ``gst_rate`` overrides the product lookup (bulk entry fetches every
        rate up front).
        """
        self._check(payload)
        if payload.customer_id:
            self.repo.get_customer(payload.customer_id)
        if gst_rate is None:
            gst_rate = self.repo.get_product(payload.product_id).gst_rate or ZERO
        totals = sale_totals(payload.quantity, payload.unit_price, gst_rate)
        sale = self.repo.create_sale(
            {
                **payload.model_dump(),
                "sale_type": payload.sale_type.value,
                "total_amount": totals.total_amount,
                "gst_amount": totals.gst_amount,
                "payment_status": payment_status_for(payload.sale_type).value,
            }
        )
        metrics.sale_recorded(sale.sale_type)
        logger.info("Recorded %s sale %s for %s", sale.sale_type, sale.id, totals.total_amount)
        return sale

    async def create_bulk(self, rows: Sequence[SaleDraft], concurrency: int | None = None) -> BulkResult:
        product_ids = [row.product_id for row in rows if row.product_id]
        try:
            rates = await asyncio.to_thread(self.repo.product_gst_rates, product_ids)
        except StoreError as exc:
            logger.error("Bulk sales aborted: %s", exc.message)
            return BulkResult.aborted(len(rows), exc.message)

        def submit(index: int, row: SaleDraft) -> str:
            payload = SaleCreate.model_validate(row.model_dump(exclude_none=True))
            if payload.product_id not in rates:
                raise NotFoundError("product", payload.product_id)
            with self.scope() as repo:
                return SalesService(repo).create_sale(payload, gst_rate=rates[payload.product_id]).id

        return await run_bulk(rows, submit, label="Sale", concurrency=concurrency)

    def list_sales(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        sale_type: str | None = None,
        customer_id: str | None = None,
    ) -> list[Sale]:
        return self.repo.list_sales(start, end, sale_type, customer_id)

    def stats(self, start: dt.date | None = None, end: dt.date | None = None) -> SalesStats:
        counts = {kind: 0 for kind in SaleType}
        amounts = {kind: ZERO for kind in SaleType}
        credit_by_status = {status: ZERO for status in SalePaymentStatus}
        gst = ZERO

        for sale in self.repo.list_sales(start, end):
            kind = SaleType(sale.sale_type)
            amount = sale.total_amount or ZERO
            counts[kind] += 1
            amounts[kind] += amount
            gst += sale.gst_amount or ZERO
            if kind == SaleType.CREDIT:
                credit_by_status[SalePaymentStatus(sale.payment_status)] += amount

        return SalesStats(
            total_sales=sum(counts.values()),
            cash_sales=counts[SaleType.CASH],
            credit_sales=counts[SaleType.CREDIT],
            qr_sales=counts[SaleType.QR],
            total_amount=sum(amounts.values(), ZERO),
            cash_amount=amounts[SaleType.CASH],
            credit_amount=amounts[SaleType.CREDIT],
            qr_amount=amounts[SaleType.QR],
            gst_amount=gst,
            pending_credit_amount=credit_by_status[SalePaymentStatus.PENDING],
            billed_credit_amount=credit_by_status[SalePaymentStatus.BILLED],
            completed_credit_amount=credit_by_status[SalePaymentStatus.COMPLETED],
        )
