"""
Customer balances.

A customer's balance is a running ledger:

    opening balance + delivered goods + credit sales - payments

Cash and QR sales are settled at the counter and never reach the ledger. A
positive balance is outstanding; a negative one is payment received in
advance (unapplied credit). Balances above ``REVIEW_THRESHOLD`` are flagged
for manual review.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from app.models.models import Customer, DeliveryStatus, SaleType
from app.models.schemas.reports import CustomerOutstanding, OutstandingReport
from app.repositories.base import DairyRepository
from app.utils.currency import format_currency, round_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
REVIEW_THRESHOLD = Decimal("1000000")


class OutstandingService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def _balance(self, customer: Customer, as_of: dt.date | None) -> CustomerOutstanding:
        deliveries = self.repo.list_deliveries(end=as_of, customer_id=customer.id)
        delivered = sum(
            (d.total_amount for d in deliveries if d.delivery_status == DeliveryStatus.DELIVERED.value),
            ZERO,
        )
        credit_sales = sum(
            (s.total_amount for s in self.repo.list_sales(None, as_of, SaleType.CREDIT.value, customer.id)),
            ZERO,
        )
        payments = sum((p.amount for p in self.repo.list_payments(None, as_of, customer.id)), ZERO)
        opening = customer.opening_balance or ZERO

        balance = round_money(opening + delivered + credit_sales - payments)
        outstanding = max(balance, ZERO)
        warnings = []
        if outstanding > REVIEW_THRESHOLD:
            warnings.append(
                f"Outstanding amount ({format_currency(outstanding)}) exceeds "
                f"reasonable limit ({format_currency(REVIEW_THRESHOLD)})"
            )
            logger.warning("Customer %s outstanding %s needs review", customer.id, outstanding)

        return CustomerOutstanding(
            customer_id=customer.id,
            billing_name=customer.billing_name,
            opening_balance=opening,
            delivered_amount=delivered,
            credit_sales_amount=credit_sales,
            payments_amount=payments,
            outstanding=outstanding,
            unapplied_credit=max(-balance, ZERO),
            requires_review=bool(warnings),
            warnings=warnings,
        )

    def for_customer(self, customer_id: str, as_of: dt.date | None = None) -> CustomerOutstanding:
        return self._balance(self.repo.get_customer(customer_id), as_of)

    def report(self, as_of: dt.date | None = None) -> OutstandingReport:
        """Customers who owe money, largest balance first."""
        balances = [self._balance(c, as_of) for c in self.repo.list_customers()]
        owing = sorted((b for b in balances if b.outstanding > 0), key=lambda b: (-b.outstanding, b.billing_name))
        return OutstandingReport(
            as_of=as_of,
            customers=owing,
            total_outstanding=sum((b.outstanding for b in owing), ZERO),
            total_unapplied_credit=sum((b.unapplied_credit for b in balances), ZERO),
        )

    def unapplied_credits(self) -> list[CustomerOutstanding]:
        """Customers who have paid more than they have been charged."""
        balances = [self._balance(c, None) for c in self.repo.list_customers()]
        return sorted((b for b in balances if b.unapplied_credit > 0), key=lambda b: -b.unapplied_credit)
