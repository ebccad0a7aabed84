"""
Live summaries for bulk entry forms.

Each function takes the rows as currently entered and returns counts and
totals for the summary cards. Incomplete rows count towards the total but
are otherwise ignored; nothing here raises or touches the database. Every
figure is a sum, a set size or a min/max, so row order never changes the
result.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal

from app.models.models import ModificationType, SaleType
from app.models.schemas.bulk import (
    ModificationDraft,
    ModificationSummary,
    PaymentDraft,
    PaymentSummary,
    SaleDraft,
    SaleSummary,
)
from app.services.gst_service import from_inclusive

ZERO = Decimal("0")
UNSPECIFIED_METHOD = "Not specified"


def summarize_modifications(rows: Sequence[ModificationDraft]) -> ModificationSummary:
    valid = 0
    by_type = {kind.value: 0 for kind in ModificationType}
    customers: set[str] = set()
    products: set[str] = set()
    earliest = None
    latest = None

    for row in rows:
        if not (row.customer_id and row.product_id and row.modification_type):
            continue
        valid += 1
        customers.add(row.customer_id)
        products.add(row.product_id)
        if row.modification_type in by_type:
            by_type[row.modification_type] += 1
        if row.start_date and (earliest is None or row.start_date < earliest):
            earliest = row.start_date
        if row.end_date and (latest is None or row.end_date > latest):
            latest = row.end_date

    return ModificationSummary(
        total_modifications=len(rows),
        valid_modifications=valid,
        skip_count=by_type[ModificationType.SKIP.value],
        increase_count=by_type[ModificationType.INCREASE.value],
        decrease_count=by_type[ModificationType.DECREASE.value],
        note_count=by_type[ModificationType.ADD_NOTE.value],
        unique_customers=len(customers),
        unique_products=len(products),
        earliest_start=earliest,
        latest_end=latest,
    )


def summarize_sales(rows: Sequence[SaleDraft], gst_rates: Mapping[str, Decimal]) -> SaleSummary:
    """Summarise draft sales; ``gst_rates`` maps product id to its GST rate."""
    total_amount = ZERO
    total_gst = ZERO
    valid = 0
    sale_types = {kind.value: 0 for kind in SaleType}

    for row in rows:
        if not (row.product_id and (row.quantity or ZERO) > 0 and (row.unit_price or ZERO) > 0):
            continue
        valid += 1
        amount = row.quantity * row.unit_price
        total_amount += amount
        rate = gst_rates.get(row.product_id) or ZERO
        if rate > 0:
            total_gst += from_inclusive(amount, rate).tax
        if row.sale_type in sale_types:
            sale_types[row.sale_type] += 1

    return SaleSummary(
        total_sales=len(rows),
        valid_sales=valid,
        total_amount=total_amount,
        total_gst=total_gst,
        base_amount=total_amount - total_gst,
        sale_types=sale_types,
    )


def summarize_payments(rows: Sequence[PaymentDraft]) -> PaymentSummary:
    total_amount = ZERO
    largest = ZERO
    valid = 0
    methods: dict[str, int] = {}
    customers: set[str] = set()

    for row in rows:
        if not (row.customer_id and (row.amount or ZERO) > 0):
            continue
        valid += 1
        total_amount += row.amount
        largest = max(largest, row.amount)
        customers.add(row.customer_id)

        method = row.payment_method or UNSPECIFIED_METHOD
        methods[method] = methods.get(method, 0) + 1

    return PaymentSummary(
        total_payments=len(rows),
        valid_payments=valid,
        total_amount=total_amount,
        largest_amount=largest,
        method_counts=dict(sorted(methods.items())),
        unique_customers=len(customers),
    )
