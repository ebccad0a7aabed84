"""Bulk entry schemas.

Draft rows mirror a half-filled spreadsheet line: every field is optional so
the summary endpoints can report on incomplete input. Rows are only checked
against the full create schema when they are submitted.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ModificationDraft(BaseModel):
    customer_id: str | None = None
    product_id: str | None = None
    modification_type: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    quantity_change: Decimal | None = None
    reason: str | None = None


class SaleDraft(BaseModel):
    customer_id: str | None = None
    product_id: str | None = None
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    sale_type: str | None = None
    sale_date: dt.date | None = None
    notes: str | None = None


class PaymentDraft(BaseModel):
    customer_id: str | None = None
    amount: Decimal | None = None
    payment_date: dt.date | None = None
    payment_method: str | None = None
    period_start: dt.date | None = None
    period_end: dt.date | None = None
    notes: str | None = None

    model_config = ConfigDict(extra="forbid")


class BulkModificationsIn(BaseModel):
    modifications: list[ModificationDraft]


class BulkSalesIn(BaseModel):
    sales: list[SaleDraft]


class BulkPaymentsIn(BaseModel):
    payments: list[PaymentDraft]


class ModificationSummary(BaseModel):
    total_modifications: int
    valid_modifications: int
    skip_count: int
    increase_count: int
    decrease_count: int
    note_count: int
    unique_customers: int
    unique_products: int
    earliest_start: dt.date | None = None
    latest_end: dt.date | None = None


class SaleSummary(BaseModel):
    total_sales: int
    valid_sales: int
    total_amount: Decimal
    total_gst: Decimal
    base_amount: Decimal
    sale_types: dict[str, int]


class PaymentSummary(BaseModel):
    total_payments: int
    valid_payments: int
    total_amount: Decimal
    largest_amount: Decimal
    method_counts: dict[str, int]
    unique_customers: int


class RowErrorOut(BaseModel):
    index: int
    error: str


class BulkResultOut(BaseModel):
    success: bool
    processed: int
    total: int
    errors: list[RowErrorOut]
    created: list[str]
    record_ids: list[str | None]
