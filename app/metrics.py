"""Metrics facade.

Service code should ONLY call the semantic helpers here so the backend can
change freely.

Metrics:
- daily_orders_generated_total     Orders written by order generation
- order_generation_runs_total      Generation runs by outcome
- bulk_rows_total                  Bulk rows submitted, by kind and outcome
- sales_recorded_total             Sales created, by sale type
- payments_recorded_total          Payments recorded
- mfa_verifications_total          TOTP verifications by outcome
- login_attempts_total             Password sign-ins by outcome
- order_generation_seconds         Time spent generating a day's orders
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

_ORDERS_GENERATED = Counter("daily_orders_generated_total", "Daily orders written by order generation")
_GENERATION_RUNS = Counter(
    "order_generation_runs_total", "Order generation runs", ["outcome"]
)
_BULK_ROWS = Counter("bulk_rows_total", "Bulk entry rows submitted", ["kind", "outcome"])
_SALES_RECORDED = Counter("sales_recorded_total", "Sales created", ["sale_type"])
_PAYMENTS_RECORDED = Counter("payments_recorded_total", "Payments recorded")
_MFA_VERIFICATIONS = Counter("mfa_verifications_total", "TOTP verifications", ["outcome"])
_LOGIN_ATTEMPTS = Counter("login_attempts_total", "Password sign-in attempts", ["outcome"])
_GENERATION_LATENCY = Histogram(
    "order_generation_seconds",
    "Time spent generating a day's orders",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)


def orders_generated(count: int, seconds: float | None = None):
    _ORDERS_GENERATED.inc(count)
    _GENERATION_RUNS.labels(outcome="created").inc()
    if seconds is not None:
        _GENERATION_LATENCY.observe(seconds)


def order_generation_refused(reason: str):
    _GENERATION_RUNS.labels(outcome=reason).inc()


def bulk_row_succeeded(kind: str):
    _BULK_ROWS.labels(kind=kind.lower(), outcome="success").inc()


def bulk_row_failed(kind: str):
    _BULK_ROWS.labels(kind=kind.lower(), outcome="error").inc()


def sale_recorded(sale_type: str):
    _SALES_RECORDED.labels(sale_type=sale_type).inc()


def payment_recorded():
    _PAYMENTS_RECORDED.inc()


def mfa_verified():
    _MFA_VERIFICATIONS.labels(outcome="success").inc()


def mfa_rejected(reason: str = "invalid_code"):
    _MFA_VERIFICATIONS.labels(outcome=reason).inc()


def login_succeeded():
    _LOGIN_ATTEMPTS.labels(outcome="success").inc()


def login_failed():
    _LOGIN_ATTEMPTS.labels(outcome="failure").inc()
