"""Sales and payments, including bulk entry."""
import datetime as dt

from fastapi import APIRouter

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.services.bulk_summary import summarize_payments, summarize_sales
from app.services.payment_service import PaymentService
from app.services.sales_service import SalesService

sales_router = APIRouter()
payments_router = APIRouter()


# ----------------------------- sales -----------------------------

@sales_router.get("", response_model=list[schemas.SaleOut])
def list_sales(
    _user: VerifiedUserDep,
    repo: RepoDep,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
    sale_type: str | None = None,
    customer_id: str | None = None,
):
    return SalesService(repo).list_sales(date_from, date_to, sale_type, customer_id)


@sales_router.post("", response_model=schemas.SaleOut, status_code=201)
def create_sale(payload: schemas.SaleCreate, _user: VerifiedUserDep, repo: RepoDep):
    return SalesService(repo).create_sale(payload)


@sales_router.get("/stats", response_model=schemas.SalesStats)
def sales_stats(
    _user: VerifiedUserDep,
    repo: RepoDep,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
):
    return SalesService(repo).stats(date_from, date_to)


@sales_router.post("/bulk/summary", response_model=schemas.SaleSummary)
def bulk_sales_summary(payload: schemas.BulkSalesIn, _user: VerifiedUserDep, repo: RepoDep):
    rates = repo.product_gst_rates(row.product_id for row in payload.sales if row.product_id)
    return summarize_sales(payload.sales, rates)


@sales_router.post("/bulk", response_model=schemas.BulkResultOut)
async def bulk_create_sales(payload: schemas.BulkSalesIn, _user: VerifiedUserDep, repo: RepoDep):
    result = await SalesService(repo).create_bulk(payload.sales)
    return result.to_dict()


@sales_router.get("/{sale_id}", response_model=schemas.SaleOut)
def get_sale(sale_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_sale(sale_id)


# ----------------------------- payments -----------------------------

@payments_router.get("", response_model=list[schemas.PaymentOut])
def list_payments(
    _user: VerifiedUserDep,
    repo: RepoDep,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
    customer_id: str | None = None,
):
    return PaymentService(repo).list(date_from, date_to, customer_id)


@payments_router.post("", response_model=schemas.PaymentOut, status_code=201)
def create_payment(payload: schemas.PaymentCreate, _user: VerifiedUserDep, repo: RepoDep):
    return PaymentService(repo).create(payload)


@payments_router.get("/stats", response_model=schemas.PaymentStats)
def payment_stats(
    _user: VerifiedUserDep,
    repo: RepoDep,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
):
    return PaymentService(repo).stats(date_from, date_to)


@payments_router.post("/bulk/summary", response_model=schemas.PaymentSummary)
def bulk_payments_summary(payload: schemas.BulkPaymentsIn, _user: VerifiedUserDep):
    return summarize_payments(payload.payments)


@payments_router.post("/bulk", response_model=schemas.BulkResultOut)
async def bulk_create_payments(payload: schemas.BulkPaymentsIn, _user: VerifiedUserDep, repo: RepoDep):
    result = await PaymentService(repo).create_bulk(payload.payments)
    return result.to_dict()


@payments_router.get("/{payment_id}", response_model=schemas.PaymentOut)
def get_payment(payment_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_payment(payment_id)
