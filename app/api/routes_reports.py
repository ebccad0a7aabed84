"""Production and route reports, and customer balances."""
import datetime as dt

from fastapi import APIRouter

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.models.models import DeliveryTime
from app.services.outstanding_service import OutstandingService
from app.services.report_service import ReportService

reports_router = APIRouter()
outstanding_router = APIRouter()


@reports_router.get("/production/{order_date}", response_model=schemas.ProductionSummary)
def production_summary(order_date: dt.date, _user: VerifiedUserDep, repo: RepoDep):
    return ReportService(repo).production_summary(order_date)


@reports_router.get("/route-delivery/{order_date}", response_model=schemas.RouteDeliveryReport)
def route_delivery_report(
    order_date: dt.date,
    route_id: str,
    _user: VerifiedUserDep,
    repo: RepoDep,
    delivery_time: DeliveryTime = DeliveryTime.MORNING,
):
    return ReportService(repo).route_delivery_report(order_date, route_id, delivery_time)


@outstanding_router.get("", response_model=schemas.OutstandingReport)
def outstanding_report(_user: VerifiedUserDep, repo: RepoDep, as_of: dt.date | None = None):
    return OutstandingService(repo).report(as_of)


@outstanding_router.get("/credits", response_model=list[schemas.CustomerOutstanding])
def unapplied_credits(_user: VerifiedUserDep, repo: RepoDep):
    return OutstandingService(repo).unapplied_credits()


@outstanding_router.get("/{customer_id}", response_model=schemas.CustomerOutstanding)
def customer_outstanding(customer_id: str, _user: VerifiedUserDep, repo: RepoDep, as_of: dt.date | None = None):
    return OutstandingService(repo).for_customer(customer_id, as_of)
