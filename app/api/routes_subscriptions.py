"""Subscriptions and modifications, including bulk modification entry."""
import datetime as dt

from fastapi import APIRouter, Query

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.services.bulk_summary import summarize_modifications
from app.services.modification_service import ModificationService
from app.services.subscription_service import SubscriptionService
from app.utils.dates import today_ist

subscriptions_router = APIRouter()
modifications_router = APIRouter()


# ----------------------------- subscriptions -----------------------------

@subscriptions_router.get("", response_model=list[schemas.SubscriptionOut])
def list_subscriptions(
    _user: VerifiedUserDep,
    repo: RepoDep,
    customer_id: str | None = None,
    active_only: bool = False,
):
    return SubscriptionService(repo).list(customer_id, active_only)


@subscriptions_router.post("", response_model=schemas.SubscriptionOut, status_code=201)
def create_subscription(payload: schemas.SubscriptionCreate, _user: VerifiedUserDep, repo: RepoDep):
    return SubscriptionService(repo).create(payload)


@subscriptions_router.get("/{subscription_id}", response_model=schemas.SubscriptionOut)
def get_subscription(subscription_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_subscription(subscription_id)


@subscriptions_router.patch("/{subscription_id}/active", response_model=schemas.SubscriptionOut)
def set_subscription_active(
    subscription_id: str,
    payload: schemas.ActiveToggle,
    _user: VerifiedUserDep,
    repo: RepoDep,
):
    return SubscriptionService(repo).set_active(subscription_id, payload.is_active)


@subscriptions_router.get("/{subscription_id}/preview", response_model=list[schemas.PatternPreviewDay])
def preview_subscription(
    subscription_id: str,
    _user: VerifiedUserDep,
    repo: RepoDep,
    start: dt.date | None = None,
    days: int = Query(14, ge=1, le=90),
):
    return SubscriptionService(repo).preview(subscription_id, start or today_ist(), days)


# ----------------------------- modifications -----------------------------

@modifications_router.get("", response_model=list[schemas.ModificationOut])
def list_modifications(
    _user: VerifiedUserDep,
    repo: RepoDep,
    customer_id: str | None = None,
    active_only: bool = False,
    on: dt.date | None = None,
):
    service = ModificationService(repo)
    if on is not None:
        return service.active_on(on)
    return service.list(customer_id, active_only)


@modifications_router.post("", response_model=schemas.ModificationOut, status_code=201)
def create_modification(payload: schemas.ModificationCreate, _user: VerifiedUserDep, repo: RepoDep):
    return ModificationService(repo).create(payload)


@modifications_router.patch("/{modification_id}/active", response_model=schemas.ModificationOut)
def set_modification_active(
    modification_id: str,
    payload: schemas.ActiveToggle,
    _user: VerifiedUserDep,
    repo: RepoDep,
):
    return ModificationService(repo).set_active(modification_id, payload.is_active)


@modifications_router.post("/bulk/summary", response_model=schemas.ModificationSummary)
def bulk_modifications_summary(payload: schemas.BulkModificationsIn, _user: VerifiedUserDep):
    return summarize_modifications(payload.modifications)


@modifications_router.post("/bulk", response_model=schemas.BulkResultOut)
async def bulk_create_modifications(payload: schemas.BulkModificationsIn, _user: VerifiedUserDep, repo: RepoDep):
    result = await ModificationService(repo).create_bulk(payload.modifications)
    return result.to_dict()
