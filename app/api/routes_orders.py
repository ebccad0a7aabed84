"""Daily order generation and deliveries."""
import datetime as dt

from fastapi import APIRouter

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.services.delivery_service import DeliveryService
from app.services.order_service import OrderService

orders_router = APIRouter()
deliveries_router = APIRouter()


@orders_router.get("/{order_date}", response_model=list[schemas.DailyOrderOut])
def list_orders(order_date: dt.date, _user: VerifiedUserDep, repo: RepoDep):
    return OrderService(repo).list_orders(order_date)


@orders_router.get("/{order_date}/preview", response_model=schemas.OrderPreview)
def preview_orders(order_date: dt.date, _user: VerifiedUserDep, repo: RepoDep):
    return OrderService(repo).preview(order_date)


@orders_router.post("/{order_date}/generate", response_model=schemas.GenerateOrdersResult, status_code=201)
def generate_orders(order_date: dt.date, _user: VerifiedUserDep, repo: RepoDep):
    return OrderService(repo).generate(order_date)


@orders_router.delete("/{order_date}", response_model=schemas.MessageOut)
def delete_orders(order_date: dt.date, _user: VerifiedUserDep, repo: RepoDep):
    deleted = OrderService(repo).delete_orders(order_date)
    return schemas.MessageOut(detail=f"Deleted {deleted} orders for {order_date.isoformat()}")


@deliveries_router.get("", response_model=list[schemas.DeliveryOut])
def list_deliveries(
    order_date: dt.date,
    _user: VerifiedUserDep,
    repo: RepoDep,
    until: dt.date | None = None,
):
    return DeliveryService(repo).list(order_date, until)


@deliveries_router.post("", response_model=schemas.DeliveryOut, status_code=201)
def record_delivery(payload: schemas.DeliveryCreate, _user: VerifiedUserDep, repo: RepoDep):
    return DeliveryService(repo).record(payload)


@deliveries_router.post("/bulk", response_model=schemas.BulkResultOut)
async def bulk_record_deliveries(payload: schemas.BulkDeliveryIn, _user: VerifiedUserDep, repo: RepoDep):
    result = await DeliveryService(repo).record_bulk(payload)
    return result.to_dict()


@deliveries_router.get("/undelivered", response_model=list[schemas.DailyOrderOut])
def undelivered_orders(_user: VerifiedUserDep, repo: RepoDep, order_date: dt.date | None = None):
    return DeliveryService(repo).undelivered(order_date)


@deliveries_router.get("/stats", response_model=schemas.DeliveryStats)
def delivery_stats(_user: VerifiedUserDep, repo: RepoDep, order_date: dt.date | None = None):
    return DeliveryService(repo).stats(order_date)
