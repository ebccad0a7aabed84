"""Routes, customers and products."""
from fastapi import APIRouter

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.services.catalog_service import CatalogService

routes_router = APIRouter()
customers_router = APIRouter()
products_router = APIRouter()


# ----------------------------- routes -----------------------------

@routes_router.get("", response_model=list[schemas.RouteOut])
def list_routes(_user: VerifiedUserDep, repo: RepoDep):
    return repo.list_routes()


@routes_router.post("", response_model=schemas.RouteOut, status_code=201)
def create_route(payload: schemas.RouteCreate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).create_route(payload)


@routes_router.get("/{route_id}", response_model=schemas.RouteOut)
def get_route(route_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_route(route_id)


@routes_router.patch("/{route_id}", response_model=schemas.RouteOut)
def update_route(route_id: str, payload: schemas.RouteUpdate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).update_route(route_id, payload)


# ----------------------------- customers -----------------------------

@customers_router.get("", response_model=list[schemas.CustomerOut])
def list_customers(
    _user: VerifiedUserDep,
    repo: RepoDep,
    status: str | None = None,
    route_id: str | None = None,
):
    return repo.list_customers(status=status, route_id=route_id)


@customers_router.post("", response_model=schemas.CustomerOut, status_code=201)
def create_customer(payload: schemas.CustomerCreate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).create_customer(payload)


@customers_router.get("/{customer_id}", response_model=schemas.CustomerOut)
def get_customer(customer_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_customer(customer_id)


@customers_router.patch("/{customer_id}", response_model=schemas.CustomerOut)
def update_customer(customer_id: str, payload: schemas.CustomerUpdate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).update_customer(customer_id, payload)


# ----------------------------- products -----------------------------

@products_router.get("", response_model=list[schemas.ProductOut])
def list_products(_user: VerifiedUserDep, repo: RepoDep):
    return repo.list_products()


@products_router.post("", response_model=schemas.ProductOut, status_code=201)
def create_product(payload: schemas.ProductCreate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).create_product(payload)


@products_router.get("/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: str, _user: VerifiedUserDep, repo: RepoDep):
    return repo.get_product(product_id)


@products_router.patch("/{product_id}", response_model=schemas.ProductOut)
def update_product(product_id: str, payload: schemas.ProductUpdate, _user: VerifiedUserDep, repo: RepoDep):
    return CatalogService(repo).update_product(product_id, payload)
