from __future__ import annotations

import datetime as dt
import os
import warnings
from decimal import Decimal
from types import SimpleNamespace

os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.db import session as db_session_module  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import SessionLocal, enable_sqlite_foreign_keys  # noqa: E402
from app.models import models  # noqa: E402,F401  (registers tables)

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
if test_engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(test_engine)

# Ensure application code uses the test engine
settings.DATABASE_URL = TEST_DATABASE_URL  # type: ignore[attr-defined]
settings.ENV = "test"  # type: ignore[attr-defined]
db_session_module.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)

warnings.filterwarnings("ignore", category=DeprecationWarning, module="passlib.utils")
# SQLite stores Numeric as float; the values we use round-trip exactly
warnings.filterwarnings("ignore", message=".*Decimal objects natively.*")

PASSWORD = "Dairy2024pass"


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    from app.api.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def repo(db_session):
    from app.repositories.sql import SqlDairyRepository

    return SqlDairyRepository(db_session)


@pytest.fixture
def catalog(repo):
    """Two routes, three customers (one inactive) and two products."""
    north = repo.create_route({"name": "North", "personnel_name": "Ravi"})
    south = repo.create_route({"name": "South"})
    asha = repo.create_customer({"billing_name": "Asha Stores", "route_id": north.id})
    bala = repo.create_customer(
        {"billing_name": "Bala Hotel", "route_id": south.id, "delivery_time": models.DeliveryTime.EVENING.value}
    )
    closed = repo.create_customer(
        {"billing_name": "Closed Cafe", "route_id": north.id, "status": models.CustomerStatus.INACTIVE.value}
    )
    milk = repo.create_product(
        {"name": "Full Cream Milk", "code": "FCM", "current_price": Decimal("60.00"), "gst_rate": Decimal("0")}
    )
    ghee = repo.create_product(
        {"name": "Cow Ghee", "code": "GHEE", "current_price": Decimal("550.00"), "gst_rate": Decimal("12")}
    )
    return SimpleNamespace(
        north=north, south=south, asha=asha, bala=bala, closed=closed, milk=milk, ghee=ghee
    )


@pytest.fixture
def anchor_date() -> dt.date:
    return dt.date(2024, 3, 1)


# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402

from app.api.main import app  # noqa: E402


@pytest.fixture
def client():
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)


def register_and_login(client: TestClient, email: str = "owner@dairy.test") -> dict[str, str]:
    """Create the first user and return bearer headers for an aal1 session."""
    reg = client.post("/auth/register", json={"email": email, "password": PASSWORD, "full_name": "Owner"})
    assert reg.status_code == 201, reg.text
    login = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    return register_and_login(client)
