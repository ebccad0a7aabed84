from fastapi import FastAPI
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from app.api.rate_limit import increment_rate_limit_exceeded, limiter
from app.api.routes_auth import router as auth_router
from app.api.routes_catalog import customers_router, products_router, routes_router
from app.api.routes_dashboard import router as dashboard_router
from app.api.routes_health import router as health_router
from app.api.routes_metrics import router as metrics_router
from app.api.routes_orders import deliveries_router, orders_router
from app.api.routes_reports import outstanding_router, reports_router
from app.api.routes_sales import payments_router, sales_router
from app.api.routes_subscriptions import modifications_router, subscriptions_router
from app.api.routes_tools import router as tools_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logger import init_logging
from app.core.monitoring import init_monitoring


async def _rate_limit_handler(request, exc: RateLimitExceeded):
    increment_rate_limit_exceeded()
    return JSONResponse(status_code=429, content={"detail": "Too many requests"})


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):  # type: ignore[override]
        response = await call_next(request)
        response.headers.setdefault(
            "Strict-Transport-Security",
            f"max-age={settings.HSTS_SECONDS}; includeSubDomains",
        )
        response.headers.setdefault("Referrer-Policy", "same-origin")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        return response


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    if is_production:
        app.add_middleware(HTTPSRedirectMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    register_error_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(routes_router, prefix="/routes", tags=["routes"])
    app.include_router(customers_router, prefix="/customers", tags=["customers"])
    app.include_router(products_router, prefix="/products", tags=["products"])
    app.include_router(subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])
    app.include_router(modifications_router, prefix="/modifications", tags=["modifications"])
    app.include_router(sales_router, prefix="/sales", tags=["sales"])
    app.include_router(payments_router, prefix="/payments", tags=["payments"])
    app.include_router(orders_router, prefix="/orders", tags=["orders"])
    app.include_router(deliveries_router, prefix="/deliveries", tags=["deliveries"])
    app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(reports_router, prefix="/reports", tags=["reports"])
    app.include_router(outstanding_router, prefix="/outstanding", tags=["outstanding"])
    app.include_router(tools_router, prefix="/tools", tags=["tools"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(health_router)
    return app


app = create_app()
