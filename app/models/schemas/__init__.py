"""Pydantic schemas for API requests and responses.

Sub-modules:
- catalog: Route, customer and product schemas
- subscriptions: Subscription and modification schemas
- sales: Sale and payment schemas
- orders: Daily order and delivery schemas
- reports: Production, route delivery and outstanding balance reports
- bulk: Draft rows, bulk summaries and bulk results
- auth: Sign-in and MFA schemas
- dashboard: Dashboard card schemas
- tools: GST and pattern calculator schemas
"""
from .auth import (
    AssuranceOut,
    ChallengeRequest,
    ChallengeOut,
    EnrollOut,
    EnrollRequest,
    FactorOut,
    MessageOut,
    RegisterRequest,
    SignInRequest,
    TokenOut,
    UserOut,
    VerifyRequest,
)
from .bulk import (
    BulkModificationsIn,
    BulkPaymentsIn,
    BulkResultOut,
    BulkSalesIn,
    ModificationDraft,
    ModificationSummary,
    PaymentDraft,
    PaymentSummary,
    RowErrorOut,
    SaleDraft,
    SaleSummary,
)
from .catalog import (
    CustomerCreate,
    CustomerOut,
    CustomerUpdate,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    RouteCreate,
    RouteOut,
    RouteUpdate,
)
from .dashboard import (
    CustomerCounts,
    DashboardOut,
    DayOperations,
    RoutePerformance,
    TopCustomer,
    WeekComparison,
)
from .orders import (
    BulkDeliveryIn,
    CustomQuantity,
    DailyOrderOut,
    DeliveryCreate,
    DeliveryOut,
    DeliveryStats,
    GenerateOrdersResult,
    OrderBucket,
    OrderLine,
    OrderPreview,
)
from .reports import (
    CustomerOutstanding,
    OutstandingReport,
    ProductionSummary,
    ProductLine,
    RouteDeliveryReport,
    RouteLine,
    RouteProductLine,
    RouteStop,
    TimeSlotLine,
)
from .sales import PaymentCreate, PaymentOut, PaymentStats, SaleCreate, SaleOut, SalesStats
from .subscriptions import (
    ActiveToggle,
    ModificationCreate,
    ModificationOut,
    PatternPreviewDay,
    SubscriptionCreate,
    SubscriptionOut,
)
from .tools import GSTOut, GSTRequest, PatternDayOut

__all__ = [
    "ActiveToggle",
    "AssuranceOut",
    "BulkDeliveryIn",
    "BulkModificationsIn",
    "BulkPaymentsIn",
    "BulkResultOut",
    "BulkSalesIn",
    "ChallengeOut",
    "ChallengeRequest",
    "CustomerCounts",
    "CustomerOutstanding",
    "CustomQuantity",
    "CustomerCreate",
    "CustomerOut",
    "CustomerUpdate",
    "DailyOrderOut",
    "DashboardOut",
    "DayOperations",
    "DeliveryCreate",
    "DeliveryOut",
    "DeliveryStats",
    "EnrollOut",
    "EnrollRequest",
    "FactorOut",
    "GSTOut",
    "GSTRequest",
    "GenerateOrdersResult",
    "MessageOut",
    "ModificationCreate",
    "ModificationDraft",
    "ModificationOut",
    "ModificationSummary",
    "OrderBucket",
    "OrderLine",
    "OrderPreview",
    "OutstandingReport",
    "PatternDayOut",
    "PatternPreviewDay",
    "PaymentCreate",
    "PaymentDraft",
    "PaymentOut",
    "PaymentStats",
    "PaymentSummary",
    "ProductLine",
    "ProductCreate",
    "ProductOut",
    "ProductUpdate",
    "ProductionSummary",
    "RegisterRequest",
    "RouteDeliveryReport",
    "RouteLine",
    "RoutePerformance",
    "RouteProductLine",
    "RouteStop",
    "RouteCreate",
    "RouteOut",
    "RouteUpdate",
    "RowErrorOut",
    "SaleCreate",
    "SaleDraft",
    "SaleOut",
    "SaleSummary",
    "SalesStats",
    "SignInRequest",
    "SubscriptionCreate",
    "SubscriptionOut",
    "TimeSlotLine",
    "TokenOut",
    "TopCustomer",
    "UserOut",
    "VerifyRequest",
    "WeekComparison",
]
