from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base_class import Base, IdMixin


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DeliveryTime(str, enum.Enum):
    MORNING = "Morning"
    EVENING = "Evening"


class CustomerPaymentMethod(str, enum.Enum):
    MONTHLY = "Monthly"
    PREPAID = "Prepaid"


class CustomerStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class SubscriptionType(str, enum.Enum):
    DAILY = "Daily"
    PATTERN = "Pattern"


class ModificationType(str, enum.Enum):
    SKIP = "Skip"
    INCREASE = "Increase"
    DECREASE = "Decrease"
    ADD_NOTE = "Add Note"

    @property
    def needs_quantity(self) -> bool:
        return self in (ModificationType.INCREASE, ModificationType.DECREASE)


class SaleType(str, enum.Enum):
    CASH = "Cash"
    CREDIT = "Credit"
    QR = "QR"

    @property
    def settles_immediately(self) -> bool:
        """Cash and QR sales are paid at the counter; credit is billed later."""
        return self in (SaleType.CASH, SaleType.QR)


class SalePaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    BILLED = "Billed"
    COMPLETED = "Completed"


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    GENERATED = "Generated"
    DELIVERED = "Delivered"


class DeliveryStatus(str, enum.Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TimestampMixin:
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )


class Route(IdMixin, TimestampMixin, Base):
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    personnel_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    customers: Mapped[list[Customer]] = relationship("Customer", back_populates="route")


class Customer(IdMixin, TimestampMixin, Base):
    billing_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact_person: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone_primary: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone_secondary: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone_tertiary: Mapped[str | None] = mapped_column(String(20), nullable=True)
    route_id: Mapped[str | None] = mapped_column(ForeignKey("route.id"), nullable=True, index=True)
    delivery_time: Mapped[str] = mapped_column(String(10), default=DeliveryTime.MORNING.value)
    payment_method: Mapped[str] = mapped_column(String(10), default=CustomerPaymentMethod.MONTHLY.value)
    billing_cycle_day: Mapped[int] = mapped_column(Integer, default=1)
    opening_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(10), default=CustomerStatus.ACTIVE.value, index=True)

    route: Mapped[Route | None] = relationship("Route", back_populates="customers")


class Product(IdMixin, TimestampMixin, Base):
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    current_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), default="liter")
    gst_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
    unit_of_measure: Mapped[str] = mapped_column(String(20), default="liter")
    is_subscription_product: Mapped[bool] = mapped_column(Boolean, default=True)


class Subscription(IdMixin, TimestampMixin, Base):
    customer_id: Mapped[str] = mapped_column(ForeignKey("customer.id"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("product.id"), index=True)
    subscription_type: Mapped[str] = mapped_column(String(10), nullable=False)
    daily_quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pattern_day1_quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pattern_day2_quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pattern_start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    customer: Mapped[Customer] = relationship("Customer")
    product: Mapped[Product] = relationship("Product")


class Modification(IdMixin, TimestampMixin, Base):
    customer_id: Mapped[str] = mapped_column(ForeignKey("customer.id"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("product.id"), index=True)
    modification_type: Mapped[str] = mapped_column(String(10), nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    quantity_change: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    customer: Mapped[Customer] = relationship("Customer")
    product: Mapped[Product] = relationship("Product")


class Sale(IdMixin, TimestampMixin, Base):
    customer_id: Mapped[str | None] = mapped_column(ForeignKey("customer.id"), nullable=True, index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("product.id"), index=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    sale_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    sale_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    payment_status: Mapped[str] = mapped_column(String(10), default=SalePaymentStatus.PENDING.value)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer: Mapped[Customer | None] = relationship("Customer")
    product: Mapped[Product] = relationship("Product")


class Payment(IdMixin, TimestampMixin, Base):
    customer_id: Mapped[str] = mapped_column(ForeignKey("customer.id"), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    payment_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    period_start: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    period_end: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    customer: Mapped[Customer] = relationship("Customer")


class DailyOrder(IdMixin, TimestampMixin, Base):
    __tablename__ = "daily_order"
    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", "order_date", name="uq_daily_order_customer_product_date"),
    )

    customer_id: Mapped[str] = mapped_column(ForeignKey("customer.id"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("product.id"), index=True)
    order_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    planned_quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    route_id: Mapped[str | None] = mapped_column(ForeignKey("route.id"), nullable=True)
    delivery_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[str] = mapped_column(String(10), default=OrderStatus.GENERATED.value, index=True)

    customer: Mapped[Customer] = relationship("Customer")
    product: Mapped[Product] = relationship("Product")
    route: Mapped[Route | None] = relationship("Route")


class Delivery(IdMixin, TimestampMixin, Base):
    daily_order_id: Mapped[str | None] = mapped_column(
        ForeignKey("daily_order.id", ondelete="SET NULL"), nullable=True, index=True
    )
    customer_id: Mapped[str] = mapped_column(ForeignKey("customer.id"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("product.id"), index=True)
    route_id: Mapped[str | None] = mapped_column(ForeignKey("route.id"), nullable=True, index=True)
    order_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    delivery_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    planned_quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    actual_quantity: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    delivery_status: Mapped[str] = mapped_column(String(12), default=DeliveryStatus.DELIVERED.value)
    delivery_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivered_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivery_person: Mapped[str | None] = mapped_column(String(100), nullable=True)

    customer: Mapped[Customer] = relationship("Customer")
    product: Mapped[Product] = relationship("Product")
    route: Mapped[Route | None] = relationship("Route")


class User(IdMixin, TimestampMixin, Base):
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    factors: Mapped[list[MFAFactor]] = relationship(
        "MFAFactor",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class MFAFactor(IdMixin, TimestampMixin, Base):
    __tablename__ = "mfa_factor"

    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), index=True)
    factor_type: Mapped[str] = mapped_column(String(10), default="totp")
    friendly_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    secret: Mapped[str] = mapped_column(String(64))
    status: Mapped[str] = mapped_column(String(12), default="unverified")

    user: Mapped[User] = relationship("User", back_populates="factors")


class MFAChallenge(IdMixin, Base):
    __tablename__ = "mfa_challenge"

    factor_id: Mapped[str] = mapped_column(ForeignKey("mfa_factor.id"), index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))
    verified_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
