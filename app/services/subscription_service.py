"""Base subscriptions (daily or 2-day pattern)."""
from __future__ import annotations

import datetime as dt
import logging

from app.core.exceptions import ValidationFailedError
from app.models.models import Subscription, SubscriptionType
from app.models.schemas.subscriptions import SubscriptionCreate
from app.repositories.base import DairyRepository
from app.services.subscription_pattern import PREVIEW_DAYS, pattern_preview

logger = logging.getLogger(__name__)

QUANTITY_MESSAGE = "Please provide valid quantities for the selected subscription type"


def _positive(value) -> bool:
    return value is not None and value > 0


def validate_subscription(payload: SubscriptionCreate) -> None:
    if payload.subscription_type == SubscriptionType.DAILY:
        if not _positive(payload.daily_quantity):
            raise ValidationFailedError(QUANTITY_MESSAGE, field="daily_quantity", code="SUB151")
    elif payload.subscription_type == SubscriptionType.PATTERN:
        if not (_positive(payload.pattern_day1_quantity) and _positive(payload.pattern_day2_quantity)):
            raise ValidationFailedError(QUANTITY_MESSAGE, field="pattern_day1_quantity", code="SUB151")
        if payload.pattern_start_date is None:
            raise ValidationFailedError("Pattern start date is required", field="pattern_start_date", code="SUB152")


class SubscriptionService:
    def __init__(self, repo: DairyRepository):
        self.repo = repo

    def create(self, payload: SubscriptionCreate) -> Subscription:
        validate_subscription(payload)
        self.repo.get_customer(payload.customer_id)
        self.repo.get_product(payload.product_id)
        data = payload.model_dump()
        data["subscription_type"] = payload.subscription_type.value
        # Keep only the quantities that apply to the chosen type
        if payload.subscription_type == SubscriptionType.DAILY:
            data.update(pattern_day1_quantity=None, pattern_day2_quantity=None, pattern_start_date=None)
        else:
            data["daily_quantity"] = None
        subscription = self.repo.create_subscription(data)
        logger.info("Subscription %s (%s) for customer %s", subscription.id, subscription.subscription_type, subscription.customer_id)
        return subscription

    def set_active(self, subscription_id: str, is_active: bool) -> Subscription:
        return self.repo.update_subscription(subscription_id, {"is_active": is_active})

    def list(self, customer_id: str | None = None, active_only: bool = False) -> list[Subscription]:
        return self.repo.list_subscriptions(customer_id, active_only)

    def preview(self, subscription_id: str, start: dt.date, days: int = PREVIEW_DAYS) -> list[dict]:
        return pattern_preview(self.repo.get_subscription(subscription_id), start, days)
