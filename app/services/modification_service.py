"""Temporary changes to a customer's deliveries (skip, increase, decrease, note)."""
from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Sequence

from app.core.exceptions import ValidationFailedError
from app.models.models import Modification, ModificationType
from app.models.schemas.bulk import ModificationDraft
from app.models.schemas.subscriptions import ModificationCreate
from app.repositories.base import DairyRepository, RepositoryScope
from app.repositories.sql import repository_scope
from app.services.bulk_runner import BulkResult, run_bulk

logger = logging.getLogger(__name__)


def validate_modification(payload: ModificationCreate) -> None:
    if payload.end_date < payload.start_date:
        raise ValidationFailedError("End date must be after or equal to start date", field="end_date")
    if payload.modification_type.needs_quantity and not (payload.quantity_change and payload.quantity_change > 0):
        raise ValidationFailedError(
            "Quantity change is required for increase/decrease modifications",
            field="quantity_change",
        )


class ModificationService:
    def __init__(self, repo: DairyRepository, scope: RepositoryScope | None = None):
        self.repo = repo
        self.scope = scope or repository_scope

    def create(self, payload: ModificationCreate) -> Modification:
        validate_modification(payload)
        self.repo.get_customer(payload.customer_id)
        self.repo.get_product(payload.product_id)
        data = payload.model_dump()
        data["modification_type"] = payload.modification_type.value
        if payload.modification_type in (ModificationType.SKIP, ModificationType.ADD_NOTE):
            data["quantity_change"] = None
        modification = self.repo.create_modification(data)
        logger.info(
            "Modification %s (%s) for customer %s from %s to %s",
            modification.id,
            modification.modification_type,
            modification.customer_id,
            modification.start_date,
            modification.end_date,
        )
        return modification

    async def create_bulk(self, rows: Sequence[ModificationDraft], concurrency: int | None = None) -> BulkResult:
        def submit(index: int, row: ModificationDraft) -> str:
            payload = ModificationCreate.model_validate(row.model_dump(exclude_none=True))
            with self.scope() as repo:
                return ModificationService(repo).create(payload).id

        return await run_bulk(rows, submit, label="Modification", concurrency=concurrency)

    def set_active(self, modification_id: str, is_active: bool) -> Modification:
        return self.repo.update_modification(modification_id, {"is_active": is_active})

    def list(self, customer_id: str | None = None, active_only: bool = False) -> list[Modification]:
        return self.repo.list_modifications(customer_id, active_only)

    def active_on(self, day: dt.date) -> list[Modification]:
        return self.repo.modifications_active_on(day)
