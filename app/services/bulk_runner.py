"""
Bulk submission runner.

Submits a batch of independent rows and reports the outcome of each one. A
failing row is recorded as ``{index, error}`` and never stops, rolls back or
reorders its siblings; the runner returns only once every row has resolved.

Blocking submit functions (the SQL services) run in worker threads so rows
can overlap and the event loop keeps serving other requests meanwhile.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import ValidationError

from app import metrics
from app.core.config import settings
from app.core.exceptions import DairyOpsException

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")
Submit = Callable[[int, RowT], Awaitable[str | None] | str | None]


@dataclass(frozen=True)
class RowError:
    index: int
    error: str

    def as_dict(self) -> dict[str, Any]:
        return {"index": self.index, "error": self.error}


@dataclass(frozen=True)
class RowOutcome:
    index: int
    ok: bool
    record_id: str | None = None
    label: str | None = None
    error: str | None = None


@dataclass
class BulkResult:
    total: int
    outcomes: list[RowOutcome] = field(default_factory=list)
    batch_errors: list[RowError] = field(default_factory=list)

    @property
    def errors(self) -> list[RowError]:
        row_errors = [RowError(o.index, o.error or "") for o in self.outcomes if not o.ok]
        return self.batch_errors + row_errors

    @property
    def processed(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def created(self) -> list[str]:
        return [o.label for o in self.outcomes if o.ok and o.label]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "processed": self.processed,
            "total": self.total,
            "errors": [e.as_dict() for e in self.errors],
            "created": self.created,
            "record_ids": [o.record_id for o in self.outcomes],
        }

    @classmethod
    def aborted(cls, total: int, message: str) -> BulkResult:
        """A batch that could not start; reported against index -1."""
        return cls(total=total, batch_errors=[RowError(-1, message)])


def describe_error(exc: Exception) -> str:
    if isinstance(exc, DairyOpsException):
        return exc.message
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            where = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{where}: {err['msg']}" if where else err["msg"])
        return "; ".join(parts)
    return str(exc) or "Unknown error occurred"


async def run_bulk(
    rows: Sequence[RowT],
    submit: Submit,
    *,
    label: str = "Row",
    concurrency: int | None = None,
) -> BulkResult:
    """Submit every row and collect one outcome per row, in input order.

    ``submit`` receives the row index and the row and returns the created
    record's id. It may be a coroutine function or a plain blocking function;
    the latter is run with ``asyncio.to_thread``. ``concurrency`` bounds how
    many submissions are in flight; it defaults to ``BULK_SUBMIT_CONCURRENCY``.
    """
    limit = max(1, concurrency or settings.BULK_SUBMIT_CONCURRENCY)
    gate = asyncio.Semaphore(limit)
    blocking = not inspect.iscoroutinefunction(submit)

    async def _one(index: int, row: RowT) -> RowOutcome:
        async with gate:
            try:
                if blocking:
                    record_id = await asyncio.to_thread(submit, index, row)
                else:
                    record_id = await submit(index, row)
            except Exception as exc:  # noqa: BLE001 - each row fails on its own
                message = describe_error(exc)
                logger.warning("Bulk %s %d failed: %s", label.lower(), index + 1, message)
                metrics.bulk_row_failed(label)
                return RowOutcome(index=index, ok=False, error=message)
        metrics.bulk_row_succeeded(label)
        return RowOutcome(index=index, ok=True, record_id=record_id, label=f"{label} {index + 1}")

    outcomes = await asyncio.gather(*(_one(i, row) for i, row in enumerate(rows)))
    result = BulkResult(total=len(rows), outcomes=list(outcomes))
    logger.info("Bulk %s completed: %d/%d succeeded", label.lower(), result.processed, result.total)
    return result
