import asyncio
import threading

from pydantic import ValidationError

from app.core.exceptions import NotFoundError
from app.models.schemas.sales import SaleCreate
from app.services.bulk_runner import BulkResult, RowError, describe_error, run_bulk


def test_failing_row_is_reported_and_siblings_succeed():
    async def submit(index, row):
        if index == 2:
            raise RuntimeError("Database unavailable")
        return f"rec-{row}"

    result = asyncio.run(run_bulk(["a", "b", "c", "d", "e"], submit, label="Sale"))

    assert result.total == 5
    assert len(result.outcomes) == 5
    assert result.errors == [RowError(index=2, error="Database unavailable")]
    assert [o.ok for o in result.outcomes] == [True, True, False, True, True]
    assert result.processed == 4
    assert result.success is False
    assert result.created == ["Sale 1", "Sale 2", "Sale 4", "Sale 5"]
    assert result.to_dict()["record_ids"] == ["rec-a", "rec-b", None, "rec-d", "rec-e"]


def test_outcomes_keep_input_order():
    async def submit(index, row):
        # later rows finish first
        await asyncio.sleep(0.01 * (5 - index))
        return str(index)

    result = asyncio.run(run_bulk(range(5), submit, concurrency=5))
    assert [o.index for o in result.outcomes] == [0, 1, 2, 3, 4]
    assert [o.record_id for o in result.outcomes] == ["0", "1", "2", "3", "4"]
    assert result.success is True


def _max_in_flight(concurrency):
    state = {"now": 0, "peak": 0}

    async def submit(index, row):
        state["now"] += 1
        state["peak"] = max(state["peak"], state["now"])
        await asyncio.sleep(0.005)
        state["now"] -= 1
        return str(index)

    asyncio.run(run_bulk(list(range(8)), submit, concurrency=concurrency))
    return state["peak"]


def test_concurrency_is_bounded():
    assert _max_in_flight(1) == 1
    assert _max_in_flight(3) == 3


def test_default_concurrency_is_sequential():
    state = {"now": 0, "peak": 0}

    async def submit(index, row):
        state["now"] += 1
        state["peak"] = max(state["peak"], state["now"])
        await asyncio.sleep(0)
        state["now"] -= 1
        return None

    asyncio.run(run_bulk([1, 2, 3], submit))
    assert state["peak"] == 1


def test_blocking_submits_run_off_the_event_loop_thread():
    loop_thread = threading.get_ident()
    seen = []

    def submit(index, row):
        seen.append(threading.get_ident())
        if row == "bad":
            raise RuntimeError("Row rejected")
        return f"rec-{index}"

    result = asyncio.run(run_bulk(["a", "bad", "c"], submit, label="Payment"))

    assert loop_thread not in seen
    assert result.created == ["Payment 1", "Payment 3"]
    assert result.errors == [RowError(index=1, error="Row rejected")]


def test_empty_batch_succeeds():
    async def submit(index, row):  # pragma: no cover - never called
        raise AssertionError

    result = asyncio.run(run_bulk([], submit))
    assert result.success is True
    assert result.to_dict() == {
        "success": True,
        "processed": 0,
        "total": 0,
        "errors": [],
        "created": [],
        "record_ids": [],
    }


def test_aborted_batch_reports_index_minus_one():
    result = BulkResult.aborted(3, "Failed to fetch product GST rates: timeout")
    assert result.success is False
    assert result.processed == 0
    assert result.to_dict()["errors"] == [{"index": -1, "error": "Failed to fetch product GST rates: timeout"}]


class TestDescribeError:
    def test_domain_error_uses_message(self):
        assert describe_error(NotFoundError("product", "p9")) == "Product p9 not found"

    def test_validation_error_lists_fields(self):
        try:
            SaleCreate.model_validate({"quantity": "1", "unit_price": "10"})
        except ValidationError as exc:
            text = describe_error(exc)
        assert "product_id: Field required" in text
        assert "sale_date: Field required" in text

    def test_blank_exception_has_fallback(self):
        assert describe_error(RuntimeError()) == "Unknown error occurred"
