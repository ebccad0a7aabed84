from prometheus_client import REGISTRY

from app import metrics


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_metrics_endpoint_available(client):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    text = resp.text
    assert "daily_orders_generated_total" in text
    assert "payments_recorded_total" in text
    assert (
        'order_generation_seconds_bucket{le="30"}' in text
        or 'order_generation_seconds_bucket{le="30.0"}' in text
    )


def test_orders_generated_counts_rows_and_runs():
    before_rows = _sample("daily_orders_generated_total")
    before_runs = _sample("order_generation_runs_total", outcome="created")
    metrics.orders_generated(4, seconds=0.2)
    assert _sample("daily_orders_generated_total") == before_rows + 4
    assert _sample("order_generation_runs_total", outcome="created") == before_runs + 1


def test_bulk_rows_labelled_by_kind():
    before = _sample("bulk_rows_total", kind="sale", outcome="error")
    metrics.bulk_row_failed("Sale")
    assert _sample("bulk_rows_total", kind="sale", outcome="error") == before + 1


def test_generation_refusal_is_counted(repo, anchor_date):
    from app.core.exceptions import NoOrdersToGenerateError
    from app.services.order_service import OrderService

    before = _sample("order_generation_runs_total", outcome="no_subscriptions")
    try:
        OrderService(repo).generate(anchor_date)
    except NoOrdersToGenerateError:
        pass
    assert _sample("order_generation_runs_total", outcome="no_subscriptions") == before + 1
