import datetime as dt
from decimal import Decimal

import pytest

from app.services.dashboard_service import DashboardService, percent_change

TODAY = dt.date(2024, 3, 15)


@pytest.mark.parametrize(
    "current,previous,expected",
    [(150, 100, 50.0), (50, 100, -50.0), (10, 0, 0.0), (Decimal("1"), Decimal("3"), -66.67)],
)
def test_percent_change(current, previous, expected):
    assert percent_change(current, previous) == expected


def _delivery(repo, customer, product, day, amount):
    return repo.create_delivery(
        {
            "customer_id": customer.id,
            "product_id": product.id,
            "route_id": customer.route_id,
            "order_date": day,
            "actual_quantity": Decimal("1"),
            "unit_price": Decimal(amount),
            "total_amount": Decimal(amount),
        }
    )


def _sale(repo, product, day, amount, sale_type="Cash", customer=None):
    return repo.create_sale(
        {
            "customer_id": customer.id if customer else None,
            "product_id": product.id,
            "quantity": Decimal("1"),
            "unit_price": Decimal(amount),
            "total_amount": Decimal(amount),
            "gst_amount": Decimal("0"),
            "sale_type": sale_type,
            "sale_date": day,
            "payment_status": "Completed" if sale_type != "Credit" else "Pending",
        }
    )


@pytest.fixture
def activity(repo, catalog):
    _delivery(repo, catalog.asha, catalog.milk, TODAY, "120")
    _delivery(repo, catalog.bala, catalog.milk, TODAY - dt.timedelta(days=3), "180")
    _delivery(repo, catalog.asha, catalog.milk, TODAY - dt.timedelta(days=10), "100")
    _sale(repo, catalog.milk, TODAY, "50")
    _sale(repo, catalog.ghee, TODAY, "1120", sale_type="Credit", customer=catalog.bala)
    repo.create_payment({"customer_id": catalog.asha.id, "amount": Decimal("300"), "payment_date": TODAY})
    return catalog


def test_day_operations(repo, activity):
    today = DashboardService(repo).day_operations(TODAY)
    assert today.deliveries_count == 1
    assert today.delivery_revenue == Decimal("120")
    assert today.sales_count == 2
    assert today.sales_revenue == Decimal("1170")
    assert today.payments_count == 1
    assert today.payments_amount == Decimal("300")
    assert today.orders_count == 0


def test_week_comparison(repo, activity):
    week = DashboardService(repo).week_comparison(TODAY)
    assert week.this_week_revenue == Decimal("300")
    assert week.last_week_revenue == Decimal("100")
    assert week.revenue_change == 200.0
    assert week.this_week_deliveries == 2
    assert week.deliveries_change == 100.0


def test_top_customers_combine_deliveries_and_sales(repo, activity):
    top = DashboardService(repo).top_customers(TODAY)
    assert [c.billing_name for c in top] == ["Bala Hotel", "Asha Stores"]
    assert top[0].revenue == Decimal("1300")
    assert top[0].transactions == 2
    assert top[1].revenue == Decimal("220")


def test_route_performance(repo, activity):
    routes = {r.route_name: r for r in DashboardService(repo).route_performance(TODAY)}
    assert routes["North"].deliveries == 1
    assert routes["North"].revenue == Decimal("120")
    assert routes["South"].active_customers == 1
    assert routes["South"].revenue == Decimal("180")


def test_build(repo, activity):
    dashboard = DashboardService(repo).build(TODAY)
    assert dashboard.today.date == TODAY
    assert dashboard.yesterday.date == TODAY - dt.timedelta(days=1)
    assert dashboard.customers.total_customers == 3
    assert dashboard.customers.active_customers == 2
    assert dashboard.customers.inactive_customers == 1
    assert dashboard.customers.active_subscriptions == 0
