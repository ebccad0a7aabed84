from decimal import Decimal


def test_health(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/live").json() == {"status": "alive"}


def test_business_endpoints_require_token(client):
    assert client.get("/customers").status_code == 401
    assert client.post("/tools/gst", json={"amount": "105", "rate": "5"}).status_code == 401


def test_gst_tool(client, auth_headers):
    resp = client.post("/tools/gst", json={"amount": "105", "rate": "5"}, headers=auth_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert Decimal(body["base"]) == Decimal("100")
    assert Decimal(body["tax"]) == Decimal("5")
    assert body["breakdown"] == "Base: ₹100.00 + GST(5%): ₹5.00"
    assert body["formatted_total"] == "₹105.00"

    exclusive = client.post(
        "/tools/gst", json={"amount": "100", "rate": "5", "mode": "exclusive"}, headers=auth_headers
    ).json()
    assert Decimal(exclusive["total"]) == Decimal("105")


def test_pattern_day_tool(client, auth_headers):
    resp = client.get("/tools/pattern-day", params={"anchor": "2024-03-01", "target": "2024-02-29"}, headers=auth_headers)
    assert resp.json()["pattern_day"] == 2


def test_domain_errors_use_error_envelope(client, auth_headers):
    resp = client.get("/customers/missing", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "CUS001"


def _setup_book(client, headers):
    route = client.post("/routes", json={"name": "North"}, headers=headers).json()
    customer = client.post(
        "/customers", json={"billing_name": "Asha Stores", "route_id": route["id"]}, headers=headers
    ).json()
    product = client.post(
        "/products", json={"name": "Toned Milk", "code": "tm", "current_price": "54", "gst_rate": "0"}, headers=headers
    ).json()
    sub = client.post(
        "/subscriptions",
        json={
            "customer_id": customer["id"],
            "product_id": product["id"],
            "subscription_type": "Pattern",
            "pattern_day1_quantity": "2",
            "pattern_day2_quantity": "1",
            "pattern_start_date": "2024-03-01",
        },
        headers=headers,
    )
    assert sub.status_code == 201, sub.text
    return route, customer, product, sub.json()


def test_order_day_end_to_end(client, auth_headers):
    route, customer, product, sub = _setup_book(client, auth_headers)
    assert product["code"] == "TM"

    preview = client.get(f"/subscriptions/{sub['id']}/preview", params={"start": "2024-03-01", "days": 3}, headers=auth_headers)
    assert [d["pattern_day"] for d in preview.json()] == [1, 2, 1]

    plan = client.get("/orders/2024-03-02/preview", headers=auth_headers).json()
    assert plan["total_orders"] == 1
    assert Decimal(plan["by_route"]["North"]["quantity"]) == Decimal("1")

    generated = client.post("/orders/2024-03-02/generate", headers=auth_headers)
    assert generated.status_code == 201, generated.text
    assert generated.json()["created"] == 1

    again = client.post("/orders/2024-03-02/generate", headers=auth_headers)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ORD301"

    orders = client.get("/orders/2024-03-02", headers=auth_headers).json()
    assert Decimal(orders[0]["total_amount"]) == Decimal("54")

    delivery = client.post(
        "/deliveries", json={"daily_order_id": orders[0]["id"], "actual_quantity": "1"}, headers=auth_headers
    )
    assert delivery.status_code == 201, delivery.text
    assert client.get("/orders/2024-03-02", headers=auth_headers).json()[0]["status"] == "Delivered"

    dashboard = client.get("/dashboard", params={"today": "2024-03-02"}, headers=auth_headers).json()
    assert dashboard["today"]["deliveries_count"] == 1
    assert dashboard["routes"][0]["route_name"] == "North"

    deleted = client.delete("/orders/2024-03-02", headers=auth_headers).json()
    assert deleted["detail"] == "Deleted 1 orders for 2024-03-02"
    kept = client.get("/deliveries", params={"order_date": "2024-03-02"}, headers=auth_headers).json()
    assert [d["daily_order_id"] for d in kept] == [None]


def test_bulk_sales_endpoint(client, auth_headers):
    _, customer, product, _ = _setup_book(client, auth_headers)
    rows = [
        {"product_id": product["id"], "quantity": "1", "unit_price": "54", "sale_date": "2024-03-02"},
        {"product_id": product["id"], "quantity": "2", "unit_price": "54", "sale_type": "Credit", "sale_date": "2024-03-02"},
        {
            "customer_id": customer["id"],
            "product_id": product["id"],
            "quantity": "2",
            "unit_price": "54",
            "sale_type": "Credit",
            "sale_date": "2024-03-02",
        },
    ]
    summary = client.post("/sales/bulk/summary", json={"sales": rows}, headers=auth_headers).json()
    assert summary["valid_sales"] == 3
    assert Decimal(summary["total_amount"]) == Decimal("270")

    result = client.post("/sales/bulk", json={"sales": rows}, headers=auth_headers).json()
    assert result["success"] is False
    assert result["processed"] == 2
    assert result["errors"] == [{"index": 1, "error": "Customer is required for credit sales"}]
    assert result["created"] == ["Sale 1", "Sale 3"]

    stats = client.get("/sales/stats", headers=auth_headers).json()
    assert stats["total_sales"] == 2
    assert Decimal(stats["pending_credit_amount"]) == Decimal("108")


def test_bulk_modifications_and_payments(client, auth_headers):
    _, customer, product, _ = _setup_book(client, auth_headers)
    mods = [
        {
            "customer_id": customer["id"],
            "product_id": product["id"],
            "modification_type": "Skip",
            "start_date": "2024-03-05",
            "end_date": "2024-03-06",
        },
        {"customer_id": customer["id"]},
    ]
    summary = client.post("/modifications/bulk/summary", json={"modifications": mods}, headers=auth_headers).json()
    assert summary["valid_modifications"] == 1
    assert summary["unique_customers"] == 1

    result = client.post("/modifications/bulk", json={"modifications": mods}, headers=auth_headers).json()
    assert result["processed"] == 1
    assert [e["index"] for e in result["errors"]] == [1]

    active = client.get("/modifications", params={"on": "2024-03-05"}, headers=auth_headers).json()
    assert len(active) == 1

    payments = [
        {"customer_id": customer["id"], "amount": "500", "payment_date": "2024-03-05", "payment_method": "UPI"},
    ]
    paid = client.post("/payments/bulk", json={"payments": payments}, headers=auth_headers).json()
    assert paid["success"] is True
    assert Decimal(client.get("/payments/stats", headers=auth_headers).json()["total_amount"]) == Decimal("500")


def test_bulk_payments_refuse_allocation_payloads(client, auth_headers):
    customer = client.post("/customers", json={"billing_name": "Hill View"}, headers=auth_headers).json()
    payments = [
        {
            "customer_id": customer["id"],
            "amount": "100",
            "payment_date": "2024-03-05",
            "allocations": [{"invoice_id": "inv-1", "amount": "100"}],
        }
    ]
    resp = client.post("/payments/bulk", json={"payments": payments}, headers=auth_headers)
    assert resp.status_code == 422
    assert client.get("/payments", headers=auth_headers).json() == []


def test_delivery_reports_and_balances(client, auth_headers):
    route, customer, product, _ = _setup_book(client, auth_headers)
    client.post("/orders/2024-03-01/generate", headers=auth_headers)

    production = client.get("/reports/production/2024-03-01", headers=auth_headers).json()
    assert production["total_orders"] == 1
    assert Decimal(production["product_breakdown"]["TM"]["total_quantity"]) == Decimal("2")

    stops = client.get(
        "/reports/route-delivery/2024-03-01", params={"route_id": route["id"]}, headers=auth_headers
    ).json()
    assert stops["route_name"] == "North"
    assert [s["customer_name"] for s in stops["stops"]] == ["Asha Stores"]

    pending = client.get("/deliveries/undelivered", params={"order_date": "2024-03-01"}, headers=auth_headers).json()
    assert len(pending) == 1

    bulk = client.post(
        "/deliveries/bulk",
        json={"order_ids": [pending[0]["id"], "missing"], "delivery_person": "Ravi"},
        headers=auth_headers,
    ).json()
    assert bulk["created"] == ["Delivery 1"]
    assert bulk["errors"] == [{"index": 1, "error": "Order missing not found"}]

    stats = client.get("/deliveries/stats", params={"order_date": "2024-03-01"}, headers=auth_headers).json()
    assert (stats["delivered_orders"], stats["completion_rate"]) == (1, 100)

    client.post(
        "/payments",
        json={"customer_id": customer["id"], "amount": "120", "payment_date": "2024-03-02"},
        headers=auth_headers,
    )
    outstanding = client.get("/outstanding", headers=auth_headers).json()
    assert outstanding["customers"] == []
    assert Decimal(outstanding["total_unapplied_credit"]) == Decimal("12")
    before = client.get(f"/outstanding/{customer['id']}", params={"as_of": "2024-03-01"}, headers=auth_headers).json()
    assert Decimal(before["outstanding"]) == Decimal("108")
    assert client.get("/outstanding/credits", headers=auth_headers).json()[0]["customer_id"] == customer["id"]
