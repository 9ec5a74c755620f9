from __future__ import annotations


def _stock(client):
    resp = client.post(
        "/api/purchase-bills",
        json={
            "dealer_name": "AutoParts Wholesalers",
            "bill_date": "2026-02-01",
            "items": [
                {"name": "Oil Filter", "company": "Purolator", "product_id": "OF-Gen", "buy_price": 120, "quantity": 20},
                {"name": "Brake Pad", "company": "Bosch", "buy_price": 850, "quantity": 10},
            ],
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_list_products_sorted_by_name(client):
    _stock(client)

    products = client.get("/api/products").json()

    assert [p["name"] for p in products] == ["Brake Pad", "Oil Filter"]
    assert products[1]["unique_id"] == "oil-filter-purolator-of-gen"


def test_unknown_product_is_404(client):
    resp = client.get("/api/products/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Product not found"}


def test_purchase_history_newest_first(client):
    _stock(client)
    client.post(
        "/api/purchase-bills",
        json={
            "dealer_name": "Second Dealer",
            "bill_date": "2026-03-01",
            "items": [{"name": "Brake Pad", "company": "Bosch", "buy_price": 900, "quantity": 2}],
        },
    )
    product_id = client.get("/api/products/brake-pad-bosch").json()["id"]

    history = client.get(f"/api/products/{product_id}/history").json()

    assert [h["dealer_name"] for h in history] == ["Second Dealer", "AutoParts Wholesalers"]
    assert history[0]["total_cost"] == "1800.00"


def test_sales_history(client):
    _stock(client)
    client.post(
        "/api/sell-bills",
        json={
            "customer_name": "Rahul Sharma",
            "bill_date": "2026-03-02",
            "items": [{"unique_id": "brake-pad-bosch", "selling_price": 1200, "quantity": 2}],
        },
    )
    product_id = client.get("/api/products/brake-pad-bosch").json()["id"]

    sales = client.get(f"/api/products/{product_id}/sales").json()

    assert len(sales) == 1
    assert sales[0]["customer_name"] == "Rahul Sharma"
    assert sales[0]["total_profit"] == "700.00"


def test_history_of_unknown_product_is_404(client):
    assert client.get("/api/products/4242/history").status_code == 404
