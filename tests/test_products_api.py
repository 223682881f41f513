from decimal import Decimal


def test_list_products_with_available_qty(client, products, cashier_headers):
    resp = client.get("/products", headers=cashier_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["totalCount"] == 3

    by_id = {p["id"]: p for p in body["data"]}
    assert Decimal(by_id[1]["availableQty"]) == Decimal("10")
    assert Decimal(by_id[2]["availableQty"]) == Decimal("5")
    assert Decimal(by_id[3]["availableQty"]) == Decimal("0")


def test_list_products_paginates(client, products, cashier_headers):
    resp = client.get("/products", params={"page": 2, "pageSize": 2}, headers=cashier_headers)

    body = resp.json()
    assert body["totalCount"] == 3
    assert [p["name"] for p in body["data"]] == ["Sugar 1kg"]


def test_search_products(client, products, cashier_headers):
    resp = client.get("/products", params={"search": "dairy"}, headers=cashier_headers)

    assert [p["name"] for p in resp.json()["data"]] == ["Milk 500ml"]

    by_barcode = client.get("/products", params={"search": "6003"}, headers=cashier_headers)
    assert [p["code"] for p in by_barcode.json()["data"]] == ["BRD4"]


def test_categories_are_trimmed_and_sorted(client, products, cashier_headers):
    resp = client.get("/products/categories", headers=cashier_headers)

    assert resp.json()["data"] == ["Bakery", "Dairy", "Groceries"]


def test_get_product(client, products, cashier_headers):
    resp = client.get("/products/1", headers=cashier_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["code"] == "SUG1"


def test_get_missing_product(client, products, cashier_headers):
    assert client.get("/products/42", headers=cashier_headers).status_code == 404


def test_page_size_is_bounded(client, cashier_headers):
    resp = client.get("/products", params={"pageSize": 10000}, headers=cashier_headers)

    assert resp.status_code == 400


def test_product_search_endpoint(client, products, cashier_headers):
    resp = client.get("/products/search", params={"query": "milk"}, headers=cashier_headers)

    assert resp.status_code == 200
    assert [p["code"] for p in resp.json()["data"]] == ["MLK5"]
    assert resp.json()["data"][0]["availableQty"] == 5.0


def test_product_search_requires_term(client, cashier_headers):
    assert client.get("/products/search", params={"query": " "}, headers=cashier_headers).status_code == 400
