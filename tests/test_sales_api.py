from datetime import date
from decimal import Decimal

from conftest import add_invoice, sale_payload
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.models.stock import StockEntry


def _rows(db):
    db.expire_all()
    return (
        db.query(Invoice).count(),
        db.query(InvoiceItem).count(),
        db.query(InvoicePayment).count(),
    )


def _sugar_stock(db):
    db.expire_all()
    return Decimal(db.query(StockEntry).filter_by(product_id=1, barcode="6001").one().quantity)


# =========================================================
# SAVE SALE
# =========================================================
def test_happy_path_sale(client, products, cashier_headers, db_session):
    resp = client.post("/sale/save", json=sale_payload(), headers=cashier_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["invoiceId"] == 501
    assert body["data"]["invoiceNo"] == "RCT-501"
    assert body["data"]["grandTotal"] == 200.0
    assert isinstance(body["data"]["grandTotal"], float)
    assert body["data"]["productsCount"] == 1
    assert body["data"]["paymentsCount"] == 1

    assert _rows(db_session) == (1, 1, 1)
    assert _sugar_stock(db_session) == Decimal("8")


def test_insufficient_stock_sale(client, products, cashier_headers, db_session):
    resp = client.post("/sale/save", json=sale_payload(quantity="50"), headers=cashier_headers)

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "INSUFFICIENT_STOCK"
    assert "Insufficient stock" in body["message"]

    assert _rows(db_session) == (0, 0, 0)
    assert _sugar_stock(db_session) == Decimal("10")


def test_duplicate_invoice_number_sale(client, products, cashier_headers, db_session):
    assert client.post("/sale/save", json=sale_payload(), headers=cashier_headers).status_code == 200

    resp = client.post(
        "/sale/save",
        json=sale_payload(inv_id=502, invoice_no="RCT-501"),
        headers=cashier_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "DUPLICATE_INVOICE_NO"
    assert "already exists" in resp.json()["message"]
    assert _rows(db_session) == (1, 1, 1)
    assert _sugar_stock(db_session) == Decimal("8")


def test_unknown_product_is_a_stock_conflict(client, products, cashier_headers, db_session, enforce_foreign_keys):
    payload = sale_payload()
    payload["products"][0]["productId"] = 999

    resp = client.post("/sale/save", json=payload, headers=cashier_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "STOCK_RECORD_MISSING"
    assert _rows(db_session) == (0, 0, 0)
    assert _sugar_stock(db_session) == Decimal("10")


def test_sale_with_foreign_keys_enforced(client, products, cashier_headers, db_session, enforce_foreign_keys):
    resp = client.post("/sale/save", json=sale_payload(), headers=cashier_headers)

    assert resp.status_code == 200
    assert _rows(db_session) == (1, 1, 1)


def test_invalid_invoice_number_is_rejected(client, products, cashier_headers):
    resp = client.post("/sale/save", json=sale_payload(invoice_no="INV-1"), headers=cashier_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_INVOICE_NUMBER"


def test_non_positive_quantity_is_a_validation_error(client, products, cashier_headers, db_session):
    resp = client.post("/sale/save", json=sale_payload(quantity="0"), headers=cashier_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert _rows(db_session) == (0, 0, 0)


def test_sale_requires_save_right(client, products, viewer_headers, db_session):
    resp = client.post("/sale/save", json=sale_payload(), headers=viewer_headers)

    assert resp.status_code == 403
    assert _rows(db_session) == (0, 0, 0)


def test_sale_requires_login(client, products):
    assert client.post("/sale/save", json=sale_payload()).status_code == 401


# =========================================================
# INVOICE NUMBERING
# =========================================================
def test_max_id_and_next_number(client, products, cashier_headers):
    assert client.get("/sale/max-id", headers=cashier_headers).json()["data"] == 0

    client.post("/sale/save", json=sale_payload(), headers=cashier_headers)

    assert client.get("/sale/max-id", headers=cashier_headers).json()["data"] == 501

    first = client.get("/sale/next-number", headers=cashier_headers).json()["data"]
    second = client.get("/sale/next-number", headers=cashier_headers).json()["data"]

    assert first == {"invoiceId": 502, "invoiceNo": "RCT-502"}
    assert first == second


# =========================================================
# DAILY STATS
# =========================================================
def test_daily_stats(client, products, cashier_headers, db_session):
    add_invoice(db_session, 1, "RCT-1", "100")
    add_invoice(db_session, 2, "RCT-2", "300", discount="20")

    resp = client.get("/sale/stats/daily", params={"date": date.today().isoformat()}, headers=cashier_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["totalInvoices"] == 2
    assert Decimal(data["totalSales"]) == Decimal("400")
    assert Decimal(data["totalDiscount"]) == Decimal("20")
    assert Decimal(data["averageSale"]) == Decimal("200")


def test_daily_stats_bad_date(client, cashier_headers):
    resp = client.get("/sale/stats/daily", params={"date": "17-10-2026x"}, headers=cashier_headers)

    assert resp.status_code == 400
