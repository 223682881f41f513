from datetime import date, datetime, timedelta
from decimal import Decimal

from conftest import add_invoice


def _seed(db):
    add_invoice(db, 1, "RCT-1", "200", items=[(1, "2", "200", "80", "20")], payments=[("CASH", "200")])
    add_invoice(db, 2, "RCT-2", "110", items=[(2, "2", "110", "40", "15")], payments=[("M-Pesa", "110")])
    add_invoice(db, 3, "RCT-3", "60", items=[(3, "1", "60", "45", "15")], payments=[("credit", "60")])


def test_dashboard_stats(client, products, cashier_headers, db_session):
    _seed(db_session)

    resp = client.get("/dashboard/stats", headers=cashier_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert Decimal(data["todaysSales"]) == Decimal("370")
    assert Decimal(data["cashSales"]) == Decimal("200")
    assert Decimal(data["mobileMoneySales"]) == Decimal("110")
    assert Decimal(data["creditSales"]) == Decimal("60")
    assert data["invoiceCount"] == 3
    assert data["productCount"] == 3
    assert data["lowStockCount"] == 2
    assert data["profitStrategy"] == "stock_average_cost"
    assert data["degraded"] == []


def test_dashboard_stats_for_range(client, products, cashier_headers, db_session):
    add_invoice(db_session, 1, "RCT-1", "100", when=datetime(2026, 1, 5, 12, 0))
    add_invoice(db_session, 2, "RCT-2", "40", when=datetime(2026, 1, 7, 9, 0))

    resp = client.get(
        "/dashboard/stats",
        params={"fromDate": "2026-01-05", "toDate": "2026-01-07"},
        headers=cashier_headers,
    )

    data = resp.json()["data"]
    assert Decimal(data["todaysSales"]) == Decimal("100")
    assert data["fromDate"] == "2026-01-05"
    assert data["toDate"] == "2026-01-07"


def test_dashboard_rejects_inverted_range(client, cashier_headers):
    resp = client.get(
        "/dashboard/stats",
        params={"fromDate": "2026-01-07", "toDate": "2026-01-05"},
        headers=cashier_headers,
    )

    assert resp.status_code == 400


def test_today_stats_and_summary(client, products, cashier_headers, db_session):
    _seed(db_session)

    today = client.get("/dashboard/stats/today", headers=cashier_headers).json()["data"]
    summary = client.get("/dashboard/today-summary", headers=cashier_headers).json()["data"]

    assert today["fromDate"] == date.today().isoformat()
    assert Decimal(summary["totalSales"]) == Decimal(today["todaysSales"])
    assert summary["transactions"] == 3


def test_sales_trends(client, products, cashier_headers, db_session):
    _seed(db_session)
    add_invoice(db_session, 4, "RCT-4", "90", when=datetime.now() - timedelta(days=3))

    resp = client.get("/dashboard/sales-trends", params={"days": 7}, headers=cashier_headers)

    data = resp.json()["data"]
    assert len(data) == 2
    assert data[-1]["date"] == date.today().isoformat()
    assert data[-1]["transactions"] == 3


def test_top_products(client, products, cashier_headers, db_session):
    _seed(db_session)

    resp = client.get("/dashboard/top-products", params={"limit": 1}, headers=cashier_headers)

    data = resp.json()["data"]
    assert len(data) == 1
    assert data[0]["productName"] == "Sugar 1kg"
    assert Decimal(data[0]["totalSales"]) == Decimal("200")


def test_low_stock_alerts(client, products, cashier_headers):
    resp = client.get("/dashboard/low-stock-alerts", headers=cashier_headers)

    data = resp.json()["data"]
    assert [(a["productCode"], a["stockStatus"]) for a in data] == [
        ("BRD4", "Out of Stock"),
        ("MLK5", "Low Stock"),
    ]


def test_dashboard_requires_login(client):
    assert client.get("/dashboard/stats").status_code == 401


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
