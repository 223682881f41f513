# schemas/dashboard.py

from datetime import date
from decimal import Decimal
from typing import List

from pos_api.schemas.common import Amount, CamelModel


class DashboardStats(CamelModel):
    from_date: date
    to_date: date
    todays_sales: Amount = Decimal("0")
    cash_sales: Amount = Decimal("0")
    mobile_money_sales: Amount = Decimal("0")
    credit_sales: Amount = Decimal("0")
    total_discount: Amount = Decimal("0")
    total_returns: Amount = Decimal("0")
    total_profit: Amount = Decimal("0")
    profit_strategy: str = "none"
    product_count: int = 0
    invoice_count: int = 0
    low_stock_count: int = 0
    net_sales: Amount = Decimal("0")

    # names of sub-aggregates that failed and were reported as zero
    degraded: List[str] = []


class TodaySummary(CamelModel):
    total_sales: Amount
    cash_sales: Amount
    mobile_money_sales: Amount
    credit_sales: Amount
    total_profit: Amount
    transactions: int
    total_discount: Amount
    total_returns: Amount
    net_sales: Amount


class SalesTrendPoint(CamelModel):
    date: date
    sales: Amount
    transactions: int
    discount: Amount


class TopProduct(CamelModel):
    product_id: int
    product_name: str
    product_code: str
    category: str
    total_quantity: Amount
    total_sales: Amount
    times_sold: int


class LowStockAlert(CamelModel):
    product_id: int
    product_name: str
    product_code: str
    category: str
    reorder_point: int
    current_stock: Amount
    stock_status: str
