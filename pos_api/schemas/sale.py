# schemas/sale.py

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import Field

from pos_api.schemas.common import Amount, CamelModel


class SaleProductRequest(CamelModel):
    product_id: int
    product_code: str = ""
    barcode: str | None = ""
    quantity: Decimal = Field(..., gt=0, description="Quantity sold, fractional units allowed")
    sales_rate: Decimal = Decimal("0")
    purchase_rate: Decimal = Decimal("0")
    discount_per: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    vat_per: Decimal = Decimal("0")
    vat: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    margin: Decimal = Decimal("0")


class SalePaymentRequest(CamelModel):
    payment_mode: str | None = ""
    amount: Decimal = Decimal("0")


class SaveSaleRequest(CamelModel):
    inv_id: int = 0
    invoice_no: str = ""
    invoice_date: str | None = ""
    user_id: str = ""
    salesman_name: str = ""
    customer_name: str = ""
    grand_total: Decimal = Decimal("0")
    total_discount: Decimal = Decimal("0")
    amount_tendered: Decimal = Decimal("0")
    change_amount: Decimal = Decimal("0")
    products: List[SaleProductRequest] = []
    payments: List[SalePaymentRequest] = []


class SaleResult(CamelModel):
    invoice_id: int
    invoice_no: str
    grand_total: Amount
    products_count: int
    payments_count: int
    timestamp: datetime


class NextInvoiceNumber(CamelModel):
    invoice_id: int
    invoice_no: str


class DailyStats(CamelModel):
    date: str
    total_invoices: int = 0
    total_sales: Amount = Decimal("0")
    total_discount: Amount = Decimal("0")
    average_sale: Amount = Decimal("0")
    min_sale: Amount = Decimal("0")
    max_sale: Amount = Decimal("0")
