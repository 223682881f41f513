# schemas/invoice.py

from datetime import datetime
from typing import List

from pydantic import AliasChoices, Field

from pos_api.schemas.common import Amount, CamelModel


class InvoiceSummary(CamelModel):
    invoice_id: int = Field(
        validation_alias=AliasChoices("id", "invoiceId", "invoice_id"),
        serialization_alias="invoiceId",
    )
    invoice_no: str
    invoice_date: datetime
    customer_name: str
    salesman_name: str
    grand_total: Amount
    total_discount: Amount
    amount_tendered: Amount
    change_amount: Amount


class InvoiceItemOut(CamelModel):
    id: int
    product_id: int
    product_name: str | None = None
    product_code: str | None = None
    barcode: str | None
    quantity: Amount
    sales_rate: Amount
    purchase_rate: Amount
    discount: Amount
    vat: Amount
    total_amount: Amount
    margin: Amount


class InvoicePaymentOut(CamelModel):
    id: int
    payment_mode: str
    category: str
    amount: Amount
    reference: str | None
    payment_date: datetime


class InvoiceDetail(CamelModel):
    invoice: InvoiceSummary
    items: List[InvoiceItemOut]
    payments: List[InvoicePaymentOut]
    paid_amount: Amount


class UnpaidInvoice(InvoiceSummary):
    paid_amount: Amount
    outstanding: Amount
    payment_status: str
    payment_modes: str


class TodayInvoice(InvoiceSummary):
    total_cash: Amount
    total_mobile_money: Amount
    total_credit: Amount
