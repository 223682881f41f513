# =========================================================
# INVOICE WRITER
#
# Header, line items and payments for one sale. All writes
# are flushed into the caller's open transaction; nothing
# here commits.
# =========================================================

import logging
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.errors import (
    DuplicateInvoiceId,
    DuplicateInvoiceNo,
    LineItemWriteFailed,
    PaymentWriteFailed,
)
from pos_api.core.payment_modes import clean_payment_mode
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.schemas.sale import SalePaymentRequest, SaleProductRequest

logger = logging.getLogger("pos_api.invoices")


class InvoiceWriter:
    def __init__(self, db: Session, currency_code: str = "KES"):
        self.db = db
        self.currency_code = currency_code

    def ensure_unique(self, invoice_id: int, invoice_no: str):
        existing_id = self.db.execute(
            select(func.count()).select_from(Invoice).where(Invoice.id == invoice_id)
        ).scalar()

        if existing_id:
            logger.error(f"Invoice ID {invoice_id} already exists")
            raise DuplicateInvoiceId(invoice_id)

        existing_no = self.db.execute(
            select(func.count()).select_from(Invoice).where(Invoice.invoice_no == invoice_no)
        ).scalar()

        if existing_no:
            logger.error(f"Invoice number {invoice_no} already exists")
            raise DuplicateInvoiceNo(invoice_no)

    def insert_header(
        self,
        invoice_id: int,
        invoice_no: str,
        invoice_date: datetime,
        customer_name: str,
        salesman_name: str,
        grand_total: Decimal,
        total_discount: Decimal,
        amount_tendered: Decimal,
        change_amount: Decimal,
    ) -> int:
        invoice = Invoice(
            id=invoice_id,
            invoice_no=invoice_no,
            invoice_date=invoice_date,
            customer_name=customer_name or "",
            salesman_name=salesman_name or "",
            grand_total=grand_total,
            total_discount=total_discount,
            amount_tendered=amount_tendered,
            change_amount=change_amount,
            currency_code=self.currency_code,
        )

        self.db.add(invoice)
        self.db.flush()

        logger.info(f"Invoice header staged - id {invoice.id}, no {invoice_no}")
        return invoice.id

    def insert_line_items(self, invoice_id: int, items: Sequence[SaleProductRequest]) -> int:
        count = 0

        for item in items:
            barcode = (item.barcode or "").strip() or None

            try:
                self.db.add(
                    InvoiceItem(
                        invoice_id=invoice_id,
                        product_id=item.product_id,
                        barcode=barcode,
                        quantity=item.quantity,
                        sales_rate=item.sales_rate,
                        purchase_rate=item.purchase_rate,
                        discount_per=item.discount_per,
                        discount=item.discount,
                        vat_per=item.vat_per,
                        vat=item.vat,
                        total_amount=item.total_amount,
                        margin=item.margin,
                    )
                )
                self.db.flush()
            except SQLAlchemyError as exc:
                logger.error(f"Line item insert failed - invoice {invoice_id}, product {item.product_id}: {exc}")
                raise LineItemWriteFailed(invoice_id, item.product_id) from exc

            count += 1

        logger.info(f"{count} line item(s) staged for invoice {invoice_id}")
        return count

    def insert_payments(self, invoice_id: int, payments: Sequence[SalePaymentRequest]) -> int:
        if not payments:
            logger.info(f"No payments for invoice {invoice_id} (order mode)")
            return 0

        paid_at = datetime.now()

        try:
            for payment in payments:
                self.db.add(
                    InvoicePayment(
                        invoice_id=invoice_id,
                        payment_mode=clean_payment_mode(payment.payment_mode),
                        amount=payment.amount,
                        payment_date=paid_at,
                    )
                )
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Payment insert failed - invoice {invoice_id}: {exc}")
            raise PaymentWriteFailed(invoice_id) from exc

        logger.info(f"{len(payments)} payment(s) staged for invoice {invoice_id}")
        return len(payments)
