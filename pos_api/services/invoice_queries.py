# =========================================================
# INVOICE LOOKUPS
#
# Read-only views over saved invoices. Invoices are
# immutable once committed, so nothing here writes.
# =========================================================

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from pos_api.core.errors import NotFoundError
from pos_api.core.payment_modes import categorize_payments, normalize_payment_mode
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.schemas.invoice import (
    InvoiceDetail,
    InvoiceItemOut,
    InvoicePaymentOut,
    InvoiceSummary,
    TodayInvoice,
    UnpaidInvoice,
)

logger = logging.getLogger("pos_api.invoices")

LIST_LIMIT = 1000


class InvoiceQueryService:
    def __init__(self, db: Session):
        self.db = db

    def list_invoices(self, from_date: date | None = None, to_date: date | None = None) -> list[InvoiceSummary]:
        stmt = select(Invoice)

        if from_date:
            stmt = stmt.where(Invoice.invoice_date >= datetime.combine(from_date, datetime.min.time()))
        if to_date:
            # inclusive of the whole end day
            end = datetime.combine(to_date, datetime.min.time()) + timedelta(days=1)
            stmt = stmt.where(Invoice.invoice_date < end)

        invoices = self.db.execute(stmt.order_by(Invoice.id.desc()).limit(LIST_LIMIT)).scalars().all()

        logger.info(f"Invoice list {from_date} -> {to_date}: {len(invoices)} row(s)")
        return [InvoiceSummary.model_validate(inv) for inv in invoices]

    def search(self, term: str, limit: int = 100) -> list[InvoiceSummary]:
        pattern = f"%{term.strip()}%"

        invoices = self.db.execute(
            select(Invoice)
            .where(
                or_(
                    Invoice.invoice_no.ilike(pattern),
                    Invoice.customer_name.ilike(pattern),
                    Invoice.salesman_name.ilike(pattern),
                )
            )
            .order_by(Invoice.id.desc())
            .limit(limit)
        ).scalars().all()

        return [InvoiceSummary.model_validate(inv) for inv in invoices]

    def recent(self, count: int = 10) -> list[InvoiceSummary]:
        invoices = self.db.execute(
            select(Invoice).order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).limit(count)
        ).scalars().all()

        return [InvoiceSummary.model_validate(inv) for inv in invoices]

    def today(self) -> list[TodayInvoice]:
        """Today's invoices, newest first, each with its payments split by category."""
        start = datetime.combine(date.today(), datetime.min.time())

        invoices = self.db.execute(
            select(Invoice)
            .options(selectinload(Invoice.payments))
            .where(Invoice.invoice_date >= start, Invoice.invoice_date < start + timedelta(days=1))
            .order_by(Invoice.invoice_date.desc(), Invoice.id.desc())
        ).scalars().all()

        result = []
        for invoice in invoices:
            breakdown = categorize_payments((p.payment_mode, p.amount) for p in invoice.payments)
            summary = InvoiceSummary.model_validate(invoice)

            result.append(
                TodayInvoice(
                    **summary.model_dump(),
                    total_cash=breakdown.cash,
                    total_mobile_money=breakdown.mobile_money,
                    total_credit=breakdown.credit,
                )
            )

        logger.info(f"{len(result)} invoice(s) today")
        return result

    def unpaid(self) -> list[UnpaidInvoice]:
        paid = (
            select(
                InvoicePayment.invoice_id.label("invoice_id"),
                func.sum(InvoicePayment.amount).label("paid"),
            )
            .group_by(InvoicePayment.invoice_id)
            .subquery()
        )
        paid_amount = func.coalesce(paid.c.paid, 0)

        rows = self.db.execute(
            select(Invoice, paid_amount)
            .outerjoin(paid, paid.c.invoice_id == Invoice.id)
            .where(Invoice.grand_total > paid_amount)
            .order_by(Invoice.invoice_date.desc(), Invoice.id.desc())
        ).all()

        modes = defaultdict(list)
        if rows:
            payment_rows = self.db.execute(
                select(InvoicePayment.invoice_id, InvoicePayment.payment_mode)
                .where(InvoicePayment.invoice_id.in_([inv.id for inv, _ in rows]))
                .order_by(InvoicePayment.id)
            ).all()
            for invoice_id, mode in payment_rows:
                if mode not in modes[invoice_id]:
                    modes[invoice_id].append(mode)

        result = []
        for invoice, paid_value in rows:
            paid_value = Decimal(str(paid_value or 0))
            summary = InvoiceSummary.model_validate(invoice)

            result.append(
                UnpaidInvoice(
                    **summary.model_dump(),
                    paid_amount=paid_value,
                    outstanding=Decimal(invoice.grand_total) - paid_value,
                    payment_status="Not Paid" if paid_value == 0 else "Partially Paid",
                    payment_modes=", ".join(modes[invoice.id]),
                )
            )

        logger.info(f"{len(result)} unpaid invoice(s)")
        return result

    def get_detail(self, invoice_id: int) -> InvoiceDetail:
        invoice = self.db.execute(
            select(Invoice)
            .options(
                selectinload(Invoice.items).selectinload(InvoiceItem.product),
                selectinload(Invoice.payments),
            )
            .where(Invoice.id == invoice_id)
        ).scalar_one_or_none()

        if invoice is None:
            raise NotFoundError(f"Invoice {invoice_id} not found")

        items = []
        for item in invoice.items:
            out = InvoiceItemOut.model_validate(item)
            if item.product is not None:
                out.product_name = item.product.name
                out.product_code = item.product.code
            items.append(out)

        payments = [
            InvoicePaymentOut(
                id=p.id,
                payment_mode=p.payment_mode,
                category=normalize_payment_mode(p.payment_mode).value,
                amount=p.amount,
                reference=p.reference,
                payment_date=p.payment_date,
            )
            for p in invoice.payments
        ]

        return InvoiceDetail(
            invoice=InvoiceSummary.model_validate(invoice),
            items=items,
            payments=payments,
            paid_amount=sum((p.amount for p in payments), Decimal("0")),
        )
