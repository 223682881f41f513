# =========================================================
# INVOICE NUMBER ALLOCATION
#
# Read-only helpers the till calls before building a sale.
# Allocation is not locked: two tills can be handed the same
# number, and the uniqueness check inside the sale
# transaction decides which one wins.
# =========================================================

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pos_api.models.invoices import Invoice
from pos_api.schemas.sale import NextInvoiceNumber

logger = logging.getLogger("pos_api.invoices")


def parse_invoice_sequence(invoice_no: str | None, prefix: str) -> int | None:
    """Numeric part of ``RCT-<n>``, or None for numbers that don't follow the pattern."""
    if not invoice_no or not invoice_no.startswith(prefix):
        return None

    suffix = invoice_no[len(prefix):]
    if not suffix.isdigit():
        return None

    return int(suffix)


class InvoiceNumberService:
    def __init__(self, db: Session, prefix: str = "RCT-"):
        self.db = db
        self.prefix = prefix

    def max_invoice_id(self) -> int:
        max_id = self.db.execute(
            select(func.coalesce(func.max(Invoice.id), 0))
        ).scalar()

        return int(max_id or 0)

    def max_invoice_sequence(self) -> int:
        """Highest ``RCT-<n>`` sequence.

        Numbers are issued without leading zeros, so ordering by length then
        text puts the largest first; non-numeric suffixes are skipped.
        """
        numbers = self.db.execute(
            select(Invoice.invoice_no)
            .where(Invoice.invoice_no.like(f"{self.prefix}%"))
            .order_by(func.length(Invoice.invoice_no).desc(), Invoice.invoice_no.desc())
            .execution_options(yield_per=100)
        ).scalars()

        for invoice_no in numbers:
            seq = parse_invoice_sequence(invoice_no, self.prefix)
            if seq is not None:
                return seq

        return 0

    def next_invoice_number(self) -> NextInvoiceNumber:
        next_id = self.max_invoice_id() + 1
        next_no = f"{self.prefix}{self.max_invoice_sequence() + 1}"

        logger.info(f"Next invoice allocated: id={next_id}, no={next_no}")

        return NextInvoiceNumber(invoice_id=next_id, invoice_no=next_no)
