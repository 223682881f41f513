# =========================================================
# SALE TRANSACTION
#
# VALIDATING -> CHECKING_UNIQUENESS -> WRITING_HEADER
#   -> WRITING_ITEMS -> DEDUCTING_STOCK -> WRITING_PAYMENTS
#   -> COMMITTED
#
# Any failure after VALIDATING rolls the whole transaction
# back (ROLLED_BACK) and re-raises the original error, so a
# failed save never leaves a header, item, payment or stock
# movement behind.
# =========================================================

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.config import Settings
from pos_api.core.errors import (
    EmptyCart,
    InvalidInvoiceId,
    InvalidInvoiceNumber,
    PosError,
    SaleConflictError,
    SaleWriteError,
)
from pos_api.schemas.sale import SaleResult, SaveSaleRequest
from pos_api.services.invoice_writer import InvoiceWriter
from pos_api.services.stock_ledger import StockLedger

logger = logging.getLogger("pos_api.sales")

INVOICE_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
)


class SaleState(str, Enum):
    VALIDATING = "validating"
    CHECKING_UNIQUENESS = "checking_uniqueness"
    WRITING_HEADER = "writing_header"
    WRITING_ITEMS = "writing_items"
    DEDUCTING_STOCK = "deducting_stock"
    WRITING_PAYMENTS = "writing_payments"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


def parse_invoice_date(value: str | None) -> datetime | None:
    """Best-effort parse of the till's invoice date; None when it can't be read."""
    if not value or not value.strip():
        return None

    text = value.strip()

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in INVOICE_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None

    # invoice dates are stored as shop-local wall time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)

    return parsed


class SaleService:
    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.prefix = config.INVOICE_PREFIX
        self.tolerance = config.PAYMENT_RECONCILIATION_TOLERANCE
        self.writer = InvoiceWriter(db, currency_code=config.CURRENCY_CODE)
        self.ledger = StockLedger(db)
        self.state = SaleState.VALIDATING

    def _enter(self, state: SaleState, invoice_no: str):
        self.state = state
        logger.info(f"[{invoice_no}] {state.value}")

    # ---------------- PRECONDITIONS ----------------
    def validate(self, request: SaveSaleRequest):
        if request.inv_id <= 0:
            logger.warning(f"Rejected sale: invalid invoice id {request.inv_id}")
            raise InvalidInvoiceId(request.inv_id)

        if not request.products:
            logger.warning(f"Rejected sale {request.invoice_no}: no products")
            raise EmptyCart()

        invoice_no = (request.invoice_no or "").strip()
        if not invoice_no or not invoice_no.startswith(self.prefix):
            logger.warning(f"Rejected sale: invalid invoice number '{request.invoice_no}'")
            raise InvalidInvoiceNumber(request.invoice_no, self.prefix)

    def _check_payments(self, request: SaveSaleRequest):
        if not request.payments:
            return

        paid = sum((p.amount for p in request.payments), Decimal("0"))
        expected = request.grand_total - request.total_discount

        if abs(paid - expected) > self.tolerance:
            logger.warning(
                f"[{request.invoice_no}] payments {paid} do not match "
                f"total {request.grand_total} less discount {request.total_discount}"
            )

    def _rollback(self, invoice_no: str):
        try:
            self.db.rollback()
            logger.info(f"[{invoice_no}] transaction rolled back")
        except SQLAlchemyError as exc:
            logger.error(f"[{invoice_no}] rollback failed: {exc}")
        self.state = SaleState.ROLLED_BACK

    # ---------------- TRANSACTION ----------------
    def save(self, request: SaveSaleRequest) -> SaleResult:
        self.state = SaleState.VALIDATING
        self.validate(request)

        invoice_no = request.invoice_no.strip()
        invoice_id = request.inv_id

        logger.info(
            f"Saving sale {invoice_no} (id {invoice_id}): "
            f"{len(request.products)} product(s), {len(request.payments)} payment(s), "
            f"total {request.grand_total}"
        )

        try:
            self._enter(SaleState.CHECKING_UNIQUENESS, invoice_no)
            self.writer.ensure_unique(invoice_id, invoice_no)

            invoice_date = parse_invoice_date(request.invoice_date)
            if invoice_date is None:
                if request.invoice_date:
                    logger.warning(f"[{invoice_no}] unreadable invoice date '{request.invoice_date}', using now")
                invoice_date = datetime.now()

            self._enter(SaleState.WRITING_HEADER, invoice_no)
            invoice_id = self.writer.insert_header(
                invoice_id=invoice_id,
                invoice_no=invoice_no,
                invoice_date=invoice_date,
                customer_name=request.customer_name,
                salesman_name=request.salesman_name,
                grand_total=request.grand_total,
                total_discount=request.total_discount,
                amount_tendered=request.amount_tendered,
                change_amount=request.change_amount,
            )

            self._enter(SaleState.WRITING_ITEMS, invoice_no)
            products_count = self.writer.insert_line_items(invoice_id, request.products)

            self._enter(SaleState.DEDUCTING_STOCK, invoice_no)
            for item in request.products:
                self.ledger.deduct(item.product_id, item.barcode, item.quantity)

            self._enter(SaleState.WRITING_PAYMENTS, invoice_no)
            payments_count = self.writer.insert_payments(invoice_id, request.payments)

            self._check_payments(request)

            self.db.commit()

        except PosError:
            self._rollback(invoice_no)
            raise

        except IntegrityError as exc:
            # a concurrent sale committed the same number after our check
            self._rollback(invoice_no)
            logger.error(f"[{invoice_no}] integrity error: {exc}")
            raise SaleConflictError(
                f"Invoice {invoice_no} conflicts with a sale saved at the same time. "
                "Please generate a new invoice number."
            ) from exc

        except SQLAlchemyError as exc:
            self._rollback(invoice_no)
            logger.error(f"[{invoice_no}] database error while saving sale: {exc}")
            raise SaleWriteError("Unable to complete sale") from exc

        except Exception:
            self._rollback(invoice_no)
            logger.exception(f"[{invoice_no}] unexpected error while saving sale")
            raise

        self._enter(SaleState.COMMITTED, invoice_no)
        logger.info(f"Sale completed - id {invoice_id}, no {invoice_no}, total {request.grand_total}")

        return SaleResult(
            invoice_id=invoice_id,
            invoice_no=invoice_no,
            grand_total=request.grand_total,
            products_count=products_count,
            payments_count=payments_count,
            timestamp=datetime.now(),
        )
