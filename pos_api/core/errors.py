"""
Typed errors raised by the POS services.

Every error carries a class-level ``code`` (machine readable, safe to return
to clients) and an HTTP ``status_code`` used by the exception handlers in
``pos_api.main``. Messages are written for cashiers, not for developers:
they never contain driver output or stack traces.

    PosError
    |
    +-- SaleValidationError (400)   rejected before any write
    |   +-- InvalidInvoiceId
    |   +-- EmptyCart
    |   +-- InvalidInvoiceNumber
    |
    +-- SaleConflictError (400)     business rule broken inside the transaction
    |   +-- DuplicateInvoiceId
    |   +-- DuplicateInvoiceNo
    |   +-- StockRecordMissing
    |   +-- InsufficientStock
    |
    +-- SaleWriteError (500)        the store refused a write
    |   +-- UpdateFailed
    |   +-- LineItemWriteFailed
    |   +-- PaymentWriteFailed
    |
    +-- NotFoundError (404)
    +-- AuthenticationError (401)
"""

from decimal import Decimal


class PosError(Exception):
    code = "POS_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------- VALIDATION ----------------
class SaleValidationError(PosError):
    code = "SALE_VALIDATION_FAILED"
    status_code = 400


class InvalidInvoiceId(SaleValidationError):
    code = "INVALID_INVOICE_ID"

    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__(f"Invalid Invoice ID: {invoice_id}. Must be greater than 0.")


class EmptyCart(SaleValidationError):
    code = "EMPTY_CART"

    def __init__(self):
        super().__init__("No products in sale")


class InvalidInvoiceNumber(SaleValidationError):
    code = "INVALID_INVOICE_NUMBER"

    def __init__(self, invoice_no: str, prefix: str):
        self.invoice_no = invoice_no
        self.prefix = prefix
        super().__init__(
            f"Invalid invoice number format: '{invoice_no}'. Expected '{prefix}<number>'."
        )


# ---------------- BUSINESS CONFLICTS ----------------
class SaleConflictError(PosError):
    code = "SALE_CONFLICT"
    status_code = 400


class DuplicateInvoiceId(SaleConflictError):
    code = "DUPLICATE_INVOICE_ID"

    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__(
            f"Invoice ID {invoice_id} already exists. Please generate a new invoice number."
        )


class DuplicateInvoiceNo(SaleConflictError):
    code = "DUPLICATE_INVOICE_NO"

    def __init__(self, invoice_no: str):
        self.invoice_no = invoice_no
        super().__init__(
            f"Invoice number {invoice_no} already exists. Please generate a new invoice number."
        )


class StockRecordMissing(SaleConflictError):
    code = "STOCK_RECORD_MISSING"

    def __init__(self, product_id: int, batch_key: str):
        self.product_id = product_id
        self.batch_key = batch_key
        super().__init__(
            f"Product '{product_id}' (batch '{batch_key}') not found in stock. Cannot complete sale."
        )


class InsufficientStock(SaleConflictError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, batch_key: str, available: Decimal, requested: Decimal):
        self.product_id = product_id
        self.batch_key = batch_key
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product '{product_id}'. "
            f"Available: {available}, Needed: {requested}"
        )


# ---------------- WRITE FAILURES ----------------
class SaleWriteError(PosError):
    code = "SALE_WRITE_FAILED"
    status_code = 500


class UpdateFailed(SaleWriteError):
    code = "STOCK_UPDATE_FAILED"

    def __init__(self, product_id: int, batch_key: str):
        self.product_id = product_id
        self.batch_key = batch_key
        super().__init__(f"Failed to update stock for product '{product_id}'")


class LineItemWriteFailed(SaleWriteError):
    code = "LINE_ITEM_WRITE_FAILED"

    def __init__(self, invoice_id: int, product_id: int | None = None):
        self.invoice_id = invoice_id
        self.product_id = product_id
        super().__init__(f"Unable to save sale items for invoice {invoice_id}")


class PaymentWriteFailed(SaleWriteError):
    code = "PAYMENT_WRITE_FAILED"

    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__(f"Unable to save payments for invoice {invoice_id}")


# ---------------- LOOKUPS / AUTH ----------------
class NotFoundError(PosError):
    code = "NOT_FOUND"
    status_code = 404


class AuthenticationError(PosError):
    code = "AUTHENTICATION_FAILED"
    status_code = 401
