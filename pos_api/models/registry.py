# Importing every model module registers its table on Base.metadata
# (used by create_all in main.py, alembic/env.py and the tests).

from pos_api.models.products import Product
from pos_api.models.stock import StockEntry
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.models.sales_returns import SalesReturn
from pos_api.models.users import User, UserRight

__all__ = [
    "Product",
    "StockEntry",
    "Invoice",
    "InvoiceItem",
    "InvoicePayment",
    "SalesReturn",
    "User",
    "UserRight",
]
