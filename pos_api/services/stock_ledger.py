# =========================================================
# STOCK LEDGER
#
# Per-product-batch available quantity. The sale transaction
# is the only caller allowed to deduct; it passes its own
# session so the locking read, the guarded update and the
# rest of the invoice share one transaction.
# =========================================================

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from pos_api.core.errors import InsufficientStock, StockRecordMissing, UpdateFailed
from pos_api.models.stock import StockEntry

logger = logging.getLogger("pos_api.stock")


def batch_key(barcode: str | None) -> str:
    return (barcode or "").strip()


class StockLedger:
    def __init__(self, db: Session):
        self.db = db

    def _stock_row(self, product_id: int, key: str, for_update: bool = False):
        stmt = select(StockEntry).where(
            StockEntry.product_id == product_id,
            StockEntry.barcode == key,
        )

        if for_update:
            # a locked read must see the committed row, not the identity-map copy
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        return self.db.execute(stmt).scalar_one_or_none()

    def check_available(self, product_id: int, barcode: str | None) -> Decimal:
        key = batch_key(barcode)
        entry = self._stock_row(product_id, key)

        if entry is None:
            raise StockRecordMissing(product_id, key)

        return Decimal(entry.quantity)

    def deduct(self, product_id: int, barcode: str | None, quantity: Decimal) -> Decimal:
        """
        Remove ``quantity`` from one batch and return what is left.

        The row is re-read with a locking read so a concurrent sale on the
        same batch waits for this transaction; the UPDATE keeps its own
        ``quantity >= requested`` guard so the ledger can never go negative
        even where the backend ignores FOR UPDATE.
        """
        key = batch_key(barcode)
        requested = Decimal(quantity)

        entry = self._stock_row(product_id, key, for_update=True)

        if entry is None:
            logger.error(f"No stock record for product {product_id}, batch '{key}'")
            raise StockRecordMissing(product_id, key)

        available = Decimal(entry.quantity)

        if available < requested:
            logger.warning(
                f"Insufficient stock for product {product_id}, batch '{key}': "
                f"available {available}, needed {requested}"
            )
            raise InsufficientStock(product_id, key, available, requested)

        result = self.db.execute(
            update(StockEntry)
            .where(
                StockEntry.product_id == product_id,
                StockEntry.barcode == key,
                StockEntry.quantity >= requested,
            )
            .values(quantity=StockEntry.quantity - requested)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            logger.error(f"Stock update touched no rows for product {product_id}, batch '{key}'")
            raise UpdateFailed(product_id, key)

        # keep the identity-map copy in step with the row we just changed
        self.db.expire(entry, ["quantity"])

        remaining = available - requested
        logger.info(f"Stock deducted - product {product_id}, batch '{key}', qty -{requested}, left {remaining}")

        return remaining
