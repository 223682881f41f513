import logging

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from pos_api.core.errors import NotFoundError
from pos_api.models.products import Product
from pos_api.models.stock import StockEntry
from pos_api.schemas.product import ProductResponse

logger = logging.getLogger("pos_api.products")

MAX_PAGE_SIZE = 500
SEARCH_LIMIT = 50


class CatalogService:
    def __init__(self, db: Session):
        self.db = db

    def _available_qty(self):
        return (
            select(
                StockEntry.product_id.label("product_id"),
                func.sum(StockEntry.quantity).label("qty"),
            )
            .group_by(StockEntry.product_id)
            .subquery()
        )

    def _to_response(self, product: Product, qty) -> ProductResponse:
        response = ProductResponse.model_validate(product)
        response.available_qty = qty if qty is not None else response.available_qty
        return response

    def list_products(self, page: int = 1, page_size: int = 100, search: str | None = None):
        """Return ``(products, total_count)`` for one page of the catalog."""
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

        filters = []
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            filters.append(
                or_(
                    Product.name.ilike(pattern),
                    Product.code.ilike(pattern),
                    Product.barcode.ilike(pattern),
                    Product.category.ilike(pattern),
                )
            )

        total = self.db.execute(
            select(func.count(Product.id)).where(*filters)
        ).scalar() or 0

        stock = self._available_qty()
        rows = self.db.execute(
            select(Product, func.coalesce(stock.c.qty, 0))
            .outerjoin(stock, stock.c.product_id == Product.id)
            .where(*filters)
            .order_by(Product.name.asc(), Product.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()

        logger.info(f"Products page {page} (size {page_size}, search '{term}'): {len(rows)} of {total}")

        return [self._to_response(product, qty) for product, qty in rows], int(total)

    def get_product(self, product_id: int) -> ProductResponse:
        stock = self._available_qty()
        row = self.db.execute(
            select(Product, func.coalesce(stock.c.qty, 0))
            .outerjoin(stock, stock.c.product_id == Product.id)
            .where(Product.id == product_id)
        ).first()

        if row is None:
            raise NotFoundError(f"Product {product_id} not found")

        return self._to_response(row[0], row[1])

    def categories(self) -> list[str]:
        names = self.db.execute(
            select(Product.category).where(Product.category.isnot(None)).distinct()
        ).scalars()

        return sorted({name.strip() for name in names if name and name.strip()})
