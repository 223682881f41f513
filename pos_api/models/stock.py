# pos_api/models/stock.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from pos_api.database import Base


class StockEntry(Base):
    """Available quantity for one product batch (barcode)."""

    __tablename__ = "stock_entries"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    # blank barcodes are stored as "" so (product_id, barcode) stays a usable key
    barcode = Column(String(100), nullable=False, default="")

    quantity = Column(Numeric(18, 3), nullable=False, default=0)
    purchase_rate = Column(Numeric(18, 2), nullable=True)
    sales_rate = Column(Numeric(18, 2), nullable=True)

    product = relationship("Product", back_populates="stock_entries")

    __table_args__ = (
        UniqueConstraint("product_id", "barcode", name="uq_stock_product_barcode"),
        CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
    )
