# pos_api/models/products.py

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    barcode = Column(String(100), nullable=True, index=True)
    category = Column(String(100), nullable=True, index=True)

    purchase_cost = Column(Numeric(18, 2), nullable=True)
    sales_cost = Column(Numeric(18, 2), nullable=True)

    # products at or below this summed stock level are flagged low-stock
    reorder_point = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    stock_entries = relationship("StockEntry", back_populates="product")

    __table_args__ = (
        CheckConstraint("reorder_point >= 0", name="ck_products_reorder_point_non_negative"),
    )
