# pos_api/models/invoice_items.py

from sqlalchemy import CheckConstraint, Column, Integer, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from pos_api.database import Base


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)

    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    # no FK: an unknown product is reported by the stock ledger, not the schema
    product_id = Column(Integer, nullable=False, index=True)
    barcode = Column(String(100), nullable=True)

    quantity = Column(Numeric(18, 3), nullable=False)
    sales_rate = Column(Numeric(18, 2), nullable=False, default=0)
    purchase_rate = Column(Numeric(18, 2), nullable=False, default=0)
    discount_per = Column(Numeric(9, 4), nullable=False, default=0)
    discount = Column(Numeric(18, 2), nullable=False, default=0)
    vat_per = Column(Numeric(9, 4), nullable=False, default=0)
    vat = Column(Numeric(18, 2), nullable=False, default=0)
    total_amount = Column(Numeric(18, 2), nullable=False, default=0)
    margin = Column(Numeric(18, 2), nullable=False, default=0)

    invoice = relationship("Invoice", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(InvoiceItem.product_id) == Product.id",
        viewonly=True,
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
    )
