# pos_api/models/invoices.py

from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    # allocated by the till through /sale/next-number, never generated here
    id = Column(Integer, primary_key=True, autoincrement=False)
    invoice_no = Column(String(50), nullable=False, unique=True, index=True)

    invoice_date = Column(DateTime, nullable=False, index=True)

    customer_name = Column(String(200), nullable=False, default="")
    salesman_name = Column(String(200), nullable=False, default="")

    grand_total = Column(Numeric(18, 2), nullable=False, default=0)
    total_discount = Column(Numeric(18, 2), nullable=False, default=0)
    amount_tendered = Column(Numeric(18, 2), nullable=False, default=0)
    change_amount = Column(Numeric(18, 2), nullable=False, default=0)

    currency_code = Column(String(3), nullable=False, default="KES")

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
    )

    payments = relationship(
        "InvoicePayment",
        back_populates="invoice",
        cascade="all, delete-orphan",
    )
