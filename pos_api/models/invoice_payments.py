# pos_api/models/invoice_payments.py

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship

from pos_api.database import Base


class InvoicePayment(Base):
    __tablename__ = "invoice_payments"

    id = Column(Integer, primary_key=True, index=True)

    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)

    payment_mode = Column(String(50), nullable=False, default="Cash")
    amount = Column(Numeric(18, 2), nullable=False)
    reference = Column(String(100), nullable=True)
    payment_date = Column(DateTime, nullable=False)

    invoice = relationship("Invoice", back_populates="payments")
