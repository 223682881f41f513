# pos_api/models/sales_returns.py

from sqlalchemy import Column, Integer, ForeignKey, Numeric, DateTime

from pos_api.database import Base


class SalesReturn(Base):
    # written by the back-office returns workflow; only read here for reporting
    __tablename__ = "sales_returns"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    return_date = Column(DateTime, nullable=False, index=True)
    grand_total = Column(Numeric(18, 2), nullable=False, default=0)
