from decimal import Decimal
from datetime import datetime

from pos_api.schemas.common import Amount, CamelModel


class ProductResponse(CamelModel):
    id: int
    code: str | None
    name: str
    barcode: str | None
    category: str | None
    purchase_cost: Amount | None
    sales_cost: Amount | None
    reorder_point: int
    available_qty: Amount = Decimal("0")
    created_at: datetime | None = None
