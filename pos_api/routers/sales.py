# =========================================================
# SALES ROUTER
#
# /sale/save is the only write path for invoices and stock
# movements. The till first asks /sale/next-number for an
# id + number, builds the cart, then posts it here.
# The save is all-or-nothing: a non-2xx response means no
# header, item, payment or stock change was persisted.
# =========================================================

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user, require_right
from pos_api.core.config import settings
from pos_api.core.rate_limiter import limiter
from pos_api.schemas.common import ApiResponse
from pos_api.schemas.sale import DailyStats, NextInvoiceNumber, SaleResult, SaveSaleRequest
from pos_api.services.invoice_numbers import InvoiceNumberService
from pos_api.services.reporting_service import ReportingService
from pos_api.services.sale_service import SaleService

router = APIRouter(prefix="/sale", tags=["Sales"])


# =========================================================
# SAVE SALE
# =========================================================
@router.post("/save", response_model=ApiResponse[SaleResult])
@limiter.limit(settings.SALE_RATE_LIMIT)
def save_sale(
    request: Request,
    sale_data: SaveSaleRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_right("Sales", "save")),
):
    result = SaleService(db, settings).save(sale_data)

    return ApiResponse[SaleResult](
        success=True,
        message="Sale saved successfully",
        data=result,
    )


# =========================================================
# INVOICE NUMBERING
# =========================================================
@router.get("/max-id", response_model=ApiResponse[int])
def get_max_invoice_id(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    max_id = InvoiceNumberService(db, settings.INVOICE_PREFIX).max_invoice_id()

    return ApiResponse[int](data=max_id)


@router.get("/next-number", response_model=ApiResponse[NextInvoiceNumber])
def get_next_invoice_number(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    next_number = InvoiceNumberService(db, settings.INVOICE_PREFIX).next_invoice_number()

    return ApiResponse[NextInvoiceNumber](data=next_number)


# =========================================================
# DAILY STATS
# =========================================================
@router.get("/stats/daily", response_model=ApiResponse[DailyStats])
def get_daily_stats(
    day: date | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    stats = ReportingService(db, settings).daily_stats(day or date.today())

    return ApiResponse[DailyStats](data=stats)
