# =========================================================
# INVOICES ROUTER
#
# Read-only lookups for the till's history screens.
# =========================================================

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.common import ApiResponse
from pos_api.schemas.invoice import InvoiceDetail, InvoiceSummary, TodayInvoice, UnpaidInvoice
from pos_api.services.invoice_queries import InvoiceQueryService

router = APIRouter(prefix="/invoices", tags=["Invoices"])


# =========================================================
# LIST
# =========================================================
@router.get("", response_model=ApiResponse[List[InvoiceSummary]])
def list_invoices(
    from_date: date | None = Query(None, alias="fromDate"),
    to_date: date | None = Query(None, alias="toDate"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if from_date and to_date and from_date > to_date:
        raise HTTPException(status_code=400, detail="fromDate must be on or before toDate")

    invoices = InvoiceQueryService(db).list_invoices(from_date, to_date)

    return ApiResponse[List[InvoiceSummary]](
        message=f"Retrieved {len(invoices)} invoices",
        data=invoices,
        total_count=len(invoices),
    )


@router.get("/search", response_model=ApiResponse[List[InvoiceSummary]])
def search_invoices(
    q: str = Query(""),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search term is required")

    invoices = InvoiceQueryService(db).search(q)

    return ApiResponse[List[InvoiceSummary]](data=invoices, total_count=len(invoices))


@router.get("/recent", response_model=ApiResponse[List[InvoiceSummary]])
def recent_invoices(
    count: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    invoices = InvoiceQueryService(db).recent(count)

    return ApiResponse[List[InvoiceSummary]](data=invoices, total_count=len(invoices))


@router.get("/today", response_model=ApiResponse[List[TodayInvoice]])
def todays_invoices(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    invoices = InvoiceQueryService(db).today()

    return ApiResponse[List[TodayInvoice]](
        message="Today's invoices retrieved successfully",
        data=invoices,
        total_count=len(invoices),
    )


@router.get("/unpaid", response_model=ApiResponse[List[UnpaidInvoice]])
def unpaid_invoices(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    invoices = InvoiceQueryService(db).unpaid()

    return ApiResponse[List[UnpaidInvoice]](data=invoices, total_count=len(invoices))


# =========================================================
# DETAIL
# =========================================================
@router.get("/{invoice_id}", response_model=ApiResponse[InvoiceDetail])
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return ApiResponse[InvoiceDetail](data=InvoiceQueryService(db).get_detail(invoice_id))
