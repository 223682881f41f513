# =========================================================
# DASHBOARD ROUTER
#
# Figures for the back-office dashboard. Each figure is
# computed independently; a figure whose query fails comes
# back as zero and is listed under "degraded".
# =========================================================

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.core.config import settings
from pos_api.schemas.common import ApiResponse
from pos_api.schemas.dashboard import (
    DashboardStats,
    LowStockAlert,
    SalesTrendPoint,
    TodaySummary,
    TopProduct,
)
from pos_api.services.reporting_service import ReportingService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


# =========================================================
# STATS
# =========================================================
@router.get("/stats", response_model=ApiResponse[DashboardStats])
def get_dashboard_stats(
    from_date: date | None = Query(None, alias="fromDate"),
    to_date: date | None = Query(None, alias="toDate"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if from_date and to_date and from_date >= to_date:
        raise HTTPException(status_code=400, detail="fromDate must be before toDate")

    stats = ReportingService(db, settings).dashboard_stats(from_date, to_date)

    return ApiResponse[DashboardStats](message="Dashboard statistics retrieved", data=stats)


@router.get("/stats/today", response_model=ApiResponse[DashboardStats])
def get_today_stats(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return ApiResponse[DashboardStats](data=ReportingService(db, settings).dashboard_stats())


@router.get("/today-summary", response_model=ApiResponse[TodaySummary])
def get_today_summary(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return ApiResponse[TodaySummary](data=ReportingService(db, settings).today_summary())


# =========================================================
# TRENDS & PRODUCTS
# =========================================================
@router.get("/sales-trends", response_model=ApiResponse[List[SalesTrendPoint]])
def get_sales_trends(
    days: int = Query(30, ge=1, le=366),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    trends = ReportingService(db, settings).sales_trends(days)

    return ApiResponse[List[SalesTrendPoint]](data=trends, total_count=len(trends))


@router.get("/top-products", response_model=ApiResponse[List[TopProduct]])
def get_top_products(
    limit: int = Query(10, ge=1, le=100),
    from_date: date | None = Query(None, alias="fromDate"),
    to_date: date | None = Query(None, alias="toDate"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    products = ReportingService(db, settings).top_products(limit, from_date, to_date)

    return ApiResponse[List[TopProduct]](data=products, total_count=len(products))


@router.get("/low-stock-alerts", response_model=ApiResponse[List[LowStockAlert]])
def get_low_stock_alerts(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    alerts = ReportingService(db, settings).low_stock_alerts()

    return ApiResponse[List[LowStockAlert]](data=alerts, total_count=len(alerts))
