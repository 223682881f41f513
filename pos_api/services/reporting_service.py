# =========================================================
# DASHBOARD REPORTING
#
# Read-only aggregates over invoices, payments, stock and
# returns for a [from, to) window. Each dashboard figure is
# computed on its own: a failing query is logged, the
# session is reset and the figure is reported as zero so
# the rest of the dashboard still renders.
# =========================================================

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable

from sqlalchemy import Date, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.config import Settings
from pos_api.core.payment_modes import PaymentBreakdown, normalize_payment_mode
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.models.products import Product
from pos_api.models.sales_returns import SalesReturn
from pos_api.models.stock import StockEntry
from pos_api.schemas.dashboard import (
    DashboardStats,
    LowStockAlert,
    SalesTrendPoint,
    TodaySummary,
    TopProduct,
)
from pos_api.schemas.sale import DailyStats

logger = logging.getLogger("pos_api.reports")

MONEY = Decimal("0.01")


def _dec(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _money(value) -> Decimal:
    return _dec(value).quantize(MONEY)


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


class ReportingService:
    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.fallback_margin = config.PROFIT_FALLBACK_MARGIN
        self.tolerance = config.PAYMENT_RECONCILIATION_TOLERANCE

    # =========================================================
    # FAILURE ISOLATION
    # =========================================================
    def _isolated(self, name: str, compute: Callable, fallback, degraded: list[str]):
        try:
            return compute()
        except SQLAlchemyError as exc:
            logger.warning(f"Dashboard figure '{name}' failed, reporting {fallback}: {exc}")
            self.db.rollback()
            degraded.append(name)
            return fallback

    def _in_range(self, start: datetime, end: datetime):
        return [Invoice.invoice_date >= start, Invoice.invoice_date < end]

    # =========================================================
    # SUB-AGGREGATES
    # =========================================================
    def _sales_summary(self, start: datetime, end: datetime):
        row = self.db.execute(
            select(
                func.coalesce(func.sum(Invoice.grand_total), 0),
                func.count(Invoice.id),
                func.coalesce(func.sum(Invoice.total_discount), 0),
            ).where(*self._in_range(start, end))
        ).one()

        return _money(row[0]), int(row[1] or 0), _money(row[2])

    def _payment_breakdown(self, start: datetime, end: datetime) -> PaymentBreakdown:
        clean_mode = func.lower(func.trim(InvoicePayment.payment_mode))

        rows = self.db.execute(
            select(
                clean_mode.label("mode"),
                func.coalesce(func.sum(InvoicePayment.amount), 0).label("amount"),
                func.count(InvoicePayment.id).label("records"),
            )
            .join(Invoice, InvoicePayment.invoice_id == Invoice.id)
            .where(*self._in_range(start, end))
            .group_by(clean_mode)
        ).all()

        breakdown = PaymentBreakdown()
        for row in rows:
            category = normalize_payment_mode(row.mode)
            breakdown.add(category, _dec(row.amount))
            logger.debug(f"Payment mode '{row.mode}' -> {category.value}: {row.amount} ({row.records} records)")

        return breakdown

    def _returns_total(self, start: datetime, end: datetime) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(SalesReturn.grand_total), 0)).where(
                SalesReturn.return_date >= start,
                SalesReturn.return_date < end,
            )
        ).scalar()

        return _money(total)

    def _product_count(self) -> int:
        return int(self.db.execute(select(func.count(Product.id))).scalar() or 0)

    def _stock_levels(self):
        return (
            select(
                StockEntry.product_id.label("product_id"),
                func.sum(StockEntry.quantity).label("qty"),
            )
            .group_by(StockEntry.product_id)
            .subquery()
        )

    def _low_stock_query(self):
        stock = self._stock_levels()
        current = func.coalesce(stock.c.qty, 0)

        return (
            select(
                Product.id,
                Product.name,
                Product.code,
                Product.category,
                Product.reorder_point,
                current.label("current_stock"),
            )
            .outerjoin(stock, stock.c.product_id == Product.id)
            .where(Product.reorder_point > 0, current <= Product.reorder_point)
        )

    def _low_stock_count(self) -> int:
        subq = self._low_stock_query().subquery()
        return int(self.db.execute(select(func.count()).select_from(subq)).scalar() or 0)

    # =========================================================
    # PROFIT STRATEGIES
    #
    # Tried in order; each returns a figure or None when its
    # cost basis is not available for the window. A strategy
    # whose query fails counts as not applicable.
    # =========================================================
    def _profit_stock_average_cost(self, start: datetime, end: datetime, sales: Decimal):
        avg_cost = (
            select(
                StockEntry.product_id.label("product_id"),
                func.avg(StockEntry.purchase_rate).label("cost"),
            )
            .where(StockEntry.purchase_rate.isnot(None), StockEntry.purchase_rate > 0)
            .group_by(StockEntry.product_id)
            .subquery()
        )

        row = self.db.execute(
            select(
                func.count(avg_cost.c.cost),
                func.coalesce(
                    func.sum(
                        InvoiceItem.total_amount
                        - InvoiceItem.quantity * func.coalesce(avg_cost.c.cost, 0)
                    ),
                    0,
                ),
            )
            .select_from(InvoiceItem)
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .outerjoin(avg_cost, avg_cost.c.product_id == InvoiceItem.product_id)
            .where(*self._in_range(start, end))
        ).one()

        if not row[0]:
            return None
        return _money(row[1])

    def _profit_line_purchase_rate(self, start: datetime, end: datetime, sales: Decimal):
        row = self.db.execute(
            select(
                func.count(InvoiceItem.id).filter(InvoiceItem.purchase_rate > 0),
                func.coalesce(
                    func.sum(InvoiceItem.total_amount - InvoiceItem.quantity * InvoiceItem.purchase_rate),
                    0,
                ),
            )
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .where(*self._in_range(start, end))
        ).one()

        if not row[0]:
            return None
        return _money(row[1])

    def _profit_line_margin(self, start: datetime, end: datetime, sales: Decimal):
        row = self.db.execute(
            select(
                func.count(InvoiceItem.id).filter(InvoiceItem.margin != 0),
                func.coalesce(func.sum(InvoiceItem.margin * InvoiceItem.quantity), 0),
            )
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .where(*self._in_range(start, end))
        ).one()

        if not row[0]:
            return None
        return _money(row[1])

    def _profit_estimated_margin(self, start: datetime, end: datetime, sales: Decimal):
        if not sales:
            return None
        return _money(sales * self.fallback_margin)

    PROFIT_STRATEGIES = (
        ("stock_average_cost", _profit_stock_average_cost),
        ("line_purchase_rate", _profit_line_purchase_rate),
        ("line_margin", _profit_line_margin),
        ("estimated_margin", _profit_estimated_margin),
    )

    def calculate_profit(self, start: datetime, end: datetime, sales: Decimal) -> tuple[str, Decimal]:
        for name, strategy in self.PROFIT_STRATEGIES:
            try:
                value = strategy(self, start, end, sales)
            except SQLAlchemyError as exc:
                logger.warning(f"Profit strategy '{name}' failed: {exc}")
                self.db.rollback()
                continue

            if value is not None:
                logger.info(f"Profit {value} via '{name}'")
                return name, value

        return "none", Decimal("0.00")

    # =========================================================
    # DASHBOARD
    # =========================================================
    def dashboard_stats(self, from_date: date | None = None, to_date: date | None = None) -> DashboardStats:
        from_date = from_date or date.today()
        to_date = to_date or from_date + timedelta(days=1)

        start = datetime.combine(from_date, datetime.min.time())
        end = datetime.combine(to_date, datetime.min.time())

        logger.info(f"Dashboard stats {from_date} -> {to_date}")

        degraded: list[str] = []
        zero = Decimal("0.00")

        total_sales, invoice_count, total_discount = self._isolated(
            "sales", lambda: self._sales_summary(start, end), (zero, 0, zero), degraded
        )

        payments = self._isolated(
            "payments", lambda: self._payment_breakdown(start, end), PaymentBreakdown(), degraded
        )

        expected = total_sales - total_discount
        if "payments" not in degraded and payments.total and abs(payments.total - expected) > self.tolerance:
            logger.warning(f"Payment breakdown {payments.total} does not match sales {expected}")

        total_returns = self._isolated(
            "returns", lambda: self._returns_total(start, end), zero, degraded
        )

        profit_strategy, total_profit = self.calculate_profit(start, end, total_sales)

        product_count = self._isolated("products", self._product_count, 0, degraded)
        low_stock_count = self._isolated("low_stock", self._low_stock_count, 0, degraded)

        stats = DashboardStats(
            from_date=from_date,
            to_date=to_date,
            todays_sales=total_sales,
            cash_sales=_money(payments.cash),
            mobile_money_sales=_money(payments.mobile_money),
            credit_sales=_money(payments.credit),
            total_discount=total_discount,
            total_returns=total_returns,
            total_profit=total_profit,
            profit_strategy=profit_strategy,
            product_count=product_count,
            invoice_count=invoice_count,
            low_stock_count=low_stock_count,
            net_sales=total_sales - total_returns - total_discount,
            degraded=degraded,
        )

        logger.info(
            f"Dashboard: sales {stats.todays_sales}, cash {stats.cash_sales}, "
            f"mobile {stats.mobile_money_sales}, credit {stats.credit_sales}, "
            f"profit {stats.total_profit}, invoices {stats.invoice_count}, low stock {stats.low_stock_count}"
        )

        return stats

    def today_summary(self) -> TodaySummary:
        stats = self.dashboard_stats(date.today())

        return TodaySummary(
            total_sales=stats.todays_sales,
            cash_sales=stats.cash_sales,
            mobile_money_sales=stats.mobile_money_sales,
            credit_sales=stats.credit_sales,
            total_profit=stats.total_profit,
            transactions=stats.invoice_count,
            total_discount=stats.total_discount,
            total_returns=stats.total_returns,
            net_sales=stats.net_sales,
        )

    # =========================================================
    # DAILY / TRENDS / PRODUCTS
    # =========================================================
    def daily_stats(self, day: date) -> DailyStats:
        start, end = _day_bounds(day)

        row = self.db.execute(
            select(
                func.count(Invoice.id),
                func.coalesce(func.sum(Invoice.grand_total), 0),
                func.coalesce(func.sum(Invoice.total_discount), 0),
                func.coalesce(func.avg(Invoice.grand_total), 0),
                func.coalesce(func.min(Invoice.grand_total), 0),
                func.coalesce(func.max(Invoice.grand_total), 0),
            ).where(*self._in_range(start, end))
        ).one()

        return DailyStats(
            date=day.isoformat(),
            total_invoices=int(row[0] or 0),
            total_sales=_money(row[1]),
            total_discount=_money(row[2]),
            average_sale=_money(row[3]),
            min_sale=_money(row[4]),
            max_sale=_money(row[5]),
        )

    def sales_trends(self, days: int = 30) -> list[SalesTrendPoint]:
        since = datetime.combine(date.today() - timedelta(days=days), datetime.min.time())
        sale_day = func.date(Invoice.invoice_date, type_=Date)

        rows = self.db.execute(
            select(
                sale_day.label("sale_date"),
                func.coalesce(func.sum(Invoice.grand_total), 0).label("sales"),
                func.count(Invoice.id).label("transactions"),
                func.coalesce(func.sum(Invoice.total_discount), 0).label("discount"),
            )
            .where(Invoice.invoice_date >= since)
            .group_by(sale_day)
            .order_by(sale_day.asc())
        ).all()

        logger.info(f"Sales trends: {len(rows)} day(s) over the last {days}")

        return [
            SalesTrendPoint(
                date=row.sale_date,
                sales=_money(row.sales),
                transactions=int(row.transactions),
                discount=_money(row.discount),
            )
            for row in rows
        ]

    def top_products(self, limit: int = 10, from_date: date | None = None, to_date: date | None = None) -> list[TopProduct]:
        to_date = to_date or date.today()
        from_date = from_date or to_date - timedelta(days=30)

        start = datetime.combine(from_date, datetime.min.time())
        end = datetime.combine(to_date, datetime.min.time()) + timedelta(days=1)

        total_sales = func.coalesce(func.sum(InvoiceItem.total_amount), 0)

        rows = self.db.execute(
            select(
                Product.id.label("product_id"),
                Product.name,
                Product.code,
                Product.category,
                func.coalesce(func.sum(InvoiceItem.quantity), 0).label("total_quantity"),
                total_sales.label("total_sales"),
                func.count(func.distinct(InvoiceItem.invoice_id)).label("times_sold"),
            )
            .join(InvoiceItem, InvoiceItem.product_id == Product.id)
            .join(Invoice, InvoiceItem.invoice_id == Invoice.id)
            .where(*self._in_range(start, end))
            .group_by(Product.id, Product.name, Product.code, Product.category)
            .order_by(total_sales.desc())
            .limit(limit)
        ).all()

        return [
            TopProduct(
                product_id=row.product_id,
                product_name=row.name or "Unknown",
                product_code=row.code or "N/A",
                category=row.category or "Uncategorized",
                total_quantity=_dec(row.total_quantity),
                total_sales=_money(row.total_sales),
                times_sold=int(row.times_sold),
            )
            for row in rows
        ]

    def low_stock_alerts(self) -> list[LowStockAlert]:
        query = self._low_stock_query()
        rows = self.db.execute(query.order_by(query.selected_columns.current_stock.asc())).all()

        alerts = []
        for row in rows:
            current = _dec(row.current_stock)
            alerts.append(
                LowStockAlert(
                    product_id=row.id,
                    product_name=row.name or "Unknown",
                    product_code=row.code or "N/A",
                    category=row.category or "Uncategorized",
                    reorder_point=row.reorder_point or 0,
                    current_stock=current,
                    stock_status="Out of Stock" if current <= 0 else "Low Stock",
                )
            )

        logger.info(f"{len(alerts)} low stock alert(s)")
        return alerts
