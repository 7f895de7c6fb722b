"""Per-product sales rollups for the business assistant.

Everything here is computed with two bulk reads (one grouped query over the
confirmed sales of the analysis range, one over the catalog) and folded into
immutable dataclasses. Rules never touch the database.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from functools import reduce

from django.db.models import Count, DecimalField, F, Q, Sum
from django.utils import timezone

from core.numbers import safe_div, to_float

logger = logging.getLogger(__name__)

NO_CATEGORY = "__no_category__"


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisWindow:
    now: datetime
    recent_days: int
    horizon_days: int | None
    recent_start: datetime
    previous_start: datetime
    range_start: datetime | None
    range_end: datetime
    start_date: date | None = None
    end_date: date | None = None

    @property
    def is_explicit_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def as_dict(self) -> dict:
        return {
            "horizonDays": self.horizon_days,
            "recentDays": self.recent_days,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }


def build_window(
    *,
    horizon_days: int,
    recent_days: int,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> AnalysisWindow:
    """Resolve the recent / previous windows and the analysis range.

    An explicit ``start_date``/``end_date`` replaces the horizon; the dates
    are whole local days.
    """
    now = now or timezone.now()
    recent_start = now - timedelta(days=recent_days)
    previous_start = now - timedelta(days=2 * recent_days)

    if start_date is not None or end_date is not None:
        range_start = (
            timezone.make_aware(datetime.combine(start_date, time.min)) if start_date else None
        )
        range_end = (
            timezone.make_aware(datetime.combine(end_date, time.max)) if end_date else now
        )
        return AnalysisWindow(
            now=now,
            recent_days=recent_days,
            horizon_days=None,
            recent_start=recent_start,
            previous_start=previous_start,
            range_start=range_start,
            range_end=range_end,
            start_date=start_date,
            end_date=end_date,
        )

    return AnalysisWindow(
        now=now,
        recent_days=recent_days,
        horizon_days=horizon_days,
        recent_start=recent_start,
        previous_start=previous_start,
        range_start=now - timedelta(days=horizon_days),
        range_end=now,
    )


# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowRollup:
    units: int = 0
    sales_count: int = 0
    revenue: float = 0.0
    profit: float = 0.0


EMPTY_ROLLUP = WindowRollup()


@dataclass(frozen=True)
class ProductAggregate:
    product_id: str
    product_name: str
    category_id: str | None
    purchase_price: float
    distributor_price: float | None
    suggested_price: float | None
    client_price: float | None
    warehouse_stock: int
    total_stock: int
    low_stock_alert: int
    total: WindowRollup = EMPTY_ROLLUP
    recent: WindowRollup = EMPTY_ROLLUP
    previous: WindowRollup = EMPTY_ROLLUP
    recent_weighted_price_sum: float = 0.0

    @property
    def category_key(self) -> str:
        return self.category_id or NO_CATEGORY

    @property
    def inventory_value(self) -> float:
        return max(self.warehouse_stock, 0) * self.purchase_price


@dataclass(frozen=True)
class CategoryBaseline:
    units: int = 0
    revenue: float = 0.0

    @property
    def avg_price(self) -> float:
        # 0 means "no signal": the price-vs-category rules stay silent.
        return safe_div(self.revenue, self.units)


def reduce_category_baselines(aggregates) -> dict[str, CategoryBaseline]:
    def _fold(acc: dict, aggregate: ProductAggregate) -> dict:
        current = acc.get(aggregate.category_key, CategoryBaseline())
        acc[aggregate.category_key] = CategoryBaseline(
            units=current.units + aggregate.recent.units,
            revenue=current.revenue + aggregate.recent.revenue,
        )
        return acc

    return reduce(_fold, aggregates, {})


# ---------------------------------------------------------------------------
# Bulk reads
# ---------------------------------------------------------------------------

def _optional_float(value) -> float | None:
    if value is None:
        return None
    return to_float(value)


def aggregate_from_product(product) -> ProductAggregate:
    return ProductAggregate(
        product_id=str(product.pk),
        product_name=product.name or "Producto",
        category_id=str(product.category_id) if product.category_id else None,
        purchase_price=to_float(product.purchase_price),
        distributor_price=_optional_float(product.distributor_price),
        suggested_price=_optional_float(product.suggested_price),
        client_price=_optional_float(product.client_price),
        warehouse_stock=int(product.warehouse_stock or 0),
        total_stock=int(product.total_stock or 0),
        low_stock_alert=int(product.low_stock_alert or 0),
    )


def _rollup(row: dict, prefix: str) -> WindowRollup:
    return WindowRollup(
        units=int(row.get(f"{prefix}_units") or 0),
        sales_count=int(row.get(f"{prefix}_sales") or 0),
        revenue=to_float(row.get(f"{prefix}_revenue")),
        profit=to_float(row.get(f"{prefix}_profit")),
    )


def fetch_sales_rollups(window: AnalysisWindow) -> dict[str, dict]:
    """One grouped query: per-product rollups for every window."""
    from sales.models import Sale

    money = DecimalField(max_digits=18, decimal_places=2)
    line_revenue = F("sale_price") * F("quantity")
    recent = Q(sale_date__gte=window.recent_start)
    previous = Q(sale_date__gte=window.previous_start, sale_date__lt=window.recent_start)

    qs = Sale.objects.filter(
        payment_status=Sale.PaymentStatus.CONFIRMED,
        sale_date__lte=window.range_end,
    )
    if window.range_start is not None:
        qs = qs.filter(sale_date__gte=window.range_start)

    rows = (
        qs.values("product_id")
        .annotate(
            total_units=Sum("quantity"),
            total_sales=Count("id"),
            total_revenue=Sum(line_revenue, output_field=money),
            total_profit=Sum("total_profit"),
            recent_units=Sum("quantity", filter=recent),
            recent_sales=Count("id", filter=recent),
            recent_revenue=Sum(line_revenue, filter=recent, output_field=money),
            recent_profit=Sum("total_profit", filter=recent),
            prev_units=Sum("quantity", filter=previous),
            prev_sales=Count("id", filter=previous),
            prev_revenue=Sum(line_revenue, filter=previous, output_field=money),
            prev_profit=Sum("total_profit", filter=previous),
        )
        .order_by()
    )
    return {str(row["product_id"]): row for row in rows}


def build_product_aggregates(window: AnalysisWindow) -> list[ProductAggregate]:
    """Union of the catalog with the products sold in the analysis range."""
    from catalog.models import Product

    rollups = fetch_sales_rollups(window)
    aggregates = []
    for product in Product.objects.select_related("category").order_by("name"):
        base = aggregate_from_product(product)
        row = rollups.get(base.product_id)
        if row is None:
            aggregates.append(base)
            continue
        recent = _rollup(row, "recent")
        aggregates.append(
            replace(
                base,
                total=_rollup(row, "total"),
                recent=recent,
                previous=_rollup(row, "prev"),
                # Weighted by units, so it equals the recent revenue.
                recent_weighted_price_sum=recent.revenue,
            )
        )

    logger.debug(
        "Built %d product aggregates (%d with sales) for range %s..%s",
        len(aggregates),
        len(rollups),
        window.range_start,
        window.range_end,
    )
    return aggregates


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProductMetrics:
    recent_days: int
    horizon_days: int | None
    recent_units: int
    prev_units: int
    units_growth_pct: float
    recent_revenue: float
    recent_profit: float
    recent_margin_pct: float
    avg_daily_units: float
    days_cover: float | None
    recent_avg_price: float
    category_avg_price: float
    price_vs_category_pct: float
    inventory_value: float

    @property
    def has_category_signal(self) -> bool:
        return self.category_avg_price > 0


def units_growth_pct(recent_units: int, prev_units: int) -> float:
    if prev_units > 0:
        return safe_div(recent_units - prev_units, prev_units) * 100
    return 100.0 if recent_units > 0 else 0.0


def compute_metrics(
    aggregate: ProductAggregate,
    window: AnalysisWindow,
    baselines: dict[str, CategoryBaseline],
) -> ProductMetrics:
    recent = aggregate.recent
    avg_daily_units = safe_div(recent.units, window.recent_days)
    days_cover = safe_div(aggregate.warehouse_stock, avg_daily_units) if avg_daily_units > 0 else None
    recent_avg_price = safe_div(aggregate.recent_weighted_price_sum, recent.units)
    category_avg = baselines.get(aggregate.category_key, CategoryBaseline()).avg_price
    price_vs_category = (
        safe_div(recent_avg_price - category_avg, category_avg) * 100 if category_avg > 0 else 0.0
    )
    return ProductMetrics(
        recent_days=window.recent_days,
        horizon_days=window.horizon_days,
        recent_units=recent.units,
        prev_units=aggregate.previous.units,
        units_growth_pct=units_growth_pct(recent.units, aggregate.previous.units),
        recent_revenue=recent.revenue,
        recent_profit=recent.profit,
        recent_margin_pct=safe_div(recent.profit, recent.revenue) * 100 if recent.revenue > 0 else 0.0,
        avg_daily_units=avg_daily_units,
        days_cover=days_cover,
        recent_avg_price=recent_avg_price,
        category_avg_price=category_avg,
        price_vs_category_pct=price_vs_category,
        inventory_value=aggregate.inventory_value,
    )
