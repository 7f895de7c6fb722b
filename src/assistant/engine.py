"""Business assistant: turns sales history into per-product recommendations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from django.utils import timezone

from core.numbers import round2

from assistant.aggregation import (
    build_product_aggregates,
    build_window,
    compute_metrics,
    reduce_category_baselines,
)
from assistant.config import AssistantSettings
from assistant.rules import evaluate_rules, impact_score, justification_for, pick_primary_action

logger = logging.getLogger(__name__)

MARKET_PRICE_NOTE = (
    "El 'precio de mercado' se estima comparando con el precio promedio reciente "
    "de productos de la misma categoría (no incluye fuentes externas)."
)


@dataclass(frozen=True)
class RecommendationParams:
    """Request parameters; ``None`` means "use the configured default"."""

    horizon_days: int | None = None
    recent_days: int | None = None
    start_date: date | None = None
    end_date: date | None = None

    def resolve(self, config: AssistantSettings) -> "RecommendationParams":
        return RecommendationParams(
            horizon_days=self.horizon_days or config.horizon_days_default,
            recent_days=self.recent_days or config.recent_days_default,
            start_date=self.start_date,
            end_date=self.end_date,
        )

    def as_dict(self) -> dict:
        return {
            "horizonDays": self.horizon_days,
            "recentDays": self.recent_days,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecommendationParams":
        def _date(value):
            return date.fromisoformat(value) if value else None

        return cls(
            horizon_days=data.get("horizonDays"),
            recent_days=data.get("recentDays"),
            start_date=_date(data.get("startDate")),
            end_date=_date(data.get("endDate")),
        )


def _recommendation_for(aggregate, metrics, config) -> dict:
    actions = evaluate_rules(aggregate, metrics, config)
    primary = pick_primary_action(actions)
    return {
        "productId": aggregate.product_id,
        "productName": aggregate.product_name,
        "categoryId": aggregate.category_id,
        "stock": {
            "warehouseStock": aggregate.warehouse_stock,
            "totalStock": aggregate.total_stock,
            "lowStockAlert": aggregate.low_stock_alert,
        },
        "metrics": {
            "recentDays": metrics.recent_days,
            "horizonDays": metrics.horizon_days,
            "recentUnits": metrics.recent_units,
            "prevUnits": metrics.prev_units,
            "unitsGrowthPct": round2(metrics.units_growth_pct),
            "recentRevenue": round2(metrics.recent_revenue),
            "recentProfit": round2(metrics.recent_profit),
            "recentMarginPct": round2(metrics.recent_margin_pct),
            "avgDailyUnits": round2(metrics.avg_daily_units),
            "daysCover": round2(metrics.days_cover) if metrics.days_cover is not None else None,
            "recentAvgPrice": round2(metrics.recent_avg_price),
            "categoryAvgPrice": round2(metrics.category_avg_price),
            "priceVsCategoryPct": round2(metrics.price_vs_category_pct),
            "inventoryValue": round2(metrics.inventory_value),
        },
        "recommendation": {
            "primary": primary.as_dict() if primary else None,
            "actions": [action.as_dict() for action in actions],
            "justification": justification_for(actions),
            "impactScore": impact_score(metrics),
            "notes": MARKET_PRICE_NOTE,
        },
    }


def generate_recommendations(
    params: RecommendationParams,
    config: AssistantSettings,
    *,
    now=None,
    on_progress=None,
) -> dict:
    """Build the full recommendation payload.

    ``on_progress`` (optional) is called with an integer percentage while
    products are evaluated.
    """
    params = params.resolve(config)
    window = build_window(
        horizon_days=params.horizon_days,
        recent_days=params.recent_days,
        start_date=params.start_date,
        end_date=params.end_date,
        now=now,
    )

    aggregates = build_product_aggregates(window)
    baselines = reduce_category_baselines(aggregates)
    if on_progress:
        on_progress(30)

    recommendations = []
    total = len(aggregates) or 1
    for index, aggregate in enumerate(aggregates, start=1):
        metrics = compute_metrics(aggregate, window, baselines)
        recommendations.append(_recommendation_for(aggregate, metrics, config))
        if on_progress and index % 50 == 0:
            on_progress(30 + int(65 * index / total))

    # Stable sort: equal confidences keep catalog order.
    recommendations.sort(
        key=lambda r: (r["recommendation"]["primary"] or {}).get("confidence", 0),
        reverse=True,
    )

    logger.info(
        "Generated %d recommendations (horizon=%s recent=%s config=%s)",
        len(recommendations),
        window.horizon_days,
        window.recent_days,
        config.version,
    )
    return {
        "generatedAt": timezone.now().isoformat(),
        "window": window.as_dict(),
        "configVersion": config.version,
        "recommendations": recommendations,
    }
