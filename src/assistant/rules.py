"""Recommendation rules.

Each rule is a pure function ``(aggregate, metrics, config) -> list[Action]``.
They run in a fixed order and a product can trigger several of them; the
fallback only runs when nothing else fired.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from core.numbers import clamp, round2, safe_div

from assistant.aggregation import ProductAggregate, ProductMetrics
from assistant.config import AssistantSettings


class ActionKind(str, Enum):
    BUY_MORE_INVENTORY = "buy_more_inventory"
    PAUSE_PURCHASES = "pause_purchases"
    DECREASE_PRICE = "decrease_price"
    CLEARANCE = "clearance"
    RUN_PROMOTION = "run_promotion"
    INCREASE_PRICE = "increase_price"
    REVIEW_MARGIN = "review_margin"
    KEEP = "keep"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]

PRIORITY = {
    ActionKind.BUY_MORE_INVENTORY: 1,
    ActionKind.PAUSE_PURCHASES: 2,
    ActionKind.DECREASE_PRICE: 3,
    ActionKind.CLEARANCE: 3,
    ActionKind.RUN_PROMOTION: 4,
    ActionKind.INCREASE_PRICE: 5,
    ActionKind.REVIEW_MARGIN: 6,
    ActionKind.KEEP: 99,
}

# Negative margins always get at least this price increase.
NEGATIVE_MARGIN_MIN_INCREASE_PCT = 8.0
# Zero-sale products holding this many times the high-stock minimum get a clearance.
CLEARANCE_STOCK_FACTOR = 4


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    severity: Severity
    confidence: float
    title: str
    suggested_qty: int | None = None
    suggested_change_pct: float | None = None
    suggested_price: float | None = None
    details: dict = field(default_factory=dict)
    reasons: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp(float(self.confidence), 0.0, 1.0))

    @property
    def priority(self) -> int:
        return PRIORITY.get(self.kind, 50)

    def as_dict(self) -> dict:
        data = {
            "action": self.kind.value,
            "severity": self.severity.value,
            "title": self.title,
            "confidence": self.confidence,
        }
        if self.suggested_qty is not None:
            data["suggestedQty"] = self.suggested_qty
        if self.suggested_change_pct is not None:
            data["suggestedChangePct"] = self.suggested_change_pct
        if self.suggested_price is not None:
            data["suggestedPrice"] = self.suggested_price
        if self.details:
            data["details"] = dict(self.details)
        return data


# ---------------------------------------------------------------------------
# Ladders
# ---------------------------------------------------------------------------

def days_cover_severity(days_cover: float | None) -> Severity:
    if days_cover is None:
        return Severity.LOW
    if days_cover <= 3:
        return Severity.CRITICAL
    if days_cover <= 7:
        return Severity.HIGH
    if days_cover <= 14:
        return Severity.MEDIUM
    return Severity.LOW


def margin_severity(margin_pct: float, threshold_pct: float) -> Severity:
    if margin_pct < 0:
        return Severity.CRITICAL
    if margin_pct < threshold_pct / 2:
        return Severity.HIGH
    if margin_pct < threshold_pct:
        return Severity.MEDIUM
    return Severity.LOW


def stock_severity(warehouse_stock: int, config: AssistantSettings) -> Severity:
    if warehouse_stock >= 4 * config.high_stock_min_units:
        return Severity.HIGH
    if warehouse_stock >= 2 * config.high_stock_min_units:
        return Severity.MEDIUM
    return Severity.LOW


def escalate(severity: Severity) -> Severity:
    index = SEVERITY_ORDER.index(severity)
    return SEVERITY_ORDER[min(index + 1, len(SEVERITY_ORDER) - 1)]


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------

def current_price(aggregate: ProductAggregate, metrics: ProductMetrics) -> float | None:
    for candidate in (
        aggregate.client_price,
        aggregate.suggested_price,
        aggregate.distributor_price,
        metrics.recent_avg_price,
    ):
        if candidate is not None and candidate > 0:
            return candidate
    return None


def floor_price(aggregate: ProductAggregate, config: AssistantSettings) -> float:
    """Lowest price that still keeps ``min_margin_after_discount_pct``."""
    min_margin = clamp(config.min_margin_after_discount_pct, 0.0, 99.0)
    return safe_div(aggregate.purchase_price, 1 - min_margin / 100)


def suggested_price(
    aggregate: ProductAggregate,
    metrics: ProductMetrics,
    change_pct: float,
    config: AssistantSettings,
) -> tuple[float, bool, float | None]:
    """Return ``(price, floor_applied, current)`` for a price change."""
    current = current_price(aggregate, metrics)
    raw = (current or 0.0) * (1 + change_pct / 100)
    floor = floor_price(aggregate, config)
    floor_applied = raw < floor
    price = round2(max(raw, floor))
    if price < floor:
        # Rounding must never take the price under the floor.
        price = math.ceil(floor * 100) / 100
    return price, floor_applied, current


def price_action(
    kind: ActionKind,
    *,
    severity: Severity,
    confidence: float,
    title: str,
    change_pct: float,
    aggregate: ProductAggregate,
    metrics: ProductMetrics,
    config: AssistantSettings,
    reasons: tuple = (),
    details: dict | None = None,
) -> Action:
    price, floor_applied, current = suggested_price(aggregate, metrics, change_pct, config)
    payload = {
        "currentPrice": round2(current) if current is not None else None,
        "floorPrice": round2(floor_price(aggregate, config)),
        "price_floor_applied": floor_applied,
    }
    payload.update(details or {})
    return Action(
        kind=kind,
        severity=severity,
        confidence=confidence,
        title=title,
        suggested_change_pct=change_pct,
        suggested_price=price,
        details=payload,
        reasons=reasons,
    )


# ---------------------------------------------------------------------------
# Shared predicates
# ---------------------------------------------------------------------------

def _critical_shortage(aggregate: ProductAggregate, metrics: ProductMetrics, config: AssistantSettings) -> bool:
    if metrics.recent_units <= 0:
        return False
    if aggregate.warehouse_stock <= 0:
        return True
    limit = max(3.0, config.days_cover_low_threshold / 4)
    return metrics.days_cover is not None and metrics.days_cover <= limit


def _low_rotation(metrics: ProductMetrics, config: AssistantSettings) -> bool:
    return metrics.recent_units <= config.low_rotation_units_threshold


def _priced_above_category(metrics: ProductMetrics, config: AssistantSettings) -> bool:
    return metrics.has_category_signal and metrics.price_vs_category_pct > config.price_high_vs_category_threshold_pct


def _priced_below_category(metrics: ProductMetrics, config: AssistantSettings) -> bool:
    return metrics.has_category_signal and metrics.price_vs_category_pct < config.price_low_vs_category_threshold_pct


def _buy_qty(aggregate: ProductAggregate, metrics: ProductMetrics, config: AssistantSettings) -> int:
    target_stock = math.ceil(metrics.avg_daily_units * config.buy_target_days)
    return max(target_stock - aggregate.warehouse_stock, 0)


def _rotation_reasons(aggregate: ProductAggregate, metrics: ProductMetrics) -> tuple:
    reasons = [
        f"Alta rotación: {round2(metrics.avg_daily_units)} uds/día en últimos {metrics.recent_days} días."
    ]
    if metrics.days_cover is not None:
        reasons.append(
            f"Cobertura estimada: {round2(metrics.days_cover)} días con stock bodega actual "
            f"({aggregate.warehouse_stock})."
        )
    else:
        reasons.append(f"Sin stock en bodega ({aggregate.warehouse_stock}).")
    return tuple(reasons)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def critical_replenishment_rule(aggregate, metrics, config) -> list[Action]:
    if not _critical_shortage(aggregate, metrics, config):
        return []
    return [
        Action(
            kind=ActionKind.BUY_MORE_INVENTORY,
            severity=Severity.CRITICAL,
            confidence=0.92,
            title="Comprar más inventario (urgente)",
            suggested_qty=_buy_qty(aggregate, metrics, config),
            details={
                "targetDays": config.buy_target_days,
                "avgDailyUnits": round2(metrics.avg_daily_units),
                "daysCover": round2(metrics.days_cover) if metrics.days_cover is not None else None,
            },
            reasons=_rotation_reasons(aggregate, metrics),
        )
    ]


def low_cover_replenishment_rule(aggregate, metrics, config) -> list[Action]:
    if metrics.days_cover is None or _critical_shortage(aggregate, metrics, config):
        return []
    if metrics.days_cover >= config.days_cover_low_threshold:
        return []
    if aggregate.warehouse_stock > max(aggregate.low_stock_alert * 1.5, 5):
        return []

    severity = days_cover_severity(metrics.days_cover)
    if aggregate.warehouse_stock <= aggregate.low_stock_alert and severity != Severity.LOW:
        # Already under the alert level: one step more urgent.
        severity = escalate(severity)

    return [
        Action(
            kind=ActionKind.BUY_MORE_INVENTORY,
            severity=severity,
            confidence=0.85,
            title="Comprar más inventario",
            suggested_qty=_buy_qty(aggregate, metrics, config),
            details={
                "targetDays": config.buy_target_days,
                "avgDailyUnits": round2(metrics.avg_daily_units),
                "daysCover": round2(metrics.days_cover),
            },
            reasons=_rotation_reasons(aggregate, metrics),
        )
    ]


def low_rotation_high_stock_rule(aggregate, metrics, config) -> list[Action]:
    high_stock = (
        aggregate.warehouse_stock > aggregate.low_stock_alert * config.high_stock_multiplier
        and aggregate.warehouse_stock >= config.high_stock_min_units
    )
    if not (_low_rotation(metrics, config) and high_stock):
        return []

    actions = [
        Action(
            kind=ActionKind.PAUSE_PURCHASES,
            severity=stock_severity(aggregate.warehouse_stock, config),
            confidence=0.8,
            title="Pausar compras",
            details={"warehouseStock": aggregate.warehouse_stock},
            reasons=(
                f"Baja rotación: {metrics.recent_units} uds en últimos {metrics.recent_days} días "
                f"con stock alto ({aggregate.warehouse_stock}).",
            ),
        )
    ]

    if _priced_above_category(metrics, config):
        actions.append(price_action(
            ActionKind.DECREASE_PRICE,
            severity=Severity.MEDIUM,
            confidence=0.7,
            title="Bajar precio",
            change_pct=config.decrease_price_pct,
            aggregate=aggregate,
            metrics=metrics,
            config=config,
            reasons=(
                "Precio relativo alto vs productos similares (categoría): "
                f"+{round2(metrics.price_vs_category_pct)}%.",
            ),
        ))
    else:
        actions.append(price_action(
            ActionKind.RUN_PROMOTION,
            severity=Severity.MEDIUM,
            confidence=0.65,
            title="Hacer promoción",
            change_pct=config.promotion_discount_pct,
            aggregate=aggregate,
            metrics=metrics,
            config=config,
        ))

    if metrics.recent_units == 0 and aggregate.warehouse_stock >= CLEARANCE_STOCK_FACTOR * config.high_stock_min_units:
        actions.append(price_action(
            ActionKind.CLEARANCE,
            severity=Severity.HIGH,
            confidence=0.6,
            title="Liquidar inventario",
            change_pct=2 * config.promotion_discount_pct,
            aggregate=aggregate,
            metrics=metrics,
            config=config,
            reasons=(
                f"Sin ventas recientes y stock muy alto ({aggregate.warehouse_stock} uds).",
            ),
        ))
    return actions


def negative_trend_rule(aggregate, metrics, config) -> list[Action]:
    if _low_rotation(metrics, config):
        return []
    if metrics.units_growth_pct >= config.trend_drop_threshold_pct:
        return []
    if aggregate.warehouse_stock <= aggregate.low_stock_alert:
        return []

    reasons = (
        f"Tendencia a la baja: {round2(metrics.units_growth_pct)}% vs periodo anterior "
        f"({metrics.recent_days} días).",
    )
    if _priced_above_category(metrics, config):
        return [price_action(
            ActionKind.DECREASE_PRICE,
            severity=Severity.HIGH,
            confidence=0.7,
            title="Bajar precio",
            change_pct=config.decrease_price_pct,
            aggregate=aggregate,
            metrics=metrics,
            config=config,
            reasons=reasons + (
                "Precio relativo alto vs categoría: "
                f"+{round2(metrics.price_vs_category_pct)}%.",
            ),
        )]
    return [price_action(
        ActionKind.RUN_PROMOTION,
        severity=Severity.MEDIUM,
        confidence=0.7,
        title="Activar promoción",
        change_pct=config.promotion_discount_pct,
        aggregate=aggregate,
        metrics=metrics,
        config=config,
        reasons=reasons,
    )]


def margin_repair_rule(aggregate, metrics, config) -> list[Action]:
    if metrics.recent_units <= 0 or metrics.recent_margin_pct >= config.margin_low_threshold_pct:
        return []

    target_margin = clamp(config.target_margin_pct, 0.0, 99.0)
    actions = [
        Action(
            kind=ActionKind.REVIEW_MARGIN,
            severity=margin_severity(metrics.recent_margin_pct, config.margin_low_threshold_pct),
            confidence=0.65,
            title="Revisar margen (precio/costo)",
            details={
                "recentMarginPct": round2(metrics.recent_margin_pct),
                "targetMarginPct": config.target_margin_pct,
                "targetPrice": round2(safe_div(aggregate.purchase_price, 1 - target_margin / 100)),
            },
            reasons=(
                f"Margen reciente bajo: {metrics.recent_margin_pct:.1f}% en últimos "
                f"{metrics.recent_days} días.",
            ),
        )
    ]

    if metrics.recent_margin_pct < 0:
        actions.append(price_action(
            ActionKind.INCREASE_PRICE,
            severity=Severity.HIGH,
            confidence=0.7,
            title="Subir precio",
            change_pct=max(config.increase_price_pct, NEGATIVE_MARGIN_MIN_INCREASE_PCT),
            aggregate=aggregate,
            metrics=metrics,
            config=config,
            reasons=("Margen negativo: se vende por debajo del costo.",),
        ))
    elif _priced_below_category(metrics, config):
        actions.append(price_action(
            ActionKind.INCREASE_PRICE,
            severity=Severity.MEDIUM,
            confidence=0.6,
            title="Subir precio",
            change_pct=config.increase_price_pct,
            aggregate=aggregate,
            metrics=metrics,
            config=config,
        ))
    return actions


def growth_underpriced_rule(aggregate, metrics, config) -> list[Action]:
    if metrics.recent_units < config.min_units_for_growth_strategy:
        return []
    if metrics.units_growth_pct < config.trend_growth_threshold_pct:
        return []
    if not _priced_below_category(metrics, config):
        return []
    return [price_action(
        ActionKind.INCREASE_PRICE,
        severity=Severity.LOW,
        confidence=0.6,
        title="Subir precio (prueba controlada)",
        change_pct=config.increase_price_pct,
        aggregate=aggregate,
        metrics=metrics,
        config=config,
        reasons=(
            f"Demanda creciente: +{round2(metrics.units_growth_pct)}% vs periodo anterior.",
            f"Precio relativo bajo vs categoría: {round2(metrics.price_vs_category_pct)}%.",
        ),
    )]


def fallback_rule(aggregate, metrics, config) -> list[Action]:
    if metrics.recent_units > 0:
        return [Action(
            kind=ActionKind.KEEP,
            severity=Severity.LOW,
            confidence=0.7,
            title="Mantener estrategia",
        )]

    reasons = (f"Sin ventas confirmadas en la ventana analizada ({metrics.recent_days} días).",)
    if aggregate.warehouse_stock > aggregate.low_stock_alert:
        return [
            price_action(
                ActionKind.RUN_PROMOTION,
                severity=Severity.LOW,
                confidence=0.55,
                title="Probar promoción",
                change_pct=config.promotion_discount_pct,
                aggregate=aggregate,
                metrics=metrics,
                config=config,
                reasons=reasons,
            ),
            Action(
                kind=ActionKind.PAUSE_PURCHASES,
                severity=Severity.LOW,
                confidence=0.55,
                title="Pausar compras hasta validar demanda",
            ),
        ]
    return [Action(
        kind=ActionKind.KEEP,
        severity=Severity.LOW,
        confidence=0.5,
        title="Mantener (esperar más datos)",
        reasons=reasons,
    )]


RULES = (
    critical_replenishment_rule,
    low_cover_replenishment_rule,
    low_rotation_high_stock_rule,
    negative_trend_rule,
    margin_repair_rule,
    growth_underpriced_rule,
)


def evaluate_rules(
    aggregate: ProductAggregate,
    metrics: ProductMetrics,
    config: AssistantSettings,
) -> list[Action]:
    actions: list[Action] = []
    for rule in RULES:
        actions.extend(rule(aggregate, metrics, config))
    if not actions:
        actions = fallback_rule(aggregate, metrics, config)
    return actions


def pick_primary_action(actions: list[Action]) -> Action | None:
    if not actions:
        return None
    # sorted() is stable: equal priority and confidence keep rule order.
    return sorted(actions, key=lambda a: (a.priority, -a.confidence))[0]


def justification_for(actions: list[Action]) -> list[str]:
    seen = []
    for action in actions:
        for reason in action.reasons:
            if reason not in seen:
                seen.append(reason)
    return seen


def impact_score(metrics: ProductMetrics) -> float:
    return round2(metrics.recent_revenue + metrics.recent_profit + 0.2 * metrics.inventory_value)
