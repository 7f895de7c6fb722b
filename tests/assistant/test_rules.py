from dataclasses import replace
from datetime import datetime

import pytest
from django.utils import timezone

from assistant.aggregation import (
    CategoryBaseline,
    ProductAggregate,
    WindowRollup,
    build_window,
    compute_metrics,
)
from assistant.config import AssistantSettings
from assistant.rules import (
    Action,
    ActionKind,
    Severity,
    evaluate_rules,
    floor_price,
    impact_score,
    margin_severity,
    pick_primary_action,
    suggested_price,
)

CONFIG = AssistantSettings()
NOW = timezone.make_aware(datetime(2024, 6, 30, 12, 0))


def make_aggregate(
    *,
    warehouse_stock=20,
    low_stock_alert=10,
    purchase_price=10000.0,
    client_price=20000.0,
    recent_units=0,
    recent_price=None,
    recent_profit_per_unit=None,
    prev_units=0,
    category_id="cat-1",
):
    price = recent_price if recent_price is not None else client_price
    unit_profit = recent_profit_per_unit if recent_profit_per_unit is not None else price - purchase_price
    recent_revenue = recent_units * price
    return ProductAggregate(
        product_id="p-1",
        product_name="Producto",
        category_id=category_id,
        purchase_price=purchase_price,
        distributor_price=15000.0,
        suggested_price=13000.0,
        client_price=client_price,
        warehouse_stock=warehouse_stock,
        total_stock=warehouse_stock,
        low_stock_alert=low_stock_alert,
        total=WindowRollup(units=recent_units + prev_units),
        recent=WindowRollup(
            units=recent_units,
            sales_count=recent_units,
            revenue=recent_revenue,
            profit=recent_units * unit_profit,
        ),
        previous=WindowRollup(units=prev_units, sales_count=prev_units),
        recent_weighted_price_sum=recent_revenue,
    )


def evaluate(aggregate, *, category_avg=None, recent_days=30, config=CONFIG):
    window = build_window(horizon_days=90, recent_days=recent_days, now=NOW)
    baselines = {}
    if category_avg is not None:
        baselines[aggregate.category_key] = CategoryBaseline(units=100, revenue=100 * category_avg)
    metrics = compute_metrics(aggregate, window, baselines)
    return metrics, evaluate_rules(aggregate, metrics, config)


def kinds(actions):
    return [action.kind for action in actions]


class TestReplenishment:
    def test_no_stock_with_recent_sales_is_critical(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=0, recent_units=3))
        buys = [a for a in actions if a.kind == ActionKind.BUY_MORE_INVENTORY]
        assert buys
        assert buys[0].severity == Severity.CRITICAL
        assert buys[0].confidence == 0.92
        assert buys[0].suggested_qty == 3

    def test_fast_seller_with_little_cover_is_critical(self):
        metrics, actions = evaluate(
            make_aggregate(warehouse_stock=5, low_stock_alert=10, purchase_price=10000, recent_units=40)
        )
        assert metrics.avg_daily_units == pytest.approx(1.333, abs=0.01)
        assert metrics.days_cover == pytest.approx(3.75)
        buys = [a for a in actions if a.kind == ActionKind.BUY_MORE_INVENTORY]
        assert len(buys) == 1
        assert buys[0].severity == Severity.CRITICAL
        # ceil(1.333 * 30) - 5
        assert buys[0].suggested_qty == 35

    def test_low_cover_above_alert_uses_ladder(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=12, low_stock_alert=10, recent_units=30))
        buy = next(a for a in actions if a.kind == ActionKind.BUY_MORE_INVENTORY)
        # 12 days of cover, stock above the alert level.
        assert buy.severity == Severity.MEDIUM
        assert buy.confidence == 0.85

    def test_plenty_of_cover_does_not_buy(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=200, low_stock_alert=10, recent_units=30))
        assert ActionKind.BUY_MORE_INVENTORY not in kinds(actions)


class TestLowRotation:
    def test_pause_and_promotion(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=30, low_stock_alert=10, recent_units=1))
        assert kinds(actions)[:2] == [ActionKind.PAUSE_PURCHASES, ActionKind.RUN_PROMOTION]
        assert actions[0].severity == Severity.MEDIUM

    def test_priced_above_category_decreases_price(self):
        _, actions = evaluate(
            make_aggregate(warehouse_stock=30, recent_units=1, recent_price=30000),
            category_avg=20000,
        )
        assert ActionKind.DECREASE_PRICE in kinds(actions)
        assert ActionKind.RUN_PROMOTION not in kinds(actions)

    def test_zero_sales_and_huge_stock_adds_clearance(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=50, recent_units=0))
        assert kinds(actions) == [ActionKind.PAUSE_PURCHASES, ActionKind.RUN_PROMOTION, ActionKind.CLEARANCE]
        assert actions[0].severity == Severity.HIGH
        clearance = actions[2]
        assert clearance.suggested_price >= floor_price(make_aggregate(), CONFIG)


class TestTrendAndMargin:
    def test_negative_trend_runs_promotion(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=60, recent_units=5, prev_units=10))
        promo = next(a for a in actions if a.kind == ActionKind.RUN_PROMOTION)
        assert promo.title == "Activar promoción"
        assert promo.suggested_change_pct == -10

    def test_negative_trend_priced_high_escalates(self):
        _, actions = evaluate(
            make_aggregate(warehouse_stock=60, recent_units=5, prev_units=10, recent_price=26000),
            category_avg=20000,
        )
        decrease = next(a for a in actions if a.kind == ActionKind.DECREASE_PRICE)
        assert decrease.severity == Severity.HIGH
        assert ActionKind.RUN_PROMOTION not in kinds(actions)

    def test_negative_margin_is_critical_and_raises_price(self):
        _, actions = evaluate(
            make_aggregate(warehouse_stock=60, recent_units=5, prev_units=5, recent_profit_per_unit=-500)
        )
        review = next(a for a in actions if a.kind == ActionKind.REVIEW_MARGIN)
        increase = next(a for a in actions if a.kind == ActionKind.INCREASE_PRICE)
        assert review.severity == Severity.CRITICAL
        assert increase.suggested_change_pct == 8

    def test_low_margin_underpriced_raises_price(self):
        _, actions = evaluate(
            make_aggregate(warehouse_stock=60, recent_units=5, prev_units=5, recent_price=15000,
                           recent_profit_per_unit=1500),
            category_avg=20000,
        )
        review = next(a for a in actions if a.kind == ActionKind.REVIEW_MARGIN)
        assert review.severity == Severity.MEDIUM
        increase = next(a for a in actions if a.kind == ActionKind.INCREASE_PRICE)
        assert increase.suggested_change_pct == 5

    @pytest.mark.parametrize(
        "margin,expected",
        [(-1, Severity.CRITICAL), (0, Severity.HIGH), (7, Severity.HIGH), (10, Severity.MEDIUM), (20, Severity.LOW)],
    )
    def test_margin_ladder(self, margin, expected):
        assert margin_severity(margin, 15) == expected

    def test_growth_and_underpriced(self):
        _, actions = evaluate(
            make_aggregate(warehouse_stock=200, recent_units=20, prev_units=10, recent_price=15000),
            category_avg=20000,
        )
        increase = next(a for a in actions if a.kind == ActionKind.INCREASE_PRICE)
        assert increase.title == "Subir precio (prueba controlada)"
        assert increase.severity == Severity.LOW
        assert increase.confidence == 0.6


class TestFallback:
    def test_steady_seller_keeps_strategy(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=200, recent_units=20, prev_units=20))
        assert kinds(actions) == [ActionKind.KEEP]
        assert actions[0].confidence == 0.7

    def test_no_sales_low_stock_waits(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=5, recent_units=0))
        assert kinds(actions) == [ActionKind.KEEP]
        assert actions[0].title == "Mantener (esperar más datos)"

    def test_no_sales_some_stock_tries_promotion(self):
        _, actions = evaluate(make_aggregate(warehouse_stock=15, low_stock_alert=10, recent_units=0))
        assert kinds(actions) == [ActionKind.RUN_PROMOTION, ActionKind.PAUSE_PURCHASES]


class TestPricingAndPriority:
    def test_suggested_price_respects_floor(self):
        aggregate = make_aggregate(purchase_price=10000, client_price=10500)
        metrics, _ = evaluate(aggregate)
        price, floor_applied, current = suggested_price(aggregate, metrics, -10, CONFIG)
        assert current == 10500
        assert floor_applied is True
        assert price >= 10000 / 0.9

    def test_suggested_price_without_floor(self):
        aggregate = make_aggregate(purchase_price=10000, client_price=20000)
        metrics, _ = evaluate(aggregate)
        price, floor_applied, _ = suggested_price(aggregate, metrics, -10, CONFIG)
        assert price == 18000
        assert floor_applied is False

    def test_price_falls_back_to_recent_average(self):
        aggregate = make_aggregate(client_price=None, recent_units=2, recent_price=17000)
        aggregate = replace(aggregate, suggested_price=None, distributor_price=None)
        metrics, _ = evaluate(aggregate)
        _, _, current = suggested_price(aggregate, metrics, 5, CONFIG)
        assert current == 17000

    def test_every_price_action_is_above_floor(self):
        aggregate = make_aggregate(warehouse_stock=50, recent_units=0, purchase_price=19000, client_price=20000)
        _, actions = evaluate(aggregate)
        floor = floor_price(aggregate, CONFIG)
        priced = [a for a in actions if a.suggested_price is not None]
        assert priced
        assert all(a.suggested_price >= floor for a in priced)
        assert all(a.details["price_floor_applied"] for a in priced)

    def test_primary_uses_priority_then_confidence(self):
        actions = [
            Action(kind=ActionKind.REVIEW_MARGIN, severity=Severity.HIGH, confidence=0.99, title="a"),
            Action(kind=ActionKind.RUN_PROMOTION, severity=Severity.LOW, confidence=0.55, title="b"),
            Action(kind=ActionKind.RUN_PROMOTION, severity=Severity.LOW, confidence=0.7, title="c"),
        ]
        assert pick_primary_action(actions).title == "c"
        assert pick_primary_action([]) is None

    def test_confidence_is_clamped(self):
        action = Action(kind=ActionKind.KEEP, severity=Severity.LOW, confidence=1.7, title="x")
        assert action.confidence == 1.0

    def test_impact_score(self):
        aggregate = make_aggregate(warehouse_stock=10, purchase_price=1000, client_price=2000, recent_units=3)
        metrics, _ = evaluate(aggregate)
        # revenue 6000 + profit 3000 + 0.2 * 10000
        assert impact_score(metrics) == 11000
