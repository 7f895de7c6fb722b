"""Distributor ranking and commission tier resolution.

The ranking is never stored: it is recomputed from confirmed sales on every
call, so it cannot go stale. Each sale freezes the tier it got at write time,
which keeps historical profit splits reproducible even if the ranking of that
period shifts afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Count, DecimalField, F, Sum
from django.db.models.functions import Coalesce

from rankings.periods import RankingPeriod, resolve_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommissionTier:
    distributor_profit_pct: int
    commission_bonus_pct: int


BASE_TIER = CommissionTier(distributor_profit_pct=20, commission_bonus_pct=0)

# Position -> tier. Anything not listed (4th place and below, or unranked)
# falls back to BASE_TIER.
TIER_TABLE = {
    1: CommissionTier(distributor_profit_pct=25, commission_bonus_pct=5),
    2: CommissionTier(distributor_profit_pct=23, commission_bonus_pct=3),
    3: CommissionTier(distributor_profit_pct=21, commission_bonus_pct=1),
}


def tier_for_position(position: int | None) -> CommissionTier:
    if not position:
        return BASE_TIER
    return TIER_TABLE.get(position, BASE_TIER)


@dataclass(frozen=True)
class RankingEntry:
    position: int
    distributor_id: str
    total_revenue: Decimal
    total_admin_profit: Decimal
    sales_count: int

    @property
    def tier(self) -> CommissionTier:
        return tier_for_position(self.position)


class RankingResolver:
    """Resolve ranking periods, rankings and commission tiers."""

    def __init__(self, settings_obj=None) -> None:
        if settings_obj is None:
            from rankings.models import RankingSettings

            settings_obj = RankingSettings.load()
        self.settings = settings_obj

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve_period(self, as_of=None, period_type: str | None = None) -> RankingPeriod:
        return resolve_period(
            as_of,
            period_type or self.settings.period_type,
            custom_period_days=self.settings.custom_period_days,
            anchor_date=self.settings.period_anchor,
        )

    def compute_ranking(self, period: RankingPeriod) -> list[RankingEntry]:
        """Distributors ordered by confirmed revenue within ``period``.

        Exact revenue ties keep the order the database returns them in.
        """
        from sales.models import Sale

        money = DecimalField(max_digits=18, decimal_places=2)
        rows = (
            Sale.objects.filter(
                payment_status=Sale.PaymentStatus.CONFIRMED,
                distributor__isnull=False,
                sale_date__gte=period.start,
                sale_date__lte=period.end,
            )
            .values("distributor_id")
            .annotate(
                total_revenue=Coalesce(
                    Sum(F("sale_price") * F("quantity"), output_field=money),
                    Decimal("0"),
                    output_field=money,
                ),
                total_admin_profit=Coalesce(Sum("admin_profit"), Decimal("0"), output_field=money),
                sales_count=Count("id"),
            )
            .order_by("-total_revenue")
        )

        minimum = self.settings.min_admin_profit_for_ranking or Decimal("0")
        entries = []
        for row in rows:
            if minimum > 0 and row["total_admin_profit"] < minimum:
                continue
            entries.append(
                RankingEntry(
                    position=len(entries) + 1,
                    distributor_id=str(row["distributor_id"]),
                    total_revenue=row["total_revenue"],
                    total_admin_profit=row["total_admin_profit"],
                    sales_count=row["sales_count"],
                )
            )
        return entries

    def position_of(self, distributor_id, ranking: list[RankingEntry]) -> int | None:
        target = str(distributor_id)
        for entry in ranking:
            if entry.distributor_id == target:
                return entry.position
        return None

    def resolve_commission_tier(self, distributor_id, as_of=None) -> CommissionTier:
        """Tier a distributor earns right now (or at ``as_of``)."""
        period = self.resolve_period(as_of)
        ranking = self.compute_ranking(period)
        position = self.position_of(distributor_id, ranking)
        tier = tier_for_position(position)
        logger.debug(
            "Commission tier for distributor=%s period=%s..%s position=%s pct=%s",
            distributor_id,
            period.start.isoformat(),
            period.end.isoformat(),
            position,
            tier.distributor_profit_pct,
        )
        return tier


def resolve_commission_tier(distributor_id, as_of=None) -> CommissionTier:
    return RankingResolver().resolve_commission_tier(distributor_id, as_of=as_of)
