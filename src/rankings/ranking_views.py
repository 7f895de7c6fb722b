"""API views for the rankings module."""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from rest_framework import permissions
from rest_framework.generics import RetrieveUpdateAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsAdminOrDistributor, IsAdminRole
from rankings.engine import RankingResolver
from rankings.models import RankingSettings
from rankings.ranking_serializers import (
    CurrentRankingQuerySerializer,
    RankingEntrySerializer,
    RankingSettingsSerializer,
)

logger = logging.getLogger(__name__)


class CurrentRankingView(APIView):
    """
    GET /api/v1/rankings/current/?period_type=weekly&as_of=2024-01-10T12:00:00
    Ranking of the period containing ``as_of`` (default: now) with each tier.
    """
    permission_classes = [permissions.IsAuthenticated, IsAdminOrDistributor]

    def get(self, request):
        query = CurrentRankingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        resolver = RankingResolver()
        period = resolver.resolve_period(
            query.validated_data.get("as_of"),
            query.validated_data.get("period_type"),
        )
        ranking = resolver.compute_ranking(period)

        names = {
            str(user.pk): user.get_full_name() or user.email
            for user in get_user_model().objects.filter(
                pk__in=[entry.distributor_id for entry in ranking]
            )
        }
        me_id = str(request.user.pk)
        rows = [
            {
                "position": entry.position,
                "distributor_id": entry.distributor_id,
                "distributor_name": names.get(entry.distributor_id, ""),
                "total_revenue": entry.total_revenue,
                "total_admin_profit": entry.total_admin_profit,
                "sales_count": entry.sales_count,
                "distributor_profit_pct": entry.tier.distributor_profit_pct,
                "commission_bonus_pct": entry.tier.commission_bonus_pct,
                "is_me": entry.distributor_id == me_id,
            }
            for entry in ranking
        ]

        return Response(
            {
                "period": period.as_dict(),
                "entries": RankingEntrySerializer(rows, many=True).data,
            }
        )


class RankingSettingsView(RetrieveUpdateAPIView):
    """GET/PUT/PATCH /api/v1/rankings/settings/"""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    serializer_class = RankingSettingsSerializer

    def get_object(self):
        return RankingSettings.load()

    def perform_update(self, serializer):
        instance = serializer.save()
        logger.info(
            "Ranking settings updated by %s: period=%s custom_days=%s anchor=%s",
            self.request.user.pk,
            instance.period_type,
            instance.custom_period_days,
            instance.period_anchor,
        )
