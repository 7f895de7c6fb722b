"""DRF serializers for the rankings module."""
from __future__ import annotations

from rest_framework import serializers

from rankings.models import RankingSettings
from rankings.periods import PeriodType


class RankingSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = RankingSettings
        fields = [
            "id", "period_type", "custom_period_days", "period_anchor",
            "min_admin_profit_for_ranking", "updated_at",
        ]
        read_only_fields = ["id", "updated_at"]

    def validate(self, attrs):
        period_type = attrs.get("period_type", getattr(self.instance, "period_type", None))
        days = attrs.get("custom_period_days", getattr(self.instance, "custom_period_days", None))
        if period_type == PeriodType.CUSTOM and not days:
            raise serializers.ValidationError(
                {"custom_period_days": "Requerido para el periodo personalizado."}
            )
        return attrs


class RankingEntrySerializer(serializers.Serializer):
    position = serializers.IntegerField()
    distributor_id = serializers.CharField()
    distributor_name = serializers.CharField(allow_blank=True)
    total_revenue = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_admin_profit = serializers.DecimalField(max_digits=18, decimal_places=2)
    sales_count = serializers.IntegerField()
    distributor_profit_pct = serializers.IntegerField()
    commission_bonus_pct = serializers.IntegerField()
    is_me = serializers.BooleanField()


class CurrentRankingQuerySerializer(serializers.Serializer):
    period_type = serializers.ChoiceField(choices=PeriodType.ALL, required=False)
    as_of = serializers.DateTimeField(required=False)
