"""DRF serializers for the business assistant."""
from __future__ import annotations

import math

from rest_framework import serializers

from assistant.models import BusinessAssistantConfig


class BusinessAssistantConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusinessAssistantConfig
        exclude = ["created_at"]
        read_only_fields = ["id", "updated_at"]

    def validate(self, attrs):
        errors = {}
        for name, value in attrs.items():
            if isinstance(value, float) and not math.isfinite(value):
                errors[name] = "Debe ser un numero finito."
        min_margin = attrs.get("min_margin_after_discount_pct")
        if min_margin is not None and not 0 <= min_margin < 100:
            errors["min_margin_after_discount_pct"] = "Debe estar entre 0 y 100."
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class RecommendationQuerySerializer(serializers.Serializer):
    horizonDays = serializers.IntegerField(required=False, min_value=1, max_value=3650)
    recentDays = serializers.IntegerField(required=False, min_value=1, max_value=365)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    force = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        start = attrs.get("startDate")
        end = attrs.get("endDate")
        if start and end and start > end:
            raise serializers.ValidationError({"startDate": "Debe ser anterior o igual a endDate."})
        if start or end:
            # An explicit range replaces the horizon.
            attrs.pop("horizonDays", None)
        return attrs
