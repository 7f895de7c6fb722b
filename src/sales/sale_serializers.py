"""DRF serializers for the sales app."""
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from sales.models import Sale


class SaleSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    distributor_name = serializers.SerializerMethodField()
    is_house_sale = serializers.BooleanField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id", "product", "product_name", "distributor", "distributor_name",
            "is_house_sale", "quantity", "purchase_price", "distributor_price",
            "sale_price", "commission_bonus_pct", "distributor_profit_pct",
            "distributor_profit", "admin_profit", "total_profit",
            "payment_status", "payment_confirmed_at", "payment_confirmed_by",
            "sale_date", "notes", "created_at",
        ]
        read_only_fields = fields

    def get_distributor_name(self, obj):
        if obj.distributor is None:
            return None
        return obj.distributor.get_full_name() or obj.distributor.email


class SaleCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    sale_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    distributor_id = serializers.UUIDField(required=False, allow_null=True)
    sale_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
