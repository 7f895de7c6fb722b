"""Admin configuration for the sales app."""
from django.contrib import admin

from sales.models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Admin for the Sale model.

    Profit fields are read-only: they are only written by the sale services.
    """

    list_display = (
        "sale_date",
        "product",
        "distributor",
        "quantity",
        "sale_price",
        "distributor_profit_pct",
        "total_profit",
        "payment_status",
    )
    list_filter = ("payment_status", "sale_date")
    search_fields = ("product__name", "distributor__email", "distributor__first_name")
    raw_id_fields = ("product", "distributor", "payment_confirmed_by")
    date_hierarchy = "sale_date"
    readonly_fields = (
        "purchase_price",
        "distributor_price",
        "commission_bonus_pct",
        "distributor_profit_pct",
        "distributor_profit",
        "admin_profit",
        "total_profit",
        "payment_confirmed_at",
        "payment_confirmed_by",
        "created_at",
        "updated_at",
    )
