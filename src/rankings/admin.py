from django.contrib import admin

from rankings.models import RankingSettings


@admin.register(RankingSettings)
class RankingSettingsAdmin(admin.ModelAdmin):
    list_display = ("period_type", "custom_period_days", "period_anchor", "min_admin_profit_for_ranking", "updated_at")
    readonly_fields = ("created_at", "updated_at")

    def has_add_permission(self, request):
        return not RankingSettings.objects.exists()
