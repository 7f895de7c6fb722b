from django.contrib import admin

from assistant.models import BusinessAssistantConfig


@admin.register(BusinessAssistantConfig)
class BusinessAssistantConfigAdmin(admin.ModelAdmin):
    list_display = ("horizon_days_default", "recent_days_default", "cache_enabled", "cache_ttl_seconds", "updated_at")
    readonly_fields = ("created_at", "updated_at")

    def has_add_permission(self, request):
        return not BusinessAssistantConfig.objects.exists()

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        from assistant.config import config_provider
        from assistant.cache import invalidate_recommendations

        config_provider.clear()
        invalidate_recommendations(reason="config_updated_admin")
