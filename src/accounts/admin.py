from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count, Q

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for administrators and distributors."""

    list_display = ("email", "first_name", "last_name", "role", "confirmed_sales", "is_active", "date_joined")
    list_filter = ("role", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "first_name", "last_name", "phone")
    ordering = ("first_name", "last_name")
    actions = ("activate_users", "deactivate_users")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Datos personales", {"fields": ("first_name", "last_name", "phone")}),
        ("Rol y permisos", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Fechas", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "first_name", "last_name", "phone", "role", "password1", "password2"),
            },
        ),
    )
    readonly_fields = ("date_joined", "last_login")

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _confirmed_sales=Count(
                "sales_as_distributor",
                filter=Q(sales_as_distributor__payment_status="confirmed"),
            )
        )

    @admin.display(description="Ventas confirmadas", ordering="_confirmed_sales")
    def confirmed_sales(self, obj):
        return obj._confirmed_sales

    @admin.action(description="Activar los usuarios seleccionados")
    def activate_users(self, request, queryset):
        queryset.update(is_active=True)

    @admin.action(description="Desactivar los usuarios seleccionados")
    def deactivate_users(self, request, queryset):
        queryset.update(is_active=False)
