from django.contrib import admin

from catalog.models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name", "category", "purchase_price", "distributor_price",
        "client_price", "warehouse_stock", "total_stock", "low_stock_alert",
    )
    list_filter = ("category", "is_active")
    search_fields = ("name",)
