# products/admin.py

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "sku",
        "name",
        "category",
        "unit_price",
        "stock_quantity",
        "track_inventory",
        "is_active",
    )
    list_filter = ("is_active", "track_inventory", "category")
    search_fields = ("sku", "name")
    readonly_fields = ("created_by", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        obj.sku = (obj.sku or "").strip().upper()
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)
