# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "product_name",
        "sku",
        "quantity",
        "unit_price",
        "total_price",
    )

    def has_add_permission(self, request, obj=None):
        return False


# ======================================================
# SALE ADMIN
# ======================================================


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_no",
        "customer_name",
        "issuer_name",
        "status",
        "total_amount",
        "invoice_sent",
        "created_at",
    )
    readonly_fields = (
        "invoice_no",
        "status",
        "customer",
        "customer_name",
        "issuer",
        "issuer_name",
        "total_amount",
        "created_at",
        "completed_at",
        "cancelled_at",
        "cancelled_by",
        "cancel_reason",
    )
    search_fields = ("invoice_no", "customer_name", "issuer_name")
    list_filter = ("status", "created_at")
    inlines = [SaleItemInline]

    def has_delete_permission(self, request, obj=None):
        return False
