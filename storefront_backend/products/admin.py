# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:

- slug is derived from name and regenerated on rename (read-only here).
- inventory_count is editable by admins; the database column is unsigned,
  so it can never be saved negative.
- Bulk publish / unpublish actions for catalog housekeeping.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "slug",
        "price",
        "inventory_count",
        "stock_status",
        "is_published",
        "featured",
        "created_at",
    )
    list_filter = ("is_published", "featured", "created_at")
    search_fields = ("name", "slug")
    ordering = ("-created_at",)
    readonly_fields = ("slug", "created_at", "updated_at")
    actions = ("publish_selected", "unpublish_selected")

    @admin.display(description="Stock")
    def stock_status(self, obj):
        if obj.inventory_count <= 0:
            return "OUT"
        if obj.inventory_count <= 5:
            return "LOW"
        return "OK"

    @admin.action(description="Publish selected products")
    def publish_selected(self, request, queryset):
        updated = queryset.update(is_published=True)
        self.message_user(request, f"{updated} product(s) published.")

    @admin.action(description="Unpublish selected products")
    def unpublish_selected(self, request, queryset):
        updated = queryset.update(is_published=False)
        self.message_user(request, f"{updated} product(s) unpublished.")
