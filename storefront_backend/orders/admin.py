# orders/admin.py
"""
=====================================================
PATH: orders/admin.py
=====================================================

Admin rules:

- Orders are created by payment webhooks, never by hand (no add permission).
- Orders are never deleted.
- Line items are purchase-time snapshots: shown read-only.
- Status changes made here go through update_order_status() so the
  transition table and customer notifications apply exactly as in the API.
"""

from __future__ import annotations

from django.contrib import admin, messages

from orders.models import Order, OrderLine
from orders.services.order_lifecycle import OrderLifecycleError, update_order_status


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    can_delete = False
    fields = ("product_name", "unit_price", "quantity", "product_ref", "product")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "email",
        "status",
        "total_amount",
        "tracking_number",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("order_number", "email", "payment_session_id")
    ordering = ("-created_at",)
    readonly_fields = (
        "order_number",
        "user",
        "email",
        "shipping_cost",
        "tax_amount",
        "total_amount",
        "shipping_address",
        "payment_session_id",
        "payment_intent_id",
        "created_at",
        "updated_at",
    )
    inlines = [OrderLineInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        """
        Route status / tracking edits through the lifecycle service.
        """
        if not change:
            return super().save_model(request, obj, form, change)

        try:
            update_order_status(
                order=obj,
                status=form.cleaned_data.get("status"),
                tracking_number=form.cleaned_data.get("tracking_number", ""),
            )
        except OrderLifecycleError as e:
            self.message_user(request, str(e), level=messages.ERROR)
