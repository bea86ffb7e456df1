"""
PATH: orders/urls.py

ORDERS URLS

Mounted in backend/urls.py twice:
- /api/orders/        -> customer history + guest lookup (urlpatterns)
- /api/admin/orders/  -> admin list / detail / status update (admin_urlpatterns)
"""

from django.urls import path

from orders.views import (
    AdminOrderDetailView,
    AdminOrderListView,
    CustomerOrderListView,
    GuestOrderLookupView,
)

urlpatterns = [
    path("", CustomerOrderListView.as_view(), name="customer-orders"),
    path("lookup/", GuestOrderLookupView.as_view(), name="order-lookup"),
]

admin_urlpatterns = [
    path("", AdminOrderListView.as_view(), name="admin-orders"),
    path("<uuid:order_id>/", AdminOrderDetailView.as_view(), name="admin-order-detail"),
]
