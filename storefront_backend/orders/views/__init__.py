from .admin import AdminOrderDetailView, AdminOrderListView
from .customer import CustomerOrderListView, GuestOrderLookupView

__all__ = [
    "AdminOrderDetailView",
    "AdminOrderListView",
    "CustomerOrderListView",
    "GuestOrderLookupView",
]
