from .order import (
    OrderLineSerializer,
    OrderLookupQuerySerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
)

__all__ = [
    "OrderLineSerializer",
    "OrderLookupQuerySerializer",
    "OrderSerializer",
    "OrderStatusUpdateSerializer",
]
