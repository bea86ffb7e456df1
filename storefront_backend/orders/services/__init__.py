from .materialization import (
    InvalidSessionPayloadError,
    MaterializationError,
    materialize_order,
)
from .order_lifecycle import (
    InvalidOrderStatusError,
    InvalidOrderTransitionError,
    OrderLifecycleError,
    update_order_status,
)
from .order_numbers import generate_order_number

__all__ = [
    "InvalidOrderStatusError",
    "InvalidOrderTransitionError",
    "InvalidSessionPayloadError",
    "MaterializationError",
    "OrderLifecycleError",
    "generate_order_number",
    "materialize_order",
    "update_order_status",
]
