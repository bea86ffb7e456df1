from .cart_store import (
    CartError,
    CartLine,
    CartQuantityLimitError,
    CartStore,
    MAX_LINE_QUANTITY,
    MemoryCartStorage,
    SessionCartStorage,
    session_cart,
    total_items,
    total_price,
)

__all__ = [
    "CartError",
    "CartLine",
    "CartQuantityLimitError",
    "CartStore",
    "MAX_LINE_QUANTITY",
    "MemoryCartStorage",
    "SessionCartStorage",
    "session_cart",
    "total_items",
    "total_price",
]
