from .inventory import (
    InsufficientInventoryError,
    InventoryError,
    available_inventory,
    decrement_inventory,
)

__all__ = [
    "InventoryError",
    "InsufficientInventoryError",
    "available_inventory",
    "decrement_inventory",
]
