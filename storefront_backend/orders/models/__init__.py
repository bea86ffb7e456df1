from .order import ADDRESS_FIELDS, Order, normalize_shipping_address
from .order_line import OrderLine
from .owner import AuthenticatedOwner, GuestOwner, owner_matches

__all__ = [
    "ADDRESS_FIELDS",
    "AuthenticatedOwner",
    "GuestOwner",
    "Order",
    "OrderLine",
    "normalize_shipping_address",
    "owner_matches",
]
