# orders/models/owner.py

"""
Order ownership as an explicit variant.

An order belongs either to a signed-in account or to a guest identified
only by the email used at checkout. Callers match on the type instead of
checking a nullable user column.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedOwner:
    user_id: int
    email: str = ""

    @property
    def is_guest(self) -> bool:
        return False


@dataclass(frozen=True)
class GuestOwner:
    email: str

    @property
    def is_guest(self) -> bool:
        return True


def _same_email(a: str, b: str) -> bool:
    a = (a or "").strip().lower()
    return bool(a) and a == (b or "").strip().lower()


def owner_matches(owner, *, user=None, email: str = "") -> bool:
    """
    True if the requester may see an order with this owner.

    - AuthenticatedOwner: same account, or the checkout email
    - GuestOwner: the checkout email (given explicitly or the account's email)
    """
    if isinstance(owner, AuthenticatedOwner):
        if user is not None and getattr(user, "pk", None) == owner.user_id:
            return True
        return _same_email(email, owner.email)

    if isinstance(owner, GuestOwner):
        candidate = email or getattr(user, "email", "") or ""
        return _same_email(candidate, owner.email)

    return False
