# public/services/stripe_checkout.py
"""
STRIPE CLIENT (hosted checkout + webhook signatures)

- create_checkout_session(): POST /v1/checkout/sessions (form-encoded)
- verify_stripe_signature(): HMAC-SHA256 check of the Stripe-Signature header
  over the RAW request body

Config: settings.PAYMENTS["STRIPE"]
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger(__name__)

STRIPE_API_BASE = "https://api.stripe.com/v1"
DEFAULT_TOLERANCE_SECONDS = 300


class PaymentProviderError(RuntimeError):
    pass


def _stripe_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = (payments.get("STRIPE") or {}) if isinstance(payments, dict) else {}
    return cfg if isinstance(cfg, dict) else {}


def _api_base() -> str:
    return (_stripe_cfg().get("API_BASE") or STRIPE_API_BASE).rstrip("/")


def _get_secret_key() -> str:
    sk = (_stripe_cfg().get("SECRET_KEY") or "").strip()
    if not sk:
        raise PaymentProviderError(
            "STRIPE SECRET_KEY is not configured. "
            "Expected settings.PAYMENTS['STRIPE']['SECRET_KEY'] (env STRIPE_SECRET_KEY)."
        )
    return sk


def _get_webhook_secret() -> str:
    return (_stripe_cfg().get("WEBHOOK_SECRET") or "").strip()


def _to_cents(amount) -> int:
    try:
        dollars = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    cents = (dollars * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _flatten_params(value, prefix: str = "") -> list[tuple[str, str]]:
    """
    Stripe form encoding: nested dicts/lists become key[sub][0]=... pairs.
    Booleans are sent as "true"/"false"; None values are skipped.
    """
    pairs: list[tuple[str, str]] = []

    if isinstance(value, dict):
        for key, sub in value.items():
            name = f"{prefix}[{key}]" if prefix else str(key)
            pairs.extend(_flatten_params(sub, name))
    elif isinstance(value, (list, tuple)):
        for idx, sub in enumerate(value):
            pairs.extend(_flatten_params(sub, f"{prefix}[{idx}]"))
    elif isinstance(value, bool):
        pairs.append((prefix, "true" if value else "false"))
    elif value is not None:
        pairs.append((prefix, str(value)))

    return pairs


def _request_form(method: str, url: str, *, params: dict, timeout: int = 25) -> dict[str, Any]:
    sk = _get_secret_key()
    data = urlencode(_flatten_params(params)).encode("utf-8")

    req = Request(
        url,
        data=data,
        headers={
            "Authorization": f"Bearer {sk}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        try:
            err = (json.loads(raw) or {}).get("error") or {}
        except ValueError:
            err = {}
        msg = err.get("message") if isinstance(err, dict) else None
        raise PaymentProviderError(
            f"Stripe HTTPError: {e.code} {msg or _safe_preview(raw) or e.reason}"
        ) from e
    except URLError as e:
        raise PaymentProviderError(f"Stripe URLError: {e}") from e
    except OSError as e:
        raise PaymentProviderError(f"Stripe request failed: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise PaymentProviderError(
            f"Stripe returned non-JSON: {_safe_preview(raw)}"
        ) from e

    if not isinstance(parsed, dict):
        raise PaymentProviderError("Stripe returned an unexpected payload")
    return parsed


def _line_item_params(item: dict, currency: str) -> dict:
    product_data: dict = {"name": str(item["name"])}

    description = str(item.get("description") or "").strip()
    if description:
        product_data["description"] = description

    image = str(item.get("image") or "").strip()
    if image:
        product_data["images"] = [image]

    return {
        "price_data": {
            "currency": currency,
            "product_data": product_data,
            "unit_amount": _to_cents(item["unit_amount"]),
        },
        "quantity": int(item["quantity"]),
    }


def create_checkout_session(
    *,
    line_items: list[dict],
    success_url: str,
    cancel_url: str,
    metadata: dict | None = None,
    shipping_countries: list[str] | None = None,
    collect_phone: bool = True,
    automatic_tax: bool = False,
    customer_email: str = "",
    currency: str = "usd",
) -> dict:
    """
    Create a hosted payment-mode checkout session.

    line_items: [{name, unit_amount (Decimal, major units), quantity,
                  description?, image?}]
    Returns {"id": <session id>, "url": <hosted page url>}.
    """
    params: dict = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": [_line_item_params(item, currency) for item in line_items],
        "success_url": success_url,
        "cancel_url": cancel_url,
        "phone_number_collection": {"enabled": bool(collect_phone)},
        "automatic_tax": {"enabled": bool(automatic_tax)},
    }

    if metadata:
        params["metadata"] = {k: str(v) for k, v in metadata.items()}

    if shipping_countries:
        params["shipping_address_collection"] = {
            "allowed_countries": list(shipping_countries)
        }

    if customer_email:
        params["customer_email"] = str(customer_email).strip()

    parsed = _request_form("POST", f"{_api_base()}/checkout/sessions", params=params)

    session_id = str(parsed.get("id") or "")
    url = str(parsed.get("url") or "")
    if not session_id or not url:
        raise PaymentProviderError("Stripe session response missing id/url")

    logger.info("Stripe checkout session created", extra={"session_id": session_id})
    return {"id": session_id, "url": url}


def _parse_signature_header(header: str) -> tuple[int | None, list[str]]:
    timestamp = None
    signatures = []
    for part in (header or "").split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                timestamp = None
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def compute_stripe_signature(*, raw_body: bytes, timestamp: int, secret: str) -> str:
    signed = f"{int(timestamp)}.".encode("utf-8") + (raw_body or b"")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def verify_stripe_signature(
    *, raw_body: bytes, signature: str | None, now: int | None = None
) -> bool:
    """
    Stripe-Signature: t=<unix ts>,v1=<hex hmac>[,v1=...]

    Valid iff some v1 equals HMAC-SHA256(secret, "<t>." + raw_body) and t is
    within the configured tolerance of now.
    """
    secret = _get_webhook_secret()
    if not secret or not signature:
        return False

    timestamp, candidates = _parse_signature_header(signature)
    if timestamp is None or not candidates:
        return False

    tolerance = int(_stripe_cfg().get("WEBHOOK_TOLERANCE_SECONDS") or DEFAULT_TOLERANCE_SECONDS)
    current = int(time.time()) if now is None else int(now)
    if abs(current - timestamp) > tolerance:
        return False

    expected = compute_stripe_signature(raw_body=raw_body, timestamp=timestamp, secret=secret)
    return any(hmac.compare_digest(expected, c) for c in candidates)
