# public/views/checkout.py
"""
PUBLIC CHECKOUT (STOREFRONT)

POST /api/checkout/
    {items: [{product_id, name?, price?, quantity, description?, image?}],
     successUrl?, cancelUrl?}
    -> 200 {sessionId, url, shippingCost, subtotal}
    -> 400 / 404 / 500 {error}

GET /api/checkout/success/?session_id=<id>
    -> reports whether the webhook has created the order yet (the frontend
       polls until order_ready); once it has, the session cart is cleared

Rules:
- AllowAny (guest checkout); a signed-in buyer is linked to the order
- Prices are re-derived from the catalog server-side
- Nothing is reserved here; inventory is decremented when the order is
  materialized from the payment webhook

Security hardening:
- Throttle write + poll endpoints separately
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from cart.services import session_cart
from orders.models import Order
from public.serializers import (
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    CheckoutSuccessQuerySerializer,
    CheckoutSuccessResponseSerializer,
)
from public.services.checkout import (
    EmptyCheckoutError,
    InsufficientInventoryError,
    InvalidCheckoutItemError,
    PaymentSessionError,
    ProductNotFoundError,
    ProductUnavailableError,
    start_checkout,
)


class PublicWriteThrottle(AnonRateThrottle):
    """
    For public write endpoints (checkout, contact form).
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['public_write'].
    """

    scope = "public_write"


class PublicPollThrottle(AnonRateThrottle):
    """
    For public polling endpoints (checkout success).
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['public_poll'].
    """

    scope = "public_poll"


def _error(message: str, http_status: int) -> Response:
    return Response({"error": message}, status=http_status)


class CheckoutView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        tags=["Checkout"],
        request=CheckoutRequestSerializer,
        responses={
            200: CheckoutResponseSerializer,
            400: OpenApiResponse(description="Empty cart / invalid item / unavailable / insufficient inventory"),
            404: OpenApiResponse(description="Product not found"),
            429: OpenApiResponse(description="Rate limited"),
            500: OpenApiResponse(description="Payment session could not be created"),
        },
        description="Validate the cart and create a hosted payment session.",
    )
    def post(self, request, *args, **kwargs):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = start_checkout(
                items=data.get("items") or [],
                success_url=data.get("successUrl") or "",
                cancel_url=data.get("cancelUrl") or "",
                user=request.user,
            )
        except EmptyCheckoutError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except InvalidCheckoutItemError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except ProductNotFoundError as e:
            return _error(str(e), status.HTTP_404_NOT_FOUND)
        except ProductUnavailableError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except InsufficientInventoryError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except PaymentSessionError as e:
            return _error(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        payload = CheckoutResponseSerializer(
            {
                "sessionId": result.session_id,
                "url": result.url,
                "shippingCost": result.shipping_cost,
                "subtotal": result.subtotal,
            }
        ).data
        return Response(payload, status=status.HTTP_200_OK)


class CheckoutSuccessView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicPollThrottle]

    @extend_schema(
        tags=["Checkout"],
        parameters=[CheckoutSuccessQuerySerializer],
        responses={
            200: CheckoutSuccessResponseSerializer,
            400: OpenApiResponse(description="Missing session_id"),
        },
        description="Post-payment landing: reports order status, clearing the cart once the order exists.",
    )
    def get(self, request, *args, **kwargs):
        qs = CheckoutSuccessQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        session_id = qs.validated_data["session_id"].strip()

        order = Order.objects.filter(payment_session_id=session_id).first()

        # Only a completed (materialized) payment empties the cart.
        if order is not None:
            session_cart(request.session).clear_cart()
        payload = CheckoutSuccessResponseSerializer(
            {
                "session_id": session_id,
                "order_ready": order is not None,
                "order_number": order.order_number if order else None,
                "status": order.status if order else None,
                "total_amount": order.total_amount if order else None,
            }
        ).data
        return Response(payload, status=status.HTTP_200_OK)
