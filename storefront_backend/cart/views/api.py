# cart/views/api.py

"""
CART API VIEWS

Purpose:
- Session-backed storefront cart (guests and signed-in buyers alike)
- Add / update / remove / clear lines, read derived totals

Hard rules:
- Only published products can be added.
- Price/name/image are snapshotted from the catalog at add time.
- Inventory is NOT checked here; checkout validates against live stock.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from cart.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    UpdateCartItemInputSerializer,
)
from cart.services import CartError, CartQuantityLimitError, session_cart
from products.models import Product


class CartThrottle(AnonRateThrottle):
    scope = "public_poll"


# =====================================================
# HELPERS
# =====================================================

def _cart_response(store, http_status=status.HTTP_200_OK):
    return Response(CartSerializer(store).data, status=http_status)


def _get_cart(request):
    return session_cart(request.session)


# =====================================================
# CART API VIEWS
# =====================================================

class CartDetailView(APIView):
    """
    GET /api/cart/
    """

    permission_classes = [AllowAny]
    throttle_classes = [CartThrottle]

    @extend_schema(
        tags=["Cart"],
        responses={200: CartSerializer},
        description="Current session cart with derived totals.",
    )
    def get(self, request):
        return _cart_response(_get_cart(request))


class AddCartItemView(APIView):
    """
    POST /api/cart/items/

    Adding a product that is already in the cart increments its quantity.
    """

    permission_classes = [AllowAny]
    throttle_classes = [CartThrottle]

    @extend_schema(
        tags=["Cart"],
        request=AddCartItemInputSerializer,
        responses={
            200: CartSerializer,
            400: OpenApiResponse(description="Validation error / product unavailable"),
            404: OpenApiResponse(description="Product not found"),
        },
        description="Add a product to the session cart.",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product_id = serializer.validated_data["product_id"]
        quantity = serializer.validated_data["quantity"]

        product = Product.objects.filter(id=product_id).first()
        if product is None:
            return Response(
                {"error": f"Product {product_id} not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        if not product.is_published:
            return Response(
                {"error": f"Product {product.name} is no longer available"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        store = _get_cart(request)
        try:
            store.add_item(product, quantity)
        except CartError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return _cart_response(store)


class CartItemView(APIView):
    """
    PATCH  /api/cart/items/<product_id>/   {quantity}
    DELETE /api/cart/items/<product_id>/
    """

    permission_classes = [AllowAny]
    throttle_classes = [CartThrottle]

    @extend_schema(
        tags=["Cart"],
        request=UpdateCartItemInputSerializer,
        responses={
            200: CartSerializer,
            400: OpenApiResponse(description="Quantity above the per-product limit"),
            404: OpenApiResponse(description="Product not in cart"),
        },
        description="Set a line quantity (<= 0 removes the line).",
    )
    def patch(self, request, product_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = _get_cart(request)
        try:
            store.update_quantity(product_id, serializer.validated_data["quantity"])
        except CartQuantityLimitError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except CartError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

        return _cart_response(store)

    @extend_schema(
        tags=["Cart"],
        responses={
            200: CartSerializer,
            404: OpenApiResponse(description="Product not in cart"),
        },
        description="Remove a line from the cart.",
    )
    def delete(self, request, product_id):
        store = _get_cart(request)
        if not store.remove_item(product_id):
            return Response(
                {"error": f"Product {product_id} is not in the cart"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return _cart_response(store)


class ClearCartView(APIView):
    """
    POST /api/cart/clear/
    """

    permission_classes = [AllowAny]
    throttle_classes = [CartThrottle]

    @extend_schema(
        tags=["Cart"],
        request=None,
        responses={200: CartSerializer},
        description="Empty the session cart.",
    )
    def post(self, request):
        store = _get_cart(request)
        store.clear_cart()
        return _cart_response(store)
