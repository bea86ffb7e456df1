# orders/views/customer.py

"""
CUSTOMER ORDER ENDPOINTS

- GET /api/orders/          signed-in buyer's history: orders placed on the
                            account, plus guest orders placed with the
                            account's email
- GET /api/orders/lookup/   guest lookup (?order_number=&email=), AllowAny

Security hardening:
- Lookup requires BOTH order number and matching email, and is throttled.
- A mismatch answers 404 (no hint whether the order number exists).
"""

from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from orders.models import Order, owner_matches
from orders.serializers import OrderLookupQuerySerializer, OrderSerializer
from permissions.roles import IsCustomer


class OrderLookupThrottle(AnonRateThrottle):
    scope = "public_poll"


class CustomerOrderListView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(tags=["Orders"], description="Order history for the signed-in buyer.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        user = self.request.user
        email = (getattr(user, "email", "") or "").strip()

        scope = Q(user=user)
        if email:
            scope |= Q(user__isnull=True, email__iexact=email)

        return (
            Order.objects.filter(scope)
            .prefetch_related("lines")
            .order_by("-created_at")
        )


class GuestOrderLookupView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [OrderLookupThrottle]

    @extend_schema(
        tags=["Orders"],
        parameters=[OrderLookupQuerySerializer],
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Order not found"),
        },
        description="Look up one order by order number + checkout email.",
    )
    def get(self, request):
        qs = OrderLookupQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)

        order = (
            Order.objects.prefetch_related("lines")
            .filter(order_number=qs.validated_data["order_number"].strip())
            .first()
        )

        if order is None or not owner_matches(order.owner, email=qs.validated_data["email"]):
            return Response({"error": "Order not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
