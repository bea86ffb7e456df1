# orders/views/admin.py

"""
ADMIN ORDER ENDPOINTS

- GET /api/admin/orders/            (?status=<status>&q=<order number or email>)
- GET /api/admin/orders/<uuid>/
- PUT /api/admin/orders/<uuid>/     {status?, tracking_number?}

Status changes follow orders/services/order_lifecycle.py; entering
processing or shipped notifies the customer.
"""

from __future__ import annotations

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.serializers import OrderSerializer, OrderStatusUpdateSerializer
from orders.services.order_lifecycle import (
    InvalidOrderStatusError,
    InvalidOrderTransitionError,
    update_order_status,
)
from permissions.roles import IsStoreAdmin

logger = logging.getLogger(__name__)


class AdminOrderListView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, IsStoreAdmin]

    @extend_schema(
        tags=["Admin"],
        parameters=[
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by order status.",
            ),
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search order number or email.",
            ),
        ],
        description="All orders, newest first.",
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        qs = Order.objects.prefetch_related("lines")

        status_filter = (self.request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(order_number__icontains=q) | Q(email__icontains=q))

        return qs.order_by("-created_at")


class AdminOrderDetailView(APIView):
    permission_classes = [IsAuthenticated, IsStoreAdmin]

    @extend_schema(
        tags=["Admin"],
        responses={200: OrderSerializer, 404: OpenApiResponse(description="Not found")},
    )
    def get(self, request, order_id):
        order = get_object_or_404(Order.objects.prefetch_related("lines"), id=order_id)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Admin"],
        request=OrderStatusUpdateSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Invalid status / transition"),
            404: OpenApiResponse(description="Not found"),
        },
        description="Update order status and/or tracking number.",
    )
    def put(self, request, order_id):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = get_object_or_404(Order, id=order_id)

        try:
            order, status_changed = update_order_status(
                order=order,
                status=serializer.validated_data.get("status"),
                tracking_number=serializer.validated_data.get("tracking_number"),
            )
        except (InvalidOrderStatusError, InvalidOrderTransitionError) as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(
            "Admin order update",
            extra={
                "order_id": str(order.id),
                "status": order.status,
                "status_changed": status_changed,
                "admin_id": request.user.pk,
            },
        )

        order = Order.objects.prefetch_related("lines").get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
