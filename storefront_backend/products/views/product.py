# products/views/product.py

"""
PRODUCT VIEWSETS

Purpose:
- Public catalog browsing for the storefront (AllowAny, published only)
- Admin product management (CRUD) for store admins

Endpoints:
- GET  /api/products/                 (?q=<search>&featured=true)
- GET  /api/products/<uuid>/
- CRUD /api/admin/products/

Security hardening:
- Public reads are throttled to reduce scraping/abuse
"""

from __future__ import annotations

import logging

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.throttling import AnonRateThrottle

from permissions.roles import IsStoreAdmin
from products.models import Product
from products.serializers import AdminProductSerializer, ProductSerializer

logger = logging.getLogger(__name__)


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


def _truthy(value) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


@extend_schema_view(
    list=extend_schema(
        tags=["Catalog"],
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Optional search over name and description.",
            ),
            OpenApiParameter(
                name="featured",
                type=bool,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only featured products.",
            ),
        ],
        description="Published products (AllowAny).",
    ),
    retrieve=extend_schema(tags=["Catalog"], description="One published product."),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Storefront catalog.

    Unpublished products are invisible here (404 on retrieve).
    """

    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    def get_queryset(self):
        qs = Product.objects.filter(is_published=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(description__icontains=q))

        if _truthy(self.request.query_params.get("featured")):
            qs = qs.filter(featured=True)

        return qs.order_by("-featured", "name")


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"]),
    update=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminProductViewSet(viewsets.ModelViewSet):
    """
    Admin catalog management.

    Renaming a product regenerates its slug (see Product.save()).
    """

    serializer_class = AdminProductSerializer
    permission_classes = [IsAuthenticated, IsStoreAdmin]
    filterset_fields = ["is_published", "featured"]

    def get_queryset(self):
        qs = Product.objects.all()

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(slug__icontains=q))

        return qs.order_by("-created_at")

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(
            "Product created",
            extra={"product_id": str(product.id), "user_id": self.request.user.pk},
        )

    def perform_update(self, serializer):
        product = serializer.save()
        logger.info(
            "Product updated",
            extra={"product_id": str(product.id), "user_id": self.request.user.pk},
        )
