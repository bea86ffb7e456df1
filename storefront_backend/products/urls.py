# products/urls.py

"""
PRODUCTS URLS

Mounted in backend/urls.py twice:
- /api/products/        -> public catalog (urlpatterns)
- /api/admin/products/  -> admin CRUD (admin_urlpatterns)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import AdminProductViewSet, ProductViewSet

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="products")

admin_router = SimpleRouter()
admin_router.register(r"", AdminProductViewSet, basename="admin-products")

urlpatterns = [
    path("", include(router.urls)),
]

admin_urlpatterns = [
    path("", include(admin_router.urls)),
]
