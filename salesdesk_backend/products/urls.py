# products/urls.py

"""
PRODUCTS URLS

Routes under /api/products/:
    /api/products/                      list / create
    /api/products/<uuid>/               retrieve / update / delete
    /api/products/<uuid>/toggle-active/
    /api/products/categories/
    /api/products/alerts/low-stock/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
