# sales/api/urls.py

"""
SALES API URLS

Mounted at /api/sales/:
    GET  /api/sales/                      list (scoped)
    POST /api/sales/                      record a sale
    GET  /api/sales/mine/                 my transactions
    GET  /api/sales/<uuid>/               retrieve
    GET  /api/sales/<uuid>/invoice/       PDF
    POST /api/sales/<uuid>/send-invoice/
    POST /api/sales/<uuid>/complete/
    POST /api/sales/<uuid>/cancel/

SimpleRouter: an empty prefix under DefaultRouter would put the API root
view on top of the list route.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.viewsets.sale import SaleViewSet

router = SimpleRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
