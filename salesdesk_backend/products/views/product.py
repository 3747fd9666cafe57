# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Catalog endpoints (read for everyone signed in, writes for admins)
- Low stock alerts
- Category list for filters / product form

Visibility:
- staff only ever see active products (sale form)
- admins see everything and may filter by is_active
"""

from django.db import transaction
from django.db.models import F, Q
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_PRODUCTS_MANAGE,
    HasCapability,
    IsStaff,
    user_has_capability,
)
from products.models import Product
from products.serializers import ProductSerializer

_TRUE = ("1", "true", "yes")
_FALSE = ("0", "false", "no")


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search name or SKU.",
            ),
            OpenApiParameter(
                name="category",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Exact category (case-insensitive).",
            ),
            OpenApiParameter(
                name="is_active",
                type=bool,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Admins only; staff always get active products.",
            ),
        ]
    )
)
class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    All team members:
    - list / retrieve
    - categories

    Admin (products.manage):
    - create / update / delete
    - toggle-active
    - low stock alerts
    """

    serializer_class = ProductSerializer
    required_capability = CAP_PRODUCTS_MANAGE

    READ_ACTIONS = {"list", "retrieve", "categories"}

    def get_permissions(self):
        if self.action in self.READ_ACTIONS:
            return [IsAuthenticated(), IsStaff()]
        return [IsAuthenticated(), HasCapability()]

    def _can_manage(self) -> bool:
        return user_has_capability(self.request.user, CAP_PRODUCTS_MANAGE)

    def get_queryset(self):
        qs = Product.objects.all().order_by("name")
        params = self.request.query_params

        if not self._can_manage():
            qs = qs.filter(is_active=True)
        else:
            is_active = (params.get("is_active") or "").strip().lower()
            if is_active in _TRUE:
                qs = qs.filter(is_active=True)
            elif is_active in _FALSE:
                qs = qs.filter(is_active=False)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(sku__icontains=q))

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(category__iexact=category)

        return qs

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @transaction.atomic
    def perform_update(self, serializer):
        # write only the submitted columns, on the locked row
        product = Product.objects.select_for_update().get(pk=serializer.instance.pk)
        fields = list(serializer.validated_data)
        for name, value in serializer.validated_data.items():
            setattr(product, name, value)
        product.save(update_fields=fields + ["updated_at"])
        serializer.instance = product

    # -----------------------------
    # Toggle active (soft enable/disable)
    # -----------------------------
    @extend_schema(request=None, responses={200: ProductSerializer})
    @action(detail=True, methods=["post"], url_path="toggle-active")
    @transaction.atomic
    def toggle_active(self, request, pk=None):
        product = Product.objects.select_for_update().get(pk=self.get_object().pk)
        product.is_active = not product.is_active
        product.save(update_fields=["is_active", "updated_at"])
        return Response(self.get_serializer(product).data)

    # -----------------------------
    # Categories (distinct, non-empty)
    # -----------------------------
    @extend_schema(responses={200: dict})
    @action(detail=False, methods=["get"], url_path="categories")
    def categories(self, request):
        names = (
            self.get_queryset()
            .exclude(category="")
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )
        data = list(names)
        return Response({"count": len(data), "results": data})

    # -----------------------------
    # Alerts: Low stock
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Override every product's own low_stock_threshold.",
            )
        ],
        responses={200: ProductSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock_alerts(self, request):
        """
        GET /api/products/alerts/low-stock/?threshold=<int>

        Only active products that track inventory.
        """
        qs = Product.objects.filter(is_active=True, track_inventory=True)

        raw_threshold = (request.query_params.get("threshold") or "").strip()

        if raw_threshold:
            try:
                threshold = int(raw_threshold)
                if threshold < 0:
                    raise ValueError
            except ValueError:
                return Response(
                    {"detail": "threshold must be a non-negative integer"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            qs = qs.filter(stock_quantity__lte=threshold)
        else:
            qs = qs.filter(stock_quantity__lte=F("low_stock_threshold"))

        data = self.get_serializer(qs.order_by("stock_quantity", "name"), many=True).data
        return Response({"count": len(data), "results": data})
