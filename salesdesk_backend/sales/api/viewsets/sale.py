# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET

Purpose:
- Record a sale (cart lines -> immutable sale + stock deduction)
- Sales history (admins: everyone's, staff: their own)
- Invoice PDF download / email
- Status moves: complete (admin or issuer), cancel (admin)
- "My Transactions" summary

Error mapping:
- validation / empty / bad lines -> 400
- insufficient stock            -> 409
- illegal status move           -> 409
- sale outside caller's scope   -> 404
======================================================
"""

from __future__ import annotations

from django.db.models import Sum
from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_SALES_CANCEL,
    CAP_SALES_CREATE,
    CAP_SALES_VIEW_ALL,
    HasCapability,
    IsStaff,
    is_admin,
    user_has_capability,
)
from sales.documents import InvoiceRenderError, invoice_filename, render_invoice_pdf
from sales.filters import SaleFilter
from sales.models import Sale
from sales.serializers import (
    SaleCancelSerializer,
    SaleCreateSerializer,
    SaleSerializer,
    SendInvoiceSerializer,
)
from sales.services.notifications import NotificationError, send_invoice_email
from sales.services.sale_lifecycle import InvalidSaleTransitionError
from sales.services.sale_service import (
    SaleError,
    StockValidationError,
    cancel_sale,
    complete_sale,
    create_sale,
)


class SaleViewSet(
    mixins.CreateModelMixin,
    viewsets.ReadOnlyModelViewSet,
):
    serializer_class = SaleSerializer
    filterset_class = SaleFilter

    ACTION_CAPABILITIES = {
        "create": CAP_SALES_CREATE,
        "cancel": CAP_SALES_CANCEL,
    }

    def get_permissions(self):
        self.required_capability = self.ACTION_CAPABILITIES.get(self.action)
        if self.required_capability:
            return [IsAuthenticated(), HasCapability()]
        return [IsAuthenticated(), IsStaff()]

    def get_serializer_class(self):
        if self.action == "create":
            return SaleCreateSerializer
        return SaleSerializer

    # ======================================================
    # QUERYSET (row scoping)
    # ======================================================

    def get_queryset(self):
        qs = (
            Sale.objects.all()
            .select_related("customer", "issuer", "cancelled_by")
            .prefetch_related("items")
            .order_by("-created_at")
        )
        user = self.request.user
        if not user_has_capability(user, CAP_SALES_VIEW_ALL):
            qs = qs.filter(issuer=user)
        return qs

    # ======================================================
    # CREATE
    # POST /api/sales/
    # ======================================================

    @extend_schema(request=SaleCreateSerializer, responses={201: SaleSerializer})
    def create(self, request, *args, **kwargs):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            sale = create_sale(
                issuer=request.user,
                items=data["items"],
                customer=data.get("customer"),
                customer_name=data.get("customer_name", ""),
                status=data["status"],
                notes=data.get("notes", ""),
            )
        except StockValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except SaleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        sale = self.get_queryset().get(pk=sale.pk)
        return Response(
            SaleSerializer(sale, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    # ======================================================
    # INVOICE PDF
    # GET /api/sales/:id/invoice/?paper=A4|A5&watermark=
    # ======================================================

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="paper",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=["A4", "A5"],
            ),
            OpenApiParameter(
                name="watermark",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Defaults to the company name; empty disables it.",
            ),
        ],
        responses={(200, "application/pdf"): OpenApiTypes.BINARY},
    )
    @action(detail=True, methods=["get"], url_path="invoice")
    def invoice(self, request, pk=None):
        sale = self.get_object()
        paper = (request.query_params.get("paper") or "A4").strip()
        watermark = request.query_params.get("watermark")

        try:
            pdf = render_invoice_pdf(sale, paper=paper, watermark=watermark)
        except InvoiceRenderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        response = HttpResponse(pdf, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{invoice_filename(sale)}"'
        return response

    # ======================================================
    # EMAIL INVOICE
    # POST /api/sales/:id/send-invoice/
    # ======================================================

    @extend_schema(request=SendInvoiceSerializer, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="send-invoice")
    def send_invoice(self, request, pk=None):
        sale = self.get_object()
        serializer = SendInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        recipient = serializer.validated_data["recipient"]
        if not recipient and sale.customer is not None:
            recipient = sale.customer.email

        try:
            sale = send_invoice_email(
                sale=sale,
                recipient=recipient,
                paper=serializer.validated_data["paper"],
            )
        except NotificationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SaleSerializer(sale, context={"request": request}).data)

    # ======================================================
    # STATUS MOVES
    # ======================================================

    @extend_schema(request=None, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request, pk=None):
        sale = self.get_object()
        if sale.issuer_id != request.user.pk and not is_admin(request.user):
            return Response(
                {"detail": "Only admins or the issuer can complete this sale."},
                status=status.HTTP_403_FORBIDDEN,
            )

        try:
            sale = complete_sale(sale=sale, user=request.user)
        except InvalidSaleTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        sale = self.get_queryset().get(pk=sale.pk)
        return Response(SaleSerializer(sale, context={"request": request}).data)

    @extend_schema(request=SaleCancelSerializer, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        sale = self.get_object()
        serializer = SaleCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            sale = cancel_sale(
                sale=sale,
                user=request.user,
                reason=serializer.validated_data["reason"],
            )
        except InvalidSaleTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        sale = self.get_queryset().get(pk=sale.pk)
        return Response(SaleSerializer(sale, context={"request": request}).data)

    # ======================================================
    # MY TRANSACTIONS
    # GET /api/sales/mine/
    # ======================================================

    @extend_schema(responses={200: SaleSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        qs = self.filter_queryset(
            self.get_queryset().filter(issuer=request.user)
        )
        total = qs.aggregate(total=Sum("total_amount"))["total"] or 0

        return Response(
            {
                "count": qs.count(),
                "total": f"{total:.2f}",
                "results": SaleSerializer(qs, many=True, context={"request": request}).data,
            }
        )
