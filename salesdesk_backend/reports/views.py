# reports/views.py

"""
REPORT ENDPOINTS

- GET /api/reports/dashboard/?days=7|30          any team member (scoped)
- GET /api/reports/transactions/                  admin (reports.view)
- GET /api/reports/transactions/export/?format=   admin (reports.view)
"""

from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.negotiation import BaseContentNegotiation
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from company.models import CompanySettings
from permissions.roles import CAP_REPORTS_VIEW, HasCapability, IsStaff
from reports.exports import (
    export_filename,
    render_transactions_csv,
    render_transactions_pdf,
)
from reports.serializers import (
    DashboardQuerySerializer,
    ExportFilterSerializer,
    ReportFilterSerializer,
    TransactionRowSerializer,
)
from reports.services import dashboard_summary, filter_sales, sales_for_user, total_amount

_FILTER_PARAMS = [
    OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="customer", type=str, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="issuer", type=str, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(
        name="status",
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description="Cancelled sales are left out unless status=cancelled.",
    ),
]


class IgnoreFormatNegotiation(BaseContentNegotiation):
    """
    ?format= picks the export type here, not a DRF renderer.
    """

    def select_parser(self, request, parsers):
        return parsers[0]

    def select_renderer(self, request, renderers, format_suffix=None):
        return (renderers[0], renderers[0].media_type)


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, IsStaff]

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="days",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=[7, 30],
            )
        ],
        responses={200: OpenApiTypes.OBJECT},
        description="Weekly / monthly totals with growth and a daily sales series.",
    )
    def get(self, request):
        query = DashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(
            dashboard_summary(user=request.user, days=query.validated_data["days"])
        )


class _TransactionReportMixin:
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW
    filter_serializer_class = ReportFilterSerializer

    def get_report(self, request):
        query = self.filter_serializer_class(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        qs = filter_sales(
            sales_for_user(request.user),
            date_from=params.get("date_from"),
            date_to=params.get("date_to"),
            customer=params.get("customer", ""),
            issuer=params.get("issuer", ""),
            status=params.get("status", ""),
        )
        return params, qs, total_amount(qs)


class TransactionReportView(_TransactionReportMixin, APIView):
    @extend_schema(
        parameters=_FILTER_PARAMS,
        responses={200: TransactionRowSerializer(many=True)},
    )
    def get(self, request):
        _, qs, total = self.get_report(request)
        return Response(
            {
                "count": qs.count(),
                "total": f"{total:.2f}",
                "results": TransactionRowSerializer(qs, many=True).data,
            }
        )


class TransactionExportView(_TransactionReportMixin, APIView):
    filter_serializer_class = ExportFilterSerializer
    content_negotiation_class = IgnoreFormatNegotiation

    @extend_schema(
        parameters=_FILTER_PARAMS
        + [
            OpenApiParameter(
                name="format",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=["csv", "pdf"],
            )
        ],
        responses={(200, "text/csv"): OpenApiTypes.BINARY, (200, "application/pdf"): OpenApiTypes.BINARY},
    )
    def get(self, request):
        params, qs, total = self.get_report(request)
        sales = list(qs)

        if params["format"] == "pdf":
            body = render_transactions_pdf(
                sales,
                total,
                company=CompanySettings.load(),
                date_from=params.get("date_from"),
                date_to=params.get("date_to"),
            )
            response = HttpResponse(body, content_type="application/pdf")
            filename = export_filename("pdf")
        else:
            body = render_transactions_csv(sales, total)
            response = HttpResponse(body, content_type="text/csv; charset=utf-8")
            filename = export_filename("csv")

        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
