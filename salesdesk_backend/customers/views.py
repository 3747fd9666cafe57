# customers/views.py

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from customers.models import Customer
from customers.serializers import CustomerSerializer
from permissions.roles import CAP_CUSTOMERS_DELETE, IsStaff, user_has_capability


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Search name, email or phone.",
            )
        ]
    )
)
class CustomerViewSet(viewsets.ModelViewSet):
    """
    Customer directory.

    - Any team member can list / create / update customers
    - Only admins can delete
    """

    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsStaff]

    def get_queryset(self):
        qs = Customer.objects.all().order_by("name")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(name__icontains=q) | Q(email__icontains=q) | Q(phone__icontains=q)
            )

        return qs

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        if not user_has_capability(request.user, CAP_CUSTOMERS_DELETE):
            return Response(
                {"detail": "Only admins can delete customers."},
                status=status.HTTP_403_FORBIDDEN,
            )
        return super().destroy(request, *args, **kwargs)
