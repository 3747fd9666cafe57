# sales/filters.py

import django_filters
from django.db.models import Q

from sales.models import Sale


class SaleFilter(django_filters.FilterSet):
    """
    Query params:
    - status=pending|completed|cancelled
    - date_from / date_to  (YYYY-MM-DD, inclusive, local time)
    - customer=<text>      (customer snapshot icontains)
    - issuer=<text>        (issuer snapshot icontains)
    - q=<text>             (invoice number or customer)
    """

    status = django_filters.ChoiceFilter(choices=Sale.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    customer = django_filters.CharFilter(field_name="customer_name", lookup_expr="icontains")
    issuer = django_filters.CharFilter(field_name="issuer_name", lookup_expr="icontains")
    q = django_filters.CharFilter(method="filter_q")

    class Meta:
        model = Sale
        fields = ["status", "date_from", "date_to", "customer", "issuer", "q"]

    def filter_q(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(invoice_no__icontains=value) | Q(customer_name__icontains=value)
        )
