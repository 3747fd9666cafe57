# audit/filters.py

import django_filters

from audit.models import AuditLogEntry


class AuditLogEntryFilter(django_filters.FilterSet):
    """
    Query params:
    - action_type=CREATE|UPDATE|DELETE|LOGIN|LOGOUT
    - entity_type=<text>   (icontains)
    - user=<text>          (actor name icontains)
    - entity_id=<exact>
    - date_from / date_to  (YYYY-MM-DD, inclusive)
    """

    action_type = django_filters.ChoiceFilter(choices=AuditLogEntry.ACTION_CHOICES)
    entity_type = django_filters.CharFilter(lookup_expr="icontains")
    entity_id = django_filters.CharFilter()
    user = django_filters.CharFilter(field_name="user_name", lookup_expr="icontains")
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = AuditLogEntry
        fields = ["action_type", "entity_type", "entity_id", "user", "date_from", "date_to"]
