from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from audit import context
from audit.models import AuditLogEntry
from audit.services import diff_snapshots, record_event
from audit.views import AUDIT_LOG_LIMIT
from customers.models import Customer
from products.models import Product

User = get_user_model()


def _bearer(user) -> str:
    return f"Bearer {RefreshToken.for_user(user).access_token}"


class AuditSignalTests(TestCase):
    """
    GUARANTEES:
    - Creating, changing and deleting tracked records writes one entry each
    - UPDATE entries only carry the fields that changed
    - Saves that change nothing are not logged
    - Without a request, the actor is "System"
    """

    def setUp(self):
        self.product = Product.objects.create(
            sku="NET-RTR-001", name="Network Router", unit_price=Decimal("45000.00")
        )

    def _entries(self, action):
        return AuditLogEntry.objects.filter(entity_type="product", action_type=action)

    def test_create_is_logged(self):
        entry = self._entries(AuditLogEntry.ACTION_CREATE).get()

        self.assertEqual(entry.entity_id, str(self.product.pk))
        self.assertEqual(entry.details["sku"], "NET-RTR-001")
        self.assertEqual(entry.details["unit_price"], "45000.00")
        self.assertEqual(entry.user_name, "System")
        self.assertIsNone(entry.user)

    def test_update_logs_only_changed_fields(self):
        self.product.unit_price = Decimal("47000.00")
        self.product.save()

        entry = self._entries(AuditLogEntry.ACTION_UPDATE).get()
        self.assertEqual(
            entry.details,
            {"old": {"unit_price": "45000.00"}, "new": {"unit_price": "47000.00"}},
        )

    def test_noop_save_is_not_logged(self):
        self.product.save()

        self.assertFalse(self._entries(AuditLogEntry.ACTION_UPDATE).exists())

    def test_delete_is_logged(self):
        pk = self.product.pk
        self.product.delete()

        entry = self._entries(AuditLogEntry.ACTION_DELETE).get()
        self.assertEqual(entry.entity_id, str(pk))
        self.assertEqual(entry.details["name"], "Network Router")

    def test_context_actor_is_used(self):
        admin = User.objects.create_user(
            email="admin@example.com", password="pass1234", role="admin", full_name="Boss"
        )
        actor_token = context.set_actor(admin)
        ip_token = context.set_ip_address("10.0.0.5")
        try:
            Customer.objects.create(name="Kano Tech Hub")
        finally:
            context.reset(actor_token=actor_token, ip_token=ip_token)

        entry = AuditLogEntry.objects.get(entity_type="customer")
        self.assertEqual(entry.user, admin)
        self.assertEqual(entry.user_name, "Boss")
        self.assertEqual(entry.ip_address, "10.0.0.5")


class AuditEntryTests(TestCase):
    """
    GUARANTEES:
    - Entries are append-only
    - Snapshot diffs ignore unchanged keys
    """

    def test_entries_are_immutable(self):
        entry = record_event(action_type=AuditLogEntry.ACTION_LOGIN, entity_type="user")

        entry.entity_type = "changed"
        with self.assertRaises(RuntimeError):
            entry.save()
        with self.assertRaises(RuntimeError):
            entry.delete()

    def test_diff_snapshots(self):
        self.assertEqual(diff_snapshots({"a": 1, "b": 2}, {"a": 1, "b": 2}), {})
        self.assertEqual(
            diff_snapshots({"a": 1, "b": 2}, {"a": 1, "b": 3}),
            {"old": {"b": 2}, "new": {"b": 3}},
        )


class AuditApiTests(TestCase):
    """
    /api/audit/logs/

    GUARANTEES:
    - Admin only
    - Changes made through the API name the authenticated actor
    - Filters narrow the list
    """

    URL = "/api/audit/logs/"

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass1234", role="admin", full_name="Boss"
        )
        self.staff = User.objects.create_user(email="staff@example.com", password="pass1234")

    def test_staff_is_forbidden(self):
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.staff))

        self.assertEqual(self.client.get(self.URL).status_code, 403)

    def test_api_change_records_actor_and_ip(self):
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.admin))

        response = self.client.post(
            "/api/products/",
            {"sku": "AP-001", "name": "Access Point", "unit_price": "30000.00"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)

        entry = AuditLogEntry.objects.get(entity_type="product", action_type="CREATE")
        self.assertEqual(entry.user, self.admin)
        self.assertEqual(entry.user_name, "Boss")
        self.assertEqual(entry.ip_address, "127.0.0.1")

    def test_filters(self):
        record_event(action_type=AuditLogEntry.ACTION_LOGIN, entity_type="user", user=self.staff)
        Customer.objects.create(name="Kano Tech Hub")
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.admin))

        response = self.client.get(self.URL, {"action_type": "LOGIN"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["user_name"], "staff@example.com")

        response = self.client.get(self.URL, {"entity_type": "cust"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["action_type"], "CREATE")

    def test_entries_are_read_only_over_api(self):
        entry = record_event(action_type=AuditLogEntry.ACTION_LOGIN, entity_type="user")
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.admin))

        response = self.client.delete(f"{self.URL}{entry.pk}/")

        self.assertEqual(response.status_code, 405)

    def test_list_is_capped_newest_first(self):
        AuditLogEntry.objects.bulk_create(
            [
                AuditLogEntry(action_type=AuditLogEntry.ACTION_LOGIN, entity_type="user", entity_id=str(i))
                for i in range(AUDIT_LOG_LIMIT + 5)
            ]
        )
        now = timezone.now()
        AuditLogEntry.objects.filter(entity_id="0").update(
            entity_id="oldest", created_at=now - timedelta(days=30)
        )
        AuditLogEntry.objects.filter(entity_id="1").update(
            entity_id="newest", created_at=now + timedelta(minutes=5)
        )
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.admin))

        first_page = self.client.get(self.URL)
        last_page = self.client.get(self.URL, {"page": AUDIT_LOG_LIMIT // 20})

        self.assertEqual(first_page.data["count"], AUDIT_LOG_LIMIT)
        self.assertEqual(first_page.data["results"][0]["entity_id"], "newest")
        self.assertEqual(last_page.status_code, 200)
        self.assertNotIn("oldest", [row["entity_id"] for row in last_page.data["results"]])

        # the cap applies after filtering
        response = self.client.get(self.URL, {"entity_id": "oldest"})
        self.assertEqual(response.data["count"], 1)

    def test_malformed_forwarded_for_falls_back_to_peer_address(self):
        self.client.credentials(HTTP_AUTHORIZATION=_bearer(self.admin))

        for header in ("unknown", "1.2.3.4:5678"):
            response = self.client.post(
                "/api/customers/",
                {"name": f"Customer {header}"},
                format="json",
                HTTP_X_FORWARDED_FOR=header,
            )
            self.assertEqual(response.status_code, 201, response.data)

        ips = set(
            AuditLogEntry.objects.filter(entity_type="customer").values_list("ip_address", flat=True)
        )
        self.assertEqual(ips, {"127.0.0.1"})


class ClientIpTests(TestCase):
    """
    GUARANTEES:
    - Only valid IPv4/IPv6 addresses are ever returned
    """

    def setUp(self):
        self.factory = RequestFactory()

    def test_first_forwarded_hop_wins(self):
        request = self.factory.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1")

        self.assertEqual(context.get_client_ip(request), "203.0.113.7")

    def test_ipv6_forwarded_hop(self):
        request = self.factory.get("/", HTTP_X_FORWARDED_FOR="2001:db8::1")

        self.assertEqual(context.get_client_ip(request), "2001:db8::1")

    def test_garbage_forwarded_hop_uses_remote_addr(self):
        request = self.factory.get("/", HTTP_X_FORWARDED_FOR="unknown", REMOTE_ADDR="198.51.100.2")

        self.assertEqual(context.get_client_ip(request), "198.51.100.2")

    def test_no_valid_address(self):
        request = self.factory.get("/", HTTP_X_FORWARDED_FOR="1.2.3.4:5678", REMOTE_ADDR="")

        self.assertIsNone(context.get_client_ip(request))
