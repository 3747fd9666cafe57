from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Product

User = get_user_model()


class ProductPermissionTests(TestCase):
    """
    Permission & access tests.

    GUARANTEES:
    - Anonymous users have no access
    - Staff can read the catalog but never change it
    - Low-stock alerts are admin only
    """

    URL = "/api/products/"

    def setUp(self):
        self.client = APIClient()
        self.staff = User.objects.create_user(email="staff@example.com", password="pass1234")
        self.product = Product.objects.create(
            name="Network Router",
            sku="NET-RTR-001",
            unit_price=Decimal("45000.00"),
        )

    def test_anonymous_user_is_rejected(self):
        response = self.client.get(self.URL)
        self.assertEqual(response.status_code, 401)

    def test_staff_can_read(self):
        self.client.force_authenticate(self.staff)

        self.assertEqual(self.client.get(self.URL).status_code, 200)
        self.assertEqual(self.client.get(f"{self.URL}{self.product.pk}/").status_code, 200)

    def test_staff_cannot_write(self):
        self.client.force_authenticate(self.staff)

        create = self.client.post(
            self.URL, {"sku": "X-1", "name": "X", "unit_price": "1.00"}, format="json"
        )
        update = self.client.patch(
            f"{self.URL}{self.product.pk}/", {"name": "Changed"}, format="json"
        )
        delete = self.client.delete(f"{self.URL}{self.product.pk}/")
        toggle = self.client.post(f"{self.URL}{self.product.pk}/toggle-active/")

        for response in (create, update, delete, toggle):
            self.assertEqual(response.status_code, 403)

        self.product.refresh_from_db()
        self.assertEqual(self.product.name, "Network Router")
        self.assertTrue(self.product.is_active)

    def test_staff_cannot_view_low_stock_alerts(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get(f"{self.URL}alerts/low-stock/")

        self.assertEqual(response.status_code, 403)
