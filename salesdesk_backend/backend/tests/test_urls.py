from unittest.mock import MagicMock, patch

from django.db.utils import OperationalError
from django.test import TestCase
from rest_framework.test import APIClient


class ApiSurfaceTests(TestCase):
    """
    GUARANTEES:
    - Health check and API index are public
    - OpenAPI schema is served
    """

    def setUp(self):
        self.client = APIClient()

    def test_health_check(self):
        response = self.client.get("/api/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"status": "ok", "db": "ok"})

    def test_api_root_lists_modules(self):
        response = self.client.get("/api/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["modules"]["sales"], "/api/sales/")
        self.assertEqual(response.data["auth"]["login"], "/api/auth/login/")

    def test_schema(self):
        response = self.client.get("/api/schema/")

        self.assertEqual(response.status_code, 200)

    def test_health_check_hides_database_error(self):
        broken = MagicMock()
        broken.__getitem__.return_value.cursor.side_effect = OperationalError(
            'could not connect to server at "db.internal" (10.0.0.5)'
        )

        with patch("backend.urls.connections", broken), self.assertLogs("backend.urls", "ERROR"):
            response = self.client.get("/api/health/")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(
            response.data,
            {"status": "degraded", "db": "down", "error": "database unavailable"},
        )
