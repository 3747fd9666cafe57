from datetime import date, datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from products.models import Product
from reports.services import dashboard_summary, growth_percent, week_start
from sales.models import Sale
from sales.services.sale_service import create_sale

User = get_user_model()


def _at(day, hour=12):
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour, 0))


class ReportTestBase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass1234", role="admin", full_name="Admin User"
        )
        self.staff = User.objects.create_user(
            email="staff@example.com", password="pass1234", full_name="Staff One"
        )
        self.service = Product.objects.create(
            sku="SUP-001",
            name="Technical Support",
            unit_price=Decimal("100.00"),
            track_inventory=False,
        )

    def _sale(self, *, on, amount, issuer=None, customer="Walk-in", status=None):
        sale = create_sale(
            issuer=issuer or self.admin,
            customer_name=customer,
            items=[
                {
                    "product_id": self.service.pk,
                    "quantity": 1,
                    "unit_price": Decimal(amount),
                }
            ],
        )
        changes = {"created_at": _at(on)}
        if status:
            changes["status"] = status
        Sale.objects.filter(pk=sale.pk).update(**changes)
        return Sale.objects.get(pk=sale.pk)


class GrowthHelperTests(TestCase):
    """
    GUARANTEES:
    - Growth is 0 when there is nothing to compare against
    - Growth is rounded to one decimal
    - Weeks start on Sunday
    """

    def test_growth_without_previous_is_zero(self):
        self.assertEqual(growth_percent(Decimal("500"), Decimal("0")), 0.0)

    def test_growth_rounding(self):
        self.assertEqual(growth_percent(Decimal("150"), Decimal("200")), -25.0)
        self.assertEqual(growth_percent(Decimal("1"), Decimal("3")), -66.7)

    def test_week_starts_on_sunday(self):
        self.assertEqual(week_start(date(2025, 10, 12)), date(2025, 10, 12))
        self.assertEqual(week_start(date(2025, 10, 15)), date(2025, 10, 12))
        self.assertEqual(week_start(date(2025, 10, 18)), date(2025, 10, 12))


class DashboardSummaryTests(ReportTestBase):
    """
    GUARANTEES:
    - Weekly and monthly windows match the calendar
    - Cancelled sales never count
    - The daily series covers every day, including empty ones
    - Staff only see their own sales
    """

    TODAY = date(2025, 10, 15)

    def setUp(self):
        super().setUp()
        self._sale(on=date(2025, 10, 13), amount="200.00")
        self._sale(on=date(2025, 10, 7), amount="100.00")
        self._sale(on=date(2025, 9, 20), amount="300.00")
        self._sale(on=date(2025, 10, 14), amount="1000.00", status=Sale.STATUS_CANCELLED)
        self._sale(on=date(2025, 10, 14), amount="50.00", issuer=self.staff)

    def test_admin_summary(self):
        data = dashboard_summary(user=self.admin, days=7, today=self.TODAY)

        self.assertEqual(data["weekly"]["total"], "250.00")
        self.assertEqual(data["weekly"]["count"], 2)
        self.assertEqual(data["weekly"]["previous_total"], "100.00")
        self.assertEqual(data["weekly"]["growth"], 150.0)

        self.assertEqual(data["monthly"]["total"], "350.00")
        self.assertEqual(data["monthly"]["count"], 3)
        self.assertEqual(data["monthly"]["previous_total"], "300.00")
        self.assertEqual(data["monthly"]["growth"], 16.7)

        self.assertEqual(data["totals"]["sales_total"], "650.00")
        self.assertEqual(data["totals"]["sales_count"], 4)

    def test_daily_series(self):
        data = dashboard_summary(user=self.admin, days=7, today=self.TODAY)
        series = data["series"]

        self.assertEqual(len(series), 7)
        self.assertEqual(series[0]["date"], "2025-10-09")
        self.assertEqual(series[-1]["date"], "2025-10-15")

        by_date = {row["date"]: row for row in series}
        self.assertEqual(by_date["2025-10-13"]["total"], "200.00")
        self.assertEqual(by_date["2025-10-13"]["label"], "Oct 13")
        self.assertEqual(by_date["2025-10-14"]["count"], 1)
        self.assertEqual(by_date["2025-10-15"]["total"], "0.00")

    def test_thirty_day_series(self):
        data = dashboard_summary(user=self.admin, days=30, today=self.TODAY)

        self.assertEqual(len(data["series"]), 30)
        self.assertEqual(data["series"][0]["date"], "2025-09-16")

    def test_staff_summary_is_scoped(self):
        data = dashboard_summary(user=self.staff, days=7, today=self.TODAY)

        self.assertEqual(data["weekly"]["total"], "50.00")
        self.assertEqual(data["totals"]["sales_count"], 1)

    def test_unsupported_period(self):
        with self.assertRaises(ValueError):
            dashboard_summary(user=self.admin, days=14, today=self.TODAY)


class ReportApiTests(ReportTestBase):
    """
    GUARANTEES:
    - Transaction reports are admin only
    - date_to includes the whole day
    - Cancelled sales only appear when asked for
    - CSV and PDF exports carry totals and file names
    """

    def setUp(self):
        super().setUp()
        self.client = APIClient()

        self.first = self._sale(on=date(2025, 10, 1), amount="100.00", customer="Ali Traders")
        self.second = self._sale(
            on=date(2025, 10, 2), amount="250.50", customer="Kano Tech Hub", issuer=self.staff
        )
        self.cancelled = self._sale(
            on=date(2025, 10, 2), amount="999.00", status=Sale.STATUS_CANCELLED
        )
        Sale.objects.filter(pk=self.second.pk).update(created_at=_at(date(2025, 10, 2), hour=23))

    def test_staff_cannot_view_transaction_report(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/reports/transactions/")

        self.assertEqual(response.status_code, 403)

    def test_transaction_report_excludes_cancelled(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get("/api/reports/transactions/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["total"], "350.50")

    def test_cancelled_on_request(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get("/api/reports/transactions/", {"status": "cancelled"})

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["total"], "999.00")

    def test_date_to_covers_whole_day(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            "/api/reports/transactions/",
            {"date_from": "2025-10-02", "date_to": "2025-10-02"},
        )

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["customer_name"], "Kano Tech Hub")

    def test_customer_and_issuer_filters(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            "/api/reports/transactions/", {"customer": "ali", "issuer": "admin"}
        )

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["total"], "100.00")

    def test_reversed_dates_rejected(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            "/api/reports/transactions/",
            {"date_from": "2025-10-05", "date_to": "2025-10-01"},
        )

        self.assertEqual(response.status_code, 400)

    def test_csv_export(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get("/api/reports/transactions/export/", {"format": "csv"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response["Content-Type"].startswith("text/csv"))
        today = timezone.localdate().isoformat()
        self.assertIn(f"Transaction_Report_{today}.csv", response["Content-Disposition"])

        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], "Date,Customer,Issued By,Amount,Status")
        self.assertEqual(lines[1], "2025-10-02 23:00:00,Kano Tech Hub,Staff One,250.50,completed")
        self.assertEqual(lines[-2], "")
        self.assertEqual(lines[-1], "Total,,,350.50,")

    def test_pdf_export(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            "/api/reports/transactions/export/",
            {"format": "pdf", "date_from": "2025-10-01"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_export_rejects_unknown_format(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get("/api/reports/transactions/export/", {"format": "xlsx"})

        self.assertEqual(response.status_code, 400)

    def test_dashboard_endpoint(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/reports/dashboard/", {"days": "30"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["days"], 30)
        self.assertEqual(len(response.data["series"]), 30)

    def test_dashboard_rejects_other_periods(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/reports/dashboard/", {"days": "14"})

        self.assertEqual(response.status_code, 400)
