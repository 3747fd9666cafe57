# reports/urls.py

from django.urls import path

from reports.views import DashboardView, TransactionExportView, TransactionReportView

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="reports-dashboard"),
    path("transactions/", TransactionReportView.as_view(), name="reports-transactions"),
    path(
        "transactions/export/",
        TransactionExportView.as_view(),
        name="reports-transactions-export",
    ),
]
