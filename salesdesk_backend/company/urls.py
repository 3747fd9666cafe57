# company/urls.py

from django.urls import path

from company.views import CompanySettingsView, NotificationSettingsView

urlpatterns = [
    path("settings/", CompanySettingsView.as_view(), name="company-settings"),
    path("notifications/", NotificationSettingsView.as_view(), name="notification-settings"),
]
