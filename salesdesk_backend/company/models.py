# company/models.py

"""
COMPANY SINGLETONS

- CompanySettings: branding/contact block printed on invoices, reports and emails
- NotificationSettings: who receives the "new sale" email and with which subject

Both tables hold exactly one row (pk=1). Use .load() to read them;
the row is created with defaults the first time it is needed.
"""

from django.conf import settings
from django.db import models

DEFAULT_COMPANY_NAME = "YAROTECH NETWORK LIMITED"
DEFAULT_COMPANY_EMAIL = "info@yarotech.com.ng"


class SingletonModel(models.Model):
    SINGLETON_PK = 1

    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError(f"{type(self).__name__} cannot be deleted")

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj


class CompanySettings(SingletonModel):
    company_name = models.CharField(max_length=255, default=DEFAULT_COMPANY_NAME)
    address = models.TextField(
        blank=True,
        default="No. 122 Lukoro Plaza, Farm Center, Kano State",
    )
    email = models.EmailField(blank=True, default=DEFAULT_COMPANY_EMAIL)
    phone = models.CharField(max_length=64, blank=True, default="+234 814 024 4774")
    logo_url = models.URLField(max_length=500, blank=True, default="")
    currency_symbol = models.CharField(max_length=8, default="₦")

    class Meta:
        verbose_name = "company settings"
        verbose_name_plural = "company settings"

    def __str__(self):
        return self.company_name


class NotificationSettings(SingletonModel):
    notification_email = models.EmailField(default=DEFAULT_COMPANY_EMAIL)
    send_on_sale = models.BooleanField(default=True)
    email_subject_template = models.CharField(
        max_length=255,
        default=f"New Sale Receipt - {DEFAULT_COMPANY_NAME}",
    )

    class Meta:
        verbose_name = "notification settings"
        verbose_name_plural = "notification settings"

    def __str__(self):
        return f"Notifications -> {self.notification_email}"
