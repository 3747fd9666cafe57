import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CompanySettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company_name", models.CharField(default="YAROTECH NETWORK LIMITED", max_length=255)),
                (
                    "address",
                    models.TextField(blank=True, default="No. 122 Lukoro Plaza, Farm Center, Kano State"),
                ),
                ("email", models.EmailField(blank=True, default="info@yarotech.com.ng", max_length=254)),
                ("phone", models.CharField(blank=True, default="+234 814 024 4774", max_length=64)),
                ("logo_url", models.URLField(blank=True, default="", max_length=500)),
                ("currency_symbol", models.CharField(default="₦", max_length=8)),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "company settings",
                "verbose_name_plural": "company settings",
            },
        ),
        migrations.CreateModel(
            name="NotificationSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("notification_email", models.EmailField(default="info@yarotech.com.ng", max_length=254)),
                ("send_on_sale", models.BooleanField(default=True)),
                (
                    "email_subject_template",
                    models.CharField(default="New Sale Receipt - YAROTECH NETWORK LIMITED", max_length=255),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "notification settings",
                "verbose_name_plural": "notification settings",
            },
        ),
    ]
