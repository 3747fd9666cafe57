# products/management/commands/seed_products.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Product

# (sku, name, category, description, price, stock, track_inventory)
SAMPLE_PRODUCTS = [
    (
        "NET-CBL-001",
        "Networking Cable",
        "Networking Hardware",
        "Cat6 Ethernet cable, 305m box",
        "5000.00",
        100,
        True,
    ),
    (
        "SRV-RTR-001",
        "Router Configuration",
        "Services",
        "Professional router setup and configuration",
        "15000.00",
        0,
        False,
    ),
    (
        "NET-SWH-001",
        "Network Switch 8-Port",
        "Networking Hardware",
        "Gigabit unmanaged switch, 8 ports",
        "25000.00",
        20,
        True,
    ),
    (
        "NET-WAP-001",
        "WiFi Access Point",
        "Networking Hardware",
        "Dual-band ceiling mount access point",
        "35000.00",
        15,
        True,
    ),
    (
        "SRV-SUP-001",
        "Technical Support",
        "Services",
        "On-site technical support (per visit)",
        "8000.00",
        0,
        False,
    ),
]


class Command(BaseCommand):
    help = "Seed the sample product and service catalog"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        created_count = 0

        for sku, name, category, description, price, stock, tracked in SAMPLE_PRODUCTS:
            _, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "category": category,
                    "description": description,
                    "unit_price": Decimal(price),
                    "stock_quantity": stock,
                    "track_inventory": tracked,
                },
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {sku} {name}")
            else:
                self.stdout.write(f"exists:  {sku} {name}")

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} new).")
        )
