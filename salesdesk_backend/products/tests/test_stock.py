# products/tests/test_stock.py

from decimal import Decimal

from django.test import TestCase

from products.models import Product
from products.services import InsufficientStockError, deduct_stock, lock_products, restock


class ProductStockTests(TestCase):
    """
    Stock service tests.

    GUARANTEES:
    - Stock never goes negative
    - Quantities are whole positive units
    - Untracked products are never touched
    """

    def setUp(self):
        self.product = Product.objects.create(
            name="Ethernet Cable",
            sku="CBL-ETH-005",
            unit_price=Decimal("2500.00"),
            stock_quantity=10,
        )
        self.service = Product.objects.create(
            name="Network Configuration",
            sku="SVC-CFG-001",
            unit_price=Decimal("25000.00"),
            track_inventory=False,
        )

    def test_deduct_and_restock(self):
        deduct_stock(product=self.product, quantity=4)
        self.assertEqual(self.product.stock_quantity, 6)

        restock(product=self.product, quantity=2)
        self.assertEqual(self.product.stock_quantity, 8)

    def test_cannot_go_negative(self):
        with self.assertRaises(InsufficientStockError):
            deduct_stock(product=self.product, quantity=11)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 10)

    def test_quantity_must_be_positive_integer(self):
        for bad in (0, -1, 1.5, "2", True):
            with self.assertRaises(ValueError):
                deduct_stock(product=self.product, quantity=bad)

    def test_untracked_product_is_ignored(self):
        deduct_stock(product=self.service, quantity=100)

        self.service.refresh_from_db()
        self.assertEqual(self.service.stock_quantity, 0)

    def test_lock_products_returns_mapping(self):
        locked = lock_products([self.product.pk, self.service.pk, self.product.pk])

        self.assertEqual(set(locked), {self.product.pk, self.service.pk})
