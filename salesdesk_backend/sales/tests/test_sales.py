from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from customers.models import Customer
from products.models import Product
from sales.models import Sale, SaleItem
from sales.services.sale_lifecycle import (
    InvalidSaleTransitionError,
    can_transition,
    validate_transition,
)
from sales.services.sale_service import (
    MAX_QUANTITY,
    EmptySaleError,
    InvalidSaleItemError,
    SaleError,
    create_sale,
)

User = get_user_model()


class SaleCreationTests(TestCase):
    """
    Tests for sale creation through the domain service.

    GUARANTEES:
    - Totals equal the sum of line totals
    - Lines snapshot product name, SKU and price
    - Catalog price is used unless a line overrides it
    - Invalid carts never create a sale
    """

    def setUp(self):
        self.staff = User.objects.create_user(
            email="staff@example.com",
            password="pass1234",
            full_name="Amina Bello",
        )
        self.router = Product.objects.create(
            sku="NET-RTR-001",
            name="Network Router",
            unit_price=Decimal("45000.00"),
            stock_quantity=10,
        )
        self.cable = Product.objects.create(
            sku="CBL-ETH-005",
            name="Ethernet Cable",
            unit_price=Decimal("2500.00"),
            stock_quantity=50,
        )

    def test_create_sale_computes_total_and_snapshots(self):
        sale = create_sale(
            issuer=self.staff,
            customer_name="Walk-in Customer",
            items=[
                {"product_id": self.router.pk, "quantity": 1},
                {"product_id": self.cable.pk, "quantity": 4},
            ],
        )

        self.assertEqual(sale.total_amount, Decimal("55000.00"))
        self.assertEqual(sale.status, Sale.STATUS_COMPLETED)
        self.assertIsNotNone(sale.completed_at)
        self.assertEqual(sale.issuer_name, "Amina Bello")
        self.assertTrue(sale.invoice_no.startswith("INV"))

        cable_line = sale.items.get(product=self.cable)
        self.assertEqual(cable_line.product_name, "Ethernet Cable")
        self.assertEqual(cable_line.sku, "CBL-ETH-005")
        self.assertEqual(cable_line.total_price, Decimal("10000.00"))

    def test_line_price_override_is_used(self):
        sale = create_sale(
            issuer=self.staff,
            customer_name="Discount Buyer",
            items=[
                {
                    "product_id": self.router.pk,
                    "quantity": 2,
                    "unit_price": Decimal("40000.00"),
                }
            ],
        )

        line = sale.items.get()
        self.assertEqual(line.unit_price, Decimal("40000.00"))
        self.assertEqual(sale.total_amount, Decimal("80000.00"))

    def test_customer_record_supplies_name(self):
        customer = Customer.objects.create(name="Kano Tech Hub", email="hub@example.com")

        sale = create_sale(
            issuer=self.staff,
            customer=customer,
            items=[{"product_id": self.cable.pk, "quantity": 1}],
        )

        self.assertEqual(sale.customer, customer)
        self.assertEqual(sale.customer_name, "Kano Tech Hub")

    def test_pending_sale_has_no_completion_time(self):
        sale = create_sale(
            issuer=self.staff,
            customer_name="Later Payer",
            status=Sale.STATUS_PENDING,
            items=[{"product_id": self.cable.pk, "quantity": 1}],
        )

        self.assertEqual(sale.status, Sale.STATUS_PENDING)
        self.assertIsNone(sale.completed_at)

    # =====================================================
    # REJECTIONS
    # =====================================================

    def test_empty_sale_is_rejected(self):
        with self.assertRaises(EmptySaleError):
            create_sale(issuer=self.staff, customer_name="Nobody", items=[])

        self.assertEqual(Sale.objects.count(), 0)

    def test_missing_customer_is_rejected(self):
        with self.assertRaises(SaleError):
            create_sale(
                issuer=self.staff,
                customer_name="   ",
                items=[{"product_id": self.cable.pk, "quantity": 1}],
            )

    def test_inactive_product_is_rejected(self):
        self.cable.is_active = False
        self.cable.save()

        with self.assertRaises(InvalidSaleItemError):
            create_sale(
                issuer=self.staff,
                customer_name="Buyer",
                items=[{"product_id": self.cable.pk, "quantity": 1}],
            )

        self.assertEqual(Sale.objects.count(), 0)

    def test_negative_price_override_is_rejected(self):
        with self.assertRaises(InvalidSaleItemError):
            create_sale(
                issuer=self.staff,
                customer_name="Buyer",
                items=[
                    {
                        "product_id": self.cable.pk,
                        "quantity": 1,
                        "unit_price": Decimal("-1.00"),
                    }
                ],
            )

    def test_zero_total_is_rejected(self):
        with self.assertRaises(SaleError):
            create_sale(
                issuer=self.staff,
                customer_name="Freebie",
                items=[
                    {
                        "product_id": self.cable.pk,
                        "quantity": 1,
                        "unit_price": Decimal("0.00"),
                    }
                ],
            )

        self.assertEqual(Sale.objects.count(), 0)

    def test_oversized_quantity_is_rejected(self):
        with self.assertRaises(InvalidSaleItemError):
            create_sale(
                issuer=self.staff,
                customer_name="Buyer",
                items=[{"product_id": self.cable.pk, "quantity": MAX_QUANTITY + 1}],
            )

        self.assertEqual(Sale.objects.count(), 0)

    def test_cannot_start_as_cancelled(self):
        with self.assertRaises(SaleError):
            create_sale(
                issuer=self.staff,
                customer_name="Buyer",
                status=Sale.STATUS_CANCELLED,
                items=[{"product_id": self.cable.pk, "quantity": 1}],
            )


class SaleModelTests(TestCase):
    """
    Tests for Sale lifecycle and immutability.

    GUARANTEES:
    - Financial snapshot cannot be edited after creation
    - Sale items cannot be edited or deleted
    - Status moves obey the lifecycle table
    """

    def setUp(self):
        self.user = User.objects.create_user(email="staff@example.com", password="pass1234")
        self.product = Product.objects.create(
            sku="SUP-001",
            name="Technical Support",
            unit_price=Decimal("15000.00"),
            track_inventory=False,
        )
        self.sale = create_sale(
            issuer=self.user,
            customer_name="Fatima Musa",
            items=[{"product_id": self.product.pk, "quantity": 2}],
        )

    # =====================================================
    # IMMUTABILITY
    # =====================================================

    def test_total_cannot_change(self):
        self.sale.total_amount = Decimal("1.00")
        with self.assertRaises(ValueError):
            self.sale.save()

        refreshed = Sale.objects.get(pk=self.sale.pk)
        self.assertEqual(refreshed.total_amount, Decimal("30000.00"))

    def test_customer_snapshot_cannot_change(self):
        self.sale.customer_name = "Someone Else"
        with self.assertRaises(ValueError):
            self.sale.save()

    def test_notes_can_change(self):
        self.sale.notes = "Delivered"
        self.sale.save()

        self.assertEqual(Sale.objects.get(pk=self.sale.pk).notes, "Delivered")

    def test_sale_item_is_immutable(self):
        item = self.sale.items.get()
        item.quantity = 5
        with self.assertRaises(ValidationError):
            item.save()

        with self.assertRaises(ValidationError):
            item.delete()

        self.assertEqual(SaleItem.objects.get(pk=item.pk).quantity, 2)

    def test_direct_illegal_status_change_is_blocked(self):
        self.sale.status = Sale.STATUS_PENDING
        with self.assertRaises(ValueError):
            self.sale.save()

    # =====================================================
    # LIFECYCLE RULES
    # =====================================================

    def test_transition_table(self):
        self.assertTrue(can_transition(from_status="pending", to_status="completed"))
        self.assertTrue(can_transition(from_status="pending", to_status="cancelled"))
        self.assertTrue(can_transition(from_status="completed", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="completed", to_status="pending"))
        self.assertFalse(can_transition(from_status="cancelled", to_status="completed"))

    def test_completed_sale_cannot_complete_again(self):
        with self.assertRaises(InvalidSaleTransitionError):
            validate_transition(sale=self.sale, target_status=Sale.STATUS_COMPLETED)

    def test_short_id_is_uppercase_prefix(self):
        self.assertEqual(self.sale.short_id, self.sale.id.hex[:8].upper())
