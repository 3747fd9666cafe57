# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    A recorded sale (transaction header).

    GUARANTEES:
    - Financial snapshot is immutable once written
      (total, customer/issuer snapshots, invoice number, created_at)
    - Only status moves, and only along sale_lifecycle.ALLOWED_TRANSITIONS
    - Stock is mutated ONLY via products.services.stock (see sale_service)
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_no = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated invoice number",
    )

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    customer_name = models.CharField(max_length=255)

    issuer = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="sales_issued",
        help_text="Team member who recorded the sale",
    )
    issuer_name = models.CharField(max_length=255, blank=True, default="")

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
    )

    invoice_sent = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_cancelled",
    )
    cancel_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="sale_created_idx"),
            models.Index(fields=["status", "created_at"], name="sale_status_created_idx"),
            models.Index(fields=["issuer", "created_at"], name="sale_issuer_created_idx"),
        ]

    _IMMUTABLE_FIELDS = (
        "invoice_no",
        "customer_name",
        "issuer_id",
        "issuer_name",
        "total_amount",
        "created_at",
    )

    def _validate_immutable(self, previous: "Sale"):
        from sales.services.sale_lifecycle import can_transition

        if self.status != previous.status and not can_transition(
            from_status=previous.status, to_status=self.status
        ):
            raise ValueError(
                f"Sale status change {previous.status} -> {self.status} is not allowed."
            )

        for name in self._IMMUTABLE_FIELDS:
            field = self._meta.get_field(name)
            if field.to_python(getattr(self, name)) != getattr(previous, name):
                raise ValueError(f"Sale field '{name}' cannot be changed.")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        if not self.invoice_no:
            prefix = timezone.now().strftime("INV%Y%m%d")
            self.invoice_no = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        if self.status == self.STATUS_COMPLETED and not self.completed_at:
            self.completed_at = timezone.now()

        super().save(*args, **kwargs)

    @property
    def short_id(self) -> str:
        """First 8 hex chars of the id, uppercased (invoice file names)."""
        return self.id.hex[:8].upper()

    def __str__(self):
        return f"{self.invoice_no} | {self.total_amount}"
