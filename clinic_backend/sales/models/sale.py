# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    A POS sale booked against one clinic account (optics, medicine...).

    GUARANTEES:
    - Pricing is frozen at creation (items, fitting, discount, total, advance)
    - due_amount == total_amount - Σ payments (the advance is a Payment row)
    - Stock is mutated ONLY via inventory.services.stock_guard
    - status only advances pending -> ready -> delivered
    """

    STATUS_PENDING = "pending"
    STATUS_READY = "ready"
    STATUS_DELIVERED = "delivered"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_READY, "Ready"),
        (STATUS_DELIVERED, "Delivered"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_no = models.CharField(
        max_length=40,
        unique=True,
        help_text="System-generated invoice number",
    )

    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="sales",
    )

    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_phone = models.CharField(max_length=32, blank=True, default="")

    fitting_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    subtotal_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Set when the discount was given as a percentage",
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    advance_payment = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    due_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    seller = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="sales_sale_created_idx"),
            models.Index(fields=["status"], name="sales_sale_status_idx"),
            models.Index(fields=["account", "created_at"], name="sales_sale_account_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(fitting_price__gte=0), name="chk_sale_fitting_non_negative"),
            models.CheckConstraint(condition=Q(discount_amount__gte=0), name="chk_sale_discount_non_negative"),
            models.CheckConstraint(condition=Q(advance_payment__gte=0), name="chk_sale_advance_non_negative"),
            models.CheckConstraint(condition=Q(due_amount__gte=0), name="chk_sale_due_non_negative"),
            models.CheckConstraint(condition=Q(total_amount__gte=0), name="chk_sale_total_non_negative"),
        ]

    _IMMUTABLE_FIELDS = (
        "invoice_no",
        "account_id",
        "fitting_price",
        "subtotal_amount",
        "discount_percent",
        "discount_amount",
        "total_amount",
        "advance_payment",
    )

    def _validate_immutable(self, previous: "Sale"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(
                    f"Sale {previous.invoice_no}: field '{field}' cannot be changed after creation."
                )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        super().save(*args, **kwargs)

    @property
    def amount_paid(self) -> Decimal:
        return self.total_amount - self.due_amount

    def __str__(self):
        return f"{self.invoice_no} | {self.total_amount} | {self.status}"
