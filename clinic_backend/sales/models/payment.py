# sales/models/payment.py

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class Payment(models.Model):
    """
    Money received against a Sale.

    RULES:
    - amount > 0 and never more than the sale's due at the time it was taken
    - The advance taken at sale creation is a Payment with is_advance=True
    - Each payment credits the sale's account through its own income
      JournalEntry (journal_entry); rows are write-once
    """

    METHOD_CASH = "cash"
    METHOD_CARD = "card"
    METHOD_BKASH = "bkash"
    METHOD_NAGAD = "nagad"
    METHOD_ROCKET = "rocket"

    METHOD_CHOICES = [
        (METHOD_CASH, "Cash"),
        (METHOD_CARD, "Card"),
        (METHOD_BKASH, "bKash"),
        (METHOD_NAGAD, "Nagad"),
        (METHOD_ROCKET, "Rocket"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.CASCADE,
        related_name="payments",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=16, choices=METHOD_CHOICES)

    transaction_ref = models.CharField(max_length=128, blank=True, default="")
    notes = models.CharField(max_length=255, blank=True, default="")

    is_advance = models.BooleanField(default=False)

    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_payments",
    )
    journal_entry = models.OneToOneField(
        "accounting.JournalEntry",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_payment",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["sale", "created_at"], name="sales_payment_sale_idx"),
            models.Index(fields=["method"], name="sales_payment_method_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="chk_payment_amount_positive"),
        ]

    def __str__(self):
        return f"{self.sale_id} | {self.method} | {self.amount}"
