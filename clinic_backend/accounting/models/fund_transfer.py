# accounting/models/fund_transfer.py

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class FundTransfer(models.Model):
    """
    Investor fund-in / fund-out movement on one Account.

    Same rollup rule as JournalEntry: a sub-account transfer carries
    `linked_main_transfer`, the mirror row on the Main account.
    """

    class Direction(models.TextChoices):
        FUND_IN = "fund_in", "Fund In"
        FUND_OUT = "fund_out", "Fund Out"

    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="fund_transfers",
    )

    direction = models.CharField(max_length=10, choices=Direction.choices)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    investor_name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    transfer_date = models.DateField(default=timezone.localdate)

    voucher_no = models.CharField(max_length=40, unique=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="fund_transfers",
    )

    linked_main_transfer = models.OneToOneField(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="source_transfer",
    )
    is_rollup = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transfer_date", "-created_at"]
        indexes = [
            models.Index(fields=["account", "transfer_date"], name="acct_fund_account_date_idx"),
            models.Index(fields=["direction"], name="acct_fund_direction_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_fund_transfer_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.voucher_no} {self.direction} {self.amount}"
