# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL (INCOME / EXPENSE)

One income or expense movement against one Account.

Guarantees:
- amount > 0 (DB check)
- transaction_no is unique and allocated by the numbering service
- Sub-account entries carry `linked_main_voucher`: the mirror entry
  posted on the Main account (is_rollup=True)
- Rows are mutated ONLY by journal_entry_service / reversal
  (the service keeps Account.balance in step with every change)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class JournalEntry(models.Model):
    class Direction(models.TextChoices):
        INCOME = "income", "Income"
        EXPENSE = "expense", "Expense"

    account = models.ForeignKey(
        "accounting.Account",
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )

    direction = models.CharField(max_length=10, choices=Direction.choices)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    category = models.ForeignKey(
        "accounting.Category",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="journal_entries",
    )
    category_name = models.CharField(
        max_length=120,
        blank=True,
        default="",
        help_text="Category name snapshot at posting time",
    )

    description = models.TextField(blank=True, default="")
    entry_date = models.DateField(default=timezone.localdate)

    transaction_no = models.CharField(max_length=40, unique=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="journal_entries",
    )

    linked_main_voucher = models.OneToOneField(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="source_entry",
        help_text="Mirror entry on the Main account",
    )
    is_rollup = models.BooleanField(default=False)

    # Owner of the entry when it was posted by another workflow (e.g. sale payments)
    reference_type = models.CharField(max_length=40, blank=True, default="")
    reference_id = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "-created_at"]
        indexes = [
            models.Index(fields=["account", "entry_date"], name="acct_journal_account_date_idx"),
            models.Index(fields=["direction"], name="acct_journal_direction_idx"),
            models.Index(
                fields=["reference_type", "reference_id"],
                name="acct_journal_reference_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_journal_amount_positive",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"{self.transaction_no} {self.direction} {self.amount}"

    @property
    def is_owned(self) -> bool:
        return bool(self.reference_type)
