# accounting/models/account.py

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q


class Account(models.Model):
    """
    One of the five clinic money accounts.

    Guarantees:
    - Exactly one row per kind (provisioned once, never deleted)
    - balance is never negative (DB check constraint)
    - balance changes ONLY through accounting.services.ledger_service
    """

    class Kind(models.TextChoices):
        HOSPITAL = "hospital", "Hospital"
        MEDICINE = "medicine", "Medicine"
        OPTICS = "optics", "Optics"
        OPERATION = "operation", "Operation"
        MAIN = "main", "Main"

    # Number prefixes: journal / fund voucher / sale invoice
    ENTRY_PREFIXES = {
        "hospital": "H",
        "medicine": "M",
        "optics": "O",
        "operation": "OP",
        "main": "MA",
    }
    INVOICE_PREFIXES = {
        "hospital": "HSP",
        "medicine": "MED",
        "optics": "OPT",
        "operation": "OPR",
        "main": "MAIN",
    }

    kind = models.CharField(max_length=20, choices=Kind.choices, unique=True)
    name = models.CharField(max_length=100)

    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name="chk_account_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.balance})"

    @property
    def is_main(self) -> bool:
        return self.kind == self.Kind.MAIN

    @property
    def entry_prefix(self) -> str:
        return self.ENTRY_PREFIXES[str(self.kind)]

    @property
    def invoice_prefix(self) -> str:
        return self.INVOICE_PREFIXES[str(self.kind)]
