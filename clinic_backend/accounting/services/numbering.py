# accounting/services/numbering.py

"""
======================================================
PATH: accounting/services/numbering.py
======================================================
NUMBERING SERVICE

Human-readable identifiers:
- journal entries:  <ACC><I|E>-<YYYYMMDD>-<NNNN>    HE-20240101-0001
- fund transfers:   <ACC>F<I|O>-<YYYYMMDD>-<NNNN>   HFI-20240101-0001
- sale invoices:    <INV>-<YYYYMMDD>-<NNNN>         OPT-20240101-0001

GUARANTEES:
- One NumberSequence row per scope (prefix + date)
- Values are allocated under select_for_update(): unique and strictly
  increasing within a scope, no gaps except on rollback
- Must run inside the caller's transaction (the lock is held until commit)
"""

from __future__ import annotations

from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from accounting.models import Account, FundTransfer, JournalEntry, NumberSequence


def _lock_sequence(scope: str) -> NumberSequence:
    seq = NumberSequence.objects.select_for_update().filter(scope=scope).first()
    if seq is not None:
        return seq

    try:
        with transaction.atomic():
            return NumberSequence.objects.create(scope=scope, last_value=0)
    except IntegrityError:
        # another transaction created the scope first; wait for its lock
        return NumberSequence.objects.select_for_update().get(scope=scope)


@transaction.atomic
def next_number(scope: str) -> int:
    scope = (scope or "").strip()
    if not scope:
        raise ValueError("numbering scope is required")

    seq = _lock_sequence(scope)
    seq.last_value += 1
    seq.save(update_fields=["last_value", "updated_at"])
    return seq.last_value


def format_number(prefix: str, on_date: date, value: int) -> str:
    return f"{prefix}-{on_date:%Y%m%d}-{value:04d}"


def _allocate(prefix: str, on_date: date | None = None) -> str:
    on_date = on_date or timezone.localdate()
    value = next_number(f"{prefix}-{on_date:%Y%m%d}")
    return format_number(prefix, on_date, value)


def next_transaction_no(account: Account, direction: str, on_date: date | None = None) -> str:
    suffix = "I" if direction == JournalEntry.Direction.INCOME else "E"
    return _allocate(f"{account.entry_prefix}{suffix}", on_date)


def next_voucher_no(account: Account, direction: str, on_date: date | None = None) -> str:
    suffix = "FI" if direction == FundTransfer.Direction.FUND_IN else "FO"
    return _allocate(f"{account.entry_prefix}{suffix}", on_date)


def next_invoice_no(account: Account, on_date: date | None = None) -> str:
    return _allocate(account.invoice_prefix, on_date)
