# accounting/services/reversal.py

"""
======================================================
PATH: accounting/services/reversal.py
======================================================
REVERSAL PROCESSOR

Balance deltas for edits and deletes, including the Main-account rollup.

effect(row) = +amount for income / fund_in
            = -amount for expense / fund_out

RULES:
- edit:   apply effect(new) - effect(old) to the account, then the same
          delta to Main through the linked rollup row
- delete: apply -effect(row) to the account and to Main, remove both rows
- Callers hold the row lock and have locked the accounts (pk order)
- Both accounts change in the same transaction or not at all
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from accounting.models import Account, FundTransfer, JournalEntry
from accounting.services import ledger_service
from accounting.services.exceptions import LedgerValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def effect(direction: str, amount: Decimal) -> Decimal:
    amount = Decimal(amount)
    match direction:
        case JournalEntry.Direction.INCOME | FundTransfer.Direction.FUND_IN:
            return amount
        case JournalEntry.Direction.EXPENSE | FundTransfer.Direction.FUND_OUT:
            return -amount
        case _:
            raise LedgerValidationError(f"Unknown direction: {direction!r}")


def apply_delta(account: Account, delta: Decimal) -> Decimal:
    """Credit a positive delta, debit a negative one; zero is a no-op."""
    if delta > ZERO:
        return ledger_service.credit(account, delta)
    if delta < ZERO:
        return ledger_service.debit(account, -delta)
    return account.balance


def apply_effect(account: Account, direction: str, amount: Decimal) -> Decimal:
    return apply_delta(account, effect(direction, amount))


# ============================================================
# JOURNAL ENTRIES
# ============================================================

@transaction.atomic(savepoint=False)
def propagate_entry_edit(entry: JournalEntry, *, old_direction: str, old_amount: Decimal) -> Decimal:
    """
    Apply the edit delta of an already-updated (unsaved) entry to its
    account and mirror the new values onto the linked Main rollup.
    Returns the delta.
    """
    delta = effect(entry.direction, entry.amount) - effect(old_direction, old_amount)
    apply_delta(entry.account, delta)

    rollup = entry.linked_main_voucher
    if rollup is not None:
        rollup = JournalEntry.objects.select_for_update().get(pk=rollup.pk)
        rollup.direction = entry.direction
        rollup.amount = entry.amount
        rollup.category = entry.category
        rollup.category_name = entry.category_name
        rollup.entry_date = entry.entry_date
        rollup.description = entry.description
        apply_delta(rollup.account, delta)
        rollup.save()
        entry.linked_main_voucher = rollup

    logger.info(
        "Journal entry delta applied",
        extra={
            "transaction_no": entry.transaction_no,
            "delta": str(delta),
            "rollup": rollup.transaction_no if rollup else None,
        },
    )
    return delta


@transaction.atomic(savepoint=False)
def reverse_and_remove_entry(entry: JournalEntry) -> dict:
    """
    Undo a journal entry's balance effect (and its Main rollup's) and
    delete both rows. Returns a snapshot of what was removed.
    """
    snapshot = {
        "id": entry.pk,
        "transaction_no": entry.transaction_no,
        "account": entry.account.kind,
        "direction": entry.direction,
        "amount": str(entry.amount),
        "rollup_transaction_no": None,
    }

    rollup = entry.linked_main_voucher
    apply_delta(entry.account, -effect(entry.direction, entry.amount))
    entry.delete()

    if rollup is not None:
        rollup = JournalEntry.objects.select_for_update().get(pk=rollup.pk)
        apply_delta(rollup.account, -effect(rollup.direction, rollup.amount))
        snapshot["rollup_transaction_no"] = rollup.transaction_no
        rollup.delete()

    logger.info("Journal entry reversed", extra={"transaction_no": snapshot["transaction_no"]})
    return snapshot


# ============================================================
# FUND TRANSFERS
# ============================================================

@transaction.atomic(savepoint=False)
def propagate_transfer_edit(transfer: FundTransfer, *, old_amount: Decimal) -> Decimal:
    delta = effect(transfer.direction, transfer.amount) - effect(transfer.direction, old_amount)
    apply_delta(transfer.account, delta)

    rollup = transfer.linked_main_transfer
    if rollup is not None:
        rollup = FundTransfer.objects.select_for_update().get(pk=rollup.pk)
        rollup.amount = transfer.amount
        rollup.investor_name = transfer.investor_name
        rollup.description = transfer.description
        rollup.transfer_date = transfer.transfer_date
        apply_delta(rollup.account, delta)
        rollup.save()
        transfer.linked_main_transfer = rollup

    logger.info(
        "Fund transfer delta applied",
        extra={"voucher_no": transfer.voucher_no, "delta": str(delta)},
    )
    return delta


@transaction.atomic(savepoint=False)
def reverse_and_remove_transfer(transfer: FundTransfer) -> dict:
    snapshot = {
        "id": transfer.pk,
        "voucher_no": transfer.voucher_no,
        "account": transfer.account.kind,
        "direction": transfer.direction,
        "amount": str(transfer.amount),
        "rollup_voucher_no": None,
    }

    rollup = transfer.linked_main_transfer
    apply_delta(transfer.account, -effect(transfer.direction, transfer.amount))
    transfer.delete()

    if rollup is not None:
        rollup = FundTransfer.objects.select_for_update().get(pk=rollup.pk)
        apply_delta(rollup.account, -effect(rollup.direction, rollup.amount))
        snapshot["rollup_voucher_no"] = rollup.voucher_no
        rollup.delete()

    logger.info("Fund transfer reversed", extra={"voucher_no": snapshot["voucher_no"]})
    return snapshot
