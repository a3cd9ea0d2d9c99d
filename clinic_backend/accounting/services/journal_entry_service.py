# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY PROCESSOR (INCOME / EXPENSE)

This module is the ONLY place allowed to:
- Create, edit or delete JournalEntry rows
- Post the Main-account rollup for a sub-account entry
- Keep Account.balance in step with those rows

GUARANTEES:
- post:   amount > 0, category resolves, number allocated, account
          credited (income) or debited (expense), row inserted: atomically
- edit:   delta = effect(new) - effect(old) applied to the account and to
          Main (through the rollup) in the same transaction as the update
- delete: -effect(entry) applied to both accounts, both rows removed
- Rollup rows and rows owned by another workflow (sale payments) are
  read-only here; they change only through their source
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.models import JournalEntry
from accounting.services import ledger_service, numbering, reversal
from accounting.services.category_service import resolve_category
from accounting.services.exceptions import LedgerValidationError, NotFound

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("direction", "amount", "category", "entry_date", "description")


def _direction(value) -> str:
    direction = (str(value or "")).strip().lower()
    if direction not in JournalEntry.Direction.values:
        raise LedgerValidationError(
            f"Invalid direction '{value}'. Use 'income' or 'expense'."
        )
    return direction


def _load_locked(entry_id) -> JournalEntry:
    try:
        entry = (
            JournalEntry.objects.select_for_update(of=("self",))
            .select_related("account", "linked_main_voucher")
            .filter(pk=entry_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFound(f"Journal entry {entry_id} not found") from exc
    if entry is None:
        raise NotFound(f"Journal entry {entry_id} not found")
    return entry


def _ensure_directly_mutable(entry: JournalEntry) -> None:
    if entry.is_rollup:
        raise LedgerValidationError(
            f"{entry.transaction_no} is a Main account rollup; change its source entry instead"
        )
    if entry.is_owned:
        raise LedgerValidationError(
            f"{entry.transaction_no} belongs to {entry.reference_type} "
            f"{entry.reference_id} and cannot be changed directly"
        )


def _lock_with_rollup(entry: JournalEntry) -> None:
    rollup_account = entry.linked_main_voucher.account if entry.linked_main_voucher else None
    ledger_service.lock_accounts(entry.account, rollup_account)


# ============================================================
# POST
# ============================================================

@transaction.atomic
def post_entry(
    *,
    account,
    direction,
    category,
    amount,
    entry_date=None,
    description: str = "",
    user=None,
    reference_type: str = "",
    reference_id: str = "",
) -> JournalEntry:
    direction = _direction(direction)
    amount = ledger_service.positive_amount(amount)
    entry_date = ledger_service.as_date(entry_date)
    description = (description or "").strip()

    account = ledger_service.get_account(account)
    resolved_category = resolve_category(direction=direction, category=category)

    main = ledger_service.rollup_target(account)
    ledger_service.lock_accounts(account, main)

    rollup = None
    if main is not None:
        rollup = JournalEntry(
            account=main,
            direction=direction,
            amount=amount,
            category=resolved_category,
            category_name=resolved_category.name,
            description=description or f"{account.name} {direction}",
            entry_date=entry_date,
            transaction_no=numbering.next_transaction_no(main, direction),
            created_by=user,
            is_rollup=True,
            reference_type="",
            reference_id="",
        )

    entry = JournalEntry(
        account=account,
        direction=direction,
        amount=amount,
        category=resolved_category,
        category_name=resolved_category.name,
        description=description,
        entry_date=entry_date,
        transaction_no=numbering.next_transaction_no(account, direction),
        created_by=user,
        reference_type=(reference_type or "").strip(),
        reference_id=str(reference_id or "").strip(),
    )

    reversal.apply_effect(account, direction, amount)
    if rollup is not None:
        reversal.apply_effect(main, direction, amount)
        rollup.save()
        entry.linked_main_voucher = rollup

    entry.save()

    logger.info(
        "Journal entry posted",
        extra={
            "transaction_no": entry.transaction_no,
            "account_kind": account.kind,
            "direction": direction,
            "amount": str(amount),
            "rollup": rollup.transaction_no if rollup else None,
        },
    )
    return entry


# ============================================================
# EDIT
# ============================================================

@transaction.atomic
def edit_entry(*, entry_id, user=None, **changes) -> JournalEntry:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise LedgerValidationError(f"Fields cannot be edited: {sorted(unknown)}")

    entry = _load_locked(entry_id)
    _ensure_directly_mutable(entry)
    _lock_with_rollup(entry)

    old_direction = entry.direction
    old_amount = entry.amount

    if "direction" in changes:
        entry.direction = _direction(changes["direction"])
    if "amount" in changes:
        entry.amount = ledger_service.positive_amount(changes["amount"])
    if "entry_date" in changes:
        entry.entry_date = ledger_service.as_date(changes["entry_date"])
    if "description" in changes:
        entry.description = (changes["description"] or "").strip()

    if "category" in changes or entry.direction != old_direction:
        category = changes.get("category", entry.category_name)
        resolved = resolve_category(direction=entry.direction, category=category)
        entry.category = resolved
        entry.category_name = resolved.name

    delta = reversal.propagate_entry_edit(
        entry, old_direction=old_direction, old_amount=old_amount
    )
    entry.save()

    logger.info(
        "Journal entry edited",
        extra={
            "transaction_no": entry.transaction_no,
            "delta": str(delta),
            "edited_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return entry


# ============================================================
# DELETE
# ============================================================

@transaction.atomic
def delete_entry(*, entry_id, user=None) -> dict:
    entry = _load_locked(entry_id)
    _ensure_directly_mutable(entry)
    _lock_with_rollup(entry)

    snapshot = reversal.reverse_and_remove_entry(entry)

    logger.info(
        "Journal entry deleted",
        extra={
            "transaction_no": snapshot["transaction_no"],
            "deleted_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return snapshot

