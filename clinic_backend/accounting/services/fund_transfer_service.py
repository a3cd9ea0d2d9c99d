# accounting/services/fund_transfer_service.py

"""
======================================================
PATH: accounting/services/fund_transfer_service.py
======================================================
FUND TRANSFER LEDGER (INVESTOR FUND IN / FUND OUT)

GUARANTEES:
- fund_in credits, fund_out debits (InsufficientBalance if over)
- voucher_no allocated from the numbering service
- Sub-account transfers are mirrored on Main (linked_main_transfer)
- edit applies the amount delta to both accounts; delete reverses both
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.models import FundTransfer
from accounting.services import ledger_service, numbering, reversal
from accounting.services.exceptions import LedgerValidationError, NotFound

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("amount", "investor_name", "description", "transfer_date")


def _investor(value) -> str:
    investor = (value or "").strip()
    if not investor:
        raise LedgerValidationError("investor_name is required")
    return investor


@transaction.atomic
def _post_transfer(*, account, direction, investor_name, amount, transfer_date, description, user):
    amount = ledger_service.positive_amount(amount)
    investor_name = _investor(investor_name)
    transfer_date = ledger_service.as_date(transfer_date)
    description = (description or "").strip()

    account = ledger_service.get_account(account)
    main = ledger_service.rollup_target(account)
    ledger_service.lock_accounts(account, main)

    transfer = FundTransfer(
        account=account,
        direction=direction,
        amount=amount,
        investor_name=investor_name,
        description=description,
        transfer_date=transfer_date,
        voucher_no=numbering.next_voucher_no(account, direction),
        created_by=user,
    )

    reversal.apply_effect(account, direction, amount)

    if main is not None:
        rollup = FundTransfer.objects.create(
            account=main,
            direction=direction,
            amount=amount,
            investor_name=investor_name,
            description=description or f"{account.name} {direction}",
            transfer_date=transfer_date,
            voucher_no=numbering.next_voucher_no(main, direction),
            created_by=user,
            is_rollup=True,
        )
        reversal.apply_effect(main, direction, amount)
        transfer.linked_main_transfer = rollup

    transfer.save()

    logger.info(
        "Fund transfer posted",
        extra={
            "voucher_no": transfer.voucher_no,
            "account_kind": account.kind,
            "direction": direction,
            "amount": str(amount),
        },
    )
    return transfer


def fund_in(*, account, investor_name, amount, transfer_date=None, description="", user=None) -> FundTransfer:
    return _post_transfer(
        account=account,
        direction=FundTransfer.Direction.FUND_IN,
        investor_name=investor_name,
        amount=amount,
        transfer_date=transfer_date,
        description=description,
        user=user,
    )


def fund_out(*, account, investor_name, amount, transfer_date=None, description="", user=None) -> FundTransfer:
    return _post_transfer(
        account=account,
        direction=FundTransfer.Direction.FUND_OUT,
        investor_name=investor_name,
        amount=amount,
        transfer_date=transfer_date,
        description=description,
        user=user,
    )


def _load_locked(transfer_id) -> FundTransfer:
    try:
        transfer = (
            FundTransfer.objects.select_for_update(of=("self",))
            .select_related("account", "linked_main_transfer")
            .filter(pk=transfer_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFound(f"Fund transfer {transfer_id} not found") from exc
    if transfer is None:
        raise NotFound(f"Fund transfer {transfer_id} not found")
    if transfer.is_rollup:
        raise LedgerValidationError(
            f"{transfer.voucher_no} is a Main account rollup; change its source transfer instead"
        )

    rollup = transfer.linked_main_transfer
    ledger_service.lock_accounts(transfer.account, rollup.account if rollup else None)
    return transfer


@transaction.atomic
def edit_transfer(*, transfer_id, user=None, **changes) -> FundTransfer:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise LedgerValidationError(f"Fields cannot be edited: {sorted(unknown)}")

    transfer = _load_locked(transfer_id)
    old_amount = transfer.amount

    if "amount" in changes:
        transfer.amount = ledger_service.positive_amount(changes["amount"])
    if "investor_name" in changes:
        transfer.investor_name = _investor(changes["investor_name"])
    if "description" in changes:
        transfer.description = (changes["description"] or "").strip()
    if "transfer_date" in changes:
        transfer.transfer_date = ledger_service.as_date(changes["transfer_date"])

    delta = reversal.propagate_transfer_edit(transfer, old_amount=old_amount)
    transfer.save()

    logger.info(
        "Fund transfer edited",
        extra={
            "voucher_no": transfer.voucher_no,
            "delta": str(delta),
            "edited_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return transfer


@transaction.atomic
def delete_transfer(*, transfer_id, user=None) -> dict:
    transfer = _load_locked(transfer_id)
    snapshot = reversal.reverse_and_remove_transfer(transfer)

    logger.info(
        "Fund transfer deleted",
        extra={
            "voucher_no": snapshot["voucher_no"],
            "deleted_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return snapshot
