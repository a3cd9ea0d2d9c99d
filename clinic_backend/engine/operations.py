# engine/operations.py

"""
======================================================
PATH: engine/operations.py
======================================================
ENGINE OPERATIONS (CALLER-FACING)

Every operation:
- runs as ONE transaction (the service it calls is atomic)
- returns OperationResult.success(entity, account_balance)
  or OperationResult.failure(error_kind, message)

Error kinds:
  ValidationError | InsufficientBalance | InsufficientStock |
  InvalidPayment | PaymentIncomplete | NotFound | ConcurrencyConflict

Lock timeouts, deadlocks ("database is locked") and unique-number
collisions surface as ConcurrencyConflict, the only retryable kind.
"""

from __future__ import annotations

import functools
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DataError, IntegrityError, OperationalError

from accounting.models import Account
from accounting.services import fund_transfer_service, journal_entry_service
from accounting.services.exceptions import ConcurrencyConflict, LedgerError, LedgerValidationError
from accounting.services.ledger_service import get_account
from engine.results import OperationResult
from sales.services import payment_service, sale_lifecycle, sale_reversal, sale_service

logger = logging.getLogger(__name__)


def _balance_of(account) -> object:
    if account is None:
        return None
    pk = account.pk if isinstance(account, Account) else get_account(account).pk
    return Account.objects.values_list("balance", flat=True).get(pk=pk)


def _django_validation_message(exc: DjangoValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(f"{k}: {', '.join(v)}" for k, v in exc.message_dict.items())
    return "; ".join(exc.messages)


def operation(func):
    """
    Convert raised engine errors into a failed OperationResult.
    The wrapped function returns (entity, account) on success.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        op = func.__name__
        try:
            entity, account = func(*args, **kwargs)
            return OperationResult.success(entity, _balance_of(account))
        except LedgerError as exc:
            logger.info(
                "Operation rejected",
                extra={"operation": op, "error_kind": exc.kind, "detail": str(exc)},
            )
            return OperationResult.failure(exc.kind, str(exc), retryable=exc.retryable)
        except DjangoValidationError as exc:
            return OperationResult.failure(
                LedgerValidationError.kind, _django_validation_message(exc)
            )
        except DataError as exc:
            logger.warning(
                "Operation rejected by the database",
                extra={"operation": op, "detail": str(exc)},
            )
            return OperationResult.failure(LedgerValidationError.kind, f"Value out of range: {exc}")
        except (OperationalError, IntegrityError) as exc:
            logger.warning(
                "Operation conflicted",
                extra={"operation": op, "detail": str(exc)},
            )
            return OperationResult.failure(
                ConcurrencyConflict.kind,
                f"{op} conflicted with a concurrent update; retry the operation",
                retryable=True,
            )

    return wrapper


# ============================================================
# JOURNAL ENTRIES
# ============================================================

@operation
def post_journal_entry(*, account, direction, category, amount, entry_date=None, description="", user=None):
    entry = journal_entry_service.post_entry(
        account=account,
        direction=direction,
        category=category,
        amount=amount,
        entry_date=entry_date,
        description=description,
        user=user,
    )
    return entry, entry.account


@operation
def edit_journal_entry(*, entry_id, user=None, **changes):
    entry = journal_entry_service.edit_entry(entry_id=entry_id, user=user, **changes)
    return entry, entry.account


@operation
def delete_journal_entry(*, entry_id, user=None):
    snapshot = journal_entry_service.delete_entry(entry_id=entry_id, user=user)
    return snapshot, snapshot["account"]


# ============================================================
# FUND TRANSFERS
# ============================================================

@operation
def fund_in(*, account, investor_name, amount, transfer_date=None, description="", user=None):
    transfer = fund_transfer_service.fund_in(
        account=account,
        investor_name=investor_name,
        amount=amount,
        transfer_date=transfer_date,
        description=description,
        user=user,
    )
    return transfer, transfer.account


@operation
def fund_out(*, account, investor_name, amount, transfer_date=None, description="", user=None):
    transfer = fund_transfer_service.fund_out(
        account=account,
        investor_name=investor_name,
        amount=amount,
        transfer_date=transfer_date,
        description=description,
        user=user,
    )
    return transfer, transfer.account


@operation
def edit_fund_transfer(*, transfer_id, user=None, **changes):
    transfer = fund_transfer_service.edit_transfer(transfer_id=transfer_id, user=user, **changes)
    return transfer, transfer.account


@operation
def delete_fund_transfer(*, transfer_id, user=None):
    snapshot = fund_transfer_service.delete_transfer(transfer_id=transfer_id, user=user)
    return snapshot, snapshot["account"]


# ============================================================
# POS
# ============================================================

@operation
def create_sale(*, account, items, user=None, **options):
    sale = sale_service.create_sale(account=account, items=items, seller=user, **options)
    return sale, sale.account


@operation
def add_payment(*, sale_id, amount, method, transaction_ref="", notes="", user=None):
    payment = payment_service.add_payment(
        sale_id=sale_id,
        amount=amount,
        method=method,
        transaction_ref=transaction_ref,
        notes=notes,
        user=user,
    )
    return payment, payment.sale.account


@operation
def update_sale_status(*, sale_id, new_status, user=None):
    sale = sale_lifecycle.update_status(sale_id=sale_id, new_status=new_status, user=user)
    return sale, sale.account


@operation
def delete_sale(*, sale_id, user=None):
    snapshot = sale_reversal.delete_sale(sale_id=sale_id, user=user)
    return snapshot, snapshot["account"]
