# accounting/services/ledger_service.py

"""
======================================================
PATH: accounting/services/ledger_service.py
======================================================
LEDGER ACCOUNT SERVICE

This module is the ONLY place allowed to change Account.balance.

RULES:
- credit()/debit() run inside the caller's transaction
- The account row is locked (select_for_update) before it is read
- Accounts touched by one operation are locked in primary-key order
  (sub-account + Main pairs never deadlock against each other)
- debit() refuses to drive a balance below zero (InsufficientBalance)
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.db import connection, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounting.models import Account
from accounting.services.exceptions import (
    InsufficientBalance,
    LedgerValidationError,
    NotFound,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# DecimalField(max_digits=14, decimal_places=2) on balances and postings
MAX_AMOUNT = Decimal("1000000000000")

ACCOUNT_NAMES = {
    Account.Kind.HOSPITAL: "Hospital Account",
    Account.Kind.MEDICINE: "Medicine Account",
    Account.Kind.OPTICS: "Optics Account",
    Account.Kind.OPERATION: "Operation Account",
    Account.Kind.MAIN: "Main Account",
}


def money(value, *, limit: Decimal = MAX_AMOUNT) -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        amt = value
    elif isinstance(value, bool):
        raise LedgerValidationError(f"Invalid money value: {value!r}")
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise LedgerValidationError(f"Invalid money value: {value!r}") from exc

    if not amt.is_finite():
        raise LedgerValidationError(f"Invalid money value: {value!r}")

    if abs(amt) >= limit:
        raise LedgerValidationError(f"Amount {value!r} is too large (limit {limit})")

    amt = amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    if abs(amt) >= limit:
        raise LedgerValidationError(f"Amount {value!r} is too large (limit {limit})")
    return amt


def positive_amount(value, *, field: str = "amount") -> Decimal:
    amount = money(value)
    if amount <= ZERO:
        raise LedgerValidationError(f"{field} must be greater than 0")
    return amount


def as_date(value) -> date:
    if value is None or value == "":
        return timezone.localdate()
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value).strip())
    except ValueError as exc:
        raise LedgerValidationError(f"Invalid date: {value!r}") from exc
    if parsed is None:
        raise LedgerValidationError(f"Invalid date: {value!r}")
    return parsed


# ============================================================
# ACCOUNT LOOKUP / PROVISIONING
# ============================================================

def ensure_accounts() -> list[Account]:
    """Create any missing account rows (idempotent)."""
    accounts = []
    for kind, name in ACCOUNT_NAMES.items():
        account, created = Account.objects.get_or_create(
            kind=str(kind), defaults={"name": name}
        )
        if created:
            logger.info("Provisioned account", extra={"account_kind": account.kind})
        accounts.append(account)
    return accounts


def get_account(ref) -> Account:
    """
    Resolve an Account from an instance, a kind ("optics") or a primary key.
    """
    if isinstance(ref, Account):
        return ref

    if isinstance(ref, str) and not ref.strip().isdigit():
        kind = ref.strip().lower()
        account = Account.objects.filter(kind=kind).first()
        if account is None:
            raise NotFound(f"Account '{ref}' not found")
        return account

    try:
        return Account.objects.get(pk=int(ref))
    except (TypeError, ValueError) as exc:
        raise NotFound(f"Account '{ref}' not found") from exc
    except Account.DoesNotExist as exc:
        raise NotFound(f"Account '{ref}' not found") from exc


def get_main_account() -> Account:
    return get_account(Account.Kind.MAIN.value)


def rollup_target(account: Account) -> Account | None:
    """Main account mirror target for a sub-account posting, if rollups are on."""
    if account.is_main:
        return None
    if not getattr(settings, "LEDGER_MAIN_ROLLUP_ENABLED", True):
        return None
    return get_main_account()


# ============================================================
# LOCKING
# ============================================================

def _apply_lock_timeout() -> None:
    timeout_ms = int(getattr(settings, "LEDGER_LOCK_TIMEOUT_MS", 0) or 0)
    if timeout_ms <= 0 or connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")


def lock_accounts(*accounts) -> dict[int, Account]:
    """
    Lock every given account row (pk order) and return fresh copies by pk.
    None entries are ignored.
    """
    ids = sorted({a.pk for a in accounts if a is not None})
    if not ids:
        return {}

    _apply_lock_timeout()
    locked = {
        a.pk: a
        for a in Account.objects.select_for_update().filter(pk__in=ids).order_by("pk")
    }

    missing = set(ids) - set(locked)
    if missing:
        raise NotFound(f"Account(s) not found: {sorted(missing)}")

    return locked


# ============================================================
# CREDIT / DEBIT
# ============================================================

@transaction.atomic(savepoint=False)
def credit(account: Account, amount) -> Decimal:
    amount = positive_amount(amount)

    locked = Account.objects.select_for_update().get(pk=account.pk)
    if locked.balance + amount >= MAX_AMOUNT:
        raise LedgerValidationError(
            f"Credit of {amount} would take {locked.name} past the balance limit {MAX_AMOUNT}"
        )

    Account.objects.filter(pk=locked.pk).update(
        balance=F("balance") + amount,
        updated_at=timezone.now(),
    )
    locked.refresh_from_db(fields=["balance", "updated_at"])
    account.balance = locked.balance

    logger.info(
        "Account credited",
        extra={
            "account_kind": locked.kind,
            "amount": str(amount),
            "balance": str(locked.balance),
        },
    )
    return locked.balance


@transaction.atomic(savepoint=False)
def debit(account: Account, amount) -> Decimal:
    amount = positive_amount(amount)

    locked = Account.objects.select_for_update().get(pk=account.pk)
    if amount > locked.balance:
        logger.warning(
            "Debit rejected: insufficient balance",
            extra={
                "account_kind": locked.kind,
                "amount": str(amount),
                "balance": str(locked.balance),
            },
        )
        raise InsufficientBalance(
            f"Insufficient balance in {locked.name}. "
            f"Requested: {amount}, Available: {locked.balance}",
            account_kind=locked.kind,
            requested=amount,
            available=locked.balance,
        )

    Account.objects.filter(pk=locked.pk).update(
        balance=F("balance") - amount,
        updated_at=timezone.now(),
    )
    locked.refresh_from_db(fields=["balance", "updated_at"])
    account.balance = locked.balance

    logger.info(
        "Account debited",
        extra={
            "account_kind": locked.kind,
            "amount": str(amount),
            "balance": str(locked.balance),
        },
    )
    return locked.balance
