# accounting/tests/helpers.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model

from accounting.models import Account
from accounting.services import fund_transfer_service
from accounting.services.ledger_service import ensure_accounts

User = get_user_model()


def make_user(role="accountant", email=None, **extra):
    return User.objects.create_user(
        email=email or f"{role}@clinic.test",
        password="pass1234",
        role=role,
        **extra,
    )


def account(kind: str) -> Account:
    ensure_accounts()
    return Account.objects.get(kind=kind)


def balance(kind: str) -> Decimal:
    return Account.objects.get(kind=kind).balance


def seed_funds(kind: str, amount, user=None):
    """Give an account (and Main, through its rollup) some money to spend."""
    return fund_transfer_service.fund_in(
        account=kind,
        investor_name="Seed Investor",
        amount=amount,
        user=user,
    )
