# accounting/services/balance_service.py

"""
BALANCE REPLAY & STATEMENT SERVICE

Read-only aggregation helpers.

RULES:
- READ-ONLY: no writes, ever
- Replayed balance = Σ income − Σ expense + Σ fund_in − Σ fund_out
  over every row of the account (rollup rows included for Main)
- A stored Account.balance that differs from its replay is drift
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Case, DecimalField, F, Sum, Value, When
from django.db.models.functions import Coalesce

from accounting.models import Account, FundTransfer, JournalEntry

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

_MONEY = DecimalField(max_digits=14, decimal_places=2)


def _q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _sum_when(field: str, value: str):
    return Coalesce(
        Sum(Case(When(direction=value, then=F(field)), default=Value(ZERO), output_field=_MONEY)),
        Value(ZERO),
        output_field=_MONEY,
    )


def _totals(account: Account, *, date_from: date | None = None, date_to: date | None = None) -> dict:
    entries = JournalEntry.objects.filter(account=account)
    transfers = FundTransfer.objects.filter(account=account)

    if date_from is not None:
        entries = entries.filter(entry_date__gte=date_from)
        transfers = transfers.filter(transfer_date__gte=date_from)
    if date_to is not None:
        entries = entries.filter(entry_date__lte=date_to)
        transfers = transfers.filter(transfer_date__lte=date_to)

    entry_totals = entries.aggregate(
        income=_sum_when("amount", JournalEntry.Direction.INCOME),
        expense=_sum_when("amount", JournalEntry.Direction.EXPENSE),
    )
    transfer_totals = transfers.aggregate(
        fund_in=_sum_when("amount", FundTransfer.Direction.FUND_IN),
        fund_out=_sum_when("amount", FundTransfer.Direction.FUND_OUT),
    )

    return {k: _q2(v) for k, v in {**entry_totals, **transfer_totals}.items()}


def replay_balance(account: Account) -> Decimal:
    t = _totals(account)
    return _q2(t["income"] - t["expense"] + t["fund_in"] - t["fund_out"])


@dataclass(frozen=True)
class BalanceCheck:
    account_kind: str
    stored: Decimal
    replayed: Decimal

    @property
    def drift(self) -> Decimal:
        return _q2(self.stored - self.replayed)

    @property
    def ok(self) -> bool:
        return self.drift == ZERO


def verify_balances() -> list[BalanceCheck]:
    return [
        BalanceCheck(
            account_kind=account.kind,
            stored=_q2(account.balance),
            replayed=replay_balance(account),
        )
        for account in Account.objects.order_by("pk")
    ]


def account_summary(account: Account, *, date_from: date | None = None, date_to: date | None = None) -> dict:
    """
    Period totals for one account (data only, no formatting).
    """
    t = _totals(account, date_from=date_from, date_to=date_to)
    return {
        "account": account.kind,
        "date_from": date_from,
        "date_to": date_to,
        "total_income": t["income"],
        "total_expense": t["expense"],
        "total_fund_in": t["fund_in"],
        "total_fund_out": t["fund_out"],
        "net_change": _q2(t["income"] - t["expense"] + t["fund_in"] - t["fund_out"]),
        "current_balance": _q2(account.balance),
    }
