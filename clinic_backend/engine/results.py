# engine/results.py

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class OperationResult:
    ok: bool
    entity: Any = None
    account_balance: Optional[Decimal] = None
    error_kind: Optional[str] = None
    message: str = ""
    retryable: bool = False

    @classmethod
    def success(cls, entity, account_balance: Decimal | None) -> "OperationResult":
        return cls(ok=True, entity=entity, account_balance=account_balance)

    @classmethod
    def failure(cls, error_kind: str, message: str, *, retryable: bool = False) -> "OperationResult":
        return cls(ok=False, error_kind=error_kind, message=message, retryable=retryable)

    def with_entity(self, entity) -> "OperationResult":
        return replace(self, entity=entity)

    def as_dict(self) -> dict:
        if self.ok:
            return {
                "ok": True,
                "entity": self.entity,
                "account_balance": self.account_balance,
            }
        return {
            "ok": False,
            "error_kind": self.error_kind,
            "message": self.message,
        }
