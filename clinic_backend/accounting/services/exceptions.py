# accounting/services/exceptions.py

"""
LEDGER ENGINE ERRORS

Centralized domain errors for every engine operation (ledger, stock, POS).

`kind` is the stable, caller-facing error name carried in operation
results and API responses. Only ConcurrencyConflict is retryable.
"""


class LedgerError(Exception):
    """Base exception for all engine failures."""

    kind = "LedgerError"
    retryable = False


class LedgerValidationError(LedgerError):
    """Raised when input fails a domain rule (amount, category, discount...)."""

    kind = "ValidationError"


class InvalidStatusTransition(LedgerValidationError):
    """Raised when a sale status change is not pending -> ready -> delivered."""


class InsufficientBalance(LedgerError):
    """Raised when a debit would drive an account balance below zero."""

    kind = "InsufficientBalance"

    def __init__(self, message, *, account_kind=None, requested=None, available=None):
        super().__init__(message)
        self.account_kind = account_kind
        self.requested = requested
        self.available = available


class InsufficientStock(LedgerError):
    """Raised when any requested line exceeds available stock (nothing is decremented)."""

    kind = "InsufficientStock"

    def __init__(self, message, *, shortages=None):
        super().__init__(message)
        self.shortages = list(shortages or [])


class InvalidPayment(LedgerError):
    """Raised when a payment or advance is <= 0 or exceeds what is owed."""

    kind = "InvalidPayment"


class PaymentIncomplete(LedgerError):
    """Raised when a sale with an outstanding due is marked delivered."""

    kind = "PaymentIncomplete"


class NotFound(LedgerError):
    """Raised when a referenced row does not exist."""

    kind = "NotFound"


class ConcurrencyConflict(LedgerError):
    """Raised on lock timeouts, deadlocks or identifier collisions. Safe to retry."""

    kind = "ConcurrencyConflict"
    retryable = True
