# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.category import Category
from accounting.models.fund_transfer import FundTransfer
from accounting.models.journal import JournalEntry
from accounting.models.sequence import NumberSequence

__all__ = [
    "Account",
    "Category",
    "JournalEntry",
    "FundTransfer",
    "NumberSequence",
]
