"""Data models for YNAB Sync."""

from .batches import (
    AccountsBatch,
    Batch,
    CategoriesBatch,
    MonthsBatch,
    PayeesBatch,
    TransactionsBatch,
)
from .records import (
    AccountRecord,
    CategoryGroupRecord,
    CategoryMonthRecord,
    CategoryRecord,
    MonthRecord,
    PayeeRecord,
    Record,
    SubtransactionRecord,
    TransactionRecord,
)

__all__ = [
    # Records
    "Record",
    "CategoryGroupRecord",
    "CategoryRecord",
    "MonthRecord",
    "CategoryMonthRecord",
    "AccountRecord",
    "TransactionRecord",
    "SubtransactionRecord",
    "PayeeRecord",
    # Batches
    "Batch",
    "CategoriesBatch",
    "MonthsBatch",
    "AccountsBatch",
    "TransactionsBatch",
    "PayeesBatch",
]
