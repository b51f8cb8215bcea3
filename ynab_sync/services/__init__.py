"""Business logic services for YNAB Sync."""

from .normalizer import (
    normalize_accounts,
    normalize_categories,
    normalize_category_month,
    normalize_months,
    normalize_payees,
    normalize_transactions,
)
from .sync import ResourceResult, SyncError, SyncResult, SyncService

__all__ = [
    "SyncService",
    "SyncResult",
    "SyncError",
    "ResourceResult",
    "normalize_categories",
    "normalize_months",
    "normalize_category_month",
    "normalize_accounts",
    "normalize_transactions",
    "normalize_payees",
]
