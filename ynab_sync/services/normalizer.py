"""Flatten raw YNAB payloads into relational records.

One function per endpoint. Nested shapes are split into independent record
sets that keep their parent keys:

- category groups -> groups + categories (category inherits the group id)
- transactions -> transactions + subtransactions (sub inherits the parent id)
- month category snapshot -> category-month rows keyed by (month, category)

Only type coercion happens here. Missing optional values become ``None``
(``False`` for flags, ``""`` for required names); nothing is inferred.
"""

from __future__ import annotations

from typing import Any, Optional

from ..models import (
    AccountRecord,
    AccountsBatch,
    CategoriesBatch,
    CategoryGroupRecord,
    CategoryMonthRecord,
    CategoryRecord,
    MonthRecord,
    MonthsBatch,
    PayeeRecord,
    PayeesBatch,
    SubtransactionRecord,
    TransactionRecord,
    TransactionsBatch,
)


def _data(payload: dict[str, Any]) -> dict[str, Any]:
    return payload.get("data") or {}


def _int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _name(value: Any) -> str:
    return "" if value is None else str(value)


def _bool(value: Any) -> bool:
    return bool(value)


def _server_knowledge(data: dict[str, Any]) -> Optional[int]:
    return _int(data.get("server_knowledge"))


# =============================================================================
# Categories
# =============================================================================


def _category(raw: dict[str, Any], group_id: str) -> CategoryRecord:
    return CategoryRecord(
        id=raw["id"],
        category_group_id=group_id,
        name=_name(raw.get("name")),
        note=_str(raw.get("note")),
        hidden=_bool(raw.get("hidden")),
        deleted=_bool(raw.get("deleted")),
        goal_type=_str(raw.get("goal_type")),
        goal_creation_month=_str(raw.get("goal_creation_month")),
        goal_target=_int(raw.get("goal_target")),
        goal_target_month=_str(raw.get("goal_target_month")),
    )


def normalize_categories(payload: dict[str, Any]) -> CategoriesBatch:
    """Split ``category_groups`` into group and category records."""
    data = _data(payload)
    batch = CategoriesBatch(server_knowledge=_server_knowledge(data))
    for group in data.get("category_groups") or []:
        batch.groups.append(
            CategoryGroupRecord(
                id=group["id"],
                name=_name(group.get("name")),
                hidden=_bool(group.get("hidden")),
                deleted=_bool(group.get("deleted")),
            )
        )
        for raw in group.get("categories") or []:
            batch.categories.append(_category(raw, group["id"]))
    return batch


# =============================================================================
# Months
# =============================================================================


def normalize_months(payload: dict[str, Any]) -> MonthsBatch:
    """Month summaries only; category-month rows come from a separate fetch."""
    data = _data(payload)
    months = [
        MonthRecord(
            id=raw["month"],
            note=_str(raw.get("note")),
            income=_int(raw.get("income")),
            budgeted=_int(raw.get("budgeted")),
            activity=_int(raw.get("activity")),
            to_be_budgeted=_int(raw.get("to_be_budgeted")),
            age_of_money=_int(raw.get("age_of_money")),
            deleted=_bool(raw.get("deleted")),
        )
        for raw in data.get("months") or []
    ]
    return MonthsBatch(server_knowledge=_server_knowledge(data), months=months)


def normalize_category_month(month_id: str, payload: dict[str, Any]) -> list[CategoryMonthRecord]:
    """Category budget rows for one month.

    Accepts the single-category response (``data.category``) as well as the
    whole-month response (``data.month.categories``). Carries no watermark.
    """
    data = _data(payload)
    if "category" in data:
        raw_categories = [data["category"]] if data["category"] else []
    else:
        month = data.get("month") or {}
        month_id = month.get("month") or month_id
        raw_categories = month.get("categories") or []
    return [
        CategoryMonthRecord(
            month_id=month_id,
            category_id=raw["id"],
            budgeted=_int(raw.get("budgeted")),
            activity=_int(raw.get("activity")),
            balance=_int(raw.get("balance")),
        )
        for raw in raw_categories
    ]


# =============================================================================
# Accounts, transactions, payees
# =============================================================================


def normalize_accounts(payload: dict[str, Any]) -> AccountsBatch:
    data = _data(payload)
    accounts = [
        AccountRecord(
            id=raw["id"],
            name=_str(raw.get("name")),
            type=_str(raw.get("type")),
            on_budget=_bool(raw.get("on_budget")),
            closed=_bool(raw.get("closed")),
            note=_str(raw.get("note")),
            balance=_int(raw.get("balance")),
            cleared_balance=_int(raw.get("cleared_balance")),
            uncleared_balance=_int(raw.get("uncleared_balance")),
            transfer_payee_id=_str(raw.get("transfer_payee_id")),
            direct_import_linked=_bool(raw.get("direct_import_linked")),
            direct_import_in_error=_bool(raw.get("direct_import_in_error")),
            deleted=_bool(raw.get("deleted")),
        )
        for raw in data.get("accounts") or []
    ]
    return AccountsBatch(server_knowledge=_server_knowledge(data), accounts=accounts)


def _subtransaction(raw: dict[str, Any], parent_id: str) -> SubtransactionRecord:
    return SubtransactionRecord(
        id=raw["id"],
        transaction_id=parent_id,
        amount=_int(raw.get("amount")),
        memo=_str(raw.get("memo")),
        payee_id=_str(raw.get("payee_id")),
        payee_name=_str(raw.get("payee_name")),
        category_id=_str(raw.get("category_id")),
        category_name=_str(raw.get("category_name")),
        transfer_account_id=_str(raw.get("transfer_account_id")),
        transfer_transaction_id=_str(raw.get("transfer_transaction_id")),
        deleted=_bool(raw.get("deleted")),
    )


def normalize_transactions(payload: dict[str, Any]) -> TransactionsBatch:
    """Split transactions into transaction and subtransaction records."""
    data = _data(payload)
    batch = TransactionsBatch(server_knowledge=_server_knowledge(data))
    for raw in data.get("transactions") or []:
        batch.transactions.append(
            TransactionRecord(
                id=raw["id"],
                date=_str(raw.get("date")),
                amount=_int(raw.get("amount")),
                memo=_str(raw.get("memo")),
                cleared=_str(raw.get("cleared")),
                approved=_bool(raw.get("approved")),
                flag_color=_str(raw.get("flag_color")),
                account_id=_str(raw.get("account_id")),
                payee_id=_str(raw.get("payee_id")),
                category_id=_str(raw.get("category_id")),
                transfer_account_id=_str(raw.get("transfer_account_id")),
                transfer_transaction_id=_str(raw.get("transfer_transaction_id")),
                matched_transaction_id=_str(raw.get("matched_transaction_id")),
                import_id=_str(raw.get("import_id")),
                deleted=_bool(raw.get("deleted")),
                account_name=_str(raw.get("account_name")),
                payee_name=_str(raw.get("payee_name")),
                category_name=_str(raw.get("category_name")),
            )
        )
        for sub in raw.get("subtransactions") or []:
            batch.subtransactions.append(_subtransaction(sub, raw["id"]))
    return batch


def normalize_payees(payload: dict[str, Any]) -> PayeesBatch:
    data = _data(payload)
    payees = [
        PayeeRecord(
            id=raw["id"],
            name=_name(raw.get("name")),
            transfer_account_id=_str(raw.get("transfer_account_id")),
            deleted=_bool(raw.get("deleted")),
        )
        for raw in data.get("payees") or []
    ]
    return PayeesBatch(server_knowledge=_server_knowledge(data), payees=payees)
