"""Flat relational records produced by the normalizer.

Each record maps one-to-one onto a row of its table. Field order is column
order; ``TABLE`` and ``KEY`` tell the upsert engine where the row goes and
which columns identify it.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from typing import ClassVar, Optional


@dataclass
class Record:
    """Base for all table records."""

    TABLE: ClassVar[str] = ""
    KEY: ClassVar[tuple[str, ...]] = ("id",)

    @classmethod
    def columns(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def values(self) -> tuple:
        return astuple(self)

    @property
    def key(self) -> tuple:
        return tuple(getattr(self, name) for name in self.KEY)


@dataclass
class CategoryGroupRecord(Record):
    TABLE: ClassVar[str] = "category_group"

    id: str
    name: str
    hidden: bool = False
    deleted: bool = False


@dataclass
class CategoryRecord(Record):
    TABLE: ClassVar[str] = "category"

    id: str
    category_group_id: str
    name: str
    note: Optional[str] = None
    hidden: bool = False
    deleted: bool = False
    goal_type: Optional[str] = None
    goal_creation_month: Optional[str] = None
    goal_target: Optional[int] = None
    goal_target_month: Optional[str] = None


@dataclass
class MonthRecord(Record):
    """A budget month; ``id`` is the calendar month string (``YYYY-MM-DD``)."""

    TABLE: ClassVar[str] = "month"

    id: str
    note: Optional[str] = None
    income: Optional[int] = None
    budgeted: Optional[int] = None
    activity: Optional[int] = None
    to_be_budgeted: Optional[int] = None
    age_of_money: Optional[int] = None
    deleted: bool = False


@dataclass
class CategoryMonthRecord(Record):
    """Budget allocation of one category within one month."""

    TABLE: ClassVar[str] = "category_month"
    KEY: ClassVar[tuple[str, ...]] = ("month_id", "category_id")

    month_id: str
    category_id: str
    budgeted: Optional[int] = None
    activity: Optional[int] = None
    balance: Optional[int] = None


@dataclass
class AccountRecord(Record):
    TABLE: ClassVar[str] = "account"

    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    on_budget: bool = False
    closed: bool = False
    note: Optional[str] = None
    balance: Optional[int] = None
    cleared_balance: Optional[int] = None
    uncleared_balance: Optional[int] = None
    transfer_payee_id: Optional[str] = None
    direct_import_linked: bool = False
    direct_import_in_error: bool = False
    deleted: bool = False


@dataclass
class TransactionRecord(Record):
    """A transaction; ``amount`` is in milliunits."""

    TABLE: ClassVar[str] = "transaction"

    id: str
    date: Optional[str] = None
    amount: Optional[int] = None
    memo: Optional[str] = None
    cleared: Optional[str] = None
    approved: bool = False
    flag_color: Optional[str] = None
    account_id: Optional[str] = None
    payee_id: Optional[str] = None
    category_id: Optional[str] = None
    transfer_account_id: Optional[str] = None
    transfer_transaction_id: Optional[str] = None
    matched_transaction_id: Optional[str] = None
    import_id: Optional[str] = None
    deleted: bool = False
    account_name: Optional[str] = None
    payee_name: Optional[str] = None
    category_name: Optional[str] = None


@dataclass
class SubtransactionRecord(Record):
    """One split line of a transaction."""

    TABLE: ClassVar[str] = "subtransaction"

    id: str
    transaction_id: str
    amount: Optional[int] = None
    memo: Optional[str] = None
    payee_id: Optional[str] = None
    payee_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    transfer_account_id: Optional[str] = None
    transfer_transaction_id: Optional[str] = None
    deleted: bool = False


@dataclass
class PayeeRecord(Record):
    TABLE: ClassVar[str] = "payee"

    id: str
    name: str
    transfer_account_id: Optional[str] = None
    deleted: bool = False
