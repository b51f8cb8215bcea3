"""Normalized record sets for one endpoint fetch.

A batch holds everything one incremental endpoint returned, already
flattened, plus the ``server_knowledge`` the endpoint reported.
``record_sets`` lists parents before children so they can be merged in
that order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Sequence

from .records import (
    AccountRecord,
    CategoryGroupRecord,
    CategoryRecord,
    MonthRecord,
    PayeeRecord,
    Record,
    SubtransactionRecord,
    TransactionRecord,
)


@dataclass
class Batch:
    """Base for normalized endpoint batches."""

    ENDPOINT: ClassVar[str] = ""

    server_knowledge: Optional[int] = None

    @property
    def endpoint(self) -> str:
        return self.ENDPOINT

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return ()

    def __len__(self) -> int:
        return sum(len(records) for records in self.record_sets)


@dataclass
class CategoriesBatch(Batch):
    ENDPOINT: ClassVar[str] = "categories"

    groups: list[CategoryGroupRecord] = field(default_factory=list)
    categories: list[CategoryRecord] = field(default_factory=list)

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return (self.groups, self.categories)


@dataclass
class MonthsBatch(Batch):
    ENDPOINT: ClassVar[str] = "months"

    months: list[MonthRecord] = field(default_factory=list)

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return (self.months,)


@dataclass
class AccountsBatch(Batch):
    ENDPOINT: ClassVar[str] = "accounts"

    accounts: list[AccountRecord] = field(default_factory=list)

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return (self.accounts,)


@dataclass
class TransactionsBatch(Batch):
    ENDPOINT: ClassVar[str] = "transactions"

    transactions: list[TransactionRecord] = field(default_factory=list)
    subtransactions: list[SubtransactionRecord] = field(default_factory=list)

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return (self.transactions, self.subtransactions)


@dataclass
class PayeesBatch(Batch):
    ENDPOINT: ClassVar[str] = "payees"

    payees: list[PayeeRecord] = field(default_factory=list)

    @property
    def record_sets(self) -> tuple[Sequence[Record], ...]:
        return (self.payees,)
