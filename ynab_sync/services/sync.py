"""Sync service for pulling a YNAB budget into the local database.

One run is one unit of work, executed in a fixed order:

    categories -> months -> accounts -> transactions -> category months -> payees

Accounts and transactions are fetched in the background while categories
and months are merged. Category months need the merged month and category
ids, so they are fetched only after those two steps, one request per
(month, category) pair through a bounded worker pool. Every merge runs on
the calling thread; worker threads only talk to the API.

A failed background fetch is noticed before the next foreground request.
Any fatal error rolls back the whole run, cursors included. A single
category-month lookup rejected by the API is skipped and logged instead.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from tqdm import tqdm

from ..clients import RemoteError
from ..config import SyncConfig
from ..models import Batch
from .normalizer import (
    normalize_accounts,
    normalize_categories,
    normalize_category_month,
    normalize_months,
    normalize_payees,
    normalize_transactions,
)

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..clients import YNABClientProtocol
    from ..db import Database, UnitOfWork


class SyncError(Exception):
    """A sync run aborted; nothing it wrote was committed."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Sync aborted during {step}: {cause}")


@dataclass
class ResourceResult:
    """Outcome of one incremental endpoint."""

    endpoint: str
    records: int = 0  # Rows merged, children included
    previous_knowledge: int = 0
    server_knowledge: Optional[int] = None


@dataclass
class SyncResult:
    """Result of a committed sync run."""

    resources: dict[str, ResourceResult] = field(default_factory=dict)
    category_months: int = 0
    skipped_category_months: list[tuple[str, str]] = field(default_factory=list)
    cursors: dict[str, int] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        """True if no category-month pair had to be skipped."""
        return not self.skipped_category_months

    @property
    def total_records(self) -> int:
        return sum(r.records for r in self.resources.values()) + self.category_months


class SyncService:
    """Runs incremental YNAB -> SQLite syncs."""

    def __init__(
        self,
        db: Database,
        ynab: YNABClientProtocol,
        sync_config: Optional[SyncConfig] = None,
    ):
        """Initialize sync service.

        Args:
            db: Database instance for local storage.
            ynab: YNAB client (real or fake).
            sync_config: Worker pool size and progress settings.
        """
        self._db = db
        self._ynab = ynab
        self._config = sync_config or SyncConfig()

    @staticmethod
    def _guarded(stop: threading.Event, fetch: Callable[..., Any], *args: Any) -> Any:
        """Run a fetch unless the run has already been aborted."""
        if stop.is_set():
            raise CancelledError()
        return fetch(*args)

    @staticmethod
    def _raise_if_failed(background: dict[str, Future]) -> None:
        """Abort as soon as a background fetch has already failed."""
        for step, future in background.items():
            if future.done() and not future.cancelled():
                error = future.exception()
                if error is not None:
                    logger.error("Background %s fetch failed: %s", step, error)
                    raise SyncError(step, error) from error

    def _merge(self, uow: UnitOfWork, result: SyncResult, batch: Batch, previous: int) -> None:
        merged = uow.upserts.merge_batch(batch)
        result.resources[batch.endpoint] = ResourceResult(
            endpoint=batch.endpoint,
            records=merged,
            previous_knowledge=previous,
            server_knowledge=batch.server_knowledge,
        )
        logger.info(
            "Merged %d %s records (server_knowledge %d -> %s)",
            merged,
            batch.endpoint,
            previous,
            batch.server_knowledge,
        )

    def run(self) -> SyncResult:
        """Execute one sync run.

        Returns:
            SyncResult describing what was merged and the committed cursors.

        Raises:
            SyncError: The run aborted; the database is unchanged.
        """
        result = SyncResult()
        stop = threading.Event()
        step = "begin"
        executor = ThreadPoolExecutor(
            max_workers=self._config.workers, thread_name_prefix="ynab-fetch"
        )
        try:
            with self._db.unit_of_work() as uow:
                cursors = uow.cursors.load()
                logger.debug("Loaded cursors: %s", cursors)

                accounts: Future = executor.submit(
                    self._guarded, stop, self._ynab.get_accounts, cursors["accounts"]
                )
                transactions: Future = executor.submit(
                    self._guarded, stop, self._ynab.get_transactions, cursors["transactions"]
                )
                background = {"accounts": accounts, "transactions": transactions}

                step = "categories"
                self._raise_if_failed(background)
                payload = self._ynab.get_categories(cursors["categories"])
                self._merge(uow, result, normalize_categories(payload), cursors["categories"])

                step = "months"
                self._raise_if_failed(background)
                payload = self._ynab.get_months(cursors["months"])
                self._merge(uow, result, normalize_months(payload), cursors["months"])

                step = "accounts"
                self._raise_if_failed(background)
                self._merge(
                    uow, result, normalize_accounts(accounts.result()), cursors["accounts"]
                )

                step = "transactions"
                self._merge(
                    uow,
                    result,
                    normalize_transactions(transactions.result()),
                    cursors["transactions"],
                )

                step = "category_months"
                self._sync_category_months(uow, result, executor, stop)

                step = "payees"
                payload = self._ynab.get_payees(cursors["payees"])
                self._merge(uow, result, normalize_payees(payload), cursors["payees"])

                step = "commit"
        except SyncError:
            raise
        except Exception as e:
            stop.set()
            logger.exception("Sync aborted during %s", step)
            raise SyncError(step, e) from e
        finally:
            stop.set()
            executor.shutdown(wait=True, cancel_futures=True)

        result.cursors = self._db.get_server_knowledge()
        logger.info(
            "Sync complete: %d records, %d category months, %d skipped",
            result.total_records,
            result.category_months,
            len(result.skipped_category_months),
        )
        return result

    def _sync_category_months(
        self,
        uow: UnitOfWork,
        result: SyncResult,
        executor: ThreadPoolExecutor,
        stop: threading.Event,
    ) -> None:
        """Fetch and merge the budget snapshot of every (month, category) pair.

        Pairs come from everything stored so far in this run, not only the
        rows that changed.
        """
        month_ids = self._db.get_month_ids()
        category_ids = self._db.get_category_ids()
        pairs = [(m, c) for m in month_ids for c in category_ids]
        logger.info(
            "Fetching %d category months (%d months x %d categories)",
            len(pairs),
            len(month_ids),
            len(category_ids),
        )

        futures = {
            executor.submit(self._guarded, stop, self._ynab.get_category_month, m, c): (m, c)
            for m, c in pairs
        }
        with tqdm(
            total=len(pairs),
            desc="Fetching category months",
            unit="req",
            disable=not self._config.show_progress,
        ) as pbar:
            for future in as_completed(futures):
                month_id, category_id = futures[future]
                pbar.update(1)
                try:
                    payload = future.result()
                except RemoteError as e:
                    logger.warning(
                        "Skipping category month %s/%s: %s", month_id, category_id, e
                    )
                    result.skipped_category_months.append((month_id, category_id))
                    continue
                records = normalize_category_month(month_id, payload)
                result.category_months += uow.upserts.merge(records)
