"""Shared pytest fixtures for YNAB Sync tests."""

import copy
import json
import threading
from pathlib import Path

import pytest

from ynab_sync.config import SyncConfig
from ynab_sync.db.database import Database

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> dict:
    """Load a JSON payload from tests/fixtures."""
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def load_fixture():
    """Return the fixture loader so tests can grab fresh payload copies."""
    return read_fixture


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path."""
    return tmp_path / "test_ynab.db"


@pytest.fixture
def database(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db
    db.close()


# =============================================================================
# Sync-related fixtures
# =============================================================================


class FakeYNABClient:
    """Serves fixture payloads in place of the YNAB API.

    ``errors`` maps an endpoint name (or a ``(month_id, category_id)`` pair)
    to the exception that fetch should raise.
    """

    def __init__(self):
        self.payloads = {
            "categories": read_fixture("categories.json"),
            "months": read_fixture("months.json"),
            "accounts": read_fixture("accounts.json"),
            "transactions": read_fixture("transactions.json"),
            "payees": read_fixture("payees.json"),
        }
        self.category_months: dict[tuple[str, str], dict] = {}
        self.errors: dict = {}
        self.calls: list[tuple] = []
        self.closed = False
        self._lock = threading.Lock()

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def _serve(self, endpoint: str, server_knowledge: int) -> dict:
        self._record(endpoint, server_knowledge)
        if endpoint in self.errors:
            raise self.errors[endpoint]
        return copy.deepcopy(self.payloads[endpoint])

    def get_categories(self, server_knowledge: int = 0) -> dict:
        return self._serve("categories", server_knowledge)

    def get_months(self, server_knowledge: int = 0) -> dict:
        return self._serve("months", server_knowledge)

    def get_accounts(self, server_knowledge: int = 0) -> dict:
        return self._serve("accounts", server_knowledge)

    def get_transactions(self, server_knowledge: int = 0) -> dict:
        return self._serve("transactions", server_knowledge)

    def get_payees(self, server_knowledge: int = 0) -> dict:
        return self._serve("payees", server_knowledge)

    def get_category_month(self, month_id: str, category_id: str) -> dict:
        self._record("category_month", month_id, category_id)
        if (month_id, category_id) in self.errors:
            raise self.errors[(month_id, category_id)]
        values = self.category_months.get(
            (month_id, category_id), {"budgeted": 1000, "activity": -250, "balance": 750}
        )
        return {"data": {"category": {"id": category_id, "deleted": False, **values}}}

    def close(self):
        self.closed = True

    def calls_for(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_ynab():
    """Create a fake YNAB client loaded with the JSON fixtures."""
    return FakeYNABClient()


@pytest.fixture
def sync_config():
    """Small pool, no progress bar."""
    return SyncConfig(workers=3, show_progress=False)


@pytest.fixture
def sync_service(database, fake_ynab, sync_config):
    """Create SyncService with the fake client and temp database."""
    from ynab_sync.services.sync import SyncService

    return SyncService(db=database, ynab=fake_ynab, sync_config=sync_config)
