"""Tests for sync service results and step ordering."""

from ynab_sync.services.sync import ResourceResult, SyncError, SyncResult


class TestSyncResult:
    """Tests for SyncResult dataclass."""

    def test_default_values(self):
        result = SyncResult()
        assert result.resources == {}
        assert result.category_months == 0
        assert result.skipped_category_months == []
        assert result.cursors == {}
        assert result.complete is True

    def test_incomplete_when_pairs_skipped(self):
        result = SyncResult(skipped_category_months=[("2022-12-01", "cat-1")])
        assert result.complete is False

    def test_total_records(self):
        result = SyncResult(
            resources={
                "categories": ResourceResult(endpoint="categories", records=13),
                "payees": ResourceResult(endpoint="payees", records=7),
            },
            category_months=10,
        )
        assert result.total_records == 30


class TestSyncError:
    """Tests for SyncError."""

    def test_carries_step_and_cause(self):
        cause = RuntimeError("boom")
        error = SyncError("months", cause)

        assert error.step == "months"
        assert error.cause is cause
        assert "months" in str(error)
        assert "boom" in str(error)


class TestStepOrdering:
    """Dependency order between resource steps."""

    def test_category_months_fetched_after_categories_and_months(self, sync_service, fake_ynab):
        sync_service.run()

        names = [call[0] for call in fake_ynab.calls]
        first_category_month = names.index("category_month")
        assert names.index("categories") < first_category_month
        assert names.index("months") < first_category_month
        assert names.index("payees") > max(
            i for i, name in enumerate(names) if name == "category_month"
        )

    def test_every_incremental_endpoint_fetched_once(self, sync_service, fake_ynab):
        sync_service.run()

        for endpoint in ("categories", "months", "accounts", "transactions", "payees"):
            assert len(fake_ynab.calls_for(endpoint)) == 1
