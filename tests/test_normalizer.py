"""Tests for payload normalization."""

from ynab_sync.services.normalizer import (
    normalize_accounts,
    normalize_categories,
    normalize_category_month,
    normalize_months,
    normalize_payees,
    normalize_transactions,
)


class TestNormalizeCategories:
    """Tests for category group flattening."""

    def test_groups_and_categories_are_split(self, load_fixture):
        batch = normalize_categories(load_fixture("categories.json"))

        assert batch.server_knowledge == 98
        assert batch.endpoint == "categories"
        assert len(batch.groups) == 8
        assert len(batch.categories) == 5
        assert batch.groups[0].name == "Internal Master Category"

    def test_category_inherits_parent_group_id(self):
        payload = {
            "data": {
                "category_groups": [
                    {
                        "id": "group-1",
                        "name": "Bills",
                        "categories": [
                            # Payload claims a stale group; the enclosing group wins.
                            {"id": "cat-1", "name": "Rent", "category_group_id": "group-old"}
                        ],
                    }
                ],
                "server_knowledge": 5,
            }
        }
        batch = normalize_categories(payload)

        assert batch.categories[0].category_group_id == "group-1"

    def test_goal_fields_and_missing_optionals(self, load_fixture):
        batch = normalize_categories(load_fixture("categories.json"))
        by_name = {c.name: c for c in batch.categories}

        water = by_name["Water"]
        assert water.note == "Paid quarterly"
        assert water.goal_type == "TBD"
        assert water.goal_creation_month == "2021-11-01"
        assert water.goal_target == 90000
        assert water.goal_target_month == "2022-02-01"

        electric = by_name["Electric 213"]
        assert electric.note is None
        assert electric.goal_type is None
        assert electric.goal_target == 0

    def test_parents_listed_before_children(self, load_fixture):
        batch = normalize_categories(load_fixture("categories.json"))

        groups, categories = batch.record_sets
        assert groups is batch.groups
        assert categories is batch.categories

    def test_nameless_group_and_category(self):
        batch = normalize_categories(
            {"data": {"category_groups": [{"id": "g1", "categories": [{"id": "c1"}]}]}}
        )

        assert batch.groups[0].name == ""
        assert batch.categories[0].name == ""

    def test_missing_server_knowledge_is_none(self):
        batch = normalize_categories({"data": {"category_groups": []}})

        assert batch.server_knowledge is None
        assert len(batch) == 0


class TestNormalizeMonths:
    """Tests for month normalization."""

    def test_months_use_calendar_month_as_id(self, load_fixture):
        batch = normalize_months(load_fixture("months.json"))

        assert batch.server_knowledge == 98
        assert [m.id for m in batch.months] == ["2022-11-01", "2022-12-01"]
        assert batch.months[0].age_of_money == 12
        assert batch.months[1].age_of_money is None
        assert batch.months[1].note == "Holidays"

    def test_months_yield_no_category_months(self, load_fixture):
        batch = normalize_months(load_fixture("months.json"))

        assert batch.record_sets == (batch.months,)


class TestNormalizeCategoryMonth:
    """Tests for per-month category budget normalization."""

    def test_single_category_response(self, load_fixture):
        records = normalize_category_month("2022-12-01", load_fixture("category-month.json"))

        assert len(records) == 1
        record = records[0]
        assert record.month_id == "2022-12-01"
        assert record.category_id == "94b9ac05-6a55-4e33-8f52-65931515da96"
        assert record.budgeted == 2000000
        assert record.activity == -2000
        assert record.balance == 2001000

    def test_whole_month_response(self, load_fixture):
        records = normalize_category_month("ignored", load_fixture("month.json"))

        assert [r.category_id for r in records] == [
            "94b9ac05-6a55-4e33-8f52-65931515da96",
            "7d3b19a3-a347-4a10-befc-b966f278aa3e",
        ]
        assert {r.month_id for r in records} == {"2022-12-01"}

    def test_empty_response(self):
        assert normalize_category_month("2022-12-01", {"data": {}}) == []


class TestNormalizeAccounts:
    """Tests for account normalization."""

    def test_account_fields(self, load_fixture):
        batch = normalize_accounts(load_fixture("accounts.json"))

        assert batch.server_knowledge == 104
        assert len(batch.accounts) == 2
        first = batch.accounts[0]
        assert first.id == "9a329f5e-1eca-40c6-8ba1-a19b0d8cadd1"
        assert first.name == "Checker"
        assert first.type == "checking"
        assert first.on_budget is True
        assert first.closed is False
        assert first.note is None
        assert first.balance == 95000
        assert first.cleared_balance == 118000
        assert first.uncleared_balance == -23000
        assert first.transfer_payee_id == "db6deeec-b0ba-4b1e-a09f-1338822ec9d0"
        assert first.direct_import_linked is False
        assert first.direct_import_in_error is False
        assert first.deleted is False


class TestNormalizeTransactions:
    """Tests for transaction flattening."""

    def test_transaction_fields(self, load_fixture):
        batch = normalize_transactions(load_fixture("transactions.json"))

        assert batch.server_knowledge == 112
        assert len(batch.transactions) == 4
        first = batch.transactions[0]
        assert first.id == "295c1843-14dd-46ed-bed5-3d02c17a82db"
        assert first.date == "2021-11-24"
        assert first.amount == -23000
        assert first.memo == ""
        assert first.cleared == "uncleared"
        assert first.approved is True
        assert first.flag_color is None
        assert first.payee_name == "Hugo"
        assert first.category_name == "Water"
        assert first.import_id is None

    def test_subtransactions_inherit_parent_id(self):
        payload = {
            "data": {
                "transactions": [
                    {
                        "id": "txn-1",
                        "date": "2024-01-15",
                        "amount": -100000,
                        "subtransactions": [
                            {"id": "sub-1", "amount": -60000},
                            {"id": "sub-2", "transaction_id": "other", "amount": -40000},
                        ],
                    }
                ],
                "server_knowledge": 7,
            }
        }
        batch = normalize_transactions(payload)

        assert [s.transaction_id for s in batch.subtransactions] == ["txn-1", "txn-1"]
        assert batch.subtransactions[0].memo is None
        assert batch.subtransactions[0].deleted is False

    def test_split_from_fixture(self, load_fixture):
        batch = normalize_transactions(load_fixture("transactions.json"))

        assert len(batch.subtransactions) == 2
        assert sum(s.amount for s in batch.subtransactions) == -50000
        assert len(batch) == 6


class TestNormalizePayees:
    """Tests for payee normalization."""

    def test_payee_fields(self, load_fixture):
        batch = normalize_payees(load_fixture("payees.json"))

        assert batch.server_knowledge == 120
        assert len(batch.payees) == 7
        first = batch.payees[0]
        assert first.id == "8a8fbcd5-2eda-478d-a977-c8c1122f6e3a"
        assert first.name == "Starting Balance"
        assert first.transfer_account_id is None
        assert first.deleted is False
        assert batch.payees[-1].deleted is True

    def test_missing_name_becomes_empty_string(self):
        batch = normalize_payees({"data": {"payees": [{"id": "p1"}], "server_knowledge": 1}})

        assert batch.payees[0].name == ""
