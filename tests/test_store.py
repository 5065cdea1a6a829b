"""Tests for the transaction store."""

import math
from datetime import date

import pytest

from conftest import SpyStorage, sequential_ids
from wealthway.ledger import TransactionStore, parse_amount
from wealthway.models.transaction import Transaction, TransactionType
from wealthway.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStateStorage,
    StorageError,
)


INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


class TestParseAmount:
    """Tests for form amount parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("1200", 1200),
        ("1200.9", 1200),
        (" 1,500 ", 1500),
        (0, 0),
        (99.99, 99),
        ("0", 0),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "-5", -1, True, math.inf, "nan"])
    def test_invalid_amounts(self, raw):
        assert parse_amount(raw) is None


class TestCreate:
    """Tests for TransactionStore.create."""

    def test_create_returns_and_persists(self, store, storage):
        tx = store.create(EXPENSE, "1200", "Food", "Lunch", date(2024, 3, 10))
        assert tx is not None
        assert tx.id == "tx1"
        assert tx.amount == 1200
        assert store.get("tx1") == tx
        assert storage.saved_transactions == [[tx]]

    def test_newest_first(self, store):
        first = store.create(EXPENSE, "1", "Food", "", date(2024, 3, 10))
        second = store.create(EXPENSE, "2", "Food", "", date(2024, 1, 1))
        assert [t.id for t in store.transactions] == [second.id, first.id]

    def test_fraction_is_floored(self, store):
        tx = store.create(EXPENSE, "99.9", "Food", "", date(2024, 3, 10))
        assert tx.amount == 99

    @pytest.mark.parametrize("amount,category", [
        ("", "Food"),
        ("abc", "Food"),
        ("-10", "Food"),
        ("100", ""),
        ("100", "   "),
    ])
    def test_rejected_input_changes_nothing(self, store, storage, amount, category):
        assert store.create(EXPENSE, amount, category, "", date(2024, 3, 10)) is None
        assert len(store) == 0
        assert storage.saved_transactions == []

    def test_long_memo_is_accepted(self, store):
        """A memo is free text of any length."""
        memo = "x" * 501
        tx = store.create(EXPENSE, "100", "Food", memo, date(2024, 3, 1))
        assert tx is not None
        assert tx.memo == memo

    def test_memo_whitespace_is_kept(self, store):
        tx = store.create(EXPENSE, "100", "Food", "  lunch  ", date(2024, 3, 1))
        assert tx.memo == "  lunch  "

    def test_rejection_is_logged(self, store, recording_logger):
        store.create(EXPENSE, "", "Food", "", date(2024, 3, 10))
        assert "transaction_rejected" in recording_logger.event_types()


class TestUpdate:
    """Tests for TransactionStore.update."""

    def test_update_keeps_id_and_position(self, populated_store):
        before = [t.id for t in populated_store.transactions]
        target = before[2]
        updated = populated_store.update(target, INCOME, "42", "Bonus", "edited", date(2024, 3, 5))
        assert updated.id == target
        assert (updated.type, updated.amount, updated.category, updated.memo) == (INCOME, 42, "Bonus", "edited")
        assert [t.id for t in populated_store.transactions] == before
        assert populated_store.get(target) == updated

    def test_update_unknown_id(self, store, storage):
        assert store.update("missing", EXPENSE, "1", "Food", "", date(2024, 3, 1)) is None
        assert storage.saved_transactions == []

    def test_update_with_invalid_input_leaves_record(self, populated_store):
        target = populated_store.transactions[0]
        assert populated_store.update(target.id, EXPENSE, "", "Food", "", target.date) is None
        assert populated_store.get(target.id) == target

    def test_update_with_long_memo(self, populated_store):
        target = populated_store.transactions[0]
        updated = populated_store.update(target.id, EXPENSE, "10", "Food", "y" * 2000, target.date)
        assert updated.memo == "y" * 2000

    def test_update_logs_changed_fields(self, store, recording_logger):
        tx = store.create(EXPENSE, "10", "Food", "", date(2024, 3, 1))
        store.update(tx.id, EXPENSE, "20", "Food", "", date(2024, 3, 1))
        _, _, kwargs = recording_logger.records[-1]
        assert kwargs["event_type"] == "transaction_updated"
        assert kwargs["details"]["changed_fields"] == ["amount"]


class TestDelete:
    """Tests for TransactionStore.delete."""

    def test_delete_requires_confirmation(self, populated_store):
        target = populated_store.transactions[0].id
        assert populated_store.delete(target, confirm=lambda: False) is False
        assert populated_store.get(target) is not None

    def test_delete_confirmed(self, populated_store, storage):
        target = populated_store.transactions[0].id
        saves = len(storage.saved_transactions)
        assert populated_store.delete(target, confirm=lambda: True) is True
        assert populated_store.get(target) is None
        assert len(storage.saved_transactions) == saves + 1

    def test_delete_unknown_does_not_ask(self, store):
        asked = []
        assert store.delete("missing", confirm=lambda: asked.append(1) or True) is False
        assert asked == []


class TestRoundTrip:
    def test_create_edit_delete_restores_collection(self, populated_store):
        """Create, edit every field and delete leaves the collection as it was."""
        before = populated_store.transactions
        tx = populated_store.create(EXPENSE, "500", "Food", "Snack", date(2024, 3, 12))
        populated_store.update(tx.id, INCOME, "700", "Windfall", "Found", date(2024, 3, 13))
        populated_store.delete(tx.id, confirm=lambda: True)
        assert populated_store.transactions == before

    def test_ids_are_never_reused(self, storage):
        """A deleted id is reserved even if the id source hands it out again."""
        ids = iter(["same", "same", "other"])
        store = TransactionStore(storage, id_factory=lambda: next(ids))
        first = store.create(EXPENSE, "1", "Food", "", date(2024, 3, 1))
        store.delete(first.id, confirm=lambda: True)
        second = store.create(EXPENSE, "1", "Food", "", date(2024, 3, 1))
        assert second.id == "other"

    def test_default_ids_are_unique(self, storage):
        store = TransactionStore(storage)
        created = [store.create(EXPENSE, "1", "Food", "", date(2024, 3, 1)) for _ in range(20)]
        assert len({t.id for t in created}) == 20


class TestLoadAndSettings:
    """Tests for loading state and the cycle start day."""

    def test_loads_existing_state(self):
        storage = KeyValueStateStorage(InMemoryKeyValueStore())
        existing = Transaction(id="old", type=EXPENSE, amount=5, category="Food", date=date(2024, 1, 1))
        storage.save_transactions([existing])
        storage.save_cycle_start_day(16)

        store = TransactionStore(storage, id_factory=sequential_ids())
        assert store.transactions == (existing,)
        assert store.cycle_start_day == 16

    def test_loaded_ids_are_reserved(self):
        storage = KeyValueStateStorage(InMemoryKeyValueStore())
        storage.save_transactions([
            Transaction(id="tx1", type=EXPENSE, amount=5, category="Food", date=date(2024, 1, 1)),
        ])
        store = TransactionStore(storage, id_factory=sequential_ids())
        assert store.create(EXPENSE, "1", "Food", "", date(2024, 3, 1)).id == "tx2"

    def test_set_cycle_start_day_persists(self, store, storage, recording_logger):
        store.set_cycle_start_day(16)
        assert store.cycle_start_day == 16
        assert storage.saved_cycle_days == [16]
        assert "cycle_start_day_changed" in recording_logger.event_types()

    @pytest.mark.parametrize("day", [0, 29])
    def test_set_cycle_start_day_rejects_out_of_range(self, store, storage, day):
        with pytest.raises(ValueError):
            store.set_cycle_start_day(day)
        assert store.cycle_start_day == 1
        assert storage.saved_cycle_days == []


class FailingStorage(SpyStorage):
    """Loads normally but refuses every write once `failing` is set."""

    def __init__(self):
        super().__init__()
        self.failing = False

    def save_transactions(self, transactions):
        if self.failing:
            raise StorageError("disk full")
        super().save_transactions(transactions)

    def save_cycle_start_day(self, day):
        if self.failing:
            raise StorageError("disk full")
        super().save_cycle_start_day(day)


class TestStorageFailures:
    """A failed write leaves the in-memory state exactly as it was."""

    @pytest.fixture
    def failing_storage(self):
        return FailingStorage()

    @pytest.fixture
    def failing_store(self, failing_storage, activity_logger):
        store = TransactionStore(failing_storage, activity_logger=activity_logger, id_factory=sequential_ids())
        store.create(EXPENSE, "100", "Food", "Lunch", date(2024, 3, 1))
        failing_storage.failing = True
        return store

    def test_failed_create_is_logged_and_raised(self, failing_store, recording_logger):
        with pytest.raises(StorageError):
            failing_store.create(EXPENSE, "1", "Food", "", date(2024, 3, 2))
        assert len(failing_store) == 1
        assert "storage_error" in recording_logger.event_types()

    def test_failed_update_keeps_old_record(self, failing_store):
        before = failing_store.transactions
        with pytest.raises(StorageError):
            failing_store.update("tx1", INCOME, "999", "Bonus", "", date(2024, 3, 2))
        assert failing_store.transactions == before

    def test_failed_delete_keeps_record(self, failing_store):
        with pytest.raises(StorageError):
            failing_store.delete("tx1", confirm=lambda: True)
        assert failing_store.get("tx1") is not None

    def test_failed_cycle_day_save_keeps_old_day(self, failing_store):
        with pytest.raises(StorageError):
            failing_store.set_cycle_start_day(16)
        assert failing_store.cycle_start_day == 1
