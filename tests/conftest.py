"""Shared fixtures. Nothing here touches the network or the real clock."""

from datetime import date

import pytest

from wealthway.activity import ActivityLogger
from wealthway.ledger import TransactionStore
from wealthway.models.transaction import TransactionType
from wealthway.services.storage import InMemoryKeyValueStore, KeyValueStateStorage


TODAY = date(2024, 3, 20)


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.records = []

    def _record(self, level, event, **kwargs):
        self.records.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self):
        return [kwargs.get("event_type") for _, _, kwargs in self.records]


class SpyStorage(KeyValueStateStorage):
    """In-memory state storage that counts save calls."""

    def __init__(self, backend=None):
        super().__init__(backend or InMemoryKeyValueStore())
        self.saved_transactions = []
        self.saved_cycle_days = []

    def save_transactions(self, transactions):
        self.saved_transactions.append(list(transactions))
        super().save_transactions(transactions)

    def save_cycle_start_day(self, day):
        self.saved_cycle_days.append(day)
        super().save_cycle_start_day(day)


class StubResponse:
    def __init__(self, text):
        self.text = text


class StubModel:
    """Async model double with the `generate_content_async` shape."""

    def __init__(self, text="Spend less on eating out.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return StubResponse(self.text)


def sequential_ids(prefix="tx"):
    counter = {"n": 0}

    def factory():
        counter["n"] += 1
        return f"{prefix}{counter['n']}"

    return factory


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def activity_logger(recording_logger):
    return ActivityLogger(logger=recording_logger)


@pytest.fixture
def storage():
    return SpyStorage()


@pytest.fixture
def store(storage, activity_logger):
    return TransactionStore(storage, activity_logger=activity_logger, id_factory=sequential_ids())


@pytest.fixture
def stub_model():
    return StubModel()


@pytest.fixture
def populated_store(store):
    """Three transactions in March 2024 plus one in February, oldest created first."""
    store.create(TransactionType.INCOME, "300000", "Salary", "March pay", date(2024, 3, 1))
    store.create(TransactionType.EXPENSE, "1200", "Food", "Lunch", date(2024, 3, 10))
    store.create(TransactionType.EXPENSE, "800", "Transportation", "", date(2024, 3, 15))
    store.create(TransactionType.EXPENSE, "5000", "Food", "Groceries", date(2024, 2, 20))
    return store
