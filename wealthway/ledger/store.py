"""
Transaction Store

Owns the two pieces of persisted state - the transaction collection and the
cycle start day - and is the only thing allowed to change them.

DESIGN DECISION: State is loaded ONCE at construction and every change is
a full rewrite of the piece that changed. The new state is written first and
only adopted in memory once the write succeeded, so a StorageError leaves
the store exactly as it was. There is no partial update and no retry.

Malformed form input is NOT an error. `create` and `update` return None and
leave everything untouched, so the form can be corrected and resubmitted.
"""

import math
from collections.abc import Callable
from datetime import date
from typing import Optional, Union
from uuid import uuid4

from wealthway.activity import ActivityLogger
from wealthway.cycles import validate_start_day
from wealthway.models.transaction import Transaction, TransactionType
from wealthway.services.storage import StateStorageInterface, StorageError


AmountInput = Union[str, int, float, None]


def parse_amount(raw: AmountInput) -> Optional[int]:
    """
    Parse user input into a whole, non-negative amount.

    Fractions are floored ("1200.9" -> 1200). Empty, unparseable, negative
    and non-finite input gives None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return math.floor(value)


def _new_id() -> str:
    return uuid4().hex


class TransactionStore:
    """
    In-memory transaction collection with a persistence port.

    Order is insertion order with the newest first. Nothing ever re-sorts
    the list by date.
    """

    def __init__(
        self,
        storage: StateStorageInterface,
        activity_logger: Optional[ActivityLogger] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._storage = storage
        self._activity_logger = activity_logger
        self._id_factory = id_factory or _new_id

        state = storage.load()
        self._transactions: list[Transaction] = list(state.transactions)
        self._cycle_start_day = state.cycle_start_day

        # Ids stay reserved after delete so one is never handed out twice
        self._used_ids: set[str] = {tx.id for tx in self._transactions}

        if self._activity_logger:
            self._activity_logger.log_state_loaded(
                transaction_count=len(self._transactions),
                cycle_start_day=self._cycle_start_day,
                schema_version=state.schema_version,
            )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot of all transactions, newest first."""
        return tuple(self._transactions)

    @property
    def cycle_start_day(self) -> int:
        return self._cycle_start_day

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for tx in self._transactions:
            if tx.id == transaction_id:
                return tx
        return None

    def __len__(self) -> int:
        return len(self._transactions)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _fresh_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate not in self._used_ids:
                self._used_ids.add(candidate)
                return candidate

    def _commit_transactions(self, transactions: list[Transaction]) -> None:
        """Persist `transactions`, then adopt them. On failure memory is untouched."""
        try:
            self._storage.save_transactions(transactions)
        except StorageError as e:
            if self._activity_logger:
                self._activity_logger.log_storage_error("save_transactions", str(e))
            raise
        self._transactions = transactions

    def _validated_fields(
        self,
        transaction_type: TransactionType,
        amount: AmountInput,
        category: str,
        memo: str,
        day: date,
        transaction_id: Optional[str] = None,
    ) -> Optional[dict]:
        parsed = parse_amount(amount)
        if parsed is None:
            if self._activity_logger:
                self._activity_logger.log_transaction_rejected("missing or invalid amount", transaction_id)
            return None
        if not category or not category.strip():
            if self._activity_logger:
                self._activity_logger.log_transaction_rejected("missing category", transaction_id)
            return None
        return {
            "type": TransactionType(transaction_type),
            "amount": parsed,
            "category": category,
            "memo": memo or "",
            "date": day,
        }

    def create(
        self,
        transaction_type: TransactionType,
        amount: AmountInput,
        category: str,
        memo: str,
        day: date,
    ) -> Optional[Transaction]:
        """
        Create a transaction and put it first in the list.

        Returns the new transaction, or None if the input was rejected
        (nothing is stored or persisted in that case).
        """
        fields = self._validated_fields(transaction_type, amount, category, memo, day)
        if fields is None:
            return None

        transaction = Transaction(id=self._fresh_id(), **fields)
        self._commit_transactions([transaction] + self._transactions)

        if self._activity_logger:
            self._activity_logger.log_transaction_created(
                transaction.id, transaction.type.value, transaction.amount
            )
        return transaction

    def update(
        self,
        transaction_id: str,
        transaction_type: TransactionType,
        amount: AmountInput,
        category: str,
        memo: str,
        day: date,
    ) -> Optional[Transaction]:
        """
        Replace every mutable field of an existing transaction.

        The id and the position in the list are kept. Returns the updated
        transaction, or None if the id is unknown or the input was rejected.
        """
        index = next(
            (i for i, tx in enumerate(self._transactions) if tx.id == transaction_id),
            None,
        )
        if index is None:
            return None

        fields = self._validated_fields(
            transaction_type, amount, category, memo, day, transaction_id
        )
        if fields is None:
            return None

        old = self._transactions[index]
        updated = Transaction(id=old.id, **fields)
        transactions = list(self._transactions)
        transactions[index] = updated
        self._commit_transactions(transactions)

        if self._activity_logger:
            changed = [name for name in fields if getattr(old, name) != getattr(updated, name)]
            self._activity_logger.log_transaction_updated(updated.id, changed)
        return updated

    def delete(self, transaction_id: str, confirm: Callable[[], bool]) -> bool:
        """
        Delete a transaction after asking `confirm`.

        Returns True only if the user confirmed and the id existed.
        """
        if self.get(transaction_id) is None:
            return False
        if not confirm():
            return False

        self._commit_transactions([tx for tx in self._transactions if tx.id != transaction_id])

        if self._activity_logger:
            self._activity_logger.log_transaction_deleted(transaction_id)
        return True

    def set_cycle_start_day(self, day: int) -> None:
        """
        Change the cycle start day and persist it.

        Raises:
            ValueError: If day is outside 1-28
        """
        validate_start_day(day)
        old = self._cycle_start_day
        try:
            self._storage.save_cycle_start_day(day)
        except StorageError as e:
            if self._activity_logger:
                self._activity_logger.log_storage_error("save_cycle_start_day", str(e))
            raise
        self._cycle_start_day = day

        if self._activity_logger:
            self._activity_logger.log_cycle_start_day_changed(old, day)
