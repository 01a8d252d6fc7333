"""
Ledger Store

The single source of truth for transactions. Holds the ordered list in
memory and writes the whole list to one storage slot after every change.

GUARANTEES:
- Every mutation is persisted before the call returns
- Callers never see storage or lookup errors: a missing id is a no-op,
  an unreadable slot loads as an empty ledger, a failed write is only
  reported to observers
- Invalid input is rejected by the models before the store is touched

DESIGN DECISION: The store is an ordinary object that owns its storage
backend and observers. Tests build one over in-memory storage; the app
builds one over the JSON file (see orchestrator.create_app_components).
"""

import time
from typing import Any, Callable, Iterator, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from finance_tracker.ledger.observer import LedgerObserver
from finance_tracker.models.events import LedgerEvent, LedgerEventBuilder
from finance_tracker.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)
from finance_tracker.services.storage import (
    KeyValueStorageInterface,
    StorageError,
)

DEFAULT_SLOT_NAME = "transactions"

CLEAR_WARNING = (
    "Warning: This will delete ALL transactions. "
    "This action cannot be undone. Are you sure?"
)
CLEAR_LAST_WARNING = "Are you really sure? This is your last warning!"

_LEDGER_ADAPTER = TypeAdapter(list[Transaction])


class LedgerStore:
    """
    Ordered, persisted collection of transactions.

    Usage:
        store = LedgerStore(InMemoryKeyValueStorage())
        tx_id = store.add(TransactionCreate(...))
        store.update(tx_id, TransactionUpdate(notes="paid in cash"))
        store.delete(tx_id)
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        slot_name: str = DEFAULT_SLOT_NAME,
        observers: Optional[list[LedgerObserver]] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the store and load whatever is in the slot.

        Args:
            storage: Durable key-value backend.
            slot_name: Key the serialized ledger lives under.
            observers: Notified of every event, including the initial load.
            clock: Seconds since the epoch; used to derive new ids.
        """
        self._storage = storage
        self._slot = slot_name
        self._observers: list[LedgerObserver] = list(observers or [])
        self._clock = clock
        self._logger = structlog.get_logger(__name__)
        self._transactions: list[Transaction] = []
        self._last_id = 0
        self.load()

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, observer: LedgerObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: LedgerObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, event: LedgerEvent) -> None:
        for observer in list(self._observers):
            try:
                observer.on_ledger_event(event)
            except Exception as e:
                self._logger.error(
                    "ledger_observer_failed",
                    observer=type(observer).__name__,
                    event_type=event.event_type.value,
                    error=str(e),
                )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def slot_name(self) -> str:
        return self._slot

    @property
    def transactions(self) -> list[Transaction]:
        """Copy of the current collection, in insertion order."""
        return list(self._transactions)

    def get(self, transaction_id: int) -> Optional[Transaction]:
        index = self._index_of(transaction_id)
        if index is None:
            return None
        return self._transactions[index]

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    def _index_of(self, transaction_id: int) -> Optional[int]:
        for index, tx in enumerate(self._transactions):
            if tx.id == transaction_id:
                return index
        return None

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> list[Transaction]:
        """
        Replace the in-memory collection with the slot's contents.

        A missing slot, invalid JSON or any record failing validation
        yields an empty ledger. There is no partial recovery.
        """
        try:
            raw = self._storage.get(self._slot)
        except StorageError as e:
            raw = None
            self._discard(str(e))

        transactions: list[Transaction] = []
        if raw is not None:
            try:
                transactions = _LEDGER_ADAPTER.validate_json(raw)
            except ValidationError as e:
                self._discard(f"{e.error_count()} validation errors")

        self._transactions = transactions
        self._last_id = max((tx.id for tx in transactions), default=0)
        self._notify(LedgerEventBuilder.ledger_loaded(self._slot, len(transactions)))
        return list(transactions)

    def _discard(self, reason: str) -> None:
        self._logger.warning("ledger_slot_discarded", slot=self._slot, reason=reason)
        self._notify(LedgerEventBuilder.storage_discarded(self._slot, reason))

    def persist(self) -> None:
        """Write the whole collection to the slot in one call."""
        payload = _LEDGER_ADAPTER.dump_json(
            self._transactions,
            exclude_none=True,
        ).decode("utf-8")
        try:
            self._storage.set(self._slot, payload)
        except StorageError as e:
            self._notify(LedgerEventBuilder.persist_failed(self._slot, str(e)))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _next_id(self) -> int:
        """Creation time in milliseconds, bumped past the last issued id."""
        now_ms = int(self._clock() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return self._last_id

    def add(self, data: TransactionCreate | dict[str, Any]) -> int:
        """
        Append a new transaction and persist.

        Returns:
            The id assigned to the new record.

        Raises:
            ValidationError: If a dict is given and it is not a valid
                TransactionCreate.
        """
        if not isinstance(data, TransactionCreate):
            data = TransactionCreate.model_validate(data)

        transaction = Transaction.from_create(self._next_id(), data)
        self._transactions.append(transaction)
        self.persist()

        self._notify(LedgerEventBuilder.transaction_added(
            transaction.id,
            transaction.type,
            str(transaction.amount),
        ))
        return transaction.id

    def update(
        self,
        transaction_id: int,
        changes: TransactionUpdate | dict[str, Any],
    ) -> Optional[Transaction]:
        """
        Merge the supplied fields into an existing record and persist.

        Fields not supplied keep their stored values. Returns the updated
        record, or None (without touching storage) if the id is unknown.

        Raises:
            ValidationError: If the changes, or the merged record, are
                invalid. Nothing is changed in that case.
        """
        if not isinstance(changes, TransactionUpdate):
            changes = TransactionUpdate.model_validate(changes)

        index = self._index_of(transaction_id)
        if index is None:
            return None

        updated = self._transactions[index].merged(changes)
        self._transactions[index] = updated
        self.persist()

        self._notify(LedgerEventBuilder.transaction_updated(
            transaction_id,
            sorted(changes.changes()),
        ))
        return updated

    def delete(self, transaction_id: int) -> bool:
        """
        Remove every record with the id and persist.

        Returns False (without touching storage) if the id is unknown.
        """
        remaining = [tx for tx in self._transactions if tx.id != transaction_id]
        if len(remaining) == len(self._transactions):
            return False

        self._transactions = remaining
        self.persist()

        self._notify(LedgerEventBuilder.transaction_deleted(transaction_id))
        return True

    def clear(self, confirm: Callable[[str], bool]) -> bool:
        """
        Irrevocably discard every transaction.

        `confirm` is asked twice, with a warning and then a last warning.
        Only two affirmative answers clear the ledger. There is no undo.

        Returns:
            True if the ledger was cleared.
        """
        for stage, message in enumerate((CLEAR_WARNING, CLEAR_LAST_WARNING), start=1):
            if not confirm(message):
                self._notify(LedgerEventBuilder.clear_cancelled(stage))
                return False

        removed = len(self._transactions)
        self._transactions = []
        self.persist()

        self._notify(LedgerEventBuilder.ledger_cleared(removed))
        return True
