"""
Main Orchestrator for the Finance Tracker

This module ties the components together and is the surface a view
layer talks to:
1. Record (add / edit / delete / clear transactions)
2. Browse (filter + sort the list)
3. Summarize (totals, savings, category breakdown, monthly summary)
4. Export (CSV document)

DESIGN DECISION: The orchestrator holds no ledger state of its own.
The store is the source of truth, and every view is recomputed from it
on each call. Totals and summaries always cover the whole ledger, even
when the list itself is filtered.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from pydantic import BaseModel

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.export import export_csv, export_filename
from finance_tracker.ledger import LedgerObserver, LedgerStore
from finance_tracker.models.transaction import (
    LedgerSnapshot,
    MonthSummary,
    SortOrder,
    Totals,
    Transaction,
    TransactionCreate,
    TransactionFilter,
    TransactionUpdate,
)
from finance_tracker.queries import (
    DEFAULT_SUMMARY_MONTHS,
    available_categories,
    available_months,
    calculate_savings,
    calculate_totals,
    expense_by_category,
    filter_transactions,
    monthly_summary,
    sort_transactions,
)
from finance_tracker.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
)


class CsvExport(BaseModel):
    """A generated export: suggested filename plus document text."""
    filename: str
    content: str
    row_count: int


class LedgerService:
    """
    Facade over the ledger store and the aggregation engine.

    Flow for a view layer:
    1. Subscribe an observer (or poll snapshot())
    2. Call add/update/delete on user actions
    3. Re-render from snapshot() when notified
    """

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        summary_months: int = DEFAULT_SUMMARY_MONTHS,
        export_prefix: str = "finance-tracker",
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._summary_months = summary_months
        self._export_prefix = export_prefix

    @property
    def store(self) -> LedgerStore:
        return self._store

    def subscribe(self, observer: LedgerObserver) -> None:
        self._store.subscribe(observer)

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def add_transaction(self, data: TransactionCreate | dict[str, Any]) -> int:
        return self._store.add(data)

    def update_transaction(
        self,
        transaction_id: int,
        changes: TransactionUpdate | dict[str, Any],
    ) -> Optional[Transaction]:
        return self._store.update(transaction_id, changes)

    def delete_transaction(self, transaction_id: int) -> bool:
        return self._store.delete(transaction_id)

    def clear_all(self, confirm: Callable[[str], bool]) -> bool:
        """Clear every transaction after two confirmations."""
        return self._store.clear(confirm)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._store.get(transaction_id)

    # -------------------------------------------------------------------------
    # Browsing
    # -------------------------------------------------------------------------

    def list_transactions(
        self,
        criteria: Optional[TransactionFilter] = None,
        order: SortOrder | str | None = SortOrder.DATE_DESC,
    ) -> list[Transaction]:
        """Filtered, sorted view of the ledger."""
        return sort_transactions(
            filter_transactions(self._store.transactions, criteria),
            order,
        )

    # -------------------------------------------------------------------------
    # Summaries (always over the whole ledger)
    # -------------------------------------------------------------------------

    def totals(self) -> Totals:
        return calculate_totals(self._store.transactions)

    def savings(self) -> Decimal:
        return calculate_savings(self._store.transactions)

    def expense_by_category(self) -> dict[str, Decimal]:
        return expense_by_category(self._store.transactions)

    def monthly_summary(self) -> list[MonthSummary]:
        return monthly_summary(self._store.transactions, self._summary_months)

    def snapshot(
        self,
        criteria: Optional[TransactionFilter] = None,
        order: SortOrder | str | None = SortOrder.DATE_DESC,
    ) -> LedgerSnapshot:
        """Everything a dashboard needs in one call."""
        transactions = self._store.transactions
        return LedgerSnapshot(
            transactions=sort_transactions(
                filter_transactions(transactions, criteria),
                order,
            ),
            totals=calculate_totals(transactions),
            savings=calculate_savings(transactions),
            expense_by_category=expense_by_category(transactions),
            monthly_summary=monthly_summary(transactions, self._summary_months),
            available_categories=available_categories(transactions),
            available_months=available_months(transactions),
        )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_csv(
        self,
        criteria: Optional[TransactionFilter] = None,
        on: Optional[date] = None,
    ) -> CsvExport:
        """Export the (optionally filtered) ledger, oldest first."""
        transactions = filter_transactions(self._store.transactions, criteria)
        export = CsvExport(
            filename=export_filename(on, self._export_prefix),
            content=export_csv(transactions),
            row_count=len(transactions),
        )
        if self._audit_logger:
            self._audit_logger.log_export(export.row_count, export.filename)
        return export


def create_storage(settings: Settings) -> KeyValueStorageInterface:
    """Build the configured key-value backend."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStorage()
    return JsonFileKeyValueStorage(storage_settings.path)


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    configure_logs: bool = True,
) -> tuple[LedgerService, AuditLogger]:
    """
    Create the application components from settings.

    Args:
        settings: Settings to use; defaults to get_settings().
        storage: Overrides the configured backend (handy in tests).
        configure_logs: Set up structlog from the app settings.

    Returns:
        (ledger_service, audit_logger)
    """
    settings = settings or get_settings()
    app_settings = settings.app

    if configure_logs:
        configure_logging(
            level=app_settings.log_level,
            json_logs=not app_settings.debug_mode,
        )

    audit_logger = AuditLogger()
    store = LedgerStore(
        storage=storage or create_storage(settings),
        slot_name=settings.storage.slot_name,
        observers=[audit_logger],
    )
    service = LedgerService(
        store=store,
        audit_logger=audit_logger,
        summary_months=app_settings.summary_months,
        export_prefix=app_settings.export_filename_prefix,
    )
    return service, audit_logger
