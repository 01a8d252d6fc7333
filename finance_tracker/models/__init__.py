"""
Data Models Package

This package contains all Pydantic models used by the Finance Tracker.
All data flowing through the ledger must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    LedgerSnapshot,
    MonthSummary,
    SortOrder,
    Totals,
    Transaction,
    TransactionCreate,
    TransactionFilter,
    TransactionType,
    TransactionUpdate,
)
from finance_tracker.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Transaction models
    "LedgerSnapshot",
    "MonthSummary",
    "SortOrder",
    "Totals",
    "Transaction",
    "TransactionCreate",
    "TransactionFilter",
    "TransactionType",
    "TransactionUpdate",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
