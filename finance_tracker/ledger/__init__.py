"""Ledger store package."""

from finance_tracker.ledger.observer import LedgerObserver
from finance_tracker.ledger.store import (
    CLEAR_LAST_WARNING,
    CLEAR_WARNING,
    DEFAULT_SLOT_NAME,
    LedgerStore,
)

__all__ = [
    "CLEAR_LAST_WARNING",
    "CLEAR_WARNING",
    "DEFAULT_SLOT_NAME",
    "LedgerObserver",
    "LedgerStore",
]
