"""
Ledger Observer Interface

The store notifies observers after every mutation. View layers (a
dashboard, a chart, a report) implement this to refresh themselves
instead of being called directly by the data layer.
"""

from abc import ABC, abstractmethod

from finance_tracker.models.events import LedgerEvent


class LedgerObserver(ABC):
    """Receives ledger events."""

    @abstractmethod
    def on_ledger_event(self, event: LedgerEvent) -> None:
        """
        Handle one event.

        Called synchronously, after the change has been persisted.
        Exceptions raised here are logged by the store and otherwise
        ignored.
        """
        pass
