"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged.
This provides:
1. A history of what the user added, changed and removed
2. Debugging capability when stored data is discarded or a write fails

The audit logger:
- Subscribes to the ledger store like any other observer
- Keeps an in-memory tail of recent events for display
- Runs inside the store's observer guard, so a logging failure cannot
  break a ledger operation
"""

import logging
import sys
from collections import deque
from typing import Optional

import structlog

from finance_tracker.ledger.observer import LedgerObserver
from finance_tracker.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
)

DEFAULT_HISTORY_SIZE = 100


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    JSON lines by default; a coloured console renderer when json_logs
    is False (debug mode).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger(LedgerObserver):
    """
    Central audit logging service.

    Logs events to the structured local log and remembers the most
    recent ones so a view can show "what just happened".
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("finance_tracker.audit")
        self._history: deque[LedgerEvent] = deque(maxlen=history_size)

    def log(self, event: LedgerEvent) -> None:
        """Log an event and add it to the recent history."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

    def on_ledger_event(self, event: LedgerEvent) -> None:
        self.log(event)

    def recent_events(self, limit: Optional[int] = None) -> list[LedgerEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        if limit is not None:
            events = events[:limit]
        return events

    def log_export(self, row_count: int, filename: str) -> None:
        """Log a CSV export."""
        self.log(LedgerEventBuilder.export_generated(row_count, filename))
