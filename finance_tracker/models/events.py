"""
Ledger Event Models

Every mutation of the ledger produces a LedgerEvent. Events are handed to
the store's observers (the audit logger, and whatever view layer sits on
top) so they can react without the store knowing about them.

DESIGN DECISION: Events describe what happened, never what to render.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events the ledger emits."""
    # Mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    LEDGER_CLEARED = "ledger_cleared"
    CLEAR_CANCELLED = "clear_cancelled"

    # Storage
    LEDGER_LOADED = "ledger_loaded"
    STORAGE_DISCARDED = "storage_discarded"
    PERSIST_FAILED = "persist_failed"

    # Export
    EXPORT_GENERATED = "export_generated"


class EventSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    transaction_id: Optional[int] = Field(
        default=None,
        description="Transaction this event is about, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

    @property
    def is_mutation(self) -> bool:
        return self.event_type in MUTATION_EVENTS

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


MUTATION_EVENTS = frozenset({
    LedgerEventType.TRANSACTION_ADDED,
    LedgerEventType.TRANSACTION_UPDATED,
    LedgerEventType.TRANSACTION_DELETED,
    LedgerEventType.LEDGER_CLEARED,
})


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.transaction_added(transaction)
        event = LedgerEventBuilder.ledger_cleared(removed=12)
    """

    @staticmethod
    def transaction_added(transaction_id: int, type_: str, amount: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_ADDED,
            transaction_id=transaction_id,
            description=f"Transaction added: {type_} {amount}",
            details={
                "type": type_,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: int, fields: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_UPDATED,
            transaction_id=transaction_id,
            description=f"Transaction updated: {', '.join(fields) or 'no fields'}",
            details={
                "fields": fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            transaction_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def ledger_cleared(removed: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_CLEARED,
            severity=EventSeverity.WARNING,
            description=f"All data cleared ({removed} transactions removed)",
            details={
                "removed": removed,
            },
            is_user_action=True,
        )

    @staticmethod
    def clear_cancelled(stage: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.CLEAR_CANCELLED,
            description=f"Clear-all cancelled at confirmation {stage}",
            details={
                "stage": stage,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(slot: str, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            severity=EventSeverity.DEBUG,
            description=f"Loaded {count} transactions from '{slot}'",
            details={
                "slot": slot,
                "count": count,
            },
        )

    @staticmethod
    def storage_discarded(slot: str, reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORAGE_DISCARDED,
            severity=EventSeverity.WARNING,
            description=f"Stored ledger in '{slot}' was unreadable and was ignored",
            details={
                "slot": slot,
            },
            error_message=reason,
        )

    @staticmethod
    def persist_failed(slot: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PERSIST_FAILED,
            severity=EventSeverity.ERROR,
            description=f"Could not write ledger to '{slot}'",
            details={
                "slot": slot,
            },
            error_message=error_message,
        )

    @staticmethod
    def export_generated(row_count: int, filename: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPORT_GENERATED,
            description=f"CSV export generated: {filename}",
            details={
                "rows": row_count,
                "filename": filename,
            },
            is_user_action=True,
        )
