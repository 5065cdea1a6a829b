"""
Activity Event Models for WealthWay

Every state change and every call to an external service is emitted as a
structured log event. This provides:
1. Debugging information when things go wrong
2. A readable trace of what the user did in a session

DESIGN DECISION: Activity events are LOG LINES, not history. They are never
persisted or replayed; the tracker keeps no record of past actions.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Settings
    CYCLE_START_DAY_CHANGED = "cycle_start_day_changed"
    STATE_LOADED = "state_loaded"

    # Advisory text
    ADVICE_REQUESTED = "advice_requested"
    ADVICE_GENERATED = "advice_generated"
    ADVICE_DISCARDED = "advice_discarded"

    # Failures
    STORAGE_ERROR = "storage_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single structured activity event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'settings')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Flatten to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_created(tx)
        event = ActivityEventBuilder.cycle_start_day_changed(1, 16)
    """

    @staticmethod
    def transaction_created(transaction_id: str, transaction_type: str, amount: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction created: {transaction_type} {amount}",
            details={"type": transaction_type, "amount": amount},
        )

    @staticmethod
    def transaction_updated(transaction_id: str, changed_fields: list[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated ({len(changed_fields)} fields changed)",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def transaction_rejected(reason: str, transaction_id: Optional[str] = None) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_REJECTED,
            severity=ActivitySeverity.DEBUG,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Form submission ignored: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def cycle_start_day_changed(old_day: int, new_day: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CYCLE_START_DAY_CHANGED,
            entity_type="settings",
            description=f"Cycle start day changed from {old_day} to {new_day}",
            details={"old": old_day, "new": new_day},
        )

    @staticmethod
    def state_loaded(transaction_count: int, cycle_start_day: int, schema_version: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_LOADED,
            entity_type="settings",
            description=f"Loaded {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "cycle_start_day": cycle_start_day,
                "schema_version": schema_version,
            },
        )

    @staticmethod
    def advice_requested(generation: int, transaction_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ADVICE_REQUESTED,
            entity_type="advice",
            entity_id=str(generation),
            description=f"Advice requested for {transaction_count} transactions",
            details={"generation": generation, "transaction_count": transaction_count},
        )

    @staticmethod
    def advice_generated(generation: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ADVICE_GENERATED,
            entity_type="advice",
            entity_id=str(generation),
            description="Advice applied",
        )

    @staticmethod
    def advice_discarded(generation: int, latest: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ADVICE_DISCARDED,
            severity=ActivitySeverity.DEBUG,
            entity_type="advice",
            entity_id=str(generation),
            description="Stale advice discarded; a newer request is pending or done",
            details={"generation": generation, "latest": latest},
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def external_service_error(service: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXTERNAL_SERVICE_ERROR,
            severity=ActivitySeverity.WARNING,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
        )
