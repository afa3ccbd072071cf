"""
Audit Models for Record Keeper

Every significant action on a record domain is logged as an audit event.
This provides:
1. Traceability of every confirmed create/update/delete
2. Diagnostics when a backend load or write fails
3. A record of user decisions (declined deletes, rejected forms)

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from recordkeeper.models.records import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    RECORDS_LOADED = "records_loaded"
    LOAD_FAILED = "load_failed"

    # Persistence
    RECORD_INSERTED = "record_inserted"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    WRITE_FAILED = "write_failed"

    # User decisions
    VALIDATION_FAILED = "validation_failed"
    DELETE_DECLINED = "delete_declined"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which domain and record is this about?
    domain: str = Field(
        ...,
        description="Record domain (notes, expenses, wiki)"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "domain": self.domain,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_inserted("notes", note.id, note.title)
        event = AuditEventBuilder.write_failed("expenses", "insert", str(exc))
    """

    @staticmethod
    def records_loaded(domain: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_LOADED,
            domain=domain,
            description=f"Loaded {count} {domain} records",
            details={"count": count},
        )

    @staticmethod
    def load_failed(domain: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            domain=domain,
            description=f"Could not load {domain}; showing an empty list",
            error_message=error_message,
        )

    @staticmethod
    def record_inserted(domain: str, record_id: str, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_INSERTED,
            domain=domain,
            entity_id=record_id,
            description=f"Record created: {title}",
            is_user_action=True,
        )

    @staticmethod
    def record_updated(domain: str, record_id: str, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            domain=domain,
            entity_id=record_id,
            description=f"Record updated: {title}",
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(domain: str, record_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            domain=domain,
            entity_id=record_id,
            description="Record deleted",
            is_user_action=True,
        )

    @staticmethod
    def write_failed(
        domain: str,
        operation: str,
        error_message: str,
        record_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            domain=domain,
            entity_id=record_id,
            description=f"{operation.capitalize()} failed for {domain}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(domain: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            domain=domain,
            description=f"Form rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def delete_declined(domain: str, record_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_DECLINED,
            domain=domain,
            entity_id=record_id,
            description="User declined the delete confirmation",
            is_user_action=True,
        )
