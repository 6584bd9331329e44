"""
Audit Models for Finance Tracker

Every account mutation and every persistence attempt is logged.
This provides:
1. Traceability of what the user changed
2. Debugging information when a save or load silently did not happen
3. Correlation of the events belonging to one user action

DESIGN DECISION: Audit events go to the structured log only.
They are not written to the document store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account commands
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATE_REJECTED = "account_create_rejected"
    ACCOUNT_EDITED = "account_edited"
    ACCOUNT_NOT_FOUND = "account_not_found"
    BALANCE_EDITED = "balance_edited"
    BALANCE_INPUT_REJECTED = "balance_input_rejected"

    # Delete confirmation
    DELETE_REQUESTED = "delete_requested"
    DELETE_CANCELLED = "delete_cancelled"
    ACCOUNT_DELETED = "account_deleted"

    # External source
    BANK_FETCH_FAILED = "bank_fetch_failed"

    # Persistence
    ACCOUNTS_LOADED = "accounts_loaded"
    ACCOUNTS_SAVED = "accounts_saved"
    PERSISTENCE_FAILED = "persistence_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'record')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a command and its save)"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
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
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(account_id, name, correlation_id)
        event = AuditEventBuilder.persistence_failed("save", "write_failed", msg)
    """

    @staticmethod
    def account_created(
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
        source: str = "manual",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account created: {name}",
            details={
                "name": name,
                "source": source,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_create_rejected(
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            correlation_id=correlation_id,
            description=f"Account not created: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def account_edited(
        account_id: UUID,
        name: str,
        icon: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_EDITED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account edited: {name}",
            details={
                "name": name,
                "icon": icon,
            },
            is_user_action=True,
        )

    @staticmethod
    def account_not_found(
        account_id: UUID,
        command: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"No account with this identifier for {command}",
            details={"command": command},
        )

    @staticmethod
    def balance_edited(
        account_id: UUID,
        old_balance: str,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_EDITED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Balance set to {new_balance}",
            details={
                "old_balance": old_balance,
                "new_balance": new_balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_input_rejected(
        account_id: UUID,
        raw_input: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Balance input rejected",
            details={
                "raw_input": raw_input,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def delete_requested(
        account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REQUESTED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Delete requested, awaiting confirmation",
            is_user_action=True,
        )

    @staticmethod
    def delete_cancelled(
        account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_CANCELLED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Delete cancelled",
            is_user_action=True,
        )

    @staticmethod
    def account_deleted(
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account deleted: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def bank_fetch_failed(
        source: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BANK_FETCH_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"No bank account data from {source}",
            details={"source": source},
        )

    @staticmethod
    def accounts_loaded(
        account_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_LOADED,
            entity_type="record",
            correlation_id=correlation_id,
            description=f"Loaded {account_count} accounts",
            details={"account_count": account_count},
        )

    @staticmethod
    def accounts_saved(
        account_count: int,
        record_created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_SAVED,
            entity_type="record",
            correlation_id=correlation_id,
            description=f"Saved {account_count} accounts",
            details={
                "account_count": account_count,
                "record_created": record_created,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="record",
            correlation_id=correlation_id,
            description=f"Accounts {operation} did not happen",
            error_code=error_kind,
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
