"""
Audit Logger

DESIGN DECISION: Every account mutation and persistence attempt is logged.
This provides:
1. Traceability of what the user changed
2. Debugging capability when a save silently did not happen
3. Correlation IDs to trace the events of one user action

The audit logger writes to the structured local log only, and it
gracefully handles failures (logging never breaks the calling flow).
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from src.models.results import PersistenceOperation, PersistenceResult


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard logging module.

    Call once at application start-up.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
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


class AuditLogger:
    """Central audit logging service."""

    def __init__(self):
        self._logger = structlog.get_logger("audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at its severity.

        Returns False if the event could not be logged.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must not break the main flow
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)
            return False

        return True

    def log_account_created(
        self,
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
        source: str = "manual",
    ) -> None:
        self.log(AuditEventBuilder.account_created(
            account_id=account_id,
            name=name,
            correlation_id=correlation_id,
            source=source,
        ))

    def log_account_create_rejected(
        self,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_create_rejected(
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_account_edited(
        self,
        account_id: UUID,
        name: str,
        icon: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_edited(
            account_id=account_id,
            name=name,
            icon=icon,
            correlation_id=correlation_id,
        ))

    def log_account_not_found(
        self,
        account_id: UUID,
        command: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_not_found(
            account_id=account_id,
            command=command,
            correlation_id=correlation_id,
        ))

    def log_balance_edited(
        self,
        account_id: UUID,
        old_balance: str,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.balance_edited(
            account_id=account_id,
            old_balance=old_balance,
            new_balance=new_balance,
            correlation_id=correlation_id,
        ))

    def log_balance_input_rejected(
        self,
        account_id: UUID,
        raw_input: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.balance_input_rejected(
            account_id=account_id,
            raw_input=raw_input,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_delete_requested(
        self,
        account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.delete_requested(
            account_id=account_id,
            correlation_id=correlation_id,
        ))

    def log_delete_cancelled(
        self,
        account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.delete_cancelled(
            account_id=account_id,
            correlation_id=correlation_id,
        ))

    def log_account_deleted(
        self,
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_deleted(
            account_id=account_id,
            name=name,
            correlation_id=correlation_id,
        ))

    def log_bank_fetch_failed(
        self,
        source: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.bank_fetch_failed(
            source=source,
            correlation_id=correlation_id,
        ))

    def log_persistence(
        self,
        result: PersistenceResult,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log the outcome of a gateway load or save."""
        if not result.success:
            event = AuditEventBuilder.persistence_failed(
                operation=result.operation.value,
                error_kind=result.error_kind.value if result.error_kind else "unknown",
                error_message=result.error_message or "",
                correlation_id=correlation_id,
            )
        elif result.operation == PersistenceOperation.LOAD:
            event = AuditEventBuilder.accounts_loaded(
                account_count=result.account_count,
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.accounts_saved(
                account_count=result.account_count,
                record_created=result.record_created,
                correlation_id=correlation_id,
            )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., deleting an account).
    Pass it through all subsequent operations.
    """
    return uuid4()
