"""Tests for the audit logger."""

from uuid import uuid4

from structlog.testing import capture_logs

from src.audit import AuditLogger, create_correlation_id
from src.models.results import (
    PersistenceErrorKind,
    PersistenceOperation,
    PersistenceResult,
)


class TestAuditLogger:
    """Audit events end up in the structured log at their severity."""

    def test_info_event(self):
        account_id = uuid4()
        correlation_id = create_correlation_id()

        with capture_logs() as logs:
            AuditLogger().log_account_created(
                account_id=account_id,
                name="Wallet",
                correlation_id=correlation_id,
            )

        assert len(logs) == 1
        entry = logs[0]
        assert entry["event"] == "audit_event"
        assert entry["log_level"] == "info"
        assert entry["event_type"] == "account_created"
        assert entry["entity_id"] == str(account_id)
        assert entry["correlation_id"] == str(correlation_id)

    def test_rejected_balance_is_a_warning(self):
        with capture_logs() as logs:
            AuditLogger().log_balance_input_rejected(
                account_id=uuid4(),
                raw_input="12.345",
                reason="Fractional part must be one or two digits",
            )

        assert logs[0]["log_level"] == "warning"
        assert logs[0]["details"]["raw_input"] == "12.345"

    def test_failed_save_is_an_error(self):
        result = PersistenceResult.failure(
            operation=PersistenceOperation.SAVE,
            error_kind=PersistenceErrorKind.WRITE_FAILED,
            error_message="quota exceeded",
        )

        with capture_logs() as logs:
            AuditLogger().log_persistence(result)

        assert logs[0]["log_level"] == "error"
        assert logs[0]["event_type"] == "persistence_failed"
        assert logs[0]["error_code"] == "write_failed"

    def test_successful_load(self):
        result = PersistenceResult(
            operation=PersistenceOperation.LOAD,
            success=True,
            accounts=[],
            account_count=0,
        )

        with capture_logs() as logs:
            AuditLogger().log_persistence(result)

        assert logs[0]["event_type"] == "accounts_loaded"

    def test_system_error(self):
        with capture_logs() as logs:
            AuditLogger().log_error("storage_init_failed", "no credentials")

        assert logs[0]["event_type"] == "system_error"
        assert logs[0]["log_level"] == "error"
