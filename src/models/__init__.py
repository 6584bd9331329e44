"""
Data Models Package

This package contains the Pydantic models and in-memory structures used
in the Finance Tracker system. All data flowing through the system must
conform to these schemas.
"""

from src.models.account import (
    COLOR_PALETTE,
    DEFAULT_COLOR,
    DEFAULT_ICON,
    MAX_AMOUNT_DIGITS,
    Account,
    AccountIcon,
    Amount,
    BankAccountSnapshot,
    ColorWrapper,
    Transaction,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from src.models.collection import AccountCollection, DuplicateAccountError
from src.models.deletion import (
    DeleteConfirmation,
    DeleteConfirmationError,
    DeleteState,
)
from src.models.results import (
    AmountParseResult,
    CommandResult,
    PersistenceErrorKind,
    PersistenceOperation,
    PersistenceResult,
)

__all__ = [
    # Account models
    "COLOR_PALETTE",
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "MAX_AMOUNT_DIGITS",
    "Account",
    "AccountIcon",
    "Amount",
    "BankAccountSnapshot",
    "ColorWrapper",
    "Transaction",
    # Collection and deletion
    "AccountCollection",
    "DuplicateAccountError",
    "DeleteConfirmation",
    "DeleteConfirmationError",
    "DeleteState",
    # Results
    "AmountParseResult",
    "CommandResult",
    "PersistenceErrorKind",
    "PersistenceOperation",
    "PersistenceResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
