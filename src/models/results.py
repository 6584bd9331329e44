"""
Result models returned to the UI layer.

DESIGN DECISION: Persistence failures never raise out of the gateway.
They come back as a PersistenceResult so the caller decides whether to
show anything. The account-management flow shows nothing, as before.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.models.account import Account


class PersistenceOperation(str, Enum):
    LOAD = "load"
    SAVE = "save"


class PersistenceErrorKind(str, Enum):
    """Where a load or save gave up."""
    FETCH_FAILED = "fetch_failed"            # network / backend error on fetch
    RECORD_NOT_FOUND = "record_not_found"    # load only; save creates the record
    ASSET_MISSING = "asset_missing"
    ASSET_READ_FAILED = "asset_read_failed"
    DECODE_FAILED = "decode_failed"
    ENCODE_FAILED = "encode_failed"
    FILE_WRITE_FAILED = "file_write_failed"
    WRITE_FAILED = "write_failed"


class PersistenceResult(BaseModel):
    """Outcome of one gateway load or save."""

    operation: PersistenceOperation
    success: bool
    completed_at: datetime = Field(default_factory=datetime.utcnow)

    error_kind: Optional[PersistenceErrorKind] = None
    error_message: Optional[str] = None

    # Load
    accounts: Optional[list[Account]] = None

    # Save
    record_created: bool = False
    account_count: int = Field(default=0, ge=0)
    staging_path: Optional[str] = None

    @classmethod
    def failure(
        cls,
        operation: PersistenceOperation,
        error_kind: PersistenceErrorKind,
        error_message: str,
        staging_path: Optional[str] = None,
    ) -> "PersistenceResult":
        return cls(
            operation=operation,
            success=False,
            error_kind=error_kind,
            error_message=error_message,
            staging_path=staging_path,
        )


class CommandResult(BaseModel):
    """
    Outcome of an account-management command.

    `success` covers the command itself; whether the triggered save
    went through is in `persistence`.
    """

    command: str
    success: bool
    message: str
    account_id: Optional[UUID] = None
    found: bool = True
    persistence: Optional[PersistenceResult] = None

    @property
    def persisted(self) -> bool:
        return self.persistence is not None and self.persistence.success


class AmountParseResult(BaseModel):
    """Result of parsing a user-entered amount."""

    raw_input: str
    is_valid: bool
    amount: Optional[Decimal] = None
    reason: Optional[str] = None
