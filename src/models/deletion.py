"""
Two-phase delete confirmation.

CRITICAL: An account is only removed after an explicit confirmation.
A request alone never deletes anything.

    IDLE --request--> PENDING_CONFIRMATION --confirm--> CONFIRMED --complete--> IDLE
                               |
                               +--------cancel--------> IDLE
"""

from enum import Enum
from typing import Optional
from uuid import UUID


class DeleteState(str, Enum):
    """States of the delete confirmation."""
    IDLE = "idle"
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"


class DeleteConfirmationError(ValueError):
    """A transition was attempted from the wrong state."""
    pass


class DeleteConfirmation:
    """State machine guarding account deletion."""

    def __init__(self):
        self._state = DeleteState.IDLE
        self._account_id: Optional[UUID] = None

    @property
    def state(self) -> DeleteState:
        return self._state

    @property
    def account_id(self) -> Optional[UUID]:
        """Account targeted by the pending or confirmed delete."""
        return self._account_id

    @property
    def is_pending(self) -> bool:
        return self._state == DeleteState.PENDING_CONFIRMATION

    def request(self, account_id: UUID) -> None:
        if self._state != DeleteState.IDLE:
            raise DeleteConfirmationError(
                f"Cannot request a delete while {self._state.value}"
            )
        self._account_id = account_id
        self._state = DeleteState.PENDING_CONFIRMATION

    def confirm(self) -> UUID:
        if self._state != DeleteState.PENDING_CONFIRMATION:
            raise DeleteConfirmationError(
                f"Cannot confirm a delete while {self._state.value}"
            )
        self._state = DeleteState.CONFIRMED
        return self._account_id

    def cancel(self) -> None:
        if self._state != DeleteState.PENDING_CONFIRMATION:
            raise DeleteConfirmationError(
                f"Cannot cancel a delete while {self._state.value}"
            )
        self._reset()

    def complete(self) -> None:
        if self._state != DeleteState.CONFIRMED:
            raise DeleteConfirmationError(
                f"Cannot complete a delete while {self._state.value}"
            )
        self._reset()

    def _reset(self) -> None:
        self._state = DeleteState.IDLE
        self._account_id = None
