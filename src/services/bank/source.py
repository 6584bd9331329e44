"""
External Bank Account Source

An account can be seeded from a bank: its balance and transactions come
from the source instead of starting at zero.

IMPORTANT: No bank integration ships with the application. The only
implementation is disabled and never returns data. We do NOT keep any
bank credentials in the code base.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from src.models.account import BankAccountSnapshot


logger = structlog.get_logger(__name__)


class BankAccountSourceInterface(ABC):
    """Abstract interface for fetching a bank account snapshot."""

    name: str = "bank"

    @abstractmethod
    async def fetch_bank_account(self) -> Optional[BankAccountSnapshot]:
        """
        Fetch the current balance and transactions.

        Returns:
            The snapshot, or None if nothing could be fetched
        """
        pass


class DisabledBankAccountSource(BankAccountSourceInterface):
    """Source used when no bank integration is configured."""

    name = "disabled"

    async def fetch_bank_account(self) -> Optional[BankAccountSnapshot]:
        logger.info("bank_source_disabled")
        return None
