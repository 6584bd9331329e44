"""External bank account sources."""

from src.services.bank.source import (
    BankAccountSourceInterface,
    DisabledBankAccountSource,
)

__all__ = [
    "BankAccountSourceInterface",
    "DisabledBankAccountSource",
]
