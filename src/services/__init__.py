"""Services package."""

from src.services.bank import (
    BankAccountSourceInterface,
    DisabledBankAccountSource,
)
from src.services.persistence import (
    AccountsDecodeError,
    AccountsEncodeError,
    AccountsGateway,
)
from src.services.storage import (
    AssetError,
    ConnectionError,
    DocumentStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    NotFoundError,
    RecordNotFoundError,
    StorageError,
)

__all__ = [
    # Bank sources
    "BankAccountSourceInterface",
    "DisabledBankAccountSource",
    # Persistence
    "AccountsDecodeError",
    "AccountsEncodeError",
    "AccountsGateway",
    # Storage services
    "AssetError",
    "ConnectionError",
    "DocumentStoreInterface",
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "NotFoundError",
    "RecordNotFoundError",
    "StorageError",
]
