"""
Storage Services Package

Provides the abstract document store interface and concrete implementations.
Currently implements Google Sheets as the remote backend, plus an in-memory
store; designed to be swappable.
"""

from src.services.storage.interface import (
    Asset,
    AssetError,
    ConnectionError,
    DocumentStoreInterface,
    NotFoundError,
    Record,
    RecordNotFoundError,
    StorageError,
)
from src.services.storage.memory import InMemoryDocumentStore
from src.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
)

__all__ = [
    # Interface
    "Asset",
    "DocumentStoreInterface",
    "Record",
    # Exceptions
    "AssetError",
    "ConnectionError",
    "NotFoundError",
    "RecordNotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
]
