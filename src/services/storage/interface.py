"""
Abstract Document Store Interface

DESIGN DECISION: We define an abstract interface for the remote store.
This allows us to:
1. Swap Google Sheets for another document store later
2. Use in-memory storage for testing and offline use
3. Keep the persistence gateway decoupled from the backend

The store knows records and assets, nothing about accounts.
A record is fetched and saved WHOLE: there is no partial update,
no change tag and no conflict detection. The last write to complete wins.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field


class Asset(BaseModel):
    """
    A binary attachment of a record.

    Assets always travel as local files: the writer stages one before
    saving, and a fetch delivers one at `file_path`.
    """

    file_path: Path

    def read_bytes(self) -> bytes:
        return self.file_path.read_bytes()


class Record(BaseModel):
    """A named document in the store."""

    record_name: str = Field(..., min_length=1)
    record_type: str = Field(..., min_length=1)
    assets: dict[str, Asset] = Field(default_factory=dict)
    modified_at: datetime = Field(default_factory=datetime.utcnow)


class DocumentStoreInterface(ABC):
    """
    Abstract interface for document store operations.

    Any store implementation (Google Sheets, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def fetch_record(self, record_name: str) -> Record:
        """
        Fetch a record by its name.

        Args:
            record_name: The record's fixed identifier

        Returns:
            The record, with its assets delivered as local files

        Raises:
            RecordNotFoundError: If no record has this name
            StorageError: If the backend could not be read
        """
        pass

    @abstractmethod
    async def save_record(self, record: Record) -> Record:
        """
        Create the record, or replace it if it exists.

        Asset files are read at the time of the call.

        Args:
            record: The record to write

        Returns:
            The record as written

        Raises:
            AssetError: If an asset file cannot be read
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class RecordNotFoundError(NotFoundError):
    """No record with the requested name."""

    def __init__(self, record_name: str):
        self.record_name = record_name
        super().__init__(f"Record not found: {record_name}")


class AssetError(StorageError):
    """An asset could not be staged, read or delivered."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
