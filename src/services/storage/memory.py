"""
In-memory document store.

Same contract as the Google Sheets store: records are replaced whole,
assets are copied in on save and delivered as fresh files on fetch.
Used by tests and by the `memory` backend when no remote store is set up.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from src.services.storage.assets import deliver_asset, read_asset
from src.services.storage.interface import (
    DocumentStoreInterface,
    Record,
    RecordNotFoundError,
)


class InMemoryDocumentStore(DocumentStoreInterface):
    """Records kept in a dict, keyed by record name."""

    def __init__(self, asset_dir: Optional[Union[str, Path]] = None):
        self._asset_dir = asset_dir
        # record_name -> (record_type, {field: bytes}, modified_at)
        self._records: dict[str, tuple[str, dict[str, bytes], datetime]] = {}
        self.fetch_count = 0
        self.save_count = 0

    def __contains__(self, record_name: str) -> bool:
        return record_name in self._records

    def asset_bytes(self, record_name: str, field: str) -> bytes:
        """Raw stored bytes of one asset (for inspection)."""
        return self._records[record_name][1][field]

    async def fetch_record(self, record_name: str) -> Record:
        self.fetch_count += 1
        if record_name not in self._records:
            raise RecordNotFoundError(record_name)

        record_type, assets, modified_at = self._records[record_name]
        return Record(
            record_name=record_name,
            record_type=record_type,
            assets={
                field: deliver_asset(data, record_name, field, self._asset_dir)
                for field, data in assets.items()
            },
            modified_at=modified_at,
        )

    async def save_record(self, record: Record) -> Record:
        self.save_count += 1
        assets = {
            field: read_asset(asset, field)
            for field, asset in record.assets.items()
        }
        modified_at = datetime.utcnow()
        self._records[record.record_name] = (record.record_type, assets, modified_at)
        return record.model_copy(update={"modified_at": modified_at})
