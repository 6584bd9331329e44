"""
Accounts Persistence Gateway

Reads and writes the WHOLE account collection as one asset attached to one
fixed record of the document store.

Load:  fetch record -> take asset -> read delivered file -> decode
Save:  encode -> stage to a fresh file -> fetch record
       -> not found: create record / found: reuse it -> attach asset -> write

DESIGN DECISION: Failures are reported, never raised. Each load or save
returns a PersistenceResult and logs what went wrong; nothing is retried.

KNOWN RACE: There is no lock and no change tag. Two saves issued back to
back each fetch then write; the write that COMPLETES last is what the
store keeps, whichever save started first.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Sequence

import structlog

from src.config import AccountsStoreSettings, get_settings
from src.models.account import Account
from src.models.results import (
    PersistenceErrorKind,
    PersistenceOperation,
    PersistenceResult,
)
from src.services.persistence.codec import (
    AccountsDecodeError,
    AccountsEncodeError,
    decode_accounts,
    encode_accounts,
)
from src.services.storage.interface import (
    Asset,
    DocumentStoreInterface,
    Record,
    RecordNotFoundError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class AccountsGateway:
    """Load/save of the account collection against a document store."""

    def __init__(
        self,
        store: DocumentStoreInterface,
        settings: Optional[AccountsStoreSettings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().accounts_store

    @property
    def store(self) -> DocumentStoreInterface:
        return self._store

    @property
    def record_name(self) -> str:
        return self._settings.record_name

    async def load(self) -> PersistenceResult:
        """
        Fetch the accounts record and decode its asset.

        The caller's collection is never touched here: on failure the
        result carries no accounts and the caller keeps what it has.
        """
        operation = PersistenceOperation.LOAD
        field = self._settings.asset_field

        try:
            record = await self._store.fetch_record(self.record_name)
        except RecordNotFoundError as e:
            return self._failed(operation, PersistenceErrorKind.RECORD_NOT_FOUND, str(e))
        except StorageError as e:
            return self._failed(operation, PersistenceErrorKind.FETCH_FAILED, str(e))

        try:
            asset = record.assets.get(field)
            if asset is None:
                return self._failed(
                    operation,
                    PersistenceErrorKind.ASSET_MISSING,
                    f"Record {self.record_name} has no {field} asset",
                )

            try:
                data = asset.read_bytes()
            except OSError as e:
                return self._failed(
                    operation,
                    PersistenceErrorKind.ASSET_READ_FAILED,
                    f"Failed to read {asset.file_path}: {e}",
                )

            try:
                accounts = decode_accounts(data)
            except AccountsDecodeError as e:
                return self._failed(operation, PersistenceErrorKind.DECODE_FAILED, str(e))
        finally:
            self._discard(asset.file_path for asset in record.assets.values())

        logger.info(
            "accounts_loaded",
            record_name=self.record_name,
            account_count=len(accounts),
        )
        return PersistenceResult(
            operation=operation,
            success=True,
            accounts=accounts,
            account_count=len(accounts),
        )

    async def save(self, accounts: Sequence[Account]) -> PersistenceResult:
        """
        Replace the persisted collection with `accounts`.

        Creates the record when the store reports it missing. Any other
        fetch error abandons the save.
        """
        operation = PersistenceOperation.SAVE
        field = self._settings.asset_field
        accounts = list(accounts)

        try:
            data = encode_accounts(accounts, pretty=self._settings.pretty_print)
        except AccountsEncodeError as e:
            return self._failed(operation, PersistenceErrorKind.ENCODE_FAILED, str(e))

        try:
            staging_path = self._stage(data)
        except OSError as e:
            return self._failed(
                operation,
                PersistenceErrorKind.FILE_WRITE_FAILED,
                f"Failed to write staging file: {e}",
            )

        delivered: list[Path] = []
        try:
            try:
                record = await self._store.fetch_record(self.record_name)
                delivered = [asset.file_path for asset in record.assets.values()]
                record_created = False
            except RecordNotFoundError:
                record = Record(
                    record_name=self.record_name,
                    record_type=self._settings.record_type,
                )
                record_created = True
            except StorageError as e:
                return self._failed(
                    operation,
                    PersistenceErrorKind.FETCH_FAILED,
                    str(e),
                    staging_path=staging_path,
                )

            record.assets[field] = Asset(file_path=staging_path)

            try:
                await self._store.save_record(record)
            except StorageError as e:
                return self._failed(
                    operation,
                    PersistenceErrorKind.WRITE_FAILED,
                    str(e),
                    staging_path=staging_path,
                )
        finally:
            self._discard(delivered)
            if not self._settings.keep_staging_files:
                self._discard([staging_path])

        logger.info(
            "accounts_saved",
            record_name=self.record_name,
            account_count=len(accounts),
            record_created=record_created,
        )
        return PersistenceResult(
            operation=operation,
            success=True,
            record_created=record_created,
            account_count=len(accounts),
            staging_path=str(staging_path),
        )

    def _stage(self, data: bytes) -> Path:
        """Write encoded accounts to a uniquely named staging file."""
        directory = self._settings.staging_dir or tempfile.gettempdir()
        Path(directory).mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix="accounts-", suffix=".json", dir=directory)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        return Path(path)

    def _discard(self, paths: Iterable[Path]) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("staging_file_not_removed", path=str(path), error=str(e))

    def _failed(
        self,
        operation: PersistenceOperation,
        error_kind: PersistenceErrorKind,
        error_message: str,
        staging_path: Optional[Path] = None,
    ) -> PersistenceResult:
        logger.warning(
            f"accounts_{operation.value}_failed",
            record_name=self.record_name,
            error_kind=error_kind.value,
            error=error_message,
        )
        return PersistenceResult.failure(
            operation=operation,
            error_kind=error_kind,
            error_message=error_message,
            staging_path=str(staging_path) if staging_path else None,
        )
