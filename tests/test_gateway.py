"""
Tests for the accounts codec and persistence gateway.

All tests run against the in-memory document store; staging and
delivered files go to pytest's tmp_path.
"""

import asyncio
import json
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from src.config import AccountsStoreSettings
from src.models.account import Account, ColorWrapper, Transaction
from src.models.results import PersistenceErrorKind, PersistenceOperation
from src.services.persistence import (
    AccountsDecodeError,
    AccountsGateway,
    decode_accounts,
    encode_accounts,
)
from src.services.storage import (
    InMemoryDocumentStore,
    StorageError,
)
from src.services.storage.interface import Asset, Record


class FlakyStore(InMemoryDocumentStore):
    """In-memory store whose fetch or write can be made to fail."""

    def __init__(self, asset_dir, fail_fetch=False, fail_save=False):
        super().__init__(asset_dir=asset_dir)
        self.fail_fetch = fail_fetch
        self.fail_save = fail_save

    async def fetch_record(self, record_name):
        if self.fail_fetch:
            raise StorageError("network unreachable")
        return await super().fetch_record(record_name)

    async def save_record(self, record):
        if self.fail_save:
            raise StorageError("quota exceeded")
        return await super().save_record(record)


class HeldFirstWriteStore(InMemoryDocumentStore):
    """Holds the first write until `release_first_write` is set."""

    def __init__(self, asset_dir):
        super().__init__(asset_dir=asset_dir)
        self.release_first_write = asyncio.Event()
        self._writes_started = 0

    async def save_record(self, record):
        self._writes_started += 1
        if self._writes_started == 1:
            await self.release_first_write.wait()
        return await super().save_record(record)


async def put_raw_document(store, settings, data: bytes, tmp_path):
    """Store `data` as the accounts asset, bypassing the codec."""
    staged = tmp_path / "raw.json"
    staged.write_bytes(data)
    await store.save_record(Record(
        record_name=settings.record_name,
        record_type=settings.record_type,
        assets={settings.asset_field: Asset(file_path=staged)},
    ))


class TestCodec:
    """Tests for the JSON array document."""

    def test_round_trip_keeps_every_field(self, checking, savings):
        decoded = decode_accounts(encode_accounts([checking, savings]))

        assert len(decoded) == 2
        assert decoded[0].same_fields(checking)
        assert decoded[1].same_fields(savings)

    def test_order_is_preserved(self, checking, savings):
        decoded = decode_accounts(encode_accounts([savings, checking]))
        assert [a.name for a in decoded] == ["Savings", "Checking"]

    def test_empty_collection(self):
        assert encode_accounts([]).strip() == b"[]"
        assert decode_accounts(b"[]") == []

    def test_document_is_field_named(self, checking):
        """Test that amounts are numbers and ids are written."""
        payload = json.loads(encode_accounts([checking], pretty=False))

        assert payload[0]["id"] == str(checking.id)
        assert payload[0]["name"] == "Checking"
        assert payload[0]["balance"] == 1000.0
        assert payload[0]["icon"] == "creditcard.fill"
        assert set(payload[0]["color"]) == {"red", "green", "blue", "opacity"}
        assert payload[0]["transactions"][1] == {
            "id": str(checking.transactions[1].id),
            "title": "Rent",
            "amount": -800.0,
            "date": "May 26, 2023",
        }

    def test_amounts_survive_exactly(self):
        account = Account(
            name="Exact",
            balance=Decimal("123456789.01"),
            transactions=[Transaction(title="Tiny", amount=Decimal("0.1"), date="x")],
        )
        decoded = decode_accounts(encode_accounts([account]))[0]
        assert decoded.balance == Decimal("123456789.01")
        assert decoded.transactions[0].amount == Decimal("0.1")

    def test_widest_amounts_survive_exactly(self):
        """Test that 15 significant digits come back unchanged."""
        account = Account(
            name="Wide",
            balance=Decimal("1234567890123.45"),
            transactions=[
                Transaction(title="Huge", amount=Decimal("-999999999999999"), date="x"),
            ],
        )
        decoded = decode_accounts(encode_accounts([account]))[0]
        assert decoded.balance == Decimal("1234567890123.45")
        assert decoded.transactions[0].amount == Decimal("-999999999999999")

    def test_amount_wider_than_document_rejected(self):
        """Test that the model refuses what a JSON number cannot carry."""
        with pytest.raises(ValidationError):
            Account(name="Big", balance=Decimal("12345678901234567.89"))
        with pytest.raises(ValidationError):
            Transaction(title="Big", amount=Decimal("12345678901234567.89"), date="x")

        account = Account(name="Big")
        with pytest.raises(ValidationError):
            account.balance = Decimal("12345678901234567.89")
        assert account.balance == Decimal("0")

    def test_document_with_too_wide_amount_rejected(self):
        with pytest.raises(AccountsDecodeError):
            decode_accounts(b'[{"name": "Big", "balance": 12345678901234567.89}]')

    def test_color_survives_exactly(self):
        color = ColorWrapper(red=0.1234567, green=0.7654321, blue=1 / 3, opacity=0.5)
        decoded = decode_accounts(encode_accounts([Account(name="C", color=color)]))[0]
        assert decoded.color == color

    def test_document_without_ids_gets_fresh_ids(self):
        """Test that a legacy document loads with newly minted ids."""
        legacy = json.dumps([
            {
                "name": "Old",
                "balance": 10.5,
                "icon": "car.fill",
                "color": {"red": 1.0, "green": 0.0, "blue": 0.0, "opacity": 1.0},
                "transactions": [{"title": "Fuel", "amount": -40.0, "date": "today"}],
            }
        ]).encode()

        first = decode_accounts(legacy)[0]
        second = decode_accounts(legacy)[0]

        assert first.name == "Old"
        assert first.balance == Decimal("10.5")
        assert first.id != second.id

    @pytest.mark.parametrize(
        "data",
        [
            b"not json",
            b'{"name": "Not an array"}',
            b'[{"balance": 1.0}]',
            b'[{"name": "Bad color", "color": {"red": 2.0, "green": 0, "blue": 0}}]',
            b"\xff\xfe",
        ],
    )
    def test_invalid_documents_rejected(self, data):
        with pytest.raises(AccountsDecodeError):
            decode_accounts(data)

    def test_repeated_id_rejected(self, checking):
        document = encode_accounts([checking, checking])
        with pytest.raises(AccountsDecodeError):
            decode_accounts(document)


class TestGatewaySave:
    """Tests for saving the collection."""

    @pytest.mark.asyncio
    async def test_first_save_creates_record(self, gateway, memory_store, store_settings, checking):
        result = await gateway.save([checking])

        assert result.success
        assert result.operation == PersistenceOperation.SAVE
        assert result.record_created is True
        assert result.account_count == 1
        assert store_settings.record_name in memory_store

    @pytest.mark.asyncio
    async def test_second_save_updates_record(self, gateway, memory_store, store_settings, checking, savings):
        await gateway.save([checking])
        result = await gateway.save([checking, savings])

        assert result.success
        assert result.record_created is False
        stored = json.loads(memory_store.asset_bytes(store_settings.record_name, "accounts"))
        assert [item["name"] for item in stored] == ["Checking", "Savings"]

    @pytest.mark.asyncio
    async def test_empty_collection_is_saved(self, gateway, memory_store, store_settings, checking):
        await gateway.save([checking])
        result = await gateway.save([])

        assert result.success
        assert json.loads(memory_store.asset_bytes(store_settings.record_name, "accounts")) == []

    @pytest.mark.asyncio
    async def test_staging_file_is_removed(self, gateway, tmp_path, checking):
        result = await gateway.save([checking])

        assert result.staging_path is not None
        assert list((tmp_path / "staging").iterdir()) == []

    @pytest.mark.asyncio
    async def test_staging_file_kept_when_configured(self, memory_store, tmp_path, checking):
        settings = AccountsStoreSettings(
            staging_dir=str(tmp_path / "staging"),
            keep_staging_files=True,
        )
        gateway = AccountsGateway(memory_store, settings)

        first = await gateway.save([checking])
        second = await gateway.save([checking])

        assert first.staging_path != second.staging_path
        staged = json.loads(Path(first.staging_path).read_bytes())
        assert staged[0]["id"] == str(checking.id)

    @pytest.mark.asyncio
    async def test_fetch_error_abandons_save(self, tmp_path, store_settings, checking):
        store = FlakyStore(tmp_path / "assets", fail_fetch=True)
        gateway = AccountsGateway(store, store_settings)

        result = await gateway.save([checking])

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.FETCH_FAILED
        assert store.save_count == 0

    @pytest.mark.asyncio
    async def test_write_error_reported(self, tmp_path, store_settings, checking):
        store = FlakyStore(tmp_path / "assets", fail_save=True)
        gateway = AccountsGateway(store, store_settings)

        result = await gateway.save([checking])

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.WRITE_FAILED
        assert "quota exceeded" in result.error_message
        assert list((tmp_path / "staging").iterdir()) == []

    @pytest.mark.asyncio
    async def test_unwritable_staging_dir_reported(self, memory_store, tmp_path, checking):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        gateway = AccountsGateway(
            memory_store,
            AccountsStoreSettings(staging_dir=str(blocker / "staging")),
        )

        result = await gateway.save([checking])

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.FILE_WRITE_FAILED
        assert memory_store.save_count == 0

    @pytest.mark.asyncio
    async def test_last_completed_write_wins(self, tmp_path, store_settings):
        """Test that the save finishing last is kept, even if it started first."""
        store = HeldFirstWriteStore(tmp_path / "assets")
        gateway = AccountsGateway(store, store_settings)
        issued_first = Account(name="Issued first")
        issued_second = Account(name="Issued second")

        first = asyncio.create_task(gateway.save([issued_first]))
        second = asyncio.create_task(gateway.save([issued_second]))

        assert (await second).success
        store.release_first_write.set()
        assert (await first).success

        loaded = await gateway.load()
        assert [a.id for a in loaded.accounts] == [issued_first.id]


class TestGatewayLoad:
    """Tests for loading the collection."""

    @pytest.mark.asyncio
    async def test_load_returns_saved_accounts(self, gateway, checking, savings):
        await gateway.save([checking, savings])

        result = await gateway.load()

        assert result.success
        assert result.operation == PersistenceOperation.LOAD
        assert result.account_count == 2
        assert result.accounts[0].same_fields(checking)
        assert result.accounts[1].same_fields(savings)

    @pytest.mark.asyncio
    async def test_delivered_files_are_removed(self, gateway, tmp_path, checking):
        await gateway.save([checking])
        await gateway.load()
        assert list((tmp_path / "assets").iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_record(self, gateway):
        result = await gateway.load()

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.RECORD_NOT_FOUND
        assert result.accounts is None

    @pytest.mark.asyncio
    async def test_missing_asset(self, gateway, memory_store, store_settings):
        await memory_store.save_record(Record(
            record_name=store_settings.record_name,
            record_type=store_settings.record_type,
        ))

        result = await gateway.load()

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.ASSET_MISSING

    @pytest.mark.asyncio
    async def test_undecodable_asset(self, gateway, memory_store, store_settings, tmp_path):
        await put_raw_document(memory_store, store_settings, b"{{ garbage", tmp_path)

        result = await gateway.load()

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.DECODE_FAILED
        assert list((tmp_path / "assets").iterdir()) == []

    @pytest.mark.asyncio
    async def test_fetch_error(self, tmp_path, store_settings):
        gateway = AccountsGateway(FlakyStore(tmp_path / "assets", fail_fetch=True), store_settings)

        result = await gateway.load()

        assert not result.success
        assert result.error_kind == PersistenceErrorKind.FETCH_FAILED

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, gateway):
        with capture_logs() as logs:
            await gateway.load()

        failures = [entry for entry in logs if entry["event"] == "accounts_load_failed"]
        assert len(failures) == 1
        assert failures[0]["error_kind"] == "record_not_found"
        assert failures[0]["log_level"] == "warning"

    @pytest.mark.asyncio
    async def test_legacy_document_loads(self, gateway, memory_store, store_settings, tmp_path):
        legacy = (
            b'[{"name": "Wallet", "balance": 3.5, "icon": "heart.fill", '
            b'"color": {"red": 0, "green": 0, "blue": 0, "opacity": 1}, "transactions": []}]'
        )
        await put_raw_document(memory_store, store_settings, legacy, tmp_path)

        result = await gateway.load()

        assert result.success
        assert result.accounts[0].name == "Wallet"
        assert result.accounts[0].balance == Decimal("3.5")
