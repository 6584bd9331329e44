"""
Google Sheets Document Store

DESIGN DECISION: Google Sheets is used as the remote document store because:
1. The user can see their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- A cell holds at most 50,000 characters; the base64 asset must fit
  (plenty for a personal account list)
- No transactions and no change tags: last write to complete wins
- Lookups read the whole sheet (we filter in Python)

The implementation follows the abstract interface, so another store
can be swapped in without changing the gateway.
"""

import base64
import binascii
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from src.config import get_settings
from src.services.storage.assets import deliver_asset, read_asset
from src.services.storage.interface import (
    ConnectionError,
    DocumentStoreInterface,
    Record,
    RecordNotFoundError,
    StorageError,
)


logger = structlog.get_logger(__name__)


# Column mappings for the Records sheet
RECORD_COLUMNS = [
    "record_name",
    "record_type",
    "assets_json",
    "modified_at",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_records_sheet(self) -> gspread.Worksheet:
        """Get or create the Records worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.records_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.records_sheet_name,
                rows=100,
                cols=len(RECORD_COLUMNS),
            )
            sheet.append_row(RECORD_COLUMNS)
        return sheet


class GoogleSheetsDocumentStore(DocumentStoreInterface):
    """
    Google Sheets implementation of the document store.

    Records are stored as rows with one record per row.
    Assets are base64-encoded into a JSON object keyed by field name.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        asset_dir: Optional[Union[str, Path]] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._asset_dir = asset_dir

    def _record_to_row(self, record: Record) -> list:
        """Convert a Record to a spreadsheet row."""
        assets = {
            field: base64.b64encode(read_asset(asset, field)).decode("ascii")
            for field, asset in record.assets.items()
        }
        return [
            record.record_name,
            record.record_type,
            json.dumps(assets),
            record.modified_at.isoformat(),
        ]

    def _row_to_record(self, row: list) -> Record:
        """Convert a spreadsheet row to a Record, delivering its assets."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        record_name = safe_get(0)
        try:
            encoded_assets = json.loads(safe_get(2) or "{}")
            if not isinstance(encoded_assets, dict):
                raise ValueError("assets cell is not a JSON object")
            asset_bytes = {}
            for field, content in encoded_assets.items():
                if not isinstance(content, str):
                    raise ValueError(f"asset {field} is not base64 text")
                asset_bytes[field] = base64.b64decode(content, validate=True)

            modified_at = safe_get(3)
            record = Record(
                record_name=record_name,
                record_type=safe_get(1),
                modified_at=datetime.fromisoformat(modified_at) if modified_at else datetime.utcnow(),
            )
        except (ValueError, TypeError, binascii.Error, ValidationError) as e:
            raise StorageError(f"Corrupt record {record_name}: {e}")

        record.assets = {
            field: deliver_asset(data, record_name, field, self._asset_dir)
            for field, data in asset_bytes.items()
        }
        return record

    def _find_row(self, all_rows: list, record_name: str) -> Optional[int]:
        """1-based sheet row index of the record, header excluded."""
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
            if row and row[0] == record_name:
                return idx
        return None

    async def fetch_record(self, record_name: str) -> Record:
        """Fetch a record from Google Sheets."""
        try:
            sheet = self._client.get_records_sheet()
            all_rows = sheet.get_all_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to fetch record {record_name}: {e}")

        idx = self._find_row(all_rows, record_name)
        if idx is None:
            raise RecordNotFoundError(record_name)
        return self._row_to_record(all_rows[idx - 1])

    async def save_record(self, record: Record) -> Record:
        """Write a record to Google Sheets, replacing any existing row."""
        record = record.model_copy(update={"modified_at": datetime.utcnow()})
        row = self._record_to_row(record)

        try:
            sheet = self._client.get_records_sheet()
            idx = self._find_row(sheet.get_all_values(), record.record_name)
            if idx is None:
                sheet.append_row(row, value_input_option="RAW")
                logger.debug("sheets_record_created", record_name=record.record_name)
            else:
                sheet.update(
                    range_name=f"A{idx}:{chr(ord('A') + len(RECORD_COLUMNS) - 1)}{idx}",
                    values=[row],
                    value_input_option="RAW",
                )
                logger.debug("sheets_record_updated", record_name=record.record_name, row=idx)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save record {record.record_name}: {e}")

        return record
