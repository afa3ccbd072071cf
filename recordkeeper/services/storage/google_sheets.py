"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the remote hosted store because:
1. Users can view their notes, expenses and commands directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (we write whole rows and re-read nothing speculatively)
- No server-side ids or defaults, so ids and timestamps are assigned here
  and the written row is echoed back as the authoritative record

Each domain lives in its own worksheet with a header row matching the
schema's columns.
"""

from typing import Optional
from uuid import uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from recordkeeper.config import GoogleSheetsSettings, get_settings
from recordkeeper.models.records import Draft, Record, utc_now
from recordkeeper.models.schema import RecordSchema
from recordkeeper.services.storage.interface import (
    NotFoundError,
    RecordStorageInterface,
    StorageConnectionError,
    StorageError,
)


logger = structlog.get_logger(__name__)

# Transient API failures (quota, 5xx) are retried; everything else surfaces
retry_api_errors = retry(
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and hands out one worksheet per domain.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

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
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: tuple[str, ...]) -> gspread.Worksheet:
        """Get or create a worksheet whose first row holds the column names."""
        if title in self._worksheets:
            return self._worksheets[title]

        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(list(columns))
            logger.info("worksheet_created", worksheet=title)

        self._worksheets[title] = sheet
        return sheet


class GoogleSheetsRecordStorage(RecordStorageInterface):
    """
    Google Sheets implementation of record storage.

    Records are stored one per row; list fields (tags) are JSON-serialized.
    """

    def __init__(
        self,
        schema: RecordSchema,
        client: Optional[GoogleSheetsClient] = None,
        sheet_name: Optional[str] = None,
    ):
        super().__init__(schema)
        self._client = client or GoogleSheetsClient()
        self._sheet_name = sheet_name or schema.table

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(self._sheet_name, self._schema.columns)

    @retry_api_errors
    def _read_rows(self) -> list[list[str]]:
        """All data rows, header excluded."""
        return self._sheet().get_all_values()[1:]

    @retry_api_errors
    def _append_row(self, row: list[str]) -> None:
        self._sheet().append_row(row, value_input_option="RAW")

    @retry_api_errors
    def _write_row(self, row_number: int, row: list[str]) -> None:
        self._sheet().update(
            range_name=f"A{row_number}",
            values=[row],
            value_input_option="RAW",
        )

    @retry_api_errors
    def _delete_row(self, row_number: int) -> None:
        self._sheet().delete_rows(row_number)

    @staticmethod
    def _find_row_number(rows: list[list[str]], record_id: str) -> Optional[int]:
        # Row 1 is the header, so data starts at row 2
        for row_number, row in enumerate(rows, start=2):
            if row and row[0] == record_id:
                return row_number
        return None

    async def fetch_all(self) -> list[Record]:
        """Read every row, skipping blank and malformed ones."""
        try:
            rows = self._read_rows()
        except Exception as e:
            raise StorageError(f"Failed to read {self._sheet_name}: {e}")

        records = []
        for row in rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(self._schema.from_row(row))
            except (TypeError, ValueError) as e:
                logger.warning(
                    "malformed_row_skipped",
                    worksheet=self._sheet_name,
                    record_id=row[0],
                    error=str(e),
                )

        records.sort(key=self._schema.order_value_of, reverse=True)
        return records

    async def insert(self, draft: Draft) -> Record:
        """Assign id and timestamps, append the row, echo it back."""
        record = self._schema.materialize(draft, str(uuid4()), utc_now())
        row = self._schema.to_row(record)
        try:
            self._append_row(row)
        except Exception as e:
            raise StorageError(f"Failed to insert into {self._sheet_name}: {e}")
        return self._schema.from_row(row)

    async def update(self, record: Record) -> Record:
        """Rewrite the row holding this record's id."""
        try:
            row_number = self._find_row_number(self._read_rows(), record.id)
            if row_number is None:
                raise NotFoundError(f"{self._schema.label} not found: {record.id}")
            row = self._schema.to_row(record)
            self._write_row(row_number, row)
            return self._schema.from_row(row)
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {self._sheet_name}: {e}")

    async def delete(self, record_id: str) -> bool:
        """Delete the row holding this id; a missing row counts as deleted."""
        try:
            row_number = self._find_row_number(self._read_rows(), record_id)
            if row_number is None:
                logger.info(
                    "delete_target_missing",
                    worksheet=self._sheet_name,
                    record_id=record_id,
                )
                return True
            self._delete_row(row_number)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete from {self._sheet_name}: {e}")
