"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the remote table store because:
1. The factory owner can view the ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each collection is a worksheet ("persons", "expense_entries") whose first
row holds the column names. A missing worksheet is created on first access;
that is the only schema management there is.

TRADEOFFS:
- Not suitable for high-volume data (we're fine for one factory)
- No transactions: id allocation reads the sheet, then appends
- Limited query capabilities (we filter in Python)
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from khata.config import GoogleSheetsSettings, get_settings
from khata.log import get_logger
from khata.models.ledger import EntryType, ExpenseEntry, NewExpenseEntry, Person
from khata.services.storage.interface import (
    ConnectionError,
    RecordStoreInterface,
    StorageError,
)
from khata.services.storage.seed import SEED_EXPENSES, SEED_PERSONS


# Column mappings for the persons sheet
PERSON_COLUMNS = [
    "id",
    "name",
]

# Column mappings for the expense_entries sheet
EXPENSE_COLUMNS = [
    "id",
    "personId",
    "date",
    "amount",
    "type",
    "description",
]

logger = get_logger(__name__)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

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
        if not self._settings.is_configured:
            raise ConnectionError("Google Sheets is not configured")
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

    def _get_or_create_sheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
            logger.info("remote_table_created", table=title)
        return sheet

    def get_persons_sheet(self) -> gspread.Worksheet:
        """Get or create the persons worksheet."""
        return self._get_or_create_sheet(self._settings.persons_sheet_name, PERSON_COLUMNS)

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Get or create the expense entries worksheet."""
        return self._get_or_create_sheet(self._settings.expenses_sheet_name, EXPENSE_COLUMNS)


class GoogleSheetsRecordStore(RecordStoreInterface):
    """
    Google Sheets implementation of the record store.

    One record per row. Amounts are written as strings so the sheet
    holds exactly the decimal that was entered.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None, seed: bool = True):
        self._client = client or GoogleSheetsClient()
        self._seed = seed
        self._initialized = False

    @property
    def name(self) -> str:
        return "google_sheets"

    # -------------------------------------------------------------------------
    # Row conversion
    # -------------------------------------------------------------------------

    def _person_to_row(self, person: Person) -> list:
        return [str(person.id), person.name]

    def _row_to_person(self, row: list) -> Person:
        return Person(id=int(row[0]), name=row[1])

    def _entry_to_row(self, entry: ExpenseEntry) -> list:
        return [
            str(entry.id),
            str(entry.person_id),
            entry.date.isoformat(),
            str(entry.amount),
            entry.type.value,
            entry.description or "",
        ]

    def _row_to_entry(self, row: list) -> ExpenseEntry:
        # Handle missing trailing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return ExpenseEntry(
            id=int(safe_get(0)),
            person_id=int(safe_get(1)),
            date=date.fromisoformat(safe_get(2)),
            amount=Decimal(safe_get(3)),
            type=EntryType(safe_get(4)),
            description=safe_get(5) or None,
        )

    def _read_rows(self, sheet: gspread.Worksheet) -> list[list]:
        """All data rows (header excluded, blank rows dropped)."""
        return [row for row in sheet.get_all_values()[1:] if row and row[0]]

    def _read_persons(self) -> list[Person]:
        sheet = self._client.get_persons_sheet()
        persons = []
        for row in self._read_rows(sheet):
            try:
                persons.append(self._row_to_person(row))
            except Exception as e:
                logger.warning("remote_row_skipped", table="persons", row=row, error=str(e))
        return persons

    def _read_expenses(self) -> list[ExpenseEntry]:
        sheet = self._client.get_expenses_sheet()
        entries = []
        for row in self._read_rows(sheet):
            try:
                entries.append(self._row_to_entry(row))
            except Exception as e:
                logger.warning("remote_row_skipped", table="expense_entries", row=row, error=str(e))
        return entries

    def _next_row_id(self, sheet: gspread.Worksheet) -> int:
        """One past the highest id in column A, counting rows that fail to parse."""
        ids = []
        for row in self._read_rows(sheet):
            try:
                ids.append(int(row[0]))
            except ValueError:
                continue
        return max(ids, default=0) + 1

    def _upsert_rows(self, sheet: gspread.Worksheet, rows: list[list]) -> None:
        """Overwrite rows whose id is already present, append the rest."""
        existing = sheet.get_all_values()
        positions = {
            row[0]: index
            for index, row in enumerate(existing[1:], start=2)  # Row 1 is the header
            if row and row[0]
        }
        new_rows = []
        for row in rows:
            if row[0] in positions:
                sheet.update(range_name=f"A{positions[row[0]]}", values=[row])
            else:
                new_rows.append(row)
        if new_rows:
            sheet.append_rows(new_rows, value_input_option="RAW")

    def _prepare(self) -> None:
        persons_sheet = self._client.get_persons_sheet()
        expenses_sheet = self._client.get_expenses_sheet()
        if self._seed:
            if not self._read_rows(persons_sheet):
                self._upsert_rows(persons_sheet, [self._person_to_row(p) for p in SEED_PERSONS])
                logger.info("remote_store_seeded", table="persons", count=len(SEED_PERSONS))
            if not self._read_rows(expenses_sheet):
                self._upsert_rows(expenses_sheet, [self._entry_to_row(e) for e in SEED_EXPENSES])
                logger.info("remote_store_seeded", table="expense_entries", count=len(SEED_EXPENSES))
        self._initialized = True

    def _ensure_ready(self) -> None:
        # A failed startup is retried on the next call, not remembered
        if not self._initialized:
            self._prepare()

    # -------------------------------------------------------------------------
    # RecordStoreInterface
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create missing worksheets and seed empty ones."""
        try:
            self._prepare()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to initialize Google Sheets store: {e}")

    async def list_persons(self) -> list[Person]:
        try:
            self._ensure_ready()
            return self._read_persons()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list persons: {e}")

    async def add_person(self, name: str) -> Person:
        try:
            self._ensure_ready()
            sheet = self._client.get_persons_sheet()
            person = Person(id=self._next_row_id(sheet), name=name)
            sheet.append_row(self._person_to_row(person), value_input_option="RAW")
            return person
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add person: {e}")

    async def list_expenses(self) -> list[ExpenseEntry]:
        try:
            self._ensure_ready()
            return self._read_expenses()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list expenses: {e}")

    async def list_expenses_by_person(self, person_id: int) -> list[ExpenseEntry]:
        entries = await self.list_expenses()
        return [e for e in entries if e.person_id == person_id]

    async def add_expense_entry(self, entry: NewExpenseEntry) -> ExpenseEntry:
        try:
            self._ensure_ready()
            sheet = self._client.get_expenses_sheet()
            stored = ExpenseEntry.from_new(entry, self._next_row_id(sheet))
            sheet.append_row(self._entry_to_row(stored), value_input_option="RAW")
            return stored
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add expense entry: {e}")

    async def upsert_persons(self, persons: list[Person]) -> None:
        try:
            self._ensure_ready()
            sheet = self._client.get_persons_sheet()
            self._upsert_rows(sheet, [self._person_to_row(p) for p in persons])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to upsert persons: {e}")

    async def upsert_expenses(self, entries: list[ExpenseEntry]) -> None:
        try:
            self._ensure_ready()
            sheet = self._client.get_expenses_sheet()
            self._upsert_rows(sheet, [self._entry_to_row(e) for e in entries])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to upsert expense entries: {e}")
