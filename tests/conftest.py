"""
Shared test fixtures.

Every test gets its own in-memory ledger, so no test touches the
local JSON document or a real spreadsheet. The Google Sheets store is
exercised against fake worksheet objects.
"""

import re

import pytest

from khata.orchestrator import LedgerService
from khata.services.storage import (
    FallbackRecordStore,
    LocalRecordStore,
    RecordStoreInterface,
    StorageError,
)
from khata.services.storage.google_sheets import EXPENSE_COLUMNS, PERSON_COLUMNS


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the record store."""

    def __init__(self, header: list[str]):
        self.rows: list[list[str]] = [list(header)]
        self.updates = 0

    def get_all_values(self) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append([str(v) for v in row])

    def append_rows(self, rows, value_input_option=None):
        for row in rows:
            self.append_row(row)

    def update(self, range_name=None, values=None, **kwargs):
        index = int(re.match(r"A(\d+)", range_name).group(1)) - 1
        self.rows[index] = [str(v) for v in values[0]]
        self.updates += 1


class FakeSheetsClient:
    """Stands in for GoogleSheetsClient; optionally fails every call."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.persons_sheet = FakeWorksheet(PERSON_COLUMNS)
        self.expenses_sheet = FakeWorksheet(EXPENSE_COLUMNS)

    def get_persons_sheet(self):
        if self.fail:
            raise RuntimeError("network unreachable")
        return self.persons_sheet

    def get_expenses_sheet(self):
        if self.fail:
            raise RuntimeError("network unreachable")
        return self.expenses_sheet


class FailingStore(RecordStoreInterface):
    """A remote store whose every operation fails, counting the attempts."""

    def __init__(self):
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "failing"

    def _fail(self, operation: str):
        self.calls.append(operation)
        raise StorageError(f"{operation} failed")

    async def initialize(self):
        self._fail("initialize")

    async def list_persons(self):
        self._fail("list_persons")

    async def add_person(self, name):
        self._fail("add_person")

    async def list_expenses(self):
        self._fail("list_expenses")

    async def list_expenses_by_person(self, person_id):
        self._fail("list_expenses_by_person")

    async def add_expense_entry(self, entry):
        self._fail("add_expense_entry")

    async def upsert_persons(self, persons):
        self._fail("upsert_persons")

    async def upsert_expenses(self, entries):
        self._fail("upsert_expenses")


@pytest.fixture
def store():
    """An isolated, seeded in-memory local store."""
    return LocalRecordStore()


@pytest.fixture
def empty_store():
    """An isolated local store with no seed data."""
    return LocalRecordStore(seed=False)


@pytest.fixture
def failing_store():
    """A remote store that is always down."""
    return FailingStore()


@pytest.fixture
def sheets_client():
    """A healthy fake spreadsheet with empty tables."""
    return FakeSheetsClient()


@pytest.fixture
def broken_sheets_client():
    """A fake spreadsheet that cannot be reached."""
    return FakeSheetsClient(fail=True)


@pytest.fixture
def service(store):
    """Ledger service over an in-memory local store (no remote)."""
    return LedgerService(FallbackRecordStore(local=store))
