"""
Local (on-device) Storage Implementation

DESIGN DECISION: The local store mirrors browser-style key/value storage:
one JSON document with a key per collection ("persons", "expenseEntries"),
each holding the full list of records.

TRADEOFFS:
- Every write rewrites the whole collection (simple, no partial writes)
- No locking: two processes writing the same file can lose an update
- Reads always go back to the document, so external edits are picked up

With no path the document lives in memory, which gives each test its own
isolated ledger.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from khata.log import get_logger
from khata.models.ledger import ExpenseEntry, NewExpenseEntry, Person
from khata.services.storage.identity import next_id
from khata.services.storage.interface import RecordStoreInterface, StorageError
from khata.services.storage.seed import SEED_EXPENSES, SEED_PERSONS


PERSONS_KEY = "persons"
EXPENSES_KEY = "expenseEntries"

logger = get_logger(__name__)


class LocalRecordStore(RecordStoreInterface):
    """
    JSON-document implementation of the record store.

    Collections are stored as lists of plain records using the same
    field names as the remote tables (personId, ISO dates).
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        seed: bool = True,
    ):
        """
        Initialize the local store.

        Args:
            path: JSON document to persist to. If None, keeps the
                  document in memory for the lifetime of this object.
            seed: Populate empty collections with the default records.
        """
        self._path = Path(path) if path else None
        self._memory = "{}"
        self._seed = seed
        self._initialized = False

    @property
    def name(self) -> str:
        return "local"

    # -------------------------------------------------------------------------
    # Document access
    # -------------------------------------------------------------------------

    def _read_document(self) -> dict:
        if self._path is None:
            return json.loads(self._memory)
        if not self._path.exists():
            return {}
        return json.loads(self._path.read_text(encoding="utf-8") or "{}")

    def _write_document(self, document: dict) -> None:
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        if self._path is None:
            self._memory = payload
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Replace in one step so a failed write never leaves half a document
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _get_item(self, key: str) -> list[dict]:
        try:
            return list(self._read_document().get(key) or [])
        except Exception as e:
            raise StorageError(f"Failed to read '{key}' from local storage: {e}")

    def _set_item(self, key: str, rows: list[dict]) -> None:
        try:
            document = self._read_document()
            document[key] = rows
            self._write_document(document)
        except Exception as e:
            raise StorageError(f"Failed to write '{key}' to local storage: {e}")

    async def _ensure_ready(self) -> None:
        if not self._initialized:
            await self.initialize()

    # -------------------------------------------------------------------------
    # RecordStoreInterface
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """Seed whichever collections are missing or empty."""
        if self._seed:
            if not self._get_item(PERSONS_KEY):
                self._set_item(PERSONS_KEY, [p.model_dump(mode="json") for p in SEED_PERSONS])
                logger.info("local_store_seeded", collection=PERSONS_KEY, count=len(SEED_PERSONS))
            if not self._get_item(EXPENSES_KEY):
                self._set_item(EXPENSES_KEY, [e.to_record() for e in SEED_EXPENSES])
                logger.info("local_store_seeded", collection=EXPENSES_KEY, count=len(SEED_EXPENSES))
        self._initialized = True

    def _load_persons(self) -> list[Person]:
        try:
            return [Person.model_validate(row) for row in self._get_item(PERSONS_KEY)]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Malformed person record in local storage: {e}")

    def _load_expenses(self) -> list[ExpenseEntry]:
        try:
            return [ExpenseEntry.model_validate(row) for row in self._get_item(EXPENSES_KEY)]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Malformed expense record in local storage: {e}")

    async def list_persons(self) -> list[Person]:
        await self._ensure_ready()
        return self._load_persons()

    async def add_person(self, name: str) -> Person:
        await self._ensure_ready()
        persons = self._load_persons()
        person = Person(id=next_id(persons), name=name)
        persons.append(person)
        self._set_item(PERSONS_KEY, [p.model_dump(mode="json") for p in persons])
        return person

    async def list_expenses(self) -> list[ExpenseEntry]:
        await self._ensure_ready()
        return self._load_expenses()

    async def list_expenses_by_person(self, person_id: int) -> list[ExpenseEntry]:
        await self._ensure_ready()
        return [e for e in self._load_expenses() if e.person_id == person_id]

    async def add_expense_entry(self, entry: NewExpenseEntry) -> ExpenseEntry:
        await self._ensure_ready()
        entries = self._load_expenses()
        stored = ExpenseEntry.from_new(entry, next_id(entries))
        entries.append(stored)
        self._set_item(EXPENSES_KEY, [e.to_record() for e in entries])
        return stored

    async def upsert_persons(self, persons: list[Person]) -> None:
        await self._ensure_ready()
        by_id = {p.id: p for p in self._load_persons()}
        for person in persons:
            by_id[person.id] = person
        self._set_item(PERSONS_KEY, [p.model_dump(mode="json") for p in by_id.values()])

    async def upsert_expenses(self, entries: list[ExpenseEntry]) -> None:
        await self._ensure_ready()
        by_id = {e.id: e for e in self._load_expenses()}
        for entry in entries:
            by_id[entry.id] = entry
        self._set_item(EXPENSES_KEY, [e.to_record() for e in by_id.values()])
