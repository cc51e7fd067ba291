"""
Ledger Service for Khata Tracker

This module ties the components together and is the only thing the
views talk to:

1. Read persons and entries (through the record store)
2. Add persons and transactions (after form validation)
3. Compute person and factory summaries (through the aggregator)
4. Hand views a FilteredLedgerView for client-side date filtering

DESIGN DECISION: The service never caches. Every call reads the store,
so a balance shown after a write always includes that write.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from khata.config import Settings, get_settings
from khata.log import configure_logging, get_logger
from khata.models.ledger import (
    EntryType,
    ExpenseEntry,
    FactorySummary,
    NewExpenseEntry,
    Person,
    PersonSummary,
)
from khata.queries import FilteredLedgerView, summarize, summarize_by_person, summarize_person
from khata.services.storage import (
    FallbackRecordStore,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    LocalRecordStore,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
    migrate_local_to_remote,
)
from khata.validation import TransactionValidator, validate_person_name


logger = get_logger(__name__)


class LedgerService:
    """
    Facade over the record store used by every view.

    Validation errors are raised before the store is called.
    Storage errors propagate unchanged so the view can report them
    and keep whatever it was showing.
    """

    def __init__(self, store: RecordStoreInterface):
        self._store = store

    @property
    def store(self) -> RecordStoreInterface:
        return self._store

    async def initialize(self) -> None:
        """Create missing tables and seed empty collections."""
        await self._store.initialize()

    # -------------------------------------------------------------------------
    # Persons
    # -------------------------------------------------------------------------

    async def get_all_persons(self) -> list[Person]:
        return await self._store.list_persons()

    async def add_person(self, name: Optional[str]) -> Person:
        """
        Add a person after checking the name.

        Raises:
            ValidationError: If the name is empty
            StorageError: If no backend accepted the write
        """
        cleaned = validate_person_name(name)
        person = await self._store.add_person(cleaned)
        logger.info("person_added", person_id=person.id)
        return person

    # -------------------------------------------------------------------------
    # Expense entries
    # -------------------------------------------------------------------------

    async def get_all_expenses(self) -> list[ExpenseEntry]:
        return await self._store.list_expenses()

    async def get_expenses_by_person(self, person_id: int) -> list[ExpenseEntry]:
        return await self._store.list_expenses_by_person(person_id)

    async def add_expense_entry(self, entry: NewExpenseEntry) -> ExpenseEntry:
        """Store an already validated entry."""
        stored = await self._store.add_expense_entry(entry)
        logger.info(
            "expense_entry_added",
            entry_id=stored.id,
            person_id=stored.person_id,
            type=stored.type.value,
        )
        return stored

    async def submit_transaction(
        self,
        person_id: Union[str, int, None],
        entry_date: Union[str, date, None],
        amount: Union[str, int, float, Decimal, None],
        entry_type: Union[str, EntryType, None],
        description: Optional[str] = None,
    ) -> ExpenseEntry:
        """
        Validate raw form values and store the transaction.

        The chosen person must exist.

        Raises:
            ValidationError: If any field is rejected (nothing is written)
            StorageError: If no backend accepted the write
        """
        persons = await self._store.list_persons()
        entry = TransactionValidator(persons).validate(
            person_id=person_id,
            entry_date=entry_date,
            amount=amount,
            entry_type=entry_type,
            description=description,
        )
        return await self.add_expense_entry(entry)

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    async def get_person_summary(self, person_id: int) -> PersonSummary:
        """
        Totals for one person.

        Raises:
            NotFoundError: If no person has this id
        """
        persons, entries = await asyncio.gather(
            self._store.list_persons(),
            self._store.list_expenses_by_person(person_id),
        )
        person = next((p for p in persons if p.id == person_id), None)
        if person is None:
            raise NotFoundError(f"Person not found: {person_id}")
        return summarize_person(person, entries)

    async def get_factory_summary(self) -> FactorySummary:
        return summarize(await self._store.list_expenses())

    async def get_person_summaries(self) -> list[PersonSummary]:
        """Every person with their totals, in person order."""
        persons, entries = await asyncio.gather(
            self._store.list_persons(),
            self._store.list_expenses(),
        )
        return summarize_by_person(persons, entries)

    # -------------------------------------------------------------------------
    # View loading
    # -------------------------------------------------------------------------

    async def load_person_view(self, person_id: int) -> FilteredLedgerView[PersonSummary]:
        """Entries and summary for the person detail view, loaded together."""
        entries, summary = await asyncio.gather(
            self.get_expenses_by_person(person_id),
            self.get_person_summary(person_id),
        )
        return FilteredLedgerView(entries, summary)

    async def load_factory_view(self) -> FilteredLedgerView[FactorySummary]:
        """Entries and summary for the factory summary view, loaded together."""
        entries, summary = await asyncio.gather(
            self.get_all_expenses(),
            self.get_factory_summary(),
        )
        return FilteredLedgerView(entries, summary)

    # -------------------------------------------------------------------------
    # Backends
    # -------------------------------------------------------------------------

    def backend_status(self) -> dict[str, Optional[str]]:
        """Which backends are wired up and which one served the last call."""
        store = self._store
        if isinstance(store, FallbackRecordStore):
            return {
                "remote": store.remote.name if store.remote else None,
                "local": store.local.name,
                "last_used": store.last_backend,
            }
        return {"remote": None, "local": store.name, "last_used": store.name}

    async def migrate_to_remote(self) -> dict[str, int]:
        """
        Copy local records into the remote store.

        Raises:
            StorageError: If no remote store is configured, or a copy fails
        """
        store = self._store
        if not isinstance(store, FallbackRecordStore) or store.remote is None:
            raise StorageError("No remote store is configured")
        return await migrate_local_to_remote(store.local, store.remote)


def create_record_store(
    settings: Optional[Settings] = None,
    use_remote: Optional[bool] = None,
) -> FallbackRecordStore:
    """
    Build the record store from settings.

    Args:
        settings: Settings to use (defaults to get_settings())
        use_remote: Force the remote store on or off. None means
                    "use it if Google Sheets is configured".
    """
    settings = settings or get_settings()
    local_settings = settings.local_store
    local = LocalRecordStore(
        path=local_settings.path,
        seed=local_settings.seed_on_first_run,
    )

    remote = None
    sheets_settings = settings.google_sheets
    if use_remote is None:
        use_remote = sheets_settings.is_configured
    if use_remote:
        remote = GoogleSheetsRecordStore(
            client=GoogleSheetsClient(sheets_settings),
            seed=local_settings.seed_on_first_run,
        )

    return FallbackRecordStore(local=local, remote=remote)


def create_app_components(
    use_remote: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> LedgerService:
    """
    Create the ledger service with its configured store.

    This is the main entry point for the UI.
    """
    settings = settings or get_settings()
    configure_logging(debug=settings.app.debug_mode)
    store = create_record_store(settings, use_remote=use_remote)
    logger.info("ledger_service_created", backend=store.name)
    return LedgerService(store)
