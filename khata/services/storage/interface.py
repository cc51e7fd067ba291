"""
Abstract Record Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Run against Google Sheets when it is configured
2. Run against a local JSON document otherwise
3. Use an isolated in-memory store for every test
4. Wrap either in a fallback decorator without touching call sites

The interface is intentionally small - the ledger is append-only,
so there are no update or delete operations.
"""

from abc import ABC, abstractmethod

from khata.models.ledger import ExpenseEntry, NewExpenseEntry, Person


class RecordStoreInterface(ABC):
    """
    Abstract interface for the two ledger collections.

    Any storage implementation (local JSON, Google Sheets, ...)
    must implement these methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the backend for use.

        Creates missing tables and seeds empty collections with the
        default records. Safe to call more than once.

        Raises:
            StorageError: If the backend cannot be prepared
        """
        pass

    @abstractmethod
    async def list_persons(self) -> list[Person]:
        """
        Return every person, in insertion order.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def add_person(self, name: str) -> Person:
        """
        Create a person with the next free id.

        The name is expected to be validated by the caller.

        Args:
            name: Display name of the new person

        Returns:
            The stored person

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_expenses(self) -> list[ExpenseEntry]:
        """
        Return every expense entry, in insertion order.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def list_expenses_by_person(self, person_id: int) -> list[ExpenseEntry]:
        """
        Return the entries whose person id equals person_id.

        Args:
            person_id: Exact person id to match

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def add_expense_entry(self, entry: NewExpenseEntry) -> ExpenseEntry:
        """
        Store a new entry under the next free id.

        Args:
            entry: The validated entry, without an id

        Returns:
            The stored entry, with its id

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def upsert_persons(self, persons: list[Person]) -> None:
        """
        Insert or update persons by id.

        Used for seeding and for copying data between backends.
        """
        pass

    @abstractmethod
    async def upsert_expenses(self, entries: list[ExpenseEntry]) -> None:
        """
        Insert or update expense entries by id.

        Used for seeding and for copying data between backends.
        """
        pass

    @property
    def name(self) -> str:
        """Short backend name used in logs and the settings page."""
        return type(self).__name__


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
