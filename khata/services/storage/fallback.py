"""
Remote-first storage with a local safety net.

DESIGN DECISION: Backend selection lives in one decorator instead of an
"is the remote configured?" check at every call site. Each operation goes:

    RemoteAttempt --(any error)--> LocalFallback (terminal)

There is no second remote attempt and no reconciliation afterwards. A write
that fails remotely and succeeds locally stays local only, so the two
backends can drift apart. The remote failure is logged; the drift itself
is not reported.
"""

from typing import Awaitable, Callable, Optional, TypeVar

from khata.log import get_logger
from khata.models.ledger import ExpenseEntry, NewExpenseEntry, Person
from khata.services.storage.interface import RecordStoreInterface


T = TypeVar("T")

logger = get_logger(__name__)


class FallbackRecordStore(RecordStoreInterface):
    """
    Runs every operation on the remote store, then on the local one if
    the remote call raised.

    With no remote store it is a transparent wrapper around the local one.
    """

    def __init__(
        self,
        local: RecordStoreInterface,
        remote: Optional[RecordStoreInterface] = None,
    ):
        self._local = local
        self._remote = remote
        self.last_backend: Optional[str] = None

    @property
    def name(self) -> str:
        if self._remote is None:
            return self._local.name
        return f"{self._remote.name}+{self._local.name}"

    @property
    def local(self) -> RecordStoreInterface:
        return self._local

    @property
    def remote(self) -> Optional[RecordStoreInterface]:
        return self._remote

    async def _run(
        self,
        operation: str,
        call: Callable[[RecordStoreInterface], Awaitable[T]],
    ) -> T:
        if self._remote is not None:
            try:
                result = await call(self._remote)
                self.last_backend = self._remote.name
                return result
            except Exception as e:
                logger.warning(
                    "remote_store_failed",
                    operation=operation,
                    backend=self._remote.name,
                    error=str(e),
                )

        # Local failures propagate to the caller
        result = await call(self._local)
        self.last_backend = self._local.name
        return result

    async def initialize(self) -> None:
        await self._run("initialize", lambda store: store.initialize())

    async def list_persons(self) -> list[Person]:
        return await self._run("list_persons", lambda store: store.list_persons())

    async def add_person(self, name: str) -> Person:
        return await self._run("add_person", lambda store: store.add_person(name))

    async def list_expenses(self) -> list[ExpenseEntry]:
        return await self._run("list_expenses", lambda store: store.list_expenses())

    async def list_expenses_by_person(self, person_id: int) -> list[ExpenseEntry]:
        return await self._run(
            "list_expenses_by_person",
            lambda store: store.list_expenses_by_person(person_id),
        )

    async def add_expense_entry(self, entry: NewExpenseEntry) -> ExpenseEntry:
        return await self._run(
            "add_expense_entry",
            lambda store: store.add_expense_entry(entry),
        )

    async def upsert_persons(self, persons: list[Person]) -> None:
        await self._run("upsert_persons", lambda store: store.upsert_persons(persons))

    async def upsert_expenses(self, entries: list[ExpenseEntry]) -> None:
        await self._run("upsert_expenses", lambda store: store.upsert_expenses(entries))
