"""
One-shot copy of the local ledger into the remote store.

Used once the remote store has been configured, to carry over records
that were written locally. Records are upserted by id, so running the
copy twice is harmless. Ids that already exist remotely are overwritten
with the local version.
"""

from khata.log import get_logger
from khata.services.storage.interface import RecordStoreInterface


logger = get_logger(__name__)


async def migrate_local_to_remote(
    local: RecordStoreInterface,
    remote: RecordStoreInterface,
) -> dict[str, int]:
    """
    Copy every person and expense entry from local to remote.

    Returns:
        Number of records copied per collection

    Raises:
        StorageError: If either backend fails; nothing is rolled back
    """
    persons = await local.list_persons()
    if persons:
        await remote.upsert_persons(persons)
        logger.info("migration_persons_copied", count=len(persons), target=remote.name)

    entries = await local.list_expenses()
    if entries:
        await remote.upsert_expenses(entries)
        logger.info("migration_expenses_copied", count=len(entries), target=remote.name)

    logger.info("migration_completed", persons=len(persons), expense_entries=len(entries))
    return {"persons": len(persons), "expense_entries": len(entries)}
