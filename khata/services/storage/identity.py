"""
Identifier allocation for ledger records.

Ids are allocated as one past the current maximum of the collection.
The function reads a snapshot, so two writers working from the same
snapshot will be handed the same id; callers that share a backend
across processes inherit that race.
"""

from typing import Iterable, Protocol


class HasId(Protocol):
    id: int


def next_id(existing: Iterable[HasId]) -> int:
    """Return 1 for an empty collection, otherwise max(id) + 1."""
    return max((item.id for item in existing), default=0) + 1
