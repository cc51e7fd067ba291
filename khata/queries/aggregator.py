"""
Ledger Aggregation

DESIGN DECISION: Totals are always computed from entries.
There is no stored balance anywhere, so a balance can never disagree
with the entries it summarises.

summarize() is the only place credits and debits are added up. The
load-time summaries and the summaries recomputed after date filtering
both go through it, so the two paths cannot drift.
"""

from decimal import MAX_PREC, Decimal, localcontext
from typing import Iterable

from khata.models.ledger import (
    EntryType,
    ExpenseEntry,
    FactorySummary,
    Person,
    PersonSummary,
)


def _total(entries: Iterable[ExpenseEntry], entry_type: EntryType) -> Decimal:
    # Addition never rounds, however many digits the amounts carry
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        return sum(
            (entry.amount for entry in entries if entry.type == entry_type),
            Decimal("0"),
        )


def summarize(entries: Iterable[ExpenseEntry]) -> FactorySummary:
    """
    Total credit, total debit and balance over entries.

    Empty input yields an all-zero summary.
    """
    entries = list(entries)
    return FactorySummary(
        total_credit=_total(entries, EntryType.CREDIT),
        total_debit=_total(entries, EntryType.DEBIT),
    )


def summarize_person(person: Person, entries: Iterable[ExpenseEntry]) -> PersonSummary:
    """
    Summary of one person's entries.

    Entries belonging to other persons are ignored, so the full ledger
    can be passed in.
    """
    totals = summarize(entry for entry in entries if entry.person_id == person.id)
    return PersonSummary(
        id=person.id,
        name=person.name,
        total_credit=totals.total_credit,
        total_debit=totals.total_debit,
    )


def summarize_by_person(
    persons: Iterable[Person],
    entries: Iterable[ExpenseEntry],
) -> list[PersonSummary]:
    """One summary per person, in the order persons are given."""
    grouped: dict[int, list[ExpenseEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.person_id, []).append(entry)
    return [summarize_person(person, grouped.get(person.id, [])) for person in persons]

