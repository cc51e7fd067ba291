"""
Client-side date filtering for the ledger views.

Filtering never goes back to storage. A view loads its entries and
summary once, then narrows and widens the date range in memory,
recomputing totals with the same summarize() used at load time.
"""

from datetime import date
from typing import Generic, Iterable, Optional, TypeVar

from khata.models.ledger import ExpenseEntry, Summary
from khata.queries.aggregator import summarize


S = TypeVar("S", bound=Summary)


def filter_by_date_range(
    entries: Iterable[ExpenseEntry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[ExpenseEntry]:
    """
    Entries dated within [start_date, end_date].

    Both bounds are inclusive; a missing bound leaves that side open.
    Order is preserved.
    """
    filtered = []
    for entry in entries:
        if start_date and entry.date < start_date:
            continue
        if end_date and entry.date > end_date:
            continue
        filtered.append(entry)
    return filtered


def describe_date_range(
    start_date: Optional[date],
    end_date: Optional[date],
) -> str:
    """Format a date range for headings."""
    if start_date and end_date:
        if start_date == end_date:
            return f"on {start_date.strftime('%d %b %Y')}"
        return f"from {start_date.strftime('%d %b %Y')} to {end_date.strftime('%d %b %Y')}"
    elif start_date:
        return f"from {start_date.strftime('%d %b %Y')}"
    elif end_date:
        return f"until {end_date.strftime('%d %b %Y')}"
    return "all dates"


class FilteredLedgerView(Generic[S]):
    """
    The entries and summary a view is currently showing.

    Holds on to what was loaded so clear() can restore it exactly.
    The summary keeps its identity fields (a person's id and name)
    while its totals follow the filter.
    """

    def __init__(self, entries: Iterable[ExpenseEntry], summary: S):
        self._all_entries = list(entries)
        self._loaded_summary = summary
        self.entries: list[ExpenseEntry] = list(self._all_entries)
        self.summary: S = summary
        self.start_date: Optional[date] = None
        self.end_date: Optional[date] = None

    @property
    def is_filtered(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def apply(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> S:
        """Narrow to a date range and recompute the summary."""
        self.start_date = start_date
        self.end_date = end_date
        self.entries = filter_by_date_range(self._all_entries, start_date, end_date)
        totals = summarize(self.entries)
        self.summary = self._loaded_summary.model_copy(
            update={
                "total_credit": totals.total_credit,
                "total_debit": totals.total_debit,
            }
        )
        return self.summary

    def clear(self) -> S:
        """Drop the date range and restore the loaded entries and summary."""
        self.start_date = None
        self.end_date = None
        self.entries = list(self._all_entries)
        self.summary = self._loaded_summary
        return self.summary
