"""Aggregation and filtering over loaded ledger entries."""

from khata.queries.aggregator import summarize, summarize_by_person, summarize_person
from khata.queries.filters import (
    FilteredLedgerView,
    describe_date_range,
    filter_by_date_range,
)

__all__ = [
    "FilteredLedgerView",
    "describe_date_range",
    "filter_by_date_range",
    "summarize",
    "summarize_by_person",
    "summarize_person",
]
