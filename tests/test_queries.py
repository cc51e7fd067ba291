"""Tests for aggregation and client-side date filtering."""

import pytest
from datetime import date
from decimal import Decimal

from khata.models.ledger import EntryType, ExpenseEntry, Person
from khata.queries import (
    FilteredLedgerView,
    describe_date_range,
    filter_by_date_range,
    summarize,
    summarize_by_person,
    summarize_person,
)
from khata.services.storage.seed import SEED_EXPENSES, SEED_PERSONS


def make_entry(entry_id, person_id, day, amount, entry_type):
    return ExpenseEntry(
        id=entry_id,
        person_id=person_id,
        date=day,
        amount=Decimal(amount),
        type=entry_type,
    )


class TestSummarize:
    """Tests for summarize()."""

    def test_seed_ledger_totals(self):
        """Test the documented example: 6500 credit, 3000 debit, 3500 balance."""
        summary = summarize(SEED_EXPENSES)
        assert summary.total_credit == Decimal("6500")
        assert summary.total_debit == Decimal("3000")
        assert summary.balance == Decimal("3500")

    def test_empty_input_is_all_zero(self):
        """Test summarize([]) returns zeros."""
        summary = summarize([])
        assert (summary.total_credit, summary.total_debit, summary.balance) == (0, 0, 0)

    def test_totals_match_per_type_sums(self):
        """Test each total is the plain sum of its type's amounts."""
        entries = [
            make_entry(1, 1, date(2024, 1, 1), "0.10", EntryType.CREDIT),
            make_entry(2, 1, date(2024, 1, 2), "0.20", EntryType.CREDIT),
            make_entry(3, 2, date(2024, 1, 3), "0.30", EntryType.DEBIT),
        ]
        summary = summarize(entries)
        assert summary.total_credit == Decimal("0.30")
        assert summary.total_debit == Decimal("0.30")
        assert summary.balance == 0
        assert summary.total_credit - summary.total_debit == summary.balance

    def test_large_totals_are_exact(self):
        """Test sums are never rounded to the default decimal precision."""
        entries = [
            make_entry(1, 1, date(2024, 1, 1), "1e30", EntryType.CREDIT),
            make_entry(2, 1, date(2024, 1, 2), "3", EntryType.CREDIT),
            make_entry(3, 1, date(2024, 1, 3), "7", EntryType.DEBIT),
        ]
        summary = summarize(entries)
        assert summary.total_credit == Decimal(10 ** 30 + 3)
        assert summary.balance == Decimal(10 ** 30 - 4)

    def test_accepts_generators(self):
        """Test any iterable can be summarized."""
        summary = summarize(e for e in SEED_EXPENSES if e.type == EntryType.DEBIT)
        assert summary.total_credit == 0
        assert summary.total_debit == Decimal("3000")


class TestPersonSummaries:
    """Tests for per-person summaries."""

    def test_person_summary_ignores_other_persons(self):
        """Test only entries with the matching person id are counted."""
        john = SEED_PERSONS[0]
        summary = summarize_person(john, SEED_EXPENSES)
        assert summary.id == 1
        assert summary.name == "John Smith (Worker)"
        assert summary.total_credit == Decimal("1500")
        assert summary.total_debit == Decimal("500")
        assert summary.balance == Decimal("1000")

    def test_person_without_entries_is_zero(self):
        """Test a person with no transactions has a zero summary."""
        summary = summarize_person(Person(id=99, name="New Hire"), SEED_EXPENSES)
        assert summary.balance == 0

    def test_summaries_by_person_follow_person_order(self):
        """Test one summary per person, balances add up to the factory balance."""
        summaries = summarize_by_person(SEED_PERSONS, SEED_EXPENSES)
        assert [s.id for s in summaries] == [1, 2, 3, 4]
        assert [s.balance for s in summaries] == [
            Decimal("1000"),
            Decimal("3000"),
            Decimal("-2500"),
            Decimal("2000"),
        ]
        assert sum(s.balance for s in summaries) == summarize(SEED_EXPENSES).balance


class TestDateFilter:
    """Tests for filter_by_date_range()."""

    def test_bounds_are_inclusive(self):
        """Test entries on either bound are kept."""
        filtered = filter_by_date_range(SEED_EXPENSES, date(2023, 5, 15), date(2023, 5, 25))
        assert [e.id for e in filtered] == [2, 3, 4]

    def test_missing_bounds_are_open(self):
        """Test a missing bound leaves that side unbounded."""
        assert [e.id for e in filter_by_date_range(SEED_EXPENSES, start_date=date(2023, 5, 25))] == [4, 5]
        assert [e.id for e in filter_by_date_range(SEED_EXPENSES, end_date=date(2023, 5, 10))] == [1]
        assert filter_by_date_range(SEED_EXPENSES) == SEED_EXPENSES

    def test_filter_is_idempotent(self):
        """Test filtering twice with the same bounds equals filtering once."""
        start, end = date(2023, 5, 12), date(2023, 5, 31)
        once = filter_by_date_range(SEED_EXPENSES, start, end)
        twice = filter_by_date_range(once, start, end)
        assert once == twice

    def test_inverted_range_is_empty(self):
        """Test a start after the end matches nothing."""
        assert filter_by_date_range(SEED_EXPENSES, date(2023, 6, 1), date(2023, 5, 1)) == []

    def test_describe_date_range(self):
        """Test range descriptions for headings."""
        assert describe_date_range(None, None) == "all dates"
        assert describe_date_range(date(2023, 5, 1), None) == "from 01 May 2023"
        assert describe_date_range(None, date(2023, 5, 31)) == "until 31 May 2023"
        assert describe_date_range(date(2023, 5, 1), date(2023, 5, 1)) == "on 01 May 2023"


class TestFilteredLedgerView:
    """Tests for the view state used by the person and factory pages."""

    def test_apply_matches_summarize_of_filtered_entries(self):
        """Test recomputed totals equal a fresh summarize over the same entries."""
        view = FilteredLedgerView(SEED_EXPENSES, summarize(SEED_EXPENSES))
        summary = view.apply(date(2023, 5, 1), date(2023, 5, 31))
        expected = summarize(filter_by_date_range(SEED_EXPENSES, date(2023, 5, 1), date(2023, 5, 31)))
        assert summary == expected
        assert summary.total_credit == Decimal("6500")
        assert summary.total_debit == Decimal("2500")
        assert view.is_filtered

    def test_clear_restores_original_summary(self):
        """Test clearing reproduces the unfiltered entries and summary exactly."""
        loaded = summarize(SEED_EXPENSES)
        view = FilteredLedgerView(SEED_EXPENSES, loaded)
        view.apply(start_date=date(2023, 6, 1))
        assert len(view.entries) == 1

        restored = view.clear()
        assert restored == loaded
        assert view.entries == SEED_EXPENSES
        assert not view.is_filtered

    def test_apply_twice_is_stable(self):
        """Test applying the same range again changes nothing."""
        view = FilteredLedgerView(SEED_EXPENSES, summarize(SEED_EXPENSES))
        first = view.apply(date(2023, 5, 20), None)
        first_entries = list(view.entries)
        second = view.apply(date(2023, 5, 20), None)
        assert first == second
        assert view.entries == first_entries

    def test_person_summary_keeps_identity(self):
        """Test a filtered person summary keeps the person's id and name."""
        john = SEED_PERSONS[0]
        entries = [e for e in SEED_EXPENSES if e.person_id == john.id]
        view = FilteredLedgerView(entries, summarize_person(john, entries))
        summary = view.apply(end_date=date(2023, 5, 31))
        assert summary.id == 1
        assert summary.name == john.name
        assert summary.balance == Decimal("1500")

    def test_view_does_not_mutate_loaded_entries(self):
        """Test the caller's list is left untouched."""
        entries = list(SEED_EXPENSES)
        view = FilteredLedgerView(entries, summarize(entries))
        view.apply(start_date=date(2024, 1, 1))
        assert entries == SEED_EXPENSES
        assert view.entries == []
