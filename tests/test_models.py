"""
Tests for Khata Tracker

Test strategy:
1. Unit tests for individual components (models, aggregator, filters, validator)
2. Store tests against isolated in-memory ledgers and fake worksheets
3. No real API calls in tests
"""

import pytest
from datetime import date
from decimal import Decimal

from khata.models.ledger import (
    EntryType,
    ExpenseEntry,
    FactorySummary,
    NewExpenseEntry,
    Person,
    PersonSummary,
)


class TestPersonModel:
    """Tests for the Person model."""

    def test_person_creation(self):
        """Test Person model creation."""
        person = Person(id=1, name="John Smith (Worker)")
        assert person.id == 1
        assert person.name == "John Smith (Worker)"

    def test_person_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        person = Person(id=2, name="  Jane Doe  ")
        assert person.name == "Jane Doe"

    def test_person_rejects_blank_name(self):
        """Test that a name of only whitespace is rejected."""
        with pytest.raises(ValueError):
            Person(id=3, name="   ")

    def test_person_rejects_zero_id(self):
        """Test ids start at 1."""
        with pytest.raises(ValueError):
            Person(id=0, name="Nobody")


class TestExpenseEntryModels:
    """Tests for new and stored expense entries."""

    def test_new_entry_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected at creation."""
        for amount in (Decimal("0"), Decimal("-100")):
            with pytest.raises(ValueError):
                NewExpenseEntry(
                    person_id=1,
                    date=date(2024, 1, 1),
                    amount=amount,
                    type=EntryType.CREDIT,
                )

    def test_new_entry_bounds_amount_scale_and_size(self):
        """Test amounts are limited to two decimals and fifteen digits."""
        for amount in (Decimal("10.005"), Decimal("1e30"), Decimal("123456789012345.6")):
            with pytest.raises(ValueError):
                NewExpenseEntry(
                    person_id=1,
                    date=date(2024, 1, 1),
                    amount=amount,
                    type=EntryType.CREDIT,
                )
        largest = NewExpenseEntry(
            person_id=1,
            date=date(2024, 1, 1),
            amount=Decimal("9999999999999.99"),
            type=EntryType.CREDIT,
        )
        assert largest.amount == Decimal("9999999999999.99")

    def test_new_entry_accepts_camel_case_person_id(self):
        """Test the stored field name is accepted as input."""
        entry = NewExpenseEntry(
            personId=4,
            date=date(2024, 1, 1),
            amount=Decimal("10"),
            type=EntryType.DEBIT,
        )
        assert entry.person_id == 4

    def test_from_new_attaches_id(self):
        """Test ExpenseEntry.from_new keeps every field and adds the id."""
        new = NewExpenseEntry(
            person_id=2,
            date=date(2024, 3, 9),
            amount=Decimal("99.50"),
            type=EntryType.CREDIT,
            description="Scrap sale",
        )
        stored = ExpenseEntry.from_new(new, 17)
        assert stored.id == 17
        assert stored.person_id == 2
        assert stored.amount == Decimal("99.50")
        assert stored.description == "Scrap sale"

    def test_to_record_uses_stored_field_names(self):
        """Test serialization matches what both backends store."""
        entry = ExpenseEntry(
            id=1,
            person_id=1,
            date=date(2023, 5, 10),
            amount=Decimal("1500.25"),
            type=EntryType.CREDIT,
            description="Monthly salary",
        )
        record = entry.to_record()
        assert record == {
            "id": 1,
            "personId": 1,
            "date": "2023-05-10",
            "amount": "1500.25",
            "type": "Credit",
            "description": "Monthly salary",
        }

    def test_stored_entry_round_trips_through_record(self):
        """Test a record read back equals the entry written."""
        entry = ExpenseEntry(
            id=5,
            person_id=1,
            date=date(2023, 6, 1),
            amount=Decimal("500"),
            type=EntryType.DEBIT,
        )
        assert ExpenseEntry.model_validate(entry.to_record()) == entry

    def test_entries_are_immutable(self):
        """Test stored entries cannot be edited."""
        entry = ExpenseEntry(
            id=1,
            person_id=1,
            date=date(2023, 5, 10),
            amount=Decimal("1"),
            type=EntryType.CREDIT,
        )
        with pytest.raises(ValueError):
            entry.amount = Decimal("2")


class TestSummaryModels:
    """Tests for derived summaries."""

    def test_balance_is_credit_minus_debit(self):
        """Test the balance is computed, not stored."""
        summary = FactorySummary(
            total_credit=Decimal("6500"),
            total_debit=Decimal("3000"),
        )
        assert summary.balance == Decimal("3500")

    def test_default_summary_is_zero(self):
        """Test an empty summary is all zeros."""
        summary = FactorySummary()
        assert summary.total_credit == 0
        assert summary.total_debit == 0
        assert summary.balance == 0

    def test_balance_follows_copy_updates(self):
        """Test balance cannot go stale after a copy with new totals."""
        summary = PersonSummary(
            id=1,
            name="John",
            total_credit=Decimal("1500"),
            total_debit=Decimal("500"),
        )
        updated = summary.model_copy(update={"total_debit": Decimal("0")})
        assert updated.balance == Decimal("1500")
        assert updated.name == "John"

    def test_balance_is_serialized(self):
        """Test the computed balance appears in dumps."""
        dumped = FactorySummary(total_credit=Decimal("1"), total_debit=Decimal("3")).model_dump()
        assert dumped["balance"] == Decimal("-2")


class TestEntryTypes:
    """Tests for the entry type enum."""

    def test_entry_type_values(self):
        """Test the stored string values."""
        assert EntryType.CREDIT.value == "Credit"
        assert EntryType.DEBIT.value == "Debit"
        assert EntryType("Debit") is EntryType.DEBIT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
