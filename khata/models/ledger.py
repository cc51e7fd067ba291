"""
Core Data Models for Khata Tracker

These models define the schemas for all records flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Serialize to the exact field names both storage backends use
3. Keep derived values (balances) derived

DESIGN DECISION: Persons and entries are frozen. The ledger is append-only;
nothing in the system edits or deletes a record once it is written.
"""

from datetime import date
from decimal import MAX_PREC, Decimal, localcontext
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
)


# Amounts are whole paise: two decimal places, fifteen digits in all
AMOUNT_DECIMAL_PLACES = 2
AMOUNT_MAX_DIGITS = 15


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryType(str, Enum):
    """
    Direction of a transaction.

    The values are the literal strings stored by both backends.
    """
    CREDIT = "Credit"  # Money in
    DEBIT = "Debit"    # Money out


# =============================================================================
# STORED RECORDS
# =============================================================================

class Person(BaseModel):
    """A named party the factory transacts with (worker, supplier, ...)."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        ...,
        ge=1,
        description="Unique person ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )


class NewExpenseEntry(BaseModel):
    """
    A transaction that has not been stored yet.

    This is what the form layer hands to the ledger. The id is assigned
    by the record store at insert time.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    person_id: int = Field(
        ...,
        alias="personId",
        ge=1,
        description="ID of the person this transaction belongs to"
    )
    # No Field() here: assigning to `date` would shadow the type in the class body
    date: date
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        description="Amount in INR"
    )
    type: EntryType = Field(
        ...,
        description="Credit (money in) or Debit (money out)"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-text details"
    )


class ExpenseEntry(BaseModel):
    """
    A stored transaction.

    Amount positivity is checked when the entry is created, not when it is
    read back, so rows written by other tools still load.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: int = Field(
        ...,
        description="Unique entry ID"
    )
    person_id: int = Field(
        ...,
        alias="personId",
        description="ID of the person this transaction belongs to"
    )
    date: date
    amount: Decimal
    type: EntryType
    description: Optional[str] = None

    @classmethod
    def from_new(cls, entry: NewExpenseEntry, entry_id: int) -> "ExpenseEntry":
        """Attach an allocated id to a new entry."""
        return cls(id=entry_id, **entry.model_dump())

    def to_record(self) -> dict:
        """Serialize with the stored field names (personId, ISO date, string amount)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# DERIVED SUMMARIES - never stored
# =============================================================================

class Summary(BaseModel):
    """
    Totals over a set of entries.

    The balance is computed on access so it can never go stale.
    """

    total_credit: Decimal = Field(
        default=Decimal("0"),
        description="Sum of Credit amounts"
    )
    total_debit: Decimal = Field(
        default=Decimal("0"),
        description="Sum of Debit amounts"
    )

    @computed_field
    @property
    def balance(self) -> Decimal:
        # Exact even for totals wider than the default 28-digit context
        with localcontext() as ctx:
            ctx.prec = MAX_PREC
            return self.total_credit - self.total_debit


class FactorySummary(Summary):
    """Totals over every entry in the ledger."""


class PersonSummary(Summary):
    """Totals over one person's entries."""

    id: int
    name: str


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
