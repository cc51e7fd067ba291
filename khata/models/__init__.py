"""
Data Models Package

All records and summaries passed between the stores, the ledger service
and the UI are defined here.
"""

from khata.models.ledger import (
    EntryType,
    ExpenseEntry,
    FactorySummary,
    NewExpenseEntry,
    Person,
    PersonSummary,
    Summary,
    ValidationIssue,
)

__all__ = [
    "EntryType",
    "ExpenseEntry",
    "FactorySummary",
    "NewExpenseEntry",
    "Person",
    "PersonSummary",
    "Summary",
    "ValidationIssue",
]
