"""
Default records for a fresh ledger.

A collection found empty on first run is populated with these so the
views have something to show. The ids are fixed, which keeps seeding
idempotent when it goes through upsert.
"""

from datetime import date
from decimal import Decimal

from khata.models.ledger import EntryType, ExpenseEntry, Person


SEED_PERSONS = [
    Person(id=1, name="John Smith (Worker)"),
    Person(id=2, name="Jane Doe (Shareholder)"),
    Person(id=3, name="Bob Johnson (Supplier)"),
    Person(id=4, name="Alice Williams (Manager)"),
]

SEED_EXPENSES = [
    ExpenseEntry(
        id=1,
        person_id=1,
        date=date(2023, 5, 10),
        amount=Decimal("1500"),
        type=EntryType.CREDIT,
        description="Monthly salary",
    ),
    ExpenseEntry(
        id=2,
        person_id=2,
        date=date(2023, 5, 15),
        amount=Decimal("3000"),
        type=EntryType.CREDIT,
        description="Dividend payment",
    ),
    ExpenseEntry(
        id=3,
        person_id=3,
        date=date(2023, 5, 20),
        amount=Decimal("2500"),
        type=EntryType.DEBIT,
        description="Raw materials purchase",
    ),
    ExpenseEntry(
        id=4,
        person_id=4,
        date=date(2023, 5, 25),
        amount=Decimal("2000"),
        type=EntryType.CREDIT,
        description="Monthly salary",
    ),
    ExpenseEntry(
        id=5,
        person_id=1,
        date=date(2023, 6, 1),
        amount=Decimal("500"),
        type=EntryType.DEBIT,
        description="Advance payment",
    ),
]
