"""
Form Input Validation

DESIGN DECISION: Validation happens at the edge, before storage is touched.
The UI passes raw form values (strings from text inputs, or the typed
values Streamlit widgets return); this module turns them into a
NewExpenseEntry or a clean person name, or raises ValidationError with
every issue found.

IMPORTANT: Validation never silently fixes input. Whitespace is trimmed,
nothing else is changed.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from khata.models.ledger import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    EntryType,
    NewExpenseEntry,
    Person,
    ValidationIssue,
)


class ValidationError(ValueError):
    """Form input was rejected. Carries every issue found."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))

    def for_field(self, field: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.field == field]


def validate_person_name(name: Optional[str]) -> str:
    """Return the trimmed name, or raise if nothing is left."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError([ValidationIssue(
            field="name",
            issue_type="missing",
            message="Person name cannot be empty",
        )])
    if len(cleaned) > 200:
        raise ValidationError([ValidationIssue(
            field="name",
            issue_type="too_long",
            message="Person name must be at most 200 characters",
        )])
    return cleaned


class TransactionValidator:
    """
    Validates the add-transaction form.

    When the known persons are supplied, the chosen person must be one
    of them.
    """

    def __init__(self, persons: Optional[Iterable[Person]] = None):
        self._person_ids = {p.id for p in persons} if persons is not None else None

    def _parse_person_id(
        self,
        value: Union[str, int, None],
        issues: list[ValidationIssue],
    ) -> Optional[int]:
        if value is None or str(value).strip() == "":
            issues.append(ValidationIssue(
                field="person_id",
                issue_type="missing",
                message="Person is required",
            ))
            return None
        try:
            person_id = int(str(value).strip())
        except ValueError:
            issues.append(ValidationIssue(
                field="person_id",
                issue_type="invalid_format",
                message=f"Person id '{value}' is not a number",
            ))
            return None
        if self._person_ids is not None and person_id not in self._person_ids:
            issues.append(ValidationIssue(
                field="person_id",
                issue_type="unknown_person",
                message=f"No person with id {person_id}",
            ))
            return None
        return person_id

    def _parse_date(
        self,
        value: Union[str, date, None],
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if isinstance(value, date):
            return value
        if value is None or value.strip() == "":
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            ))
            return None
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date '{value}' is not in YYYY-MM-DD format",
            ))
            return None

    def _parse_amount(
        self,
        value: Union[str, int, float, Decimal, None],
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        if value is None or str(value).strip() == "":
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            ))
            return None
        try:
            # str() first so floats from number inputs keep their printed value
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a positive number",
            ))
            return None
        if amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be a positive number",
            ))
            return None
        whole_digits = AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES
        if amount >= Decimal(10) ** whole_digits:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount must have at most {whole_digits} digits before the decimal point",
            ))
            return None
        places = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
        if amount.quantize(places) != amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount can have at most {AMOUNT_DECIMAL_PLACES} decimal places",
            ))
            return None
        # Trailing zeros past the second place are dropped; the value is unchanged
        if amount.as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
            amount = amount.quantize(places)
        return amount

    def _parse_type(
        self,
        value: Union[str, EntryType, None],
        issues: list[ValidationIssue],
    ) -> Optional[EntryType]:
        if isinstance(value, EntryType):
            return value
        if value is None or value.strip() == "":
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Transaction type is required",
            ))
            return None
        try:
            return EntryType(value.strip())
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="Transaction type must be Credit or Debit",
            ))
            return None

    def validate(
        self,
        person_id: Union[str, int, None],
        entry_date: Union[str, date, None],
        amount: Union[str, int, float, Decimal, None],
        entry_type: Union[str, EntryType, None],
        description: Optional[str] = None,
    ) -> NewExpenseEntry:
        """
        Check every field and build the entry.

        Raises:
            ValidationError: With one issue per rejected field
        """
        issues: list[ValidationIssue] = []

        parsed_person_id = self._parse_person_id(person_id, issues)
        parsed_date = self._parse_date(entry_date, issues)
        parsed_amount = self._parse_amount(amount, issues)
        parsed_type = self._parse_type(entry_type, issues)

        description = (description or "").strip() or None
        if description and len(description) > 1000:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message="Description must be at most 1000 characters",
            ))

        if issues:
            raise ValidationError(issues)

        return NewExpenseEntry(
            person_id=parsed_person_id,
            date=parsed_date,
            amount=parsed_amount,
            type=parsed_type,
            description=description,
        )


def get_user_friendly_summary(error: ValidationError) -> str:
    """Bullet list of issues for display next to the form."""
    lines = ["Please fix the following:"]
    for issue in error.issues:
        lines.append(f"   • {issue.message}")
    return "\n".join(lines)
