"""Form validation package."""

from khata.validation.validator import (
    TransactionValidator,
    ValidationError,
    get_user_friendly_summary,
    validate_person_name,
)

__all__ = [
    "TransactionValidator",
    "ValidationError",
    "get_user_friendly_summary",
    "validate_person_name",
]
