"""
Reusable pydantic validators.

Use them as `field_validator("field")(validator_function)`.
"""
from datetime import timezone


def normalize_datetime(value):
    """Convert aware datetimes to naive UTC. Naive values are taken as UTC already."""
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def email_normalizer(email: str) -> str:
    """Lowercase the email address and remove surrounding spaces."""
    return email.lower().strip()


def trailing_spaces_remover(value):
    """Strip surrounding spaces. Runs before length checks; non-strings are left to the field type."""
    if isinstance(value, str):
        return value.strip()
    return value
