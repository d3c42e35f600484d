# litrato/core/ulid_helper.py
"""
Record identifiers.

Every table keys its rows with a ULID string. Ids coming from URLs or
request bodies are checked here before they reach a query, so a typo is
reported as a bad request instead of a missing record.
"""

import ulid

from .exceptions import ValidationException


def generate_ulid() -> str:
    return str(ulid.ULID())


def is_valid_ulid(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ulid.ULID.from_str(value)
    except ValueError:
        return False
    return True


def require_ulid(value: str, field: str) -> str:
    """Return ``value`` unchanged, or raise ValidationException naming ``field``."""
    if not is_valid_ulid(value):
        raise ValidationException(f"Invalid {field}", details={"field": field, "value": value})
    return value
