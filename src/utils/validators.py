"""Lightweight request validation helpers."""

from typing import Any

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def ensure_any_present(**fields: Any) -> None:
    """Raise ValidationError unless at least one of the fields has a value."""
    if all(value in (None, "", []) for value in fields.values()):
        names = " or ".join(fields)
        raise ValidationError(f"Provide either {names}")
