"""Strict validators that raise on missing arguments.

These follow the throwing policy: a missing argument raises
``MissingParameterError``, a wrong type returns False. Collecting code
must reach them through ``src.utils.validation.check``.
"""
import re
from typing import Any

from src.utils.date_utils import calculate_age
from src.utils.exceptions import MissingParameterError

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
POSTAL_CODE_PATTERN = re.compile(r"[0-9]{5}")

__all__ = [
    "EMAIL_PATTERN",
    "POSTAL_CODE_PATTERN",
    "calculate_age",
    "validate_email_strict",
    "validate_name_strict",
    "validate_postal_code_strict",
]


def validate_name_strict(value: Any) -> bool:
    """
    Validate a family or given name.

    Args:
        value: Name to validate

    Returns:
        True if value is made only of Unicode letters, whitespace and hyphens

    Raises:
        MissingParameterError: If value is None

    Behavior:
        - Rejects any "<" or ">" (markup injection)
        - Accepts accented letters ("Éloïse", "Jean-Luc")
        - Rejects digits and other punctuation, apostrophes included
    """
    if value is None:
        raise MissingParameterError()
    if not isinstance(value, str):
        return False
    if "<" in value or ">" in value:
        return False
    if not value:
        return False
    return all(ch.isalpha() or ch.isspace() or ch == "-" for ch in value)


def validate_email_strict(value: Any) -> bool:
    """Validate email shape, raising MissingParameterError on None."""
    if value is None:
        raise MissingParameterError()
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_postal_code_strict(value: Any) -> bool:
    """Validate a 5-digit French postal code, raising MissingParameterError on None."""
    if value is None:
        raise MissingParameterError()
    if not isinstance(value, str):
        return False
    return POSTAL_CODE_PATTERN.fullmatch(value) is not None
