"""Registration form validation utilities.

Every function here follows the collecting policy: bad input yields
False (or an entry in the error mapping), never an exception.
"""
import re
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, Dict, Optional, Tuple

from src.models.registrant import RegistrationInput
from src.utils.date_utils import ADULT_AGE, calculate_age, compute_age, parse_date
from src.utils.exceptions import ValidationError
from src.utils.strict_validators import (
    EMAIL_PATTERN,
    POSTAL_CODE_PATTERN,
    validate_name_strict,
)

ERROR_MESSAGES = {
    "family_name": "Le nom doit contenir uniquement des lettres",
    "given_name": "Le prénom doit contenir uniquement des lettres",
    "email": "Email invalide",
    "birth_date_missing": "La date de naissance est requise",
    "birth_date": "Vous devez avoir au moins 18 ans",
    "city": "La ville est requise",
    "postal_code": "Code postal invalide (5 chiffres)",
}


def check(validator: Callable[..., bool], *args: Any) -> Tuple[bool, str]:
    """
    Run a throwing validator and convert its outcome.

    Args:
        validator: Function returning bool and possibly raising ValidationError
        *args: Arguments forwarded to validator

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if validator returned True
        - (False, "") if validator returned False
        - (False, str(error)) if validator raised ValidationError
    """
    try:
        is_valid = validator(*args)
    except ValidationError as e:
        return False, str(e)
    return bool(is_valid), ""


def try_calculate_age(person: Any, now: Optional[date] = None) -> Tuple[Optional[int], str]:
    """
    Calculate age without raising.

    Returns:
        Tuple of (age, error_message)
        - (age, "") on success
        - (None, message) if calculate_age raised
    """
    try:
        return calculate_age(person, now), ""
    except ValidationError as e:
        return None, str(e)


def validate_email(email: Any) -> bool:
    """True if email has a local part, one "@" and a dotted domain, no whitespace."""
    if not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_postal_code(code: Any) -> bool:
    """True if code is exactly 5 ASCII digits."""
    if not isinstance(code, str):
        return False
    return POSTAL_CODE_PATTERN.fullmatch(code) is not None


def _validate_name(name: Any) -> bool:
    if not isinstance(name, str):
        return False
    trimmed = name.strip()
    if not trimmed:
        return False
    is_valid, _ = check(validate_name_strict, trimmed)
    return is_valid


def validate_family_name(name: Any) -> bool:
    """
    Validate a family name.

    Args:
        name: Raw family name

    Returns:
        True if the trimmed name is non-empty and made of letters, spaces
        and hyphens only (no digits, no "<" or ">")
    """
    return _validate_name(name)


def validate_given_name(name: Any) -> bool:
    """Validate a given name; same rules as validate_family_name."""
    return _validate_name(name)


def validate_city(city: Any) -> bool:
    if not isinstance(city, str):
        return False
    return len(city.strip()) > 0


def validate_age(date_str: Any, today: Optional[date] = None) -> bool:
    """
    Check that a birth date string belongs to an adult.

    Args:
        date_str: Birth date in YYYY-MM-DD format
        today: Reference date (defaults to today)

    Returns:
        True if the date parses, is not in the future and the age is
        at least 18; False for anything else
    """
    if not isinstance(date_str, str) or not date_str:
        return False

    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        return False

    try:
        birth = parse_date(date_str)
    except ValueError:
        return False

    if today is None:
        today = date.today()

    if birth > today:
        return False

    return compute_age(birth, today) >= ADULT_AGE


def validate_registration(form_data: Any, today: Optional[date] = None) -> Dict[str, str]:
    """
    Validate every field of a registration form.

    Args:
        form_data: RegistrationInput or mapping of form values
        today: Reference date for the age check

    Returns:
        Mapping of field name to error message for each failing field;
        empty if every field is valid

    Behavior:
        - Absent, empty or non-mapping input returns {} (callers must refuse it separately);
          an empty mapping counts as absent, unlike a mapping whose values are all ""
        - All fields are checked; no short-circuit
        - Order: family name, given name, email, birth date, city, postal code
    """
    if not form_data:
        return {}

    if not isinstance(form_data, RegistrationInput):
        if not isinstance(form_data, Mapping):
            return {}
        form_data = RegistrationInput.from_dict(form_data)

    errors: Dict[str, str] = {}

    if not validate_family_name(form_data.family_name):
        errors["family_name"] = ERROR_MESSAGES["family_name"]

    if not validate_given_name(form_data.given_name):
        errors["given_name"] = ERROR_MESSAGES["given_name"]

    if not validate_email(form_data.email):
        errors["email"] = ERROR_MESSAGES["email"]

    if not form_data.birth_date:
        errors["birth_date"] = ERROR_MESSAGES["birth_date_missing"]
    elif not validate_age(form_data.birth_date, today):
        errors["birth_date"] = ERROR_MESSAGES["birth_date"]

    if not validate_city(form_data.city):
        errors["city"] = ERROR_MESSAGES["city"]

    if not validate_postal_code(form_data.postal_code):
        errors["postal_code"] = ERROR_MESSAGES["postal_code"]

    return errors
