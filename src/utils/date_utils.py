"""Date utility functions and age calculation."""
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional, Union

from src.utils.exceptions import (
    FutureBirthDateError,
    InvalidBirthTypeError,
    MissingBirthError,
    MissingParameterError,
)

ADULT_AGE = 18


def parse_date(date_str: str) -> date:
    """
    Parse date string in YYYY-MM-DD format.

    Args:
        date_str: Date string (e.g., "2006-06-14")

    Returns:
        date object

    Raises:
        ValueError: If date format is invalid
    """
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def compute_age(birth: date, today: date) -> int:
    """
    Compute age in whole years on a given day.

    Args:
        birth: Birth date
        today: Reference date

    Returns:
        Year difference, minus one if the birthday has not yet occurred

    Behavior:
        - Compares month/day only, never days / 365
        - A 29 February birth turns a year older on 1 March in non-leap years
    """
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def _get_birth(person: Any) -> Any:
    if isinstance(person, Mapping):
        return person.get("birth")
    return getattr(person, "birth", None)


def calculate_age(person: Any, now: Optional[Union[date, datetime]] = None) -> int:
    """
    Calculate a person's age, raising on any malformed input.

    Args:
        person: Object (or mapping) exposing a ``birth`` date or datetime
        now: Reference instant (defaults to current time); when only one of
            birth and now carries a timezone, the naive one is taken to be
            in that timezone

    Returns:
        Age in whole years

    Raises:
        MissingParameterError: If person is None
        MissingBirthError: If birth is absent or empty
        InvalidBirthTypeError: If birth is not a date/datetime
        FutureBirthDateError: If birth is after now
    """
    if person is None:
        raise MissingParameterError()

    birth = _get_birth(person)
    if birth is None or birth == "":
        raise MissingBirthError()

    if not isinstance(birth, date):
        raise InvalidBirthTypeError()

    if isinstance(birth, datetime):
        if now is None:
            now = datetime.now(birth.tzinfo)
        elif not isinstance(now, datetime):
            now = datetime.combine(now, datetime.min.time(), tzinfo=birth.tzinfo)
        # A naive side is read as wall time in the other side's zone
        if birth.tzinfo is not None and now.tzinfo is None:
            now = now.replace(tzinfo=birth.tzinfo)
        elif birth.tzinfo is None and now.tzinfo is not None:
            birth = birth.replace(tzinfo=now.tzinfo)
        if birth > now:
            raise FutureBirthDateError()
        return compute_age(birth.date(), now.date())

    if now is None:
        now = date.today()
    today = now.date() if isinstance(now, datetime) else now
    if birth > today:
        raise FutureBirthDateError()
    return compute_age(birth, today)
