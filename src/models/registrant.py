"""Registrant data models."""
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

FIELD_NAMES = (
    "family_name",
    "given_name",
    "email",
    "birth_date",
    "city",
    "postal_code",
)

# French and camelCase form keys accepted as aliases
FORM_ALIASES = {
    "nom": "family_name",
    "prenom": "given_name",
    "dateNaissance": "birth_date",
    "ville": "city",
    "codePostal": "postal_code",
    "familyName": "family_name",
    "givenName": "given_name",
    "birthDate": "birth_date",
    "postalCode": "postal_code",
}


def _normalize_keys(data: Mapping) -> Dict[str, Any]:
    """Map form keys onto field names; snake_case keys win over aliases."""
    normalized = {}
    for key, name in FORM_ALIASES.items():
        if key in data:
            normalized[name] = data[key]
    for name in FIELD_NAMES:
        if name in data:
            normalized[name] = data[name]
    return normalized


@dataclass
class RegistrationInput:
    """Raw form values for one submission attempt. Nothing is assumed valid."""

    family_name: Any = ""
    given_name: Any = ""
    email: Any = ""
    birth_date: Any = ""
    city: Any = ""
    postal_code: Any = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "RegistrationInput":
        """Build from form state; missing fields become None."""
        values = _normalize_keys(data)
        return cls(**{name: values.get(name) for name in FIELD_NAMES})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Person:
    """Entity exposing a birth date, used for age calculation."""

    birth: Optional[date] = None


@dataclass
class Registrant:
    """Accepted registration record."""

    family_name: str
    given_name: str
    email: str
    birth_date: str
    city: str
    postal_code: str
    registered_at: str = field(
        default_factory=lambda: datetime.now().astimezone().isoformat()
    )
    id: Optional[Any] = None
    name: Optional[str] = None

    def __post_init__(self):
        """Validate timestamp format."""
        try:
            datetime.fromisoformat(self.registered_at.replace('Z', '+00:00'))
        except (ValueError, AttributeError) as e:
            raise ValueError(f"Invalid timestamp format: {self.registered_at}") from e

    @classmethod
    def from_input(cls, form: RegistrationInput) -> "Registrant":
        """Create a record from validated input, trimming surrounding spaces."""
        return cls(
            family_name=form.family_name.strip(),
            given_name=form.given_name.strip(),
            email=form.email.strip(),
            birth_date=form.birth_date,
            city=form.city.strip(),
            postal_code=form.postal_code,
        )

    @classmethod
    def from_dict(cls, data: Mapping) -> "Registrant":
        values = _normalize_keys(data)
        kwargs = {name: values.get(name) or "" for name in FIELD_NAMES}
        if data.get("registered_at"):
            kwargs["registered_at"] = data["registered_at"]
        return cls(id=data.get("id"), name=data.get("name"), **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["id"] is None:
            del data["id"]
        if data["name"] is None:
            del data["name"]
        return data

    @property
    def display_name(self) -> str:
        """Name shown in the registrant list."""
        if self.name:
            return self.name
        return f"{self.family_name} {self.given_name}".strip()
