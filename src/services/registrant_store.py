"""Registrant stores: local JSON blob or remote REST collection."""
import logging
import os
from dataclasses import replace
from pathlib import Path
from threading import Lock
from typing import Any, List, Optional

import requests

from src.models.registrant import Registrant
from src.services.storage_service import ensure_blob_file, get_item, lock_file, set_item
from src.utils.exceptions import FileWriteError, RegistrantStoreError

logger = logging.getLogger(__name__)

_ENV_KEYS = {
    "REGISTRANT_STORE",
    "USERS_FILE",
    "REGISTRANT_API_URL",
    "REGISTRANT_API_TIMEOUT",
}
_ENV_LOADED = False
_ENV_LOCK = Lock()

USERS_KEY = "users"
DEFAULT_USERS_FILE = "data/users.json"
DEFAULT_API_URL = "https://jsonplaceholder.typicode.com/users"
DEFAULT_API_TIMEOUT = 10.0


def _load_store_env() -> None:
    """Load store settings from .env file if present. Existing env wins."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = Path(".env")
        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in _ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _api_timeout() -> float:
    raw = os.getenv("REGISTRANT_API_TIMEOUT", "")
    try:
        return float(raw) if raw.strip() else DEFAULT_API_TIMEOUT
    except ValueError:
        logger.warning("Ignoring invalid REGISTRANT_API_TIMEOUT=%r", raw)
        return DEFAULT_API_TIMEOUT


def _parse_records(records: Any) -> List[Registrant]:
    """
    Build registrants from a stored or fetched list.

    Raises:
        ValueError: If records is not a list of objects or a record is malformed
    """
    if not isinstance(records, list):
        raise ValueError(f"expected a list of registrants, got {type(records).__name__}")
    registrants = []
    for record in records:
        if not isinstance(record, dict):
            raise ValueError(f"expected a registrant object, got {type(record).__name__}")
        registrants.append(Registrant.from_dict(record))
    return registrants


class LocalRegistrantStore:
    """Registrants kept as a list under the "users" key of a JSON file."""

    def __init__(self, file_path: Optional[str] = None):
        if file_path is None:
            _load_store_env()
            file_path = os.getenv("USERS_FILE", DEFAULT_USERS_FILE)
        self.file_path = str(file_path)

    def list(self) -> List[Registrant]:
        try:
            return _parse_records(get_item(self.file_path, USERS_KEY, []))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read registrants from {self.file_path}: {e}")
            raise RegistrantStoreError(f"Impossible de lire les inscrits : {e}") from e

    def create(self, registrant: Registrant) -> Registrant:
        """Append a registrant to the blob and return it."""
        try:
            ensure_blob_file(self.file_path)
            with lock_file(self.file_path):
                records = get_item(self.file_path, USERS_KEY, [])
                if not isinstance(records, list):
                    raise ValueError(f"expected a list of registrants, got {type(records).__name__}")
                records.append(registrant.to_dict())
                set_item(self.file_path, USERS_KEY, records, backup=True)
        except (OSError, ValueError, FileWriteError) as e:
            logger.error(f"Failed to store registrant in {self.file_path}: {e}")
            raise RegistrantStoreError("Erreur lors de l'enregistrement, veuillez réessayer") from e
        return registrant


class RemoteRegistrantStore:
    """Registrants kept in a REST collection resource."""

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        _load_store_env()
        self.api_url = (api_url or os.getenv("REGISTRANT_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else _api_timeout()
        self.session = session or requests.Session()

    @staticmethod
    def _payload(registrant: Registrant) -> dict:
        return {
            "name": f"{registrant.family_name} {registrant.given_name}",
            "email": registrant.email,
            "phone": registrant.postal_code,
            "username": registrant.family_name.lower(),
        }

    def list(self) -> List[Registrant]:
        try:
            r = self.session.get(self.api_url, timeout=self.timeout)
            r.raise_for_status()
            records = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch registrants from {self.api_url}: {e}")
            raise RegistrantStoreError(f"Impossible de charger les inscrits : {e}") from e

        try:
            return _parse_records(records)
        except ValueError as e:
            logger.error(f"Unexpected registrant payload from {self.api_url}: {e}")
            raise RegistrantStoreError("Réponse inattendue du serveur") from e

    def create(self, registrant: Registrant) -> Registrant:
        """POST the registrant and return it with the server-assigned id."""
        try:
            r = self.session.post(self.api_url, json=self._payload(registrant), timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to create registrant at {self.api_url}: {e}")
            raise RegistrantStoreError(f"Erreur lors de l'enregistrement : {e}") from e

        if not isinstance(data, dict):
            return registrant
        return replace(registrant, id=data.get("id"), name=data.get("name"))


def get_registrant_store(backend: Optional[str] = None):
    """
    Build the configured registrant store.

    Args:
        backend: "local" or "remote" (defaults to REGISTRANT_STORE, then "local")

    Raises:
        ValueError: If backend is unknown
    """
    _load_store_env()
    backend = (backend or os.getenv("REGISTRANT_STORE", "local")).strip().lower()
    if backend == "local":
        return LocalRegistrantStore()
    if backend == "remote":
        return RemoteRegistrantStore()
    raise ValueError(f"Unknown registrant store backend: {backend}")
