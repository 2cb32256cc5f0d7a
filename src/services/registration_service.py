"""Registration service: validate a form then hand it to the store."""
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from src.models.registrant import RegistrationInput, Registrant
from src.services.registrant_store import get_registrant_store
from src.utils.exceptions import RegistrantStoreError
from src.utils.validation import validate_registration

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Enregistrement réussi!"
INVALID_FORM_MESSAGE = "Veuillez corriger les erreurs du formulaire"
EMPTY_FORM_MESSAGE = "Aucune donnée reçue"


def submit_registration(
    form_data: Any,
    store=None,
    today: Optional[date] = None,
) -> Tuple[bool, str, Dict[str, str]]:
    """
    Validate a registration form and create the record.

    Args:
        form_data: RegistrationInput or mapping of raw form values
        store: Registrant store (defaults to the configured one)
        today: Reference date for the age check

    Returns:
        Tuple of (success: bool, message: str, errors: Dict[str, str])
        - (True, "Enregistrement réussi!", {}) on success
        - (False, "Veuillez corriger ...", errors) on validation failure
        - (False, error_message, {}) if the store refused the record

    Behavior:
        - Validates synchronously before touching the store
        - Never mutates form_data; clearing the form is the caller's job
    """
    if not isinstance(form_data, RegistrationInput):
        if not form_data or not isinstance(form_data, Mapping):
            return False, EMPTY_FORM_MESSAGE, {}
        form_data = RegistrationInput.from_dict(form_data)

    errors = validate_registration(form_data, today)
    if errors:
        logger.info("Registration refused, invalid fields: %s", ", ".join(errors))
        return False, INVALID_FORM_MESSAGE, errors

    if store is None:
        store = get_registrant_store()

    registrant = Registrant.from_input(form_data)
    try:
        store.create(registrant)
    except RegistrantStoreError as e:
        logger.error(f"Registrant creation failed: {e}")
        return False, str(e), {}

    logger.info("Registrant created: %s", registrant.display_name)
    return True, SUCCESS_MESSAGE, {}


def list_registrants(store=None) -> List[Registrant]:
    """Return all registrants, or [] if the store cannot be read."""
    if store is None:
        store = get_registrant_store()
    try:
        return store.list()
    except RegistrantStoreError as e:
        logger.error(f"Failed to list registrants: {e}")
        return []
