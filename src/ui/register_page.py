"""Registration form page."""
from datetime import date
from typing import Any, Dict, MutableMapping

import streamlit as st

from src.models.registrant import FIELD_NAMES
from src.services.registration_service import submit_registration
from src.ui.home_page import FLASH_KEY, get_session_store

FIELD_LABELS = {
    "family_name": "Nom",
    "given_name": "Prénom",
    "email": "Email",
    "birth_date": "Date de naissance",
    "city": "Ville",
    "postal_code": "Code postal",
}

ERRORS_KEY = "registration_errors"
STORE_ERROR_KEY = "registration_store_error"


def _input_key(field_name: str) -> str:
    """Build the session-state key bound to one form input."""
    return f"register_{field_name}"


def _collect_form_data(state: MutableMapping) -> Dict[str, Any]:
    """Read raw form values from session state; the birth date becomes YYYY-MM-DD or ""."""
    form_data = {}
    for field_name in FIELD_NAMES:
        value = state.get(_input_key(field_name))
        if field_name == "birth_date":
            value = value.isoformat() if isinstance(value, date) else (value or "")
        form_data[field_name] = value if value is not None else ""
    return form_data


def _reset_form_state(state: MutableMapping) -> None:
    """Clear inputs and feedback after a successful registration."""
    for field_name in FIELD_NAMES:
        state.pop(_input_key(field_name), None)
    state.pop(ERRORS_KEY, None)
    state.pop(STORE_ERROR_KEY, None)


def _handle_submit(state: MutableMapping, store=None) -> bool:
    """
    Validate and store the current form.

    Returns:
        True on success. On failure the entered values are left in place
        and the errors are stored for rendering.
    """
    if store is None:
        store = get_session_store(state)
    success, message, errors = submit_registration(_collect_form_data(state), store=store)
    if success:
        _reset_form_state(state)
        state[FLASH_KEY] = message
        state["current_page"] = "home"
        return True

    state[ERRORS_KEY] = errors
    state[STORE_ERROR_KEY] = None if errors else message
    return False


def _clear_field_error(state: MutableMapping, field_name: str) -> None:
    """Drop the error shown under a field once the user edits it."""
    errors = state.get(ERRORS_KEY)
    if errors and field_name in errors:
        state[ERRORS_KEY] = {name: msg for name, msg in errors.items() if name != field_name}


def _render_field_error(field_name: str) -> None:
    message = st.session_state.get(ERRORS_KEY, {}).get(field_name)
    if message:
        st.error(message)


def render_register_page():
    """Render the registration form."""
    st.title("Formulaire d'enregistrement")

    store_error = st.session_state.get(STORE_ERROR_KEY)
    if store_error:
        st.error(f"❌ {store_error}")

    # Plain widgets rather than st.form: inputs inside a form cannot take on_change
    for field_name in FIELD_NAMES:
        label = FIELD_LABELS[field_name]
        callback_args = (st.session_state, field_name)
        if field_name == "birth_date":
            st.date_input(
                label,
                value=None,
                min_value=date(1900, 1, 1),
                max_value=date.today(),
                format="YYYY-MM-DD",
                key=_input_key(field_name),
                on_change=_clear_field_error,
                args=callback_args,
            )
        else:
            st.text_input(
                label,
                key=_input_key(field_name),
                placeholder="5 chiffres" if field_name == "postal_code" else None,
                on_change=_clear_field_error,
                args=callback_args,
            )
        _render_field_error(field_name)

    # Runs before the rerun: errors render under the fields, success routes home
    st.button(
        "S'enregistrer",
        key="register_submit",
        type="primary",
        on_click=_handle_submit,
        args=(st.session_state,),
    )
