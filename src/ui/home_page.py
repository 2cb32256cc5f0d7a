"""Home page: welcome text and list of registrants."""
from typing import List, MutableMapping

import streamlit as st

from src.models.registrant import Registrant
from src.services.registrant_store import get_registrant_store
from src.services.registration_service import list_registrants
from src.ui.html_utils import html_block, safe_text

FLASH_KEY = "registration_flash"
STORE_KEY = "registrant_store"


def get_session_store(state: MutableMapping):
    """Return the registrant store for this browser session, building it once."""
    if STORE_KEY not in state:
        state[STORE_KEY] = get_registrant_store()
    return state[STORE_KEY]


def _user_count_text(count: int) -> str:
    return f"{count} utilisateur(s) inscrit(s)"


def _registrant_list_html(registrants: List[Registrant]) -> str:
    """
    Build the registrant list markup.

    Names and emails are HTML-escaped; an empty list renders the
    placeholder message instead.
    """
    if not registrants:
        return html_block(
            """
            <p class="empty-message" data-cy="empty-list">
                Aucun utilisateur inscrit pour le moment.
            </p>
            """
        )

    items = "\n".join(
        f'<li data-cy="user-{index}">'
        f'<span class="user-name">{safe_text(registrant.display_name)}</span> '
        f'<span class="user-email">({safe_text(registrant.email)})</span>'
        f"</li>"
        for index, registrant in enumerate(registrants)
    )
    return html_block(
        f"""
        <ul class="users-list" data-cy="users-list">
        {items}
        </ul>
        """
    )


def render_home_page():
    """Render the welcome section and the registrant list."""
    flash = st.session_state.pop(FLASH_KEY, None)
    if flash:
        st.success(f"✅ {flash}")

    st.title("Bienvenue sur notre plateforme")
    st.write("Inscrivez-vous pour rejoindre notre communauté.")

    registrants = list_registrants(get_session_store(st.session_state))
    st.markdown(f"**{_user_count_text(len(registrants))}**")

    st.subheader("Liste des inscrits")
    st.markdown(_registrant_list_html(registrants), unsafe_allow_html=True)

    if st.button("Aller vers le formulaire d'inscription", key="link_register", type="primary"):
        st.session_state.current_page = "register"
        st.rerun()
