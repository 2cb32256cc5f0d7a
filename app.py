"""
Application d'inscription
Registrant sign-up application
"""
import logging
import streamlit as st

from src.ui.home_page import render_home_page
from src.ui.register_page import render_register_page

logger = logging.getLogger(__name__)


# Configuration de la page Streamlit
st.set_page_config(
    page_title="Inscription",
    page_icon="📝",
    layout="centered",
    initial_sidebar_state="collapsed"
)


def initialize_session_state():
    """Initialise les valeurs par défaut du session state."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "home"

    # Lien direct vers le formulaire : ?page=register
    if "url_params_processed" not in st.session_state:
        query_params = st.query_params
        if query_params.get("page") == "register":
            st.session_state.current_page = "register"
        st.session_state.url_params_processed = True


def apply_custom_css():
    """Applique les styles personnalisés."""
    st.markdown("""
        <style>
        /* Masquer les éléments Streamlit par défaut */
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .users-list {
            list-style: none;
            padding-left: 0;
        }

        .users-list li {
            padding: 8px 12px;
            border-bottom: 1px solid rgba(148, 163, 184, 0.3);
        }

        .user-email {
            color: #64748b;
        }

        .empty-message {
            color: #94a3b8;
            font-style: italic;
        }

        .stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """Affiche la barre de navigation."""
    if st.button("🏠 Accueil", key="nav_home"):
        st.session_state.current_page = "home"


def render_current_page():
    """Affiche la page correspondant à l'état courant."""
    try:
        if st.session_state.current_page == "home":
            render_home_page()

        elif st.session_state.current_page == "register":
            render_register_page()

        else:
            st.error(f"Page inconnue : {st.session_state.current_page}")
            if st.button("Retour à l'accueil"):
                st.session_state.current_page = "home"
                st.rerun()

    except Exception as e:
        # Limite d'erreur : la page plante, l'application reste utilisable
        logger.exception("Unhandled exception while rendering page")
        st.error("Une erreur est survenue, veuillez réessayer plus tard")

        with st.expander("🔍 Détails de l'erreur"):
            st.code(str(e))

        if st.button("Retour à l'accueil"):
            st.session_state.current_page = "home"
            st.rerun()


def main():
    """Point d'entrée de l'application."""
    try:
        initialize_session_state()
        apply_custom_css()
        render_navigation()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("L'application a rencontré une erreur, veuillez recharger la page")
        st.code(str(e))

        if st.button("🔄 Recharger"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
