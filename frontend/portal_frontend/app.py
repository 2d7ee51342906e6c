"""
Streamlit entry point for the project portal.

Run with: streamlit run frontend/portal_frontend/app.py
"""
import logging
import os

import streamlit as st

from portal_frontend.api_client import APIError, PortalAPIClient
from portal_frontend.navigation import (
    DASHBOARD, LOGIN, PROJECT_CREATE, PROJECT_DETAIL, PROJECT_EDIT, REGISTER,
    Router, flash, render_navigation, show_flash
)
from portal_frontend.session import clear_session, load_session
from portal_frontend import views

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

VALIDATED_KEY = "_session_validated"

PROTECTED_VIEWS = {
    DASHBOARD: views.render_dashboard,
    PROJECT_DETAIL: views.render_project_detail,
    PROJECT_CREATE: views.render_project_create,
    PROJECT_EDIT: views.render_project_edit,
}


def main():
    st.set_page_config(page_title="Project Portal", page_icon="📁", layout="wide")
    store = st.session_state
    router = Router(store)
    show_flash(store)

    try:
        client = PortalAPIClient()
    except ValueError as err:
        st.error(str(err))
        st.stop()

    session = load_session(store)

    # Confirm a restored token once per browser session
    if session is not None and not store.get(VALIDATED_KEY):
        try:
            client.with_session(session).me()
            store[VALIDATED_KEY] = True
        except APIError as err:
            if err.is_unauthorized:
                logger.info("Stored session rejected, signing out")
                clear_session(store)
                session = None
            else:
                st.warning(err.message)

    page = router.resolve(session)
    store[Router.PAGE_KEY] = page

    if session is None:
        st.title("Project Portal")
        if page == REGISTER:
            views.render_register(client, store, router)
        else:
            views.render_login(client, store, router)
        return

    def logout():
        clear_session(store)
        store.pop(VALIDATED_KEY, None)
        flash(store, "Logged out successfully", icon="👋")
        router.go(LOGIN)

    render_navigation(session, router, logout)
    PROTECTED_VIEWS[page](client.with_session(session), session, store, router)


if __name__ == "__main__":
    main()
