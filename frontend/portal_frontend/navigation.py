"""
Page switching, one-shot notifications and the navigation bar.
"""
from typing import Any, Callable, MutableMapping, Optional

import streamlit as st

from .session import AuthSession

LOGIN = "login"
REGISTER = "register"
DASHBOARD = "dashboard"
PROJECT_DETAIL = "project"
PROJECT_CREATE = "project_create"
PROJECT_EDIT = "project_edit"

PUBLIC_PAGES = (LOGIN, REGISTER)
PROTECTED_PAGES = (DASHBOARD, PROJECT_DETAIL, PROJECT_CREATE, PROJECT_EDIT)

FLASH_KEY = "_flash"


class Router:
    """Current page and selected project, kept in the session store."""

    PAGE_KEY = "nav_page"
    PROJECT_KEY = "nav_project_id"

    def __init__(self, store: MutableMapping[str, Any]):
        self.store = store

    @property
    def page(self) -> Optional[str]:
        return self.store.get(self.PAGE_KEY)

    @property
    def project_id(self) -> Optional[str]:
        return self.store.get(self.PROJECT_KEY)

    def resolve(self, session: Optional[AuthSession]) -> str:
        """
        Pick the page to render for the current auth state.

        Signed-out users only reach the login and register pages; signed-in
        users are sent from those pages to the dashboard. Project pages
        without a selected project fall back to the dashboard.
        """
        page = self.page
        if session is None:
            return page if page in PUBLIC_PAGES else LOGIN
        if page not in PROTECTED_PAGES:
            return DASHBOARD
        if page in (PROJECT_DETAIL, PROJECT_EDIT) and not self.project_id:
            return DASHBOARD
        return page

    def go(self, page: str, project_id: Optional[str] = None, rerun: bool = True) -> None:
        self.store[self.PAGE_KEY] = page
        if project_id is not None:
            self.store[self.PROJECT_KEY] = project_id
        if rerun:
            st.rerun()


def flash(store: MutableMapping[str, Any], message: str, icon: str = "✅") -> None:
    """Queue a toast to show after the next rerun."""
    store[FLASH_KEY] = (message, icon)


def show_flash(store: MutableMapping[str, Any]) -> None:
    queued = store.pop(FLASH_KEY, None)
    if queued:
        message, icon = queued
        st.toast(message, icon=icon)


def role_badge(session: AuthSession) -> str:
    return "ADMIN" if session.is_admin else "MEMBER"


def render_navigation(session: AuthSession, router: Router, on_logout: Callable[[], None]) -> None:
    """Top bar with the dashboard link, the user's email and role, and logout."""
    left, right = st.columns([3, 2])
    with left:
        if st.button("Dashboard", key="nav_dashboard", disabled=router.page == DASHBOARD):
            router.go(DASHBOARD)
    with right:
        st.markdown(f"{session.user.email} &nbsp; `{role_badge(session)}`")
        if st.button("Logout", key="nav_logout"):
            on_logout()
    st.divider()
