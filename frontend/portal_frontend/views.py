"""
Streamlit pages: login, register, dashboard and the project views.

Every page receives the API client, the current ``AuthSession`` and the
router explicitly.
"""
from datetime import datetime
from typing import Any, Dict, MutableMapping, Optional, Tuple

import streamlit as st

from .api_client import APIError, PortalAPIClient
from .navigation import (
    DASHBOARD, LOGIN, PROJECT_CREATE, PROJECT_DETAIL, PROJECT_EDIT, REGISTER,
    Router, flash
)
from .session import AuthSession, clear_session, save_session

DEFAULT_CLIENT_ID = "11111111-1111-1111-1111-111111111111"
CONFIRM_DELETE_KEY = "_confirm_delete"


def format_date(value: Optional[str]) -> str:
    """Render an ISO timestamp from the API as a date."""
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return value


def empty_dashboard_message(is_admin: bool) -> str:
    if is_admin:
        return "No projects yet. Create your first project!"
    return "No projects yet. Only admins can create projects."


def access_summary(is_admin: bool) -> Tuple[str, str]:
    if is_admin:
        return "Admin Access", "You have full permissions to create, edit, and delete projects."
    return "Member Access", "You can view projects. Only admins can create, edit, or delete projects."


def show_api_error(err: APIError, store: MutableMapping[str, Any], router: Router) -> None:
    """Report a failed call; an expired session sends the user back to login."""
    if err.is_unauthorized:
        clear_session(store)
        flash(store, "Your session has expired. Please log in again.", icon="🔒")
        router.go(LOGIN)
        return
    st.error(err.message)


def _start_session(store: MutableMapping[str, Any], router: Router, session: AuthSession, message: str) -> None:
    save_session(store, session)
    flash(store, message)
    router.go(DASHBOARD)


def render_login(client: PortalAPIClient, store: MutableMapping[str, Any], router: Router) -> None:
    st.header("Sign in to your account")

    with st.form("login_form"):
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        if not email or not password:
            st.error("Please enter email and password.")
        else:
            try:
                session = client.login(email, password)
            except APIError as err:
                st.error(err.message)
            else:
                _start_session(store, router, session, "Login successful!")

    st.write("Don't have an account?")
    if st.button("Create one", key="goto_register"):
        router.go(REGISTER)


def render_register(client: PortalAPIClient, store: MutableMapping[str, Any], router: Router) -> None:
    st.header("Create Account")

    with st.form("register_form"):
        email = st.text_input("Email *", key="register_email")
        password = st.text_input("Password *", type="password", key="register_password",
                                 help="At least 6 characters")
        client_id = st.text_input("Client ID", value=DEFAULT_CLIENT_ID, key="register_client_id")
        client_name = st.text_input("Client name (new clients only)", key="register_client_name")
        role = st.selectbox("Role", options=["member", "admin"], format_func=str.title, key="register_role")
        submitted = st.form_submit_button("Create Account")

    if submitted:
        if not email or not password or not client_id:
            st.error("Please fill in all required fields.")
        elif len(password) < 6:
            st.error("Password must be at least 6 characters.")
        else:
            try:
                session = client.register(email, password, client_id.strip(), role=role,
                                          client_name=client_name or None)
            except APIError as err:
                st.error(err.message)
            else:
                _start_session(store, router, session, "Account created successfully!")

    st.write("Already have an account?")
    if st.button("Sign in", key="goto_login"):
        router.go(LOGIN)


def _delete_controls(client: PortalAPIClient, store: MutableMapping[str, Any], router: Router,
                     project: Dict[str, Any], key_prefix: str) -> None:
    """Delete button with an inline confirmation step."""
    if store.get(CONFIRM_DELETE_KEY) != project["id"]:
        if st.button("Delete", key=f"{key_prefix}_delete_{project['id']}"):
            store[CONFIRM_DELETE_KEY] = project["id"]
            st.rerun()
        return

    st.warning(f'Are you sure you want to delete "{project["name"]}"?')
    confirm, cancel = st.columns(2)
    if confirm.button("Yes, delete", key=f"{key_prefix}_confirm_{project['id']}"):
        store.pop(CONFIRM_DELETE_KEY, None)
        try:
            client.delete_project(project["id"])
        except APIError as err:
            show_api_error(err, store, router)
            return
        flash(store, f'Project "{project["name"]}" deleted successfully!')
        router.go(DASHBOARD)
    if cancel.button("Cancel", key=f"{key_prefix}_cancel_{project['id']}"):
        store.pop(CONFIRM_DELETE_KEY, None)
        st.rerun()


def render_dashboard(client: PortalAPIClient, session: AuthSession,
                     store: MutableMapping[str, Any], router: Router) -> None:
    title, new_button = st.columns([4, 1])
    title.header("Projects")
    if session.is_admin and new_button.button("+ New Project", key="new_project"):
        router.go(PROJECT_CREATE)

    try:
        projects = client.list_projects()
    except APIError as err:
        show_api_error(err, store, router)
        return

    if not projects:
        st.info(empty_dashboard_message(session.is_admin))
        return

    columns = st.columns(3)
    for index, project in enumerate(projects):
        with columns[index % 3].container(border=True):
            st.subheader(project["name"])
            if project.get("description"):
                st.write(project["description"])
            st.caption(f"Created: {format_date(project.get('createdAt'))}")
            if st.button("View", key=f"view_{project['id']}"):
                router.go(PROJECT_DETAIL, project_id=project["id"])
            if session.is_admin:
                if st.button("Edit", key=f"edit_{project['id']}"):
                    router.go(PROJECT_EDIT, project_id=project["id"])
                _delete_controls(client, store, router, project, "dashboard")


def render_project_detail(client: PortalAPIClient, session: AuthSession,
                          store: MutableMapping[str, Any], router: Router) -> None:
    if st.button("← Back to Dashboard", key="detail_back"):
        router.go(DASHBOARD)

    try:
        project = client.get_project(router.project_id)
    except APIError as err:
        if err.status_code == 404:
            st.error("Project not found")
        else:
            show_api_error(err, store, router)
        return

    st.header(project["name"])
    st.caption(f"Created: {format_date(project.get('createdAt'))}")
    if project.get("description"):
        st.write(project["description"])

    if session.is_admin:
        edit, delete = st.columns(2)
        if edit.button("Edit Project", key="detail_edit"):
            router.go(PROJECT_EDIT, project_id=project["id"])
        with delete:
            _delete_controls(client, store, router, project, "detail")

    heading, text = access_summary(session.is_admin)
    st.info(f"**{heading}**  \n{text}")


def _require_admin(session: AuthSession, store: MutableMapping[str, Any], router: Router, action: str) -> bool:
    if session.is_admin:
        return True
    flash(store, f"Only admin users can {action} projects", icon="⛔")
    router.go(DASHBOARD)
    return False


def render_project_create(client: PortalAPIClient, session: AuthSession,
                          store: MutableMapping[str, Any], router: Router) -> None:
    if not _require_admin(session, store, router, "create"):
        return
    if st.button("← Back to Dashboard", key="create_back"):
        router.go(DASHBOARD)

    st.header("Create New Project")
    with st.form("create_project_form"):
        name = st.text_input("Project Name *", key="create_name")
        description = st.text_area("Description (Optional)", key="create_description", height=120)
        submitted = st.form_submit_button("Create Project")

    if submitted:
        if not name.strip():
            st.error("Project name is required.")
            return
        try:
            client.create_project(name, description)
        except APIError as err:
            show_api_error(err, store, router)
            return
        flash(store, "Project created successfully!")
        router.go(DASHBOARD)


def render_project_edit(client: PortalAPIClient, session: AuthSession,
                        store: MutableMapping[str, Any], router: Router) -> None:
    if not _require_admin(session, store, router, "edit"):
        return
    project_id = router.project_id
    if st.button("← Back to Project", key="edit_back"):
        router.go(PROJECT_DETAIL, project_id=project_id)

    try:
        project = client.get_project(project_id)
    except APIError as err:
        if err.status_code == 404:
            st.error("Failed to load project")
        else:
            show_api_error(err, store, router)
        return

    st.header("Edit Project")
    with st.form("edit_project_form"):
        name = st.text_input("Project Name *", value=project["name"], key=f"edit_name_{project_id}")
        description = st.text_area("Description (Optional)", value=project.get("description") or "",
                                   key=f"edit_description_{project_id}", height=120)
        submit, cancel = st.columns(2)
        submitted = submit.form_submit_button("Update Project")
        cancelled = cancel.form_submit_button("Cancel")

    if cancelled:
        router.go(PROJECT_DETAIL, project_id=project_id)
    if submitted:
        if not name.strip():
            st.error("Project name is required.")
            return
        try:
            client.update_project(project_id, name, description)
        except APIError as err:
            show_api_error(err, store, router)
            return
        flash(store, "Project updated successfully!")
        router.go(PROJECT_DETAIL, project_id=project_id)
