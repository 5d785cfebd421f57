"""Streamlit session-state plumbing: login session, page gating, stores."""

import logging
from typing import Optional

import streamlit as st

from src.auth.navigation import PAGE_TITLES, Page, can_access
from src.auth.session import Session
from src.data.client import get_client
from src.data.store import ResourceStore

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
# Everything cached for the current login: stores, controllers, page state
UI_STATE_KEY = "ui_state"


def current_session() -> Optional[Session]:
    row = st.session_state.get(SESSION_KEY)
    return Session.from_row(row) if row else None


def set_session(session: Optional[Session]) -> None:
    """Replace the logged-in session and drop everything cached for the old one."""
    st.session_state.pop(UI_STATE_KEY, None)
    if session is None:
        st.session_state.pop(SESSION_KEY, None)
    else:
        st.session_state[SESSION_KEY] = session.to_row()


def ui_state() -> dict:
    """Page state scoped to the current login."""
    return st.session_state.setdefault(UI_STATE_KEY, {})


def require_page(page: Page) -> Session:
    """Stop rendering unless someone with access to ``page`` is logged in."""
    session = current_session()
    if session is None:
        st.warning("يرجى تسجيل الدخول أولاً من الصفحة الرئيسية.")
        st.page_link("app.py", label="تسجيل الدخول", icon="🔐")
        st.stop()
    if not can_access(session, page):
        logger.warning("User %s (%s) denied %s", session.id, session.role.value, page.value)
        st.error(f"لا تملك صلاحية الوصول إلى صفحة {PAGE_TITLES[page]}.")
        st.stop()
    return session


def get_store(resource: str) -> ResourceStore:
    """One store per resource for the current login, loaded on first use."""
    stores = ui_state().setdefault("stores", {})
    store = stores.get(resource)
    if store is None:
        store = ResourceStore(resource, get_client())
        store.refresh()
        stores[resource] = store
    return store


def get_controller(key: str, factory, **context):
    """Keep a controller alive across reruns.

    ``context`` attributes (current school list, read-only flag) are applied
    on every call so they always reflect this render.
    """
    controllers = ui_state().setdefault("controllers", {})
    if key not in controllers:
        controllers[key] = factory()
    controller = controllers[key]
    for name, value in context.items():
        setattr(controller, name, value)
    return controller


def show_store_error(store: ResourceStore) -> None:
    if store.error:
        st.error(store.error)
