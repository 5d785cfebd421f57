"""
School Assessment Results Manager

Register schools, record standardized test results for eight assessment
programs, manage user accounts and generate comparative reports.
"""

import logging

import streamlit as st

from config.settings import configure_logging
from src.auth.navigation import PAGE_TITLES, Page, default_page, visible_pages
from src.data.client import get_client
from src.data.errors import SchoolDataError
from src.ui.state import current_session, set_session

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="نظام نتائج المدارس",
    page_icon="🏫",
    layout="wide",
    initial_sidebar_state="expanded",
)

PAGE_FILES = {
    Page.SCHOOLS: ("pages/1_schools.py", "🏫"),
    Page.RESULTS: ("pages/2_results.py", "📝"),
    Page.REPORTS: ("pages/3_reports.py", "📊"),
    Page.USERS: ("pages/4_users.py", "👥"),
    Page.PROFILE: ("pages/5_profile.py", "👤"),
}


def render_login():
    st.title("🏫 نظام إدارة نتائج المدارس")
    st.markdown("يرجى تسجيل الدخول للمتابعة.")

    with st.form("login_form"):
        username = st.text_input("اسم المستخدم")
        password = st.text_input("كلمة المرور", type="password")
        submitted = st.form_submit_button("تسجيل الدخول", type="primary")

    if submitted:
        if not username or not password:
            st.error("يرجى إدخال اسم المستخدم وكلمة المرور.")
            return
        try:
            session = get_client().login(username, password)
        except SchoolDataError as e:
            logger.warning("Login failed for %s: %s", username, e.message)
            st.error(e.message)
            return
        set_session(session)
        logger.info("User %s logged in as %s", session.id, session.role.value)
        st.rerun()


def render_home(session):
    st.title(f"مرحباً، {session.username}")

    if session.is_manager and session.is_new:
        st.info(
            "بما أن هذه هي المرة الأولى التي تسجل فيها الدخول، "
            "يرجى إكمال بيانات مدرستك من صفحة إدارة المدارس."
        )

    st.markdown("### الصفحات المتاحة")
    for page in visible_pages(session):
        path, icon = PAGE_FILES[page]
        st.page_link(path, label=PAGE_TITLES[page], icon=icon)

    start = default_page(session)
    st.caption(f"الصفحة المقترحة للبدء: {PAGE_TITLES[start]}")

    with st.sidebar:
        st.markdown(f"**{session.username}**")
        if st.button("تسجيل الخروج"):
            set_session(None)
            st.rerun()


def main():
    configure_logging()
    session = current_session()
    if session is None:
        render_login()
    else:
        render_home(session)


if __name__ == "__main__":
    main()
