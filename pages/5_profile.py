"""
Profile Page - Account details and password change.
"""

import logging

import streamlit as st

from src.auth.navigation import Page
from src.data.client import get_client
from src.data.errors import SchoolDataError
from src.manager.users import ROLE_LABELS, validate_password_change
from src.ui.state import require_page

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="الملف الشخصي",
    page_icon="👤",
    layout="centered",
)


def main():
    session = require_page(Page.PROFILE)
    st.title("👤 الملف الشخصي")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("الاسم", session.username)
    with col2:
        st.metric("الدور", ROLE_LABELS.get(session.role.value, session.role.value))

    st.subheader("تغيير كلمة المرور")
    with st.form("change_password", clear_on_submit=True):
        current = st.text_input("كلمة المرور الحالية", type="password")
        new = st.text_input("كلمة المرور الجديدة", type="password")
        confirm = st.text_input("تأكيد كلمة المرور الجديدة", type="password")
        submitted = st.form_submit_button("تغيير كلمة المرور", type="primary")

    if not submitted:
        return
    try:
        validate_password_change(current, new, confirm)
        message = get_client().change_password(session.id, current, new)
    except SchoolDataError as e:
        logger.warning("Password change failed for user %s: %s", session.id, e.message)
        st.error(e.message)
        return
    st.success(message or "تم تغيير كلمة المرور بنجاح!")


if __name__ == "__main__":
    main()
