"""
Users Page - Create, edit and delete user accounts.
"""

import logging

import pandas as pd
import streamlit as st

from src.auth.navigation import Page
from src.data.errors import ValidationError
from src.manager.users import (
    ROLE_LABELS,
    USERS_RESOURCE,
    build_user_payload,
    can_delete,
    can_edit,
    search_users,
)
from src.ui.state import get_store, require_page, show_store_error, ui_state

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="إدارة المستخدمين",
    page_icon="👥",
    layout="wide",
)

EDITING_KEY = "editing_user"
CONFIRM_DELETE_KEY = "confirm_delete_user"


def render_user_form(store):
    editing = ui_state().get(EDITING_KEY)
    st.subheader("تعديل مستخدم" if editing else "إضافة مستخدم جديد")
    roles = list(ROLE_LABELS.keys())
    with st.form("user_form", clear_on_submit=editing is None):
        username = st.text_input(
            "اسم المستخدم*",
            value=editing.get("username", "") if editing else "",
            disabled=editing is not None,
            help="لمدير المدرسة: الرقم الوطني للمدرسة",
        )
        role = st.selectbox(
            "الدور",
            roles,
            index=roles.index(editing["role"]) if editing else roles.index("supervisor"),
            format_func=lambda r: ROLE_LABELS[r],
        )
        password = st.text_input(
            "كلمة المرور الجديدة" if editing else "كلمة المرور*",
            type="password",
            placeholder="اتركه فارغاً لعدم التغيير" if editing else "",
        )
        submitted = st.form_submit_button("حفظ التعديلات" if editing else "إضافة المستخدم", type="primary")
        cancelled = editing is not None and st.form_submit_button("إلغاء")

    if cancelled:
        ui_state().pop(EDITING_KEY, None)
        st.rerun()
    if not submitted:
        return

    try:
        payload = build_user_payload(
            {"username": username, "role": role, "password": password}, editing=editing
        )
    except ValidationError as e:
        st.error(e.message)
        return

    ok = store.update_item(payload) if editing else store.add_item(payload)
    if ok:
        ui_state().pop(EDITING_KEY, None)
        st.success("تم تحديث المستخدم بنجاح!" if editing else "تمت إضافة المستخدم بنجاح!")
    else:
        show_store_error(store)


def render_user_list(session, store):
    term = st.text_input("بحث", placeholder="ابحث باسم المستخدم أو الدور...")
    users = search_users(store.rows, term)
    if not users:
        st.info("لا يوجد مستخدمون.")
        return

    df = pd.DataFrame(
        [
            {
                "اسم المستخدم": u.get("username"),
                "الدور": ROLE_LABELS.get(u.get("role"), u.get("role")),
                "تاريخ الإضافة": u.get("dateAdded"),
            }
            for u in users
        ]
    )
    st.dataframe(df, use_container_width=True, hide_index=True)

    for user in users:
        col1, col2, col3 = st.columns([3, 1, 1])
        with col1:
            st.write(f"{user.get('username')} ({ROLE_LABELS.get(user.get('role'), '')})")
        with col2:
            if st.button("تعديل", key=f"edit_user_{user['id']}", disabled=not can_edit(user, session)):
                ui_state()[EDITING_KEY] = user
                st.rerun()
        with col3:
            deletable = can_delete(user, session, store.rows)
            if st.button("حذف", key=f"delete_user_{user['id']}", disabled=not deletable):
                ui_state()[CONFIRM_DELETE_KEY] = user["id"]

        if ui_state().get(CONFIRM_DELETE_KEY) == user["id"]:
            st.warning(f"هل أنت متأكد من حذف المستخدم {user.get('username')}؟")
            if st.button("تأكيد الحذف", key=f"confirm_user_{user['id']}"):
                ui_state().pop(CONFIRM_DELETE_KEY, None)
                if not store.remove_item(user["id"]):
                    logger.error("Deleting user %s failed", user["id"])
                st.rerun()


def main():
    session = require_page(Page.USERS)
    st.title("👥 إدارة المستخدمين")

    store = get_store(USERS_RESOURCE)
    show_store_error(store)

    col1, col2 = st.columns([1, 2])
    with col1:
        render_user_form(store)
    with col2:
        render_user_list(session, store)


if __name__ == "__main__":
    main()
