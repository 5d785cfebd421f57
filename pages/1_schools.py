"""
Schools Page - School registry, and first-login setup for new managers.
"""

import streamlit as st

from src.auth.navigation import Page, scope_schools
from src.data.errors import ValidationError
from src.manager.controller import TestManager
from src.manager.schools import (
    SCHOOL_CONFIG,
    SCHOOLS_RESOURCE,
    complete_manager_setup,
    own_school,
    search_schools,
    setup_form,
)
from src.ui.manager_view import render_form, render_manager, render_message
from src.ui.state import get_controller, get_store, require_page, set_session

st.set_page_config(
    page_title="إدارة المدارس",
    page_icon="🏫",
    layout="wide",
)


def render_new_manager_setup(session, store):
    st.info(
        "**مرحباً بك في نظام إدارة المدارس!** بما أن هذه هي المرة الأولى التي تسجل فيها "
        "الدخول، يرجى إكمال بيانات مدرستك للمتابعة."
    )
    form = setup_form(session)
    with st.form("manager_setup"):
        values = {}
        for f in SCHOOL_CONFIG.form_fields:
            label = f"{f.label}*" if f.name in SCHOOL_CONFIG.required_fields else f.label
            if f.type == "select":
                values[f.name] = st.selectbox(label, f.options, index=f.options.index(form[f.name]))
            elif f.type == "checkbox":
                values[f.name] = st.checkbox(label)
            else:
                values[f.name] = st.text_input(
                    label,
                    value=form[f.name],
                    placeholder=f.placeholder,
                    disabled=f.name == "nationalId",
                )
        submitted = st.form_submit_button("حفظ بيانات المدرسة", type="primary")

    if submitted:
        try:
            new_session = complete_manager_setup(session, store, values)
        except ValidationError as e:
            st.error(e.message)
            return
        set_session(new_session)
        st.success("تم حفظ بيانات المدرسة بنجاح.")
        st.rerun()


def render_manager_school(session, store):
    school = own_school(session, store.rows)
    if school is None:
        st.info("جارِ تحميل بيانات المدرسة...")
        return
    manager = get_controller(
        "own_school_manager", lambda: TestManager(SCHOOL_CONFIG, store)
    )
    render_message(manager)
    if not manager.is_open:
        manager.open_edit(school, keep_message=True)
    render_form(manager, "own_school", locked=("nationalId",))


def main():
    session = require_page(Page.SCHOOLS)
    st.title("🏫 إدارة المدارس")

    store = get_store(SCHOOLS_RESOURCE)

    if session.is_manager:
        if session.is_new:
            render_new_manager_setup(session, store)
        else:
            render_manager_school(session, store)
        return

    manager = get_controller(
        "schools_manager", lambda: TestManager(SCHOOL_CONFIG, store)
    )
    render_manager(
        manager,
        "schools",
        "المدارس المسجلة",
        search=search_schools,
    )
    st.caption(f"عدد المدارس: {len(scope_schools(session, store.rows))}")


if __name__ == "__main__":
    main()
