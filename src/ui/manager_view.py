"""Generic Streamlit rendering of a TestManager: form, import and listing."""

from typing import Optional

import streamlit as st

from src.data.test_types import SCHOOL_FIELD
from src.manager.controller import TestManager
from src.manager.listing import filter_rows, to_frame


def render_message(manager: TestManager) -> None:
    message = manager.message
    if message is None:
        return
    if message.kind == "success":
        st.success(message.text)
    else:
        st.error(message.text)


def _school_label(schools_by_id: dict, national_id: str) -> str:
    school = schools_by_id.get(national_id)
    if school is None:
        return national_id
    return f"{school.get('schoolNameAr', '')} ({national_id})"


def _field_input(f, value, key: str, required: bool, schools: Optional[list],
                 locked: tuple = ()):
    label = f"{f.label}*" if required else f.label
    disabled = f.name in locked
    if f.name == SCHOOL_FIELD and schools:
        schools_by_id = {str(s.get("nationalId")): s for s in schools}
        options = list(schools_by_id.keys())
        index = options.index(str(value)) if str(value) in options else None
        return st.selectbox(
            label,
            options,
            index=index,
            format_func=lambda nid: _school_label(schools_by_id, nid),
            placeholder="اختر المدرسة",
            key=key,
            disabled=disabled,
        )
    if f.type == "select":
        options = list(f.options)
        index = options.index(value) if value in options else 0
        return st.selectbox(label, options, index=index, key=key, disabled=disabled)
    if f.type == "checkbox":
        return st.checkbox(label, value=bool(value), key=key, disabled=disabled)
    text = "" if value is None else str(value)
    return st.text_input(label, value=text, placeholder=f.placeholder, key=key, disabled=disabled)


def render_form(manager: TestManager, key: str, title: str = "",
                locked: tuple = (), submit_label: Optional[str] = None) -> None:
    """Draw the open form and submit it through the manager."""
    if not manager.is_open:
        return
    config = manager.config
    heading = "تعديل السجل" if manager.is_editing else (title or "إضافة سجل جديد")
    with st.form(f"{key}_form"):
        st.subheader(heading)
        values = {}
        for f in config.form_fields:
            values[f.name] = _field_input(
                f,
                manager.form.get(f.name),
                key=f"{key}_{f.name}_{manager.form.get('id')}",
                required=f.name in config.required_fields,
                schools=manager.schools,
                locked=locked,
            )
        for name in locked:
            values[name] = manager.form.get(name)
        label = submit_label or ("حفظ التعديلات" if manager.is_editing else "إضافة")
        submitted = st.form_submit_button(label, type="primary")
        cancelled = st.form_submit_button("إلغاء")

    if cancelled:
        manager.close()
        st.rerun()
    if submitted:
        manager.submit(values)
        st.rerun()


def render_import(manager: TestManager, key: str) -> None:
    with st.expander("استيراد من ملف Excel"):
        st.caption("الأعمدة المطلوبة: " + ", ".join(manager.config.excel_headers))
        uploaded = st.file_uploader("اختر ملف", type=["xlsx"], key=f"{key}_upload")
        if uploaded is not None and st.button("استيراد", key=f"{key}_import"):
            with st.spinner("جاري الاستيراد..."):
                manager.import_file(uploaded.getvalue())
            st.rerun()


def render_listing(manager: TestManager, key: str, schools: Optional[list] = None,
                   search=None) -> None:
    store = manager.store
    term = st.text_input("بحث", key=f"{key}_search", placeholder="ابحث باسم المدرسة أو الرقم الوطني...")
    rows = search(store.rows, term) if search else filter_rows(store.rows, term, schools)
    if store.loading:
        st.info("جارِ تحميل البيانات...")
        return
    if not rows:
        st.info("لا توجد سجلات لعرضها.")
        return

    st.dataframe(to_frame(rows, manager.config, schools), use_container_width=True)
    if manager.read_only:
        return

    by_id = {row.get("id"): row for row in rows}
    selected = st.selectbox(
        "اختر سجلاً للتعديل أو الحذف",
        list(by_id.keys()),
        index=None,
        format_func=lambda item_id: " | ".join(
            str(by_id[item_id].get(c.accessor, "")) for c in manager.config.list_columns
        ),
        key=f"{key}_selected",
    )
    if selected is None:
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("تعديل", key=f"{key}_edit"):
            manager.open_edit(by_id[selected])
            st.rerun()
    with col2:
        confirmed = st.checkbox("تأكيد الحذف", key=f"{key}_confirm_{selected}")
    with col3:
        if st.button("حذف", key=f"{key}_delete", disabled=not confirmed):
            manager.delete(selected, confirmed=confirmed)
            st.rerun()


def render_manager(manager: TestManager, key: str, title: str,
                   schools: Optional[list] = None, search=None) -> None:
    """Full create/import/list section for one resource."""
    st.markdown(f"### {title}")
    render_message(manager)
    if manager.store.error and (manager.message is None or manager.message.kind != "error"):
        st.error(manager.store.error)

    if not manager.read_only:
        if manager.is_open:
            render_form(manager, key)
        elif st.button("إضافة سجل جديد", key=f"{key}_new"):
            manager.open_create()
            st.rerun()
        render_import(manager, key)

    render_listing(manager, key, schools, search=search)
