"""
Results Page - Test results for all eight assessment programs.
"""

import streamlit as st

from src.auth.navigation import Page, scope_results, scope_schools
from src.data.test_types import SECTIONS, get_test_type
from src.manager.controller import TestManager
from src.manager.listing import filter_rows
from src.manager.schools import SCHOOLS_RESOURCE
from src.ui.manager_view import render_manager
from src.ui.report_view import render_trend, report_data_from_rows
from src.ui.state import get_controller, get_store, require_page

st.set_page_config(
    page_title="نتائج الاختبارات",
    page_icon="📝",
    layout="wide",
)


def render_test_type(session, test_type, schools):
    config = get_test_type(test_type)
    store = get_store(config.resource)
    manager = get_controller(
        f"{config.resource}_manager",
        lambda: TestManager(config.manager_config, store),
        schools=schools,
        read_only=session.is_manager,
    )

    view = st.radio(
        "طريقة العرض",
        ["البيانات", "الرسم البياني"],
        horizontal=True,
        key=f"{config.resource}_view",
    )
    if view == "البيانات":
        render_manager(
            manager,
            config.resource,
            config.title,
            schools=schools,
            search=lambda rows, term: filter_rows(scope_results(session, rows), term, schools),
        )
        return

    report_data = report_data_from_rows(
        schools, {test_type: scope_results(session, store.rows)}
    )
    render_trend(
        report_data,
        key=f"{config.resource}_chart",
        config=config,
        school_id=session.school_id if session.is_manager else None,
    )


def main():
    session = require_page(Page.RESULTS)
    st.title("📝 نتائج الاختبارات")
    if session.is_manager:
        st.caption("عرض نتائج مدرستك فقط (للقراءة فقط).")

    schools = scope_schools(session, get_store(SCHOOLS_RESOURCE).rows)

    tabs = st.tabs([title for title, _ in SECTIONS])
    for tab, (_, test_types) in zip(tabs, SECTIONS):
        with tab:
            for test_type in test_types:
                with st.expander(get_test_type(test_type).title, expanded=len(test_types) == 1):
                    render_test_type(session, test_type, schools)


if __name__ == "__main__":
    main()
