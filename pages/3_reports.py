"""
Reports Page - Per-school report, single-school trend and cross-school comparison.
"""

import logging
from datetime import date

import streamlit as st

from src.auth.navigation import Page
from src.data.client import get_client
from src.data.errors import SchoolDataError, ValidationError
from src.reports.school_report import build_school_report, export_filename, export_school_report
from src.ui.report_view import render_comparison, render_trend
from src.ui.state import require_page, ui_state

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="التقارير",
    page_icon="📊",
    layout="wide",
)

REPORT_DATA_KEY = "report_data"


def load_report_data(force: bool = False):
    state = ui_state()
    if force or REPORT_DATA_KEY not in state:
        try:
            state[REPORT_DATA_KEY] = get_client().get_report_data()
        except SchoolDataError as e:
            logger.error("Loading report data failed: %s", e.message)
            st.error(f"تعذر تحميل بيانات التقارير: {e.message}")
            return None
    return state[REPORT_DATA_KEY]


def render_school_report(report_data):
    options = {s.national_id: s.display_name for s in report_data.sorted_schools()}
    selected = st.multiselect(
        "اختر المدارس",
        list(options.keys()),
        format_func=lambda nid: options.get(nid, nid),
        key="school_report_schools",
    )
    if not selected:
        st.info("اختر مدرسة واحدة على الأقل لعرض التقرير.")
        return

    sections = build_school_report(report_data, selected)
    try:
        payload = export_school_report(sections)
    except ValidationError as e:
        st.warning(e.message)
        return
    st.download_button(
        "تصدير إلى Excel",
        data=payload,
        file_name=export_filename(date.today()),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    for section in sections:
        st.markdown(f"### {section.school.school_name_ar}")
        st.caption(f"الرقم الوطني: {section.school.national_id}")
        if not section.has_results:
            st.info("لا توجد أي نتائج اختبارات مسجلة لهذه المدرسة.")
            continue
        for table in section.tables:
            st.markdown(f"**{table.title}**")
            st.dataframe(table.to_frame(), use_container_width=True, hide_index=True)


def main():
    require_page(Page.REPORTS)
    st.title("📊 التقارير")

    if st.button("تحديث البيانات"):
        load_report_data(force=True)
    report_data = load_report_data()
    if report_data is None:
        return

    tab1, tab2, tab3 = st.tabs(["تقرير المدارس", "تطور نتائج مدرسة", "مقارنة المدارس"])
    with tab1:
        render_school_report(report_data)
    with tab2:
        render_trend(report_data, key="trend")
    with tab3:
        render_comparison(report_data, key="comparison")


if __name__ == "__main__":
    main()
