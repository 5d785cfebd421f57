"""Streamlit widgets for the trend and comparison reports."""

from typing import Optional

import streamlit as st

from src.data.errors import ValidationError
from src.data.models import ReportData, School, result_from_row
from src.data.test_types import TEST_TYPES, TestTypeConfig
from src.reports.comparison import build_comparison, validate_school_selection
from src.reports.trend import build_trend
from src.viz.charts import create_comparison_chart, create_trend_chart


def report_data_from_rows(schools: list[dict], results_by_type: dict) -> ReportData:
    """Typed ReportData from raw store rows."""
    return ReportData(
        schools=[School.from_row(s) for s in schools],
        results={
            test_type: [result_from_row(test_type, r) for r in rows]
            for test_type, rows in results_by_type.items()
        },
    )


def _school_options(report_data: ReportData) -> dict[str, str]:
    return {s.national_id: s.display_name for s in report_data.sorted_schools()}


def select_test_type(key: str) -> TestTypeConfig:
    configs = list(TEST_TYPES.values())
    return st.selectbox("نوع الاختبار", configs, format_func=lambda c: c.name, key=f"{key}_type")


def select_dimensions(config: TestTypeConfig, key: str) -> tuple:
    """Subject, grade and semester pickers; inactive dimensions yield None."""
    cols = st.columns(3)
    with cols[0]:
        subject = st.selectbox(
            "المبحث", config.dimension_values("subject"), key=f"{key}_{config.resource}_subject"
        )
    grade = semester = None
    if config.has_grade:
        with cols[1]:
            grade = st.selectbox(
                "الصف", config.dimension_values("grade"), key=f"{key}_{config.resource}_grade"
            )
    if config.has_semester:
        with cols[2]:
            semester = st.selectbox(
                "الفصل الدراسي", config.dimension_values("semester"), key=f"{key}_{config.resource}_semester"
            )
    return subject, grade, semester


def render_trend(report_data: ReportData, key: str, config: Optional[TestTypeConfig] = None,
                 school_id: Optional[str] = None) -> None:
    """One school's score per year; ``school_id`` fixes the school."""
    if config is None:
        config = select_test_type(key)
    options = _school_options(report_data)
    if school_id is None:
        school_id = st.selectbox(
            "المدرسة",
            list(options.keys()),
            index=None,
            format_func=lambda nid: options.get(nid, nid),
            placeholder="اختر مدرسة",
            key=f"{key}_school",
        )
    subject, grade, semester = select_dimensions(config, key)
    if not school_id:
        st.info("اختر مدرسة لعرض الرسم البياني.")
        return
    trend = build_trend(report_data, school_id, config.test_type, subject, grade, semester)
    st.plotly_chart(
        create_trend_chart(trend, score_label=config.score_label), use_container_width=True
    )


def render_comparison(report_data: ReportData, key: str) -> None:
    config = select_test_type(key)
    subject, grade, semester = select_dimensions(config, key)
    options = _school_options(report_data)
    selected = st.multiselect(
        "المدارس",
        list(options.keys()),
        format_func=lambda nid: options.get(nid, nid),
        key=f"{key}_schools",
    )
    st.caption(f"المدارس ({len(selected)}/4)")

    try:
        enabled = validate_school_selection(selected)
    except ValidationError as e:
        st.error(e.message)
        enabled = False

    if st.button("إنشاء المقارنة", key=f"{key}_generate", disabled=not enabled, type="primary"):
        try:
            comparison = build_comparison(
                report_data, selected, config.test_type, subject, grade, semester
            )
        except ValidationError as e:
            st.error(e.message)
            return
        st.plotly_chart(
            create_comparison_chart(comparison, score_label=config.score_label),
            use_container_width=True,
        )
