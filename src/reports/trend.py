"""Single-school score trend over the years."""

from dataclasses import dataclass, field
from typing import Optional

from src.data.models import ReportData, TestType
from src.data.test_types import get_test_type

from .filters import select_results


@dataclass
class TrendSeries:
    title: str
    years: list[int] = field(default_factory=list)
    scores: list[Optional[float]] = field(default_factory=list)
    y_axis_range: tuple = (0, 100)

    @property
    def is_empty(self) -> bool:
        return not self.years


def trend_title(subject: str, school_name: str, grade: Optional[str] = None,
                semester: Optional[str] = None) -> str:
    grade_text = f" للصف {grade}" if grade else ""
    semester_text = f" للفصل {semester}" if semester else ""
    return f"نتائج {subject}{grade_text}{semester_text} لمدرسة: {school_name}"


def build_trend(
    report_data: ReportData,
    school_id: str,
    test_type: TestType,
    subject: str,
    grade: Optional[str] = None,
    semester: Optional[str] = None,
) -> TrendSeries:
    config = get_test_type(test_type)
    if not config.has_grade:
        grade = None
    if not config.has_semester:
        semester = None

    rows = select_results(
        report_data.results_for(test_type), config, school_id, subject, grade, semester
    )
    school = report_data.find_school(school_id)
    school_name = school.school_name_ar if school else str(school_id)
    return TrendSeries(
        title=trend_title(subject, school_name, grade, semester),
        years=[r.year for r in rows],
        scores=[r.score for r in rows],
        y_axis_range=config.y_axis_range,
    )
