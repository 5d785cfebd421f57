"""Cross-school comparison of one subject over the years."""

from dataclasses import dataclass, field
from typing import Optional

from config.settings import get_settings
from src.data.errors import ValidationError
from src.data.models import ReportData, TestType
from src.data.test_types import get_test_type

from .filters import select_results, selection_complete

COMPARISON_COLORS = ["#38bdf8", "#34d399", "#fbbf24", "#f87171", "#c084fc"]


@dataclass
class ComparisonSeries:
    school_id: str
    label: str
    color: str
    years: list[int] = field(default_factory=list)
    scores: list[Optional[float]] = field(default_factory=list)


@dataclass
class Comparison:
    title: str
    series: list[ComparisonSeries]
    y_axis_range: tuple = (0, 100)

    @property
    def is_empty(self) -> bool:
        return all(not s.years for s in self.series)


def validate_school_selection(school_ids: list[str]) -> bool:
    """Whether the generate action is enabled for this selection.

    No schools disables generation; too many raises ValidationError.
    """
    limit = get_settings().MAX_COMPARISON_SCHOOLS
    if len(school_ids) > limit:
        raise ValidationError("يمكنك اختيار أربعة مدارس على الأكثر للمقارنة.")
    return len(school_ids) > 0


def comparison_title(name: str, subject: str, grade: Optional[str] = None,
                     semester: Optional[str] = None) -> str:
    title = f"مقارنة نتائج {name} - {subject}"
    if grade:
        title += f" - {grade}"
    if semester:
        title += f" - {semester}"
    return title


def build_comparison(
    report_data: ReportData,
    school_ids: list[str],
    test_type: TestType,
    subject: str,
    grade: Optional[str] = None,
    semester: Optional[str] = None,
) -> Comparison:
    """One series per school in selection order."""
    config = get_test_type(test_type)
    if not config.has_grade:
        grade = None
    if not config.has_semester:
        semester = None
    if not validate_school_selection(school_ids) or not selection_complete(
        config, subject, grade, semester
    ):
        raise ValidationError("يرجى التأكد من اختيار المدارس (1-4) وجميع الحقول المطلوبة.")

    results = report_data.results_for(test_type)
    series = []
    for index, school_id in enumerate(school_ids):
        rows = select_results(results, config, school_id, subject, grade, semester)
        school = report_data.find_school(school_id)
        series.append(
            ComparisonSeries(
                school_id=str(school_id),
                label=school.school_name_ar if school else str(school_id),
                color=COMPARISON_COLORS[index % len(COMPARISON_COLORS)],
                years=[r.year for r in rows],
                scores=[r.score for r in rows],
            )
        )
    return Comparison(
        title=comparison_title(config.name, subject, grade, semester),
        series=series,
        y_axis_range=config.y_axis_range,
    )
