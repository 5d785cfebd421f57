"""Row selection shared by the three report generators."""

from typing import Optional

from src.data.models import TestResult
from src.data.test_types import TestTypeConfig


def matches_selection(
    result: TestResult,
    config: TestTypeConfig,
    school_id: str,
    subject: str,
    grade: Optional[str] = None,
    semester: Optional[str] = None,
) -> bool:
    """True when ``result`` belongs to the selected school/subject/grade/semester.

    Grade and semester only count for test types that have them; a row
    without the field never matches while that dimension is active.
    """
    if str(result.school_national_id) != str(school_id):
        return False
    if result.subject != subject:
        return False
    if config.has_grade:
        row_grade = getattr(result, "grade", None)
        if not row_grade or row_grade != grade:
            return False
    if config.has_semester:
        row_semester = getattr(result, "semester", None)
        if not row_semester or row_semester != semester:
            return False
    return True


def select_results(results, config, school_id, subject, grade=None, semester=None) -> list[TestResult]:
    """Matching results sorted by year ascending."""
    matched = [
        r for r in results
        if matches_selection(r, config, school_id, subject, grade, semester)
    ]
    return sorted(matched, key=lambda r: r.year or 0)


def selection_complete(config: TestTypeConfig, subject, grade=None, semester=None) -> bool:
    if not subject:
        return False
    if config.has_grade and not grade:
        return False
    if config.has_semester and not semester:
        return False
    return True
