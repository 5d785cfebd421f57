"""Per-school results report and its spreadsheet export."""

import logging
from dataclasses import dataclass, field
from io import BytesIO

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from config.settings import get_settings
from src.data.errors import ValidationError
from src.data.models import INTERNAL_FIELDS, ReportData, School, TestResult, TestType
from src.data.test_types import get_test_type

logger = logging.getLogger(__name__)

_ROUNDED_KEYWORDS = ("score", "rate")


@dataclass
class ResultTable:
    test_type: TestType
    title: str
    keys: list[str]
    headers: list[str]
    rows: list[list]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.headers)


@dataclass
class SchoolSection:
    school: School
    tables: list[ResultTable] = field(default_factory=list)

    @property
    def has_results(self) -> bool:
        return bool(self.tables)


def _display_value(key: str, value):
    if isinstance(value, float) and any(k in key.lower() for k in _ROUNDED_KEYWORDS):
        return round(value, 1)
    return value


def _result_table(test_type: TestType, results: list[TestResult]) -> ResultTable:
    config = get_test_type(test_type)
    labels = config.manager_config
    keys = [k for k in results[0].to_payload().keys() if k not in INTERNAL_FIELDS]
    rows = []
    for result in sorted(results, key=lambda r: (r.year or 0, r.subject)):
        payload = result.to_payload()
        rows.append([_display_value(k, payload.get(k)) for k in keys])
    return ResultTable(
        test_type=test_type,
        title=config.name,
        keys=keys,
        headers=[labels.label_for(k) for k in keys],
        rows=rows,
    )


def build_school_report(report_data: ReportData, school_ids: list[str]) -> list[SchoolSection]:
    """One section per known school, with a table per test type that has rows."""
    sections = []
    for school_id in school_ids:
        school = report_data.find_school(school_id)
        if school is None:
            logger.warning("Skipping unknown school %s in report", school_id)
            continue
        section = SchoolSection(school=school)
        for test_type in TestType:
            results = [
                r for r in report_data.results_for(test_type)
                if str(r.school_national_id) == school.national_id
            ]
            if results:
                section.tables.append(_result_table(test_type, results))
        sections.append(section)
    return sections


def export_school_report(sections: list[SchoolSection]) -> bytes:
    """Right-to-left workbook: banner, then per school and test type a table."""
    if not sections:
        raise ValidationError("لا توجد بيانات لتصديرها.")

    settings = get_settings()
    wb = Workbook()
    ws = wb.active
    ws.title = settings.REPORT_SHEET_TITLE
    ws.sheet_view.rightToLeft = True

    banner_font = Font(bold=True, size=14)
    heading_font = Font(bold=True, size=12, color="0369A1")
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")

    for line in settings.REPORT_BANNER_LINES:
        ws.append([line])
        ws.cell(row=ws.max_row, column=1).font = banner_font
    ws.append([])

    max_cols = 0
    for section in sections:
        school = section.school
        ws.append([f"المدرسة: {school.school_name_ar}", f"الرقم الوطني: {school.national_id}"])
        for cell in ws[ws.max_row]:
            cell.font = heading_font
        ws.append([])

        for table in section.tables:
            ws.append([table.title])
            ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
            ws.append(table.headers)
            for cell in ws[ws.max_row]:
                cell.font = header_font
                cell.fill = header_fill
            for row in table.rows:
                ws.append(row)
            ws.append([])
            max_cols = max(max_cols, len(table.headers))
        ws.append([])

    max_cols = max(max_cols, 2)
    for row in (1, 2):
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=max_cols)
        ws.cell(row=row, column=1).alignment = Alignment(horizontal="center")

    for col in range(1, max_cols + 1):
        ws.column_dimensions[get_column_letter(col)].width = 20

    buffer = BytesIO()
    wb.save(buffer)
    logger.info("Exported report for %s schools", len(sections))
    return buffer.getvalue()


def export_filename(today) -> str:
    return f"School_Report_{today.isoformat()}.xlsx"
