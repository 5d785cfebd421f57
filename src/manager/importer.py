"""Spreadsheet bulk import: read, check headers, parse rows, submit one batch."""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from zipfile import BadZipFile
from typing import Optional

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from config.settings import get_settings
from src.data.errors import SchoolDataError, ValidationError
from src.data.models import ManagerConfig

from .forms import coerce_value, is_blank, validate_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowFailure:
    row: int  # sheet row number; the header is row 1
    reason: str


@dataclass
class ImportReport:
    payloads: list[dict] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)
    imported: int = 0

    @property
    def total(self) -> int:
        return len(self.payloads) + len(self.failures)

    def summary(self, max_shown: Optional[int] = None) -> str:
        """User-facing result with at most ``max_shown`` detailed failures."""
        if max_shown is None:
            max_shown = get_settings().MAX_IMPORT_ERRORS_SHOWN
        lines = []
        if self.imported:
            lines.append(f"تم استيراد {self.imported} سجل بنجاح.")
        elif not self.payloads:
            lines.append("لم يتم العثور على بيانات صالحة للاستيراد في الملف.")
        if self.failures:
            lines.append(f"تم تجاهل {len(self.failures)} صفوف بسبب الأخطاء التالية:")
            for failure in self.failures[:max_shown]:
                lines.append(f"الصف {failure.row}: {failure.reason}")
            remaining = len(self.failures) - max_shown
            if remaining > 0:
                lines.append(f"... و {remaining} أخطاء أخرى")
        return "\n".join(lines)


def _cell_key(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def read_workbook(source) -> tuple[list[str], list[tuple[int, dict]]]:
    """Read the first sheet into header-keyed rows.

    ``source`` may be a path, a binary file object or raw bytes. Returns the
    header list and ``(sheet_row_number, row)`` pairs with blank rows
    dropped.
    """
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    try:
        workbook = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        logger.error("Could not open workbook: %s", e)
        raise ValidationError("تعذر قراءة الملف. تأكد من أنه ملف Excel صالح.") from e

    try:
        sheet = workbook.worksheets[0]
        header_row = next(sheet.iter_rows(min_row=1, max_row=1, values_only=True), None) or ()
        headers = [_cell_key(h) for h in header_row]

        rows = []
        for row_number, values in enumerate(sheet.iter_rows(min_row=2, values_only=True), start=2):
            if all(is_blank(v) for v in values):
                continue
            row = {}
            for header, value in zip(headers, values):
                if header is not None:
                    row[header] = value
            rows.append((row_number, row))
    finally:
        workbook.close()

    return [h for h in headers if h is not None], rows


def check_headers(expected, headers) -> None:
    """Every expected header must be present, compared exactly."""
    missing = [h for h in expected if h not in headers]
    if missing:
        logger.warning("Import rejected, missing headers: %s", missing)
        raise ValidationError(
            f"الملف يجب أن يحتوي على الأعمدة التالية: {', '.join(expected)}."
        )


def parse_row(config: ManagerConfig, raw: dict) -> dict:
    """Coerce one sheet row like the manual form; raises ValidationError."""
    payload = {}
    for f in config.form_fields:
        value = raw.get(f.name)
        required = f.name in config.required_fields
        coerced = coerce_value(f, value, required=required)
        if f.type == "number" and coerced is None and not is_blank(value):
            raise ValidationError(f"قيمة غير رقمية في الحقل '{f.label}': {value}")
        payload[f.name] = coerced
    validate_payload(config, payload)
    return payload


def parse_rows(config: ManagerConfig, rows: list[tuple[int, dict]]) -> ImportReport:
    report = ImportReport()
    for row_number, raw in rows:
        try:
            report.payloads.append(parse_row(config, raw))
        except ValidationError as e:
            report.failures.append(RowFailure(row_number, e.message))
    if report.failures:
        logger.warning("Skipped %s of %s rows", len(report.failures), report.total)
    return report


def run_import(config: ManagerConfig, store, source) -> ImportReport:
    """Import a workbook into ``store``; valid rows go in one batch call."""
    headers, rows = read_workbook(source)
    if not rows:
        raise ValidationError("الملف فارغ أو لا يحتوي على بيانات.")
    check_headers(config.excel_headers, headers)

    report = parse_rows(config, rows)
    if not report.payloads:
        return report

    if not store.add_multiple_items(report.payloads):
        raise SchoolDataError(
            f"فشل الاستيراد، لم يتم حفظ أي سجل: {store.error or 'خطأ غير معروف'}"
        )
    report.imported = len(report.payloads)
    logger.info("Imported %s rows into %s", report.imported, store.resource)
    return report
