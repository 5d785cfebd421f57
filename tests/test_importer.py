"""Tests for spreadsheet import: header checks, row parsing and the single batch call."""

from io import BytesIO
from unittest.mock import MagicMock

import openpyxl
import pytest

from src.data.errors import SchoolDataError, ValidationError
from src.data.models import TestType
from src.data.test_types import get_test_type
from src.manager.controller import TestManager
from src.manager.importer import (
    ImportReport,
    RowFailure,
    check_headers,
    parse_row,
    read_workbook,
    run_import,
)
from src.manager.schools import SCHOOL_CONFIG

PISA = get_test_type(TestType.PISA).manager_config
ALO = get_test_type(TestType.ALO).manager_config


def _workbook(headers, rows) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _store(batch_ok=True, error=None):
    store = MagicMock()
    store.resource = "pisaResults"
    store.add_multiple_items.return_value = batch_ok
    store.error = error
    return store


PISA_HEADERS = ("schoolNationalId", "year", "subject", "score")


class TestReadWorkbook:
    def test_rows_keyed_by_header(self):
        data = _workbook(PISA_HEADERS, [(12345, 2022, "العلوم", 480)])
        headers, rows = read_workbook(data)
        assert headers == list(PISA_HEADERS)
        assert rows == [(2, {"schoolNationalId": 12345, "year": 2022, "subject": "العلوم", "score": 480})]

    def test_blank_rows_skipped_but_numbering_kept(self):
        data = _workbook(PISA_HEADERS, [
            (1, 2022, "العلوم", 480),
            (None, None, None, None),
            (2, 2022, "العلوم", 490),
        ])
        _, rows = read_workbook(data)
        assert [n for n, _ in rows] == [2, 4]

    def test_not_a_workbook(self):
        with pytest.raises(ValidationError):
            read_workbook(b"not an excel file")


class TestCheckHeaders:
    def test_missing_header_rejected(self):
        with pytest.raises(ValidationError, match="score"):
            check_headers(PISA.excel_headers, ["schoolNationalId", "year", "subject"])

    def test_headers_are_exact(self):
        with pytest.raises(ValidationError):
            check_headers(PISA.excel_headers, ["SchoolNationalId", "year", "subject", "score"])

    def test_extra_columns_ignored(self):
        check_headers(PISA.excel_headers, list(PISA_HEADERS) + ["notes"])


class TestParseRow:
    def test_numeric_id_becomes_text(self):
        payload = parse_row(PISA, {"schoolNationalId": 12345.0, "year": 2022.0, "subject": "العلوم", "score": 480})
        assert payload["schoolNationalId"] == "12345"
        assert payload["year"] == 2022

    def test_non_numeric_score(self):
        with pytest.raises(ValidationError, match="قيمة غير رقمية"):
            parse_row(PISA, {"schoolNationalId": "1", "year": 2022, "subject": "العلوم", "score": "abc"})

    def test_zero_score_accepted(self):
        assert parse_row(PISA, {"schoolNationalId": "1", "year": 2022, "subject": "العلوم", "score": 0})["score"] == 0

    def test_optional_rates_blank_are_none(self):
        raw = {"schoolNationalId": "1", "year": 2023, "subject": "الرياضيات", "grade": "الرابع", "score": 55}
        payload = parse_row(ALO, raw)
        assert payload["participationRate"] is None

    def test_school_blank_select_uses_default(self):
        raw = {"schoolNameAr": "مدرسة", "nationalId": 7, "principalName": "أحمد", "schoolGender": None}
        assert parse_row(SCHOOL_CONFIG, raw)["schoolGender"] == "مختلط"

    def test_school_bad_select_rejected(self):
        raw = {"schoolNameAr": "مدرسة", "nationalId": 7, "principalName": "أحمد", "region": "Aqaba"}
        with pytest.raises(ValidationError):
            parse_row(SCHOOL_CONFIG, raw)

    def test_school_is_camp_text(self):
        raw = {"schoolNameAr": "مدرسة", "nationalId": 7, "principalName": "أحمد", "isCamp": "TRUE"}
        assert parse_row(SCHOOL_CONFIG, raw)["isCamp"] is True


class TestRunImport:
    def test_valid_rows_sent_in_one_batch(self):
        data = _workbook(PISA_HEADERS, [
            (1, 2022, "العلوم", 480),
            (2, 2022, "العلوم", ""),
            (3, 2022, "الرياضيات", 410),
            (4, None, "العلوم", 400),
        ])
        store = _store()
        report = run_import(PISA, store, data)

        store.add_multiple_items.assert_called_once()
        sent = store.add_multiple_items.call_args[0][0]
        assert [p["schoolNationalId"] for p in sent] == ["1", "3"]
        assert report.imported == 2
        assert [f.row for f in report.failures] == [3, 5]

    def test_no_valid_rows_means_no_call(self):
        data = _workbook(PISA_HEADERS, [(1, 2022, "العلوم", "x")])
        store = _store()
        report = run_import(PISA, store, data)
        store.add_multiple_items.assert_not_called()
        assert report.imported == 0

    def test_missing_headers_rejects_whole_file(self):
        data = _workbook(("schoolNationalId", "year"), [(1, 2022)])
        store = _store()
        with pytest.raises(ValidationError):
            run_import(PISA, store, data)
        store.add_multiple_items.assert_not_called()

    def test_empty_file(self):
        with pytest.raises(ValidationError, match="فارغ"):
            run_import(PISA, _store(), _workbook(PISA_HEADERS, []))

    def test_batch_failure_raises(self):
        data = _workbook(PISA_HEADERS, [(1, 2022, "العلوم", 480)])
        with pytest.raises(SchoolDataError, match="مكرر"):
            run_import(PISA, _store(batch_ok=False, error="سجل مكرر"), data)


class TestImportReport:
    def test_summary_caps_failures(self):
        report = ImportReport(
            payloads=[{}],
            failures=[RowFailure(n, "خطأ") for n in range(2, 10)],
            imported=1,
        )
        lines = report.summary(max_shown=5).splitlines()
        assert lines[0] == "تم استيراد 1 سجل بنجاح."
        assert sum(1 for line in lines if line.startswith("الصف ")) == 5
        assert lines[-1] == "... و 3 أخطاء أخرى"

    def test_summary_without_overflow_line(self):
        report = ImportReport(failures=[RowFailure(2, "خطأ")])
        assert "أخطاء أخرى" not in report.summary(max_shown=5)


class TestControllerImport:
    def test_mixed_import_flashes_error_kind(self):
        data = _workbook(PISA_HEADERS, [(1, 2022, "العلوم", 480), (2, 2022, "العلوم", "")])
        manager = TestManager(PISA, _store())
        report = manager.import_file(data)
        assert report.imported == 1
        assert manager.message.kind == "error"
        assert "الصف 3" in manager.message.text

    def test_clean_import_flashes_success(self):
        data = _workbook(PISA_HEADERS, [(1, 2022, "العلوم", 480)])
        manager = TestManager(PISA, _store())
        manager.import_file(data)
        assert manager.message.kind == "success"

    def test_bad_file_flashes_error(self):
        manager = TestManager(PISA, _store())
        assert manager.import_file(b"garbage") is None
        assert manager.message.kind == "error"
