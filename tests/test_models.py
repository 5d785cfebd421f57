"""Tests for data models: wire mapping, coercion helpers and the result union."""

import pytest

from src.data.models import (
    AloResult,
    ManagedUser,
    PisaResult,
    RESULT_CLASSES,
    ReportData,
    School,
    TestType,
    TimssResult,
    UnifiedTestResult,
    _safe_float,
    _safe_int,
    as_bool,
    as_text,
    result_from_row,
    to_camel,
)


class TestSafeFloat:
    def test_valid_string(self):
        assert _safe_float("3.14") == 3.14

    def test_integer(self):
        assert _safe_float(42) == 42.0

    def test_none(self):
        assert _safe_float(None) is None

    def test_empty_string(self):
        assert _safe_float("") is None

    def test_invalid_string(self):
        assert _safe_float("N/A") is None

    def test_zero(self):
        assert _safe_float(0) == 0.0


class TestSafeInt:
    def test_float_string(self):
        assert _safe_int("2023.0") == 2023

    def test_none(self):
        assert _safe_int(None) is None

    def test_invalid(self):
        assert _safe_int("abc") is None


class TestAsBool:
    @pytest.mark.parametrize("value", [True, 1, "1", "TRUE", "true", " True "])
    def test_truthy(self, value):
        assert as_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "0", "FALSE", "", None, "no"])
    def test_falsy(self, value):
        assert as_bool(value) is False


class TestAsText:
    def test_integral_float_drops_decimal(self):
        """Spreadsheet cells come back as floats for numeric IDs."""
        assert as_text(12345.0) == "12345"

    def test_none_is_empty(self):
        assert as_text(None) == ""

    def test_fractional_float_kept(self):
        assert as_text(1.5) == "1.5"


class TestToCamel:
    def test_multi_word(self):
        assert to_camel("school_national_id") == "schoolNationalId"

    def test_single_word(self):
        assert to_camel("year") == "year"


class TestSchool:
    def _row(self, **overrides):
        row = {
            "id": 3,
            "schoolNameAr": "مدرسة النهضة",
            "schoolNameEn": "Al-Nahda",
            "nationalId": "12345",
            "principalName": "عبدالله",
            "region": "Zarqa",
            "isCamp": 1,
            "dateAdded": "2024-01-01T00:00:00",
        }
        row.update(overrides)
        return row

    def test_from_row_maps_camel_case(self):
        school = School.from_row(self._row())
        assert school.school_name_ar == "مدرسة النهضة"
        assert school.national_id == "12345"
        assert school.region == "Zarqa"
        assert school.id == 3

    @pytest.mark.parametrize("wire", [1, "TRUE", True, "1"])
    def test_is_camp_truthy_wire_forms(self, wire):
        assert School.from_row(self._row(isCamp=wire)).is_camp is True

    @pytest.mark.parametrize("wire", [0, "FALSE", False, None])
    def test_is_camp_falsy_wire_forms(self, wire):
        assert School.from_row(self._row(isCamp=wire)).is_camp is False

    def test_numeric_national_id_becomes_text(self):
        assert School.from_row(self._row(nationalId=12345)).national_id == "12345"

    def test_defaults_for_missing_fields(self):
        school = School.from_row({"nationalId": "1"})
        assert school.school_gender == "مختلط"
        assert school.building_type == "ملك"
        assert school.is_camp is False

    def test_to_payload_excludes_meta(self):
        payload = School.from_row(self._row()).to_payload()
        assert "id" not in payload
        assert "dateAdded" not in payload
        assert payload["isCamp"] is True

    def test_display_name(self):
        assert School.from_row(self._row()).display_name == "مدرسة النهضة (12345)"


class TestTestResults:
    def test_each_class_carries_its_tag(self):
        assert len(RESULT_CLASSES) == 8
        for test_type, cls in RESULT_CLASSES.items():
            assert cls.test_type is test_type

    def test_result_from_row_dispatches_on_tag(self):
        row = {"schoolNationalId": "1", "year": "2022", "subject": "العلوم", "score": "480.5", "grade": "الرابع"}
        result = result_from_row(TestType.TIMSS, row)
        assert isinstance(result, TimssResult)
        assert result.year == 2022
        assert result.score == 480.5
        assert result.grade == "الرابع"

    def test_result_from_row_accepts_resource_name(self):
        result = result_from_row("pisaResults", {"schoolNationalId": "1", "year": 2022, "subject": "القرائية", "score": 400})
        assert isinstance(result, PisaResult)

    def test_unified_has_semester(self):
        result = result_from_row(TestType.UNIFIED, {"semester": "الأول", "grade": "العاشر"})
        assert isinstance(result, UnifiedTestResult)
        assert result.semester == "الأول"

    def test_alo_rates_none_when_missing(self):
        result = AloResult.from_row({"schoolNationalId": "1", "year": 2023, "subject": "الرياضيات", "score": 61})
        assert result.participation_rate is None
        assert result.not_achieved_rate is None

    def test_alo_payload_uses_camel_rates(self):
        payload = AloResult(school_national_id="1", achieved_rate=40.0).to_payload()
        assert payload["achievedRate"] == 40.0
        assert "participationRate" in payload


class TestManagedUser:
    def test_password_never_mapped(self):
        user = ManagedUser.from_row({"id": 1, "username": "admin", "role": "admin", "password": "x"})
        assert not hasattr(user, "password")
        assert user.is_admin


class TestReportData:
    def test_find_school_string_compares(self):
        data = ReportData(schools=[School(national_id="42", school_name_ar="أ")])
        assert data.find_school(42).school_name_ar == "أ"
        assert data.find_school("7") is None

    def test_results_for_missing_type_is_empty(self):
        assert ReportData().results_for(TestType.ALO) == []

    def test_sorted_schools(self):
        data = ReportData(schools=[School(school_name_ar="ب"), School(school_name_ar="أ")])
        assert [s.school_name_ar for s in data.sorted_schools()] == ["أ", "ب"]
