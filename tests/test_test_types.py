"""Tests for the per-test-type configuration table."""

import pytest

from src.data.errors import ValidationError
from src.data.models import TestType
from src.data.test_types import SCHOOL_FIELD, TEST_TYPES, find_test_type, get_test_type
from src.manager.forms import coerce_form, initial_form, validate_payload


ALL_CONFIGS = list(TEST_TYPES.values())


def _filled_required(config):
    """Form values with every required field populated and optional ones blank."""
    manager = config.manager_config
    values = initial_form(manager)
    values[SCHOOL_FIELD] = "12345"
    values["year"] = "2023"
    values["score"] = "75.5"
    for f in manager.form_fields:
        if f.name not in manager.required_fields:
            values[f.name] = ""
    return values


class TestConfigTable:
    def test_all_eight_types_configured(self):
        assert set(TEST_TYPES) == set(TestType)

    def test_international_range(self):
        for t in (TestType.TIMSS, TestType.PISA, TestType.PIRLS):
            assert TEST_TYPES[t].y_axis_range == (200, 700)

    def test_percent_range(self):
        for t in (TestType.NATIONAL, TestType.UNIFIED, TestType.ALO):
            assert TEST_TYPES[t].y_axis_range == (0, 100)

    def test_unified_dimensions(self):
        cfg = get_test_type(TestType.UNIFIED)
        assert cfg.has_grade and cfg.has_semester
        assert len(cfg.grades) == 10
        assert cfg.semesters == ("الأول", "الثاني")

    def test_pisa_has_no_grade(self):
        assert not get_test_type("pisaResults").has_grade

    def test_excel_headers_are_field_names(self):
        for cfg in ALL_CONFIGS:
            manager = cfg.manager_config
            assert manager.excel_headers == tuple(f.name for f in manager.form_fields)

    def test_alo_rates_optional(self):
        manager = get_test_type(TestType.ALO).manager_config
        assert "participationRate" in manager.excel_headers
        assert "participationRate" not in manager.required_fields
        assert "score" in manager.required_fields

    def test_find_by_display_name(self):
        assert find_test_type("الاختبار الوطني").test_type is TestType.NATIONAL
        assert find_test_type("unknown") is None


class TestEveryConfigSubmits:
    @pytest.mark.parametrize("config", ALL_CONFIGS, ids=lambda c: c.resource)
    def test_required_only_form_is_valid(self, config):
        manager = config.manager_config
        payload = coerce_form(manager, _filled_required(config))
        validate_payload(manager, payload)
        for f in manager.form_fields:
            if f.type == "number" and f.name not in manager.required_fields:
                assert payload[f.name] is None

    @pytest.mark.parametrize("config", ALL_CONFIGS, ids=lambda c: c.resource)
    def test_zero_passes_required_numeric(self, config):
        manager = config.manager_config
        values = _filled_required(config)
        values["score"] = "0"
        payload = coerce_form(manager, values)
        validate_payload(manager, payload)
        assert payload["score"] == 0

    @pytest.mark.parametrize("config", ALL_CONFIGS, ids=lambda c: c.resource)
    def test_empty_required_fails(self, config):
        manager = config.manager_config
        for name in manager.required_fields:
            values = _filled_required(config)
            values[name] = ""
            with pytest.raises(ValidationError):
                validate_payload(manager, coerce_form(manager, values))
