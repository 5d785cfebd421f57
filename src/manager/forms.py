"""Form seeding, coercion and validation driven by a ManagerConfig."""

import math
from typing import Optional

from src.data.errors import ValidationError
from src.data.models import FormField, ManagerConfig, as_bool, as_text
from src.data.test_types import SCHOOL_FIELD


def parse_number(value, integer: bool = False):
    """Parse a form/spreadsheet cell into int/float, or None.

    Blank and unparsable input yields None. Integer fields also reject
    fractional values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if integer:
        if not number.is_integer():
            return None
        return int(number)
    return number


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def initial_form(config: ManagerConfig, schools: Optional[list] = None,
                 row: Optional[dict] = None) -> dict:
    """Seed a form from defaults (create mode) or from ``row`` (edit mode)."""
    if row is not None:
        form = {}
        for f in config.form_fields:
            value = row.get(f.name)
            form[f.name] = f.default_value if value is None and f.type != "number" else value
            if form[f.name] is None:
                form[f.name] = ""
        form["id"] = row.get("id")
        return form

    form = {f.name: f.default_value for f in config.form_fields}
    if schools and len(schools) == 1 and config.field(SCHOOL_FIELD):
        form[SCHOOL_FIELD] = str(schools[0].get("nationalId", ""))
    return form


def coerce_value(f: FormField, value, required: bool = True):
    if f.type == "number":
        return parse_number(value, integer=f.integer)
    if f.type == "checkbox":
        return as_bool(value)
    text = as_text(value).strip()
    if f.type == "select" and not text and not required:
        return f.default_value
    return text


def coerce_form(config: ManagerConfig, values: dict) -> dict:
    """Apply each field's declared type; ``id`` passes through untouched."""
    payload = {}
    for f in config.form_fields:
        payload[f.name] = coerce_value(
            f, values.get(f.name), required=f.name in config.required_fields
        )
    if values.get("id") is not None:
        payload["id"] = values["id"]
    return payload


def validate_payload(config: ManagerConfig, payload: dict) -> None:
    """Raise ValidationError naming the first offending field.

    ``0`` is a valid value for a required numeric field.
    """
    for name in config.required_fields:
        if is_blank(payload.get(name)):
            raise ValidationError(f"الحقل '{config.label_for(name)}' مطلوب.")
    for f in config.form_fields:
        if f.type != "select":
            continue
        value = payload.get(f.name)
        if not is_blank(value) and value not in f.options:
            raise ValidationError(f"قيمة غير صالحة للحقل '{f.label}': {value}")
