"""School registry: form config, search, manager scoping and first-login setup."""

import logging
from typing import Optional

from src.auth.session import Session
from src.data.errors import ValidationError
from src.data.models import BUILDING_TYPES, GENDERS, REGIONS, FormField, ListColumn, ManagerConfig

from .forms import coerce_form, initial_form, validate_payload

logger = logging.getLogger(__name__)

SCHOOLS_RESOURCE = "schools"

SCHOOL_CONFIG = ManagerConfig(
    form_fields=(
        FormField("schoolNameAr", "اسم المدرسة (العربية)", placeholder="مثال: مدرسة النهضة الثانوية"),
        FormField("schoolNameEn", "اسم المدرسة (الإنجليزية)", placeholder="e.g., Al-Nahda High School"),
        FormField("schoolId", "الرقم الخاص للمدرسة", placeholder="12345"),
        FormField("nationalId", "الرقم الوطني", placeholder="200100..."),
        FormField("region", "المنطقة", type="select", options=REGIONS),
        FormField("principalName", "اسم المدير", placeholder="مثال: عبدالله سالم"),
        FormField("principalEmail", "ايميل المدير", placeholder="manager@example.com"),
        FormField("principalPhone", "هاتف المدير", placeholder="05xxxxxxxx"),
        FormField("lowestGrade", "أدنى صف", placeholder="الأول"),
        FormField("highestGrade", "أعلى صف", placeholder="الثاني عشر"),
        FormField("schoolGender", "جنس المدرسة", type="select", options=GENDERS, default=GENDERS[2]),
        FormField("buildingType", "نوع المبنى", type="select", options=BUILDING_TYPES),
        FormField("isCamp", "مدرسة مخيم؟", type="checkbox"),
    ),
    list_columns=(
        ListColumn("اسم المدرسة", "schoolNameAr"),
        ListColumn("الرقم الوطني", "nationalId"),
        ListColumn("المنطقة", "region"),
        ListColumn("اسم المدير", "principalName"),
        ListColumn("جنس المدرسة", "schoolGender"),
        ListColumn("مدرسة مخيم؟", "isCamp"),
    ),
    required_fields=("schoolNameAr", "nationalId", "principalName"),
    excel_headers=("schoolNameAr", "nationalId", "principalName"),
)

_SEARCH_FIELDS = ("schoolNameAr", "schoolNameEn", "nationalId", "principalName")


def search_schools(schools: list[dict], term: str) -> list[dict]:
    """Match Arabic/English name, national ID or principal name."""
    term = (term or "").strip().lower()
    if not term:
        return list(schools)
    return [
        s for s in schools
        if any(term in str(s.get(name) or "").lower() for name in _SEARCH_FIELDS)
    ]


def can_edit_school(session: Session, school: dict) -> bool:
    """Managers may only edit their own school."""
    if session.is_manager:
        return str(school.get("nationalId")) == str(session.school_id)
    return session.is_admin


def can_create_school(session: Session) -> bool:
    return session.is_admin or (session.is_manager and session.is_new)


def setup_form(session: Session) -> dict:
    """Blank school form for a manager's first login, national ID fixed."""
    form = initial_form(SCHOOL_CONFIG)
    form["nationalId"] = session.school_id or ""
    return form


def complete_manager_setup(session: Session, store, values: dict) -> Session:
    """Create the manager's school and return the refreshed session.

    The national ID always comes from the session, whatever the form says.
    """
    if not (session.is_manager and session.is_new):
        raise ValidationError("إعداد المدرسة متاح فقط للمدير الجديد.")

    payload = coerce_form(SCHOOL_CONFIG, {**values, "nationalId": session.school_id})
    validate_payload(SCHOOL_CONFIG, payload)
    if not store.add_item(payload):
        raise ValidationError(store.error or "حدث خطأ غير متوقع عند إضافة المدرسة.")

    created = store.rows[0]
    logger.info("Manager %s registered school %s", session.school_id, created.get("nationalId"))
    return session.with_school(created.get("schoolNameAr", payload["schoolNameAr"]))


def own_school(session: Session, schools: list[dict]) -> Optional[dict]:
    for school in schools:
        if str(school.get("nationalId")) == str(session.school_id):
            return school
    return None
