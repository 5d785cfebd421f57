"""Data models for schools, users and standardized test results."""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import ClassVar, Optional


REGIONS = ("North Amman", "South Amman", "Zarqa", "Irbid")
GENDERS = ("بنين", "بنات", "مختلط")
BUILDING_TYPES = ("ملك", "مستأجرة")

# Columns never shown in report tables
INTERNAL_FIELDS = ("id", "dateAdded", "schoolNationalId")


class TestType(str, Enum):
    """The eight assessment programs; values double as REST resource names."""

    __test__ = False

    TIMSS = "timssResults"
    PISA = "pisaResults"
    PIRLS = "pirlsResults"
    NATIONAL = "nationalTestResults"
    ASSESSMENT = "assessmentTestResults"
    UNIFIED = "unifiedTestResults"
    LITERACY_NUMERACY = "literacyNumeracyResults"
    ALO = "aloResults"

    @property
    def resource(self) -> str:
        return self.value


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"


# -------------------------------------------------------------------------
# Wire helpers
# -------------------------------------------------------------------------

def to_camel(name: str) -> str:
    """school_national_id -> schoolNationalId"""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _safe_float(value) -> Optional[float]:
    """Safely convert value to float."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _safe_int(value) -> Optional[int]:
    """Safely convert value to int."""
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return None


def as_bool(value) -> bool:
    """Normalize the truthy/falsy wire forms of a flag (0/1, "TRUE", true)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().upper() in ("TRUE", "1", "YES", "نعم")


def as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _coerce(annotation, value):
    if annotation is bool:
        return as_bool(value)
    if annotation in (int, Optional[int]):
        return _safe_int(value)
    if annotation in (float, Optional[float]):
        return _safe_float(value)
    return as_text(value)


class _WireMixin:
    """Maps camelCase JSON rows to snake_case dataclass fields and back."""

    @classmethod
    def from_row(cls, row: dict):
        kwargs = {}
        for f in fields(cls):
            key = to_camel(f.name)
            if key in row:
                kwargs[f.name] = _coerce(f.type, row[key])
        return cls(**kwargs)

    def to_payload(self, include_meta: bool = False) -> dict:
        payload = {}
        for f in fields(self):
            if f.name in ("id", "date_added") and not include_meta:
                continue
            payload[to_camel(f.name)] = getattr(self, f.name)
        return payload


# -------------------------------------------------------------------------
# Schools and users
# -------------------------------------------------------------------------

@dataclass
class School(_WireMixin):
    """A registered school, keyed by its national ID."""

    national_id: str = ""
    school_name_ar: str = ""
    principal_name: str = ""
    school_name_en: str = ""
    school_id: str = ""
    region: str = REGIONS[0]
    principal_email: str = ""
    principal_phone: str = ""
    highest_grade: str = ""
    lowest_grade: str = ""
    school_gender: str = GENDERS[2]
    building_type: str = BUILDING_TYPES[0]
    is_camp: bool = False
    id: Optional[int] = None
    date_added: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.school_name_ar} ({self.national_id})"


@dataclass
class ManagedUser(_WireMixin):
    username: str = ""
    role: str = Role.SUPERVISOR.value
    id: Optional[int] = None
    date_added: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


# -------------------------------------------------------------------------
# Test results: a closed union tagged by ``test_type``
# -------------------------------------------------------------------------

@dataclass
class TestResult(_WireMixin):
    """Fields shared by every test program."""

    __test__ = False
    test_type: ClassVar[TestType]

    school_national_id: str = ""
    year: int = 0
    subject: str = ""
    score: Optional[float] = None
    id: Optional[int] = None
    date_added: str = ""


@dataclass
class TimssResult(TestResult):
    test_type: ClassVar[TestType] = TestType.TIMSS
    grade: str = ""


@dataclass
class PisaResult(TestResult):
    test_type: ClassVar[TestType] = TestType.PISA


@dataclass
class PirlsResult(TestResult):
    test_type: ClassVar[TestType] = TestType.PIRLS


@dataclass
class NationalTestResult(TestResult):
    test_type: ClassVar[TestType] = TestType.NATIONAL
    grade: str = ""


@dataclass
class AssessmentTestResult(TestResult):
    test_type: ClassVar[TestType] = TestType.ASSESSMENT


@dataclass
class UnifiedTestResult(TestResult):
    test_type: ClassVar[TestType] = TestType.UNIFIED
    grade: str = ""
    semester: str = ""


@dataclass
class LiteracyNumeracyResult(TestResult):
    test_type: ClassVar[TestType] = TestType.LITERACY_NUMERACY
    grade: str = ""


@dataclass
class AloResult(TestResult):
    """Regional ALO assessment; ``score`` is the arithmetic mean."""

    test_type: ClassVar[TestType] = TestType.ALO
    grade: str = ""
    participation_rate: Optional[float] = None
    achieved_rate: Optional[float] = None
    partially_achieved_rate: Optional[float] = None
    not_achieved_rate: Optional[float] = None


RESULT_CLASSES: dict[TestType, type[TestResult]] = {
    cls.test_type: cls
    for cls in (
        TimssResult,
        PisaResult,
        PirlsResult,
        NationalTestResult,
        AssessmentTestResult,
        UnifiedTestResult,
        LiteracyNumeracyResult,
        AloResult,
    )
}


def result_from_row(test_type: TestType, row: dict) -> TestResult:
    """Build the typed result for ``test_type`` from a JSON row."""
    return RESULT_CLASSES[TestType(test_type)].from_row(row)


@dataclass
class ReportData:
    """Everything the reports page needs, fetched in one round-trip."""

    schools: list[School] = field(default_factory=list)
    results: dict[TestType, list[TestResult]] = field(default_factory=dict)

    def results_for(self, test_type: TestType) -> list[TestResult]:
        return self.results.get(TestType(test_type), [])

    def find_school(self, national_id: str) -> Optional[School]:
        for school in self.schools:
            if school.national_id == str(national_id):
                return school
        return None

    def sorted_schools(self) -> list[School]:
        return sorted(self.schools, key=lambda s: s.school_name_ar)


# -------------------------------------------------------------------------
# Declarative form / listing configuration
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class FormField:
    """One input of a generated form; ``name`` is the JSON/spreadsheet key."""

    name: str
    label: str
    type: str = "text"  # "text" | "number" | "select" | "checkbox"
    options: tuple = ()
    placeholder: str = ""
    integer: bool = False
    default: str = ""

    @property
    def default_value(self):
        """First option for selects unless an explicit default is set."""
        if self.type == "select":
            return self.default or (self.options[0] if self.options else "")
        if self.type == "checkbox":
            return False
        return self.default


@dataclass(frozen=True)
class ListColumn:
    header: str
    accessor: str


@dataclass(frozen=True)
class ManagerConfig:
    form_fields: tuple[FormField, ...]
    list_columns: tuple[ListColumn, ...]
    required_fields: tuple[str, ...]
    excel_headers: tuple[str, ...]

    def field(self, name: str) -> Optional[FormField]:
        for f in self.form_fields:
            if f.name == name:
                return f
        return None

    def label_for(self, name: str) -> str:
        f = self.field(name)
        return f.label if f else name
