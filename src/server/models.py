"""ORM tables. Attributes are snake_case; column names match the JSON keys."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, inspect

from src.data.models import TestType

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, index=True)
    school_name_ar = Column("schoolNameAr", String, nullable=False)
    school_name_en = Column("schoolNameEn", String)
    school_id = Column("schoolId", String)
    national_id = Column("nationalId", String, unique=True, nullable=False, index=True)
    region = Column(String)
    principal_name = Column("principalName", String, nullable=False)
    principal_email = Column("principalEmail", String)
    principal_phone = Column("principalPhone", String)
    highest_grade = Column("highestGrade", String)
    lowest_grade = Column("lowestGrade", String)
    school_gender = Column("schoolGender", String)
    building_type = Column("buildingType", String)
    is_camp = Column("isCamp", Boolean, default=False)
    date_added = Column("dateAdded", DateTime(timezone=True), default=_utcnow)


class ManagedUser(Base):
    __tablename__ = "managed_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column("password", String, nullable=False)
    role = Column(String, nullable=False)
    date_added = Column("dateAdded", DateTime(timezone=True), default=_utcnow)


class ResultMixin:
    id = Column(Integer, primary_key=True, index=True)
    school_national_id = Column("schoolNationalId", String, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    subject = Column(String, nullable=False)
    score = Column(Float, nullable=False)
    date_added = Column("dateAdded", DateTime(timezone=True), default=_utcnow)


class GradeMixin:
    grade = Column(String, nullable=False)


class TimssResult(GradeMixin, ResultMixin, Base):
    __tablename__ = "timssResults"


class PisaResult(ResultMixin, Base):
    __tablename__ = "pisaResults"


class PirlsResult(ResultMixin, Base):
    __tablename__ = "pirlsResults"


class NationalTestResult(GradeMixin, ResultMixin, Base):
    __tablename__ = "nationalTestResults"


class AssessmentTestResult(ResultMixin, Base):
    __tablename__ = "assessmentTestResults"


class UnifiedTestResult(GradeMixin, ResultMixin, Base):
    __tablename__ = "unifiedTestResults"

    semester = Column(String, nullable=False)


class LiteracyNumeracyResult(GradeMixin, ResultMixin, Base):
    __tablename__ = "literacyNumeracyResults"


class AloResult(GradeMixin, ResultMixin, Base):
    __tablename__ = "aloResults"

    participation_rate = Column("participationRate", Float)
    achieved_rate = Column("achievedRate", Float)
    partially_achieved_rate = Column("partiallyAchievedRate", Float)
    not_achieved_rate = Column("notAchievedRate", Float)


RESULT_MODELS = {
    TestType.TIMSS.value: TimssResult,
    TestType.PISA.value: PisaResult,
    TestType.PIRLS.value: PirlsResult,
    TestType.NATIONAL.value: NationalTestResult,
    TestType.ASSESSMENT.value: AssessmentTestResult,
    TestType.UNIFIED.value: UnifiedTestResult,
    TestType.LITERACY_NUMERACY.value: LiteracyNumeracyResult,
    TestType.ALO.value: AloResult,
}


def column_map(model) -> dict[str, tuple[str, Column]]:
    """JSON key -> (attribute name, column) for every mapped column."""
    return {
        attr.columns[0].name: (attr.key, attr.columns[0])
        for attr in inspect(model).column_attrs
    }


def to_dict(obj, exclude: tuple = ()) -> dict:
    row = {}
    for key, (attr, _) in column_map(type(obj)).items():
        if key in exclude:
            continue
        value = getattr(obj, attr)
        if isinstance(value, datetime):
            value = value.isoformat()
        row[key] = value
    return row
