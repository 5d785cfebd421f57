"""Searchable listing of a resource's rows as a DataFrame."""

from typing import Optional

import pandas as pd

from src.data.models import ManagerConfig
from src.data.test_types import SCHOOL_FIELD


def _school_index(schools: Optional[list]) -> dict[str, dict]:
    return {str(s.get("nationalId", "")): s for s in (schools or [])}


def school_name(national_id, schools_by_id: dict[str, dict]) -> str:
    school = schools_by_id.get(str(national_id))
    if school is None:
        return str(national_id)
    return school.get("schoolNameAr") or str(national_id)


def filter_rows(rows: list[dict], term: str, schools: Optional[list] = None) -> list[dict]:
    """Case-insensitive free-text filter.

    Rows tied to a school match on the school's Arabic/English name or the
    raw national ID when a school list is supplied; otherwise any field
    value may contain the term.
    """
    term = (term or "").strip().lower()
    if not term:
        return list(rows)

    schools_by_id = _school_index(schools)
    matched = []
    for row in rows:
        if schools_by_id and SCHOOL_FIELD in row:
            national_id = str(row.get(SCHOOL_FIELD, ""))
            school = schools_by_id.get(national_id, {})
            haystack = [
                school.get("schoolNameAr", ""),
                school.get("schoolNameEn", ""),
                national_id,
            ]
        else:
            haystack = [v for v in row.values() if v is not None]
        if any(term in str(value).lower() for value in haystack):
            matched.append(row)
    return matched


def to_frame(rows: list[dict], config: ManagerConfig, schools: Optional[list] = None) -> pd.DataFrame:
    """Display table with one column per list column, school IDs resolved."""
    schools_by_id = _school_index(schools)
    headers = [c.header for c in config.list_columns]
    records = []
    for row in rows:
        record = {}
        for column in config.list_columns:
            value = row.get(column.accessor)
            if column.accessor == SCHOOL_FIELD and schools_by_id:
                value = school_name(value, schools_by_id)
            record[column.header] = value
        records.append(record)

    df = pd.DataFrame(records, columns=headers)
    if rows:
        df.index = [row.get("id") for row in rows]
    return df
