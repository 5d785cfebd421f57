"""Authenticated session context passed explicitly to every gated call."""

from dataclasses import dataclass, replace
from typing import Optional

from src.data.models import Role

ADMIN_DISPLAY_NAME = "مسؤول النظام"
NEW_MANAGER_DISPLAY_NAME = "مدير جديد"


def supervisor_display_name(login: str) -> str:
    return f"مشرف ({login})"


@dataclass(frozen=True)
class Session:
    """Who is logged in.

    For managers ``school_id`` is the national ID they logged in with and
    ``username`` is the school's Arabic name (or a placeholder while
    ``is_new`` is set and the school row does not exist yet).
    """

    id: int
    username: str
    role: Role
    school_id: Optional[str] = None
    is_new: bool = False

    @classmethod
    def from_row(cls, row: dict) -> "Session":
        school_id = row.get("schoolId")
        return cls(
            id=int(row["id"]),
            username=str(row.get("username", "")),
            role=Role(row["role"]),
            school_id=str(school_id) if school_id not in (None, "") else None,
            is_new=bool(row.get("isNew", False)),
        )

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role.value,
            "schoolId": self.school_id,
            "isNew": self.is_new,
        }

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def is_supervisor(self) -> bool:
        return self.role == Role.SUPERVISOR

    def with_school(self, school_name_ar: str) -> "Session":
        """Session after a new manager registers their school."""
        return replace(self, username=school_name_ar, is_new=False)
