"""User account rules: form validation, edit/delete permissions, password change."""

import re
from typing import Optional

from config.settings import get_settings
from src.auth.session import Session
from src.data.errors import ValidationError
from src.data.models import Role

USERS_RESOURCE = "managedUsers"

ROLE_LABELS = {
    Role.MANAGER.value: "مدير مدرسة",
    Role.SUPERVISOR.value: "مشرف",
    Role.ADMIN.value: "مسؤول النظام",
}

_DIGITS = re.compile(r"^\d+$")


def build_user_payload(values: dict, editing: Optional[dict] = None) -> dict:
    """Validate the user form and return the payload to send.

    On edit the username is kept from the existing row and an empty
    password means "keep the current one".
    """
    username = str(values.get("username") or "").strip()
    password = str(values.get("password") or "")
    role = str(values.get("role") or Role.SUPERVISOR.value)

    if editing is not None:
        username = str(editing.get("username", username))
    if not username or (editing is None and not password):
        raise ValidationError("يرجى ملء اسم المستخدم وكلمة المرور.")
    if role not in ROLE_LABELS:
        raise ValidationError(f"دور غير معروف: {role}")
    if role == Role.MANAGER.value and not _DIGITS.match(username):
        raise ValidationError(
            'عند اختيار دور "مدير مدرسة"، يجب أن يكون اسم المستخدم هو الرقم الوطني للمدرسة (أرقام فقط).'
        )

    payload = {"username": username, "role": role, "password": password}
    if editing is not None:
        payload["id"] = editing.get("id")
    return payload


def admin_count(users: list[dict]) -> int:
    return sum(1 for u in users if u.get("role") == Role.ADMIN.value)


def is_self(user: dict, session: Session) -> bool:
    return user.get("id") == session.id


def can_edit(user: dict, session: Session) -> bool:
    return not is_self(user, session)


def can_delete(user: dict, session: Session, users: list[dict]) -> bool:
    """Nobody deletes themselves, and the last admin always stays."""
    if is_self(user, session):
        return False
    if user.get("role") == Role.ADMIN.value and admin_count(users) <= 1:
        return False
    return True


def search_users(users: list[dict], term: str) -> list[dict]:
    term = (term or "").strip().lower()
    if not term:
        return list(users)
    return [
        u for u in users
        if term in str(u.get("username", "")).lower()
        or term in ROLE_LABELS.get(u.get("role"), "").lower()
    ]


def validate_password_change(current: str, new: str, confirm: str) -> None:
    if not current:
        raise ValidationError("يرجى إدخال كلمة المرور الحالية.")
    if new != confirm:
        raise ValidationError("كلمة المرور الجديدة غير متطابقة.")
    min_length = get_settings().MIN_PASSWORD_LENGTH
    if len(new) < min_length:
        raise ValidationError(f"يجب أن تكون كلمة المرور الجديدة {min_length} أحرف على الأقل.")
