"""Login, password change, user accounts and the aggregate reports endpoint."""

import logging
import re
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from werkzeug.security import check_password_hash, generate_password_hash

from config.settings import get_settings
from src.auth.session import (
    ADMIN_DISPLAY_NAME,
    NEW_MANAGER_DISPLAY_NAME,
    supervisor_display_name,
)
from src.data.models import Role

from .database import get_db
from .models import RESULT_MODELS, ManagedUser, School, to_dict
from .routers import is_unique_violation, serialize_school

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_DIGITS = re.compile(r"^\d+$")
_ROLES = {r.value for r in Role}


class LoginRequest(BaseModel):
    username: str
    password: str


class ChangePasswordRequest(BaseModel):
    userId: int
    currentPassword: str
    newPassword: str


def serialize_user(user: ManagedUser) -> dict:
    return to_dict(user, exclude=("password",))


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _validate_role(role: str, username: str) -> None:
    if role not in _ROLES:
        raise _bad_request(f"دور غير معروف: {role}")
    if role == Role.MANAGER.value and not _DIGITS.match(username):
        raise _bad_request("اسم مستخدم المدير يجب أن يكون الرقم الوطني للمدرسة (أرقام فقط).")


def _admin_count(db: Session) -> int:
    return db.query(ManagedUser).filter(ManagedUser.role == Role.ADMIN.value).count()


# -------------------------------------------------------------------------
# Authentication
# -------------------------------------------------------------------------

@router.post("/auth/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(ManagedUser).filter(ManagedUser.username == payload.username).first()
    if not user or not check_password_hash(user.password_hash, payload.password):
        logger.warning("Failed login for %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="اسم المستخدم أو كلمة المرور غير صحيحة.",
        )

    if user.role == Role.ADMIN.value:
        return {"id": user.id, "username": ADMIN_DISPLAY_NAME, "role": user.role}
    if user.role == Role.SUPERVISOR.value:
        return {"id": user.id, "username": supervisor_display_name(user.username), "role": user.role}

    school = db.query(School).filter(School.national_id == user.username).first()
    if school is not None:
        return {
            "id": user.id,
            "username": school.school_name_ar,
            "role": user.role,
            "schoolId": user.username,
        }
    return {
        "id": user.id,
        "username": NEW_MANAGER_DISPLAY_NAME,
        "role": user.role,
        "schoolId": user.username,
        "isNew": True,
    }


@router.post("/users/change-password")
def change_password(payload: ChangePasswordRequest, db: Session = Depends(get_db)):
    user = db.get(ManagedUser, payload.userId)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="المستخدم غير موجود.")
    if not check_password_hash(user.password_hash, payload.currentPassword):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="كلمة المرور الحالية غير صحيحة.")
    if len(payload.newPassword) < get_settings().MIN_PASSWORD_LENGTH:
        raise _bad_request("كلمة المرور الجديدة قصيرة جداً.")
    user.password_hash = generate_password_hash(payload.newPassword)
    db.commit()
    logger.info("Password changed for user %s", user.id)
    return {"message": "تم تغيير كلمة المرور بنجاح."}


# -------------------------------------------------------------------------
# Managed users
# -------------------------------------------------------------------------

@router.get("/managedUsers")
def list_users(db: Session = Depends(get_db)):
    users = db.query(ManagedUser).order_by(ManagedUser.id.desc()).all()
    return [serialize_user(u) for u in users]


@router.post("/managedUsers", status_code=status.HTTP_201_CREATED)
def create_user(payload: Any = Body(None), db: Session = Depends(get_db)):
    if not isinstance(payload, dict):
        raise _bad_request("البيانات المرسلة غير صالحة.")
    username = str(payload.get("username") or "").strip()
    password = str(payload.get("password") or "")
    role = str(payload.get("role") or "")
    if not username or not password:
        raise _bad_request("يرجى ملء اسم المستخدم وكلمة المرور.")
    _validate_role(role, username)

    user = ManagedUser(username=username, role=role, password_hash=generate_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"اسم المستخدم '{username}' موجود بالفعل.",
            )
        raise _bad_request("بيانات المستخدم غير مكتملة.")
    db.refresh(user)
    return serialize_user(user)


@router.put("/managedUsers/{user_id}")
def update_user(user_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    """Role and password changes; an empty password keeps the current one."""
    user = db.get(ManagedUser, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="المستخدم غير موجود.")
    if not isinstance(payload, dict):
        raise _bad_request("البيانات المرسلة غير صالحة.")

    role = payload.get("role") or user.role
    if role != user.role:
        _validate_role(role, user.username)
        if user.role == Role.ADMIN.value and _admin_count(db) <= 1:
            raise _bad_request("لا يمكن تغيير دور آخر مسؤول في النظام.")
        user.role = role
    password = payload.get("password")
    if password:
        user.password_hash = generate_password_hash(str(password))
    db.commit()
    db.refresh(user)
    return serialize_user(user)


@router.delete("/managedUsers/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = db.get(ManagedUser, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="المستخدم غير موجود.")
    if user.role == Role.ADMIN.value and _admin_count(db) <= 1:
        raise _bad_request("لا يمكن حذف آخر مسؤول في النظام.")
    db.delete(user)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------------------------------------------------------------------------
# Reports
# -------------------------------------------------------------------------

@router.get("/reports/all-data")
def all_data(db: Session = Depends(get_db)):
    """Schools plus every result table in one response."""
    body = {
        "schools": [
            serialize_school(s) for s in db.query(School).order_by(School.id.desc()).all()
        ]
    }
    for resource, model in RESULT_MODELS.items():
        body[resource] = [to_dict(r) for r in db.query(model).order_by(model.id.desc()).all()]
    return body


def seed_admin(session_factory: sessionmaker) -> None:
    """Create the default admin account when it does not exist yet."""
    settings = get_settings()
    with session_factory() as db:
        exists = (
            db.query(ManagedUser)
            .filter(ManagedUser.username == settings.DEFAULT_ADMIN_USERNAME)
            .first()
        )
        if exists is not None:
            return
        db.add(
            ManagedUser(
                username=settings.DEFAULT_ADMIN_USERNAME,
                role=Role.ADMIN.value,
                password_hash=generate_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
            )
        )
        db.commit()
        logger.info("Seeded default admin account %s", settings.DEFAULT_ADMIN_USERNAME)
