"""Uniform CRUD routers for schools and the eight result resources."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import get_settings
from src.data.models import as_bool

from .database import get_db
from .models import RESULT_MODELS, School, column_map, to_dict

logger = logging.getLogger(__name__)

READ_ONLY_KEYS = ("id", "dateAdded")


def is_unique_violation(error: IntegrityError) -> bool:
    """Postgres reports SQLSTATE 23505; SQLite and MySQL only say so in text."""
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    text = str(error.orig).lower()
    return "unique" in text or "duplicate" in text


def coerce_column(column, value):
    if value is None or value == "":
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is bool:
        return as_bool(value)
    if python_type in (int, float):
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"قيمة غير رقمية للحقل '{column.name}': {value}",
            )
        if python_type is int:
            if not number.is_integer():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"قيمة غير صحيحة للحقل '{column.name}': {value}",
                )
            return int(number)
        return number
    if python_type is str:
        return str(value)
    return value


def payload_to_values(model, payload: Any) -> dict:
    """Map a camelCase JSON object onto model attributes; unknown keys are ignored."""
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="البيانات المرسلة غير صالحة.")
    columns = column_map(model)
    values = {}
    for key, value in payload.items():
        if key in READ_ONLY_KEYS or key not in columns:
            continue
        attr, column = columns[key]
        values[attr] = coerce_column(column, value)
    return values


def _chunks(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


def build_resource_router(
    resource: str,
    model,
    conflict_message=None,
    not_found_message: str = "النتيجة غير موجودة.",
    serialize=to_dict,
) -> APIRouter:
    """GET/POST /{resource}, POST /{resource}/batch, PUT/DELETE /{resource}/{id}."""
    router = APIRouter(prefix=f"/{resource}", tags=[resource])

    def integrity_error(error: IntegrityError, payload: Optional[dict] = None) -> HTTPException:
        if is_unique_violation(error):
            message = conflict_message(payload) if conflict_message else "السجل موجود بالفعل."
            return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="بيانات غير مكتملة، تحقق من الحقول المطلوبة.",
        )

    @router.get("")
    def list_items(db: Session = Depends(get_db)):
        return [serialize(obj) for obj in db.query(model).order_by(model.id.desc()).all()]

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_item(payload: Any = Body(None), db: Session = Depends(get_db)):
        obj = model(**payload_to_values(model, payload))
        db.add(obj)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("Rejected insert into %s: %s", resource, e.orig)
            raise integrity_error(e, payload)
        db.refresh(obj)
        return serialize(obj)

    @router.post("/batch", status_code=status.HTTP_201_CREATED)
    def create_batch(items: Any = Body(None), db: Session = Depends(get_db)):
        if not isinstance(items, list) or not items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="البيانات المرسلة يجب أن تكون مصفوفة غير فارغة.",
            )
        rows = [payload_to_values(model, item) for item in items]
        try:
            for chunk in _chunks(rows, get_settings().BATCH_CHUNK_SIZE):
                db.add_all([model(**values) for values in chunk])
                db.flush()
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error("Batch insert into %s rolled back: %s", resource, e.orig)
            if is_unique_violation(e):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="فشل الاستيراد. أحد السجلات يحتوي على قيمة مكررة موجودة بالفعل في النظام.",
                )
            raise integrity_error(e)
        logger.info("Inserted %s rows into %s", len(rows), resource)
        return {"insertedCount": len(rows), "message": f"تمت إضافة {len(rows)} سجل بنجاح."}

    @router.put("/{item_id}")
    def update_item(item_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
        obj = db.get(model, item_id)
        if obj is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_message)
        for attr, value in payload_to_values(model, payload).items():
            setattr(obj, attr, value)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise integrity_error(e, payload)
        db.refresh(obj)
        return serialize(obj)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_item(item_id: int, db: Session = Depends(get_db)):
        obj = db.get(model, item_id)
        if obj is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_message)
        db.delete(obj)
        db.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


def serialize_school(obj: School) -> dict:
    row = to_dict(obj)
    row["isCamp"] = bool(row.get("isCamp"))
    return row


def _school_conflict(payload) -> str:
    national_id = payload.get("nationalId") if isinstance(payload, dict) else ""
    return f"الرقم الوطني '{national_id}' مسجل لمدرسة أخرى."


def resource_routers() -> list[APIRouter]:
    routers = [
        build_resource_router(
            "schools",
            School,
            conflict_message=_school_conflict,
            not_found_message="المدرسة غير موجودة.",
            serialize=serialize_school,
        )
    ]
    for resource, model in RESULT_MODELS.items():
        routers.append(build_resource_router(resource, model))
    return routers
