"""Create/edit/delete/import controller shared by every managed resource."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from config.settings import get_settings
from src.data.errors import SchoolDataError, ValidationError
from src.data.models import ManagerConfig

from .forms import coerce_form, initial_form, validate_payload
from .importer import ImportReport, run_import

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    kind: str  # "success" | "error"
    text: str
    expires_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class TestManager:
    """Form and row actions for one resource, independent of its shape.

    The form is in edit mode when it carries an ``id``. Success messages
    expire after a few seconds; error messages stay until the next action.
    A read-only manager refuses every mutation.
    """

    __test__ = False

    def __init__(self, config: ManagerConfig, store, schools: Optional[list] = None,
                 read_only: bool = False, clock: Callable[[], float] = time.monotonic):
        self.config = config
        self.store = store
        self.schools = schools or []
        self.read_only = read_only
        self.clock = clock
        self.form: Optional[dict] = None
        self._message: Optional[Message] = None

    @property
    def is_open(self) -> bool:
        return self.form is not None

    @property
    def is_editing(self) -> bool:
        return self.form is not None and self.form.get("id") is not None

    def open_create(self) -> None:
        if self._deny("create"):
            return
        self._message = None
        self.form = initial_form(self.config, self.schools)

    def open_edit(self, row: dict, keep_message: bool = False) -> None:
        if self._deny("edit"):
            return
        if not keep_message:
            self._message = None
        self.form = initial_form(self.config, self.schools, row=row)

    def close(self) -> None:
        self.form = None

    @property
    def message(self) -> Optional[Message]:
        if self._message is not None and self._message.expired(self.clock()):
            self._message = None
        return self._message

    def flash_success(self, text: str, ttl: Optional[int] = None) -> None:
        if ttl is None:
            ttl = get_settings().SUCCESS_MESSAGE_TTL_SECONDS
        self._message = Message("success", text, self.clock() + ttl)

    def flash_error(self, text: str) -> None:
        self._message = Message("error", text)

    def _deny(self, action: str) -> bool:
        if self.read_only:
            logger.warning("Refused %s on read-only %s", action, self.store.resource)
            self.flash_error("لا تملك صلاحية تعديل هذه البيانات.")
            return True
        return False

    def submit(self, values: Optional[dict] = None) -> bool:
        """Coerce, validate and persist the open form."""
        if self._deny("submit"):
            return False
        merged = dict(self.form or {})
        merged.update(values or {})
        editing = merged.get("id") is not None
        try:
            payload = coerce_form(self.config, merged)
            validate_payload(self.config, payload)
        except ValidationError as e:
            self.form = merged
            self.flash_error(e.message)
            return False

        ok = self.store.update_item(payload) if editing else self.store.add_item(payload)
        if not ok:
            self.form = merged
            self.flash_error(self.store.error or "حدث خطأ أثناء حفظ البيانات.")
            return False

        self.close()
        self.flash_success("تم تحديث السجل بنجاح." if editing else "تمت إضافة السجل بنجاح.")
        return True

    def delete(self, item_id: int, confirmed: bool = False) -> bool:
        """Delete a row; nothing is sent until the user confirms."""
        if self._deny("delete") or not confirmed:
            return False
        if not self.store.remove_item(item_id):
            self.flash_error(self.store.error or "فشل حذف السجل.")
            return False
        if self.form is not None and self.form.get("id") == item_id:
            self.close()
        self.flash_success("تم حذف السجل بنجاح.")
        return True

    def import_file(self, source, import_config: Optional[ManagerConfig] = None
                    ) -> Optional[ImportReport]:
        if self._deny("import"):
            return None
        try:
            report = run_import(import_config or self.config, self.store, source)
        except SchoolDataError as e:
            self.flash_error(e.message)
            return None

        ttl = get_settings().IMPORT_MESSAGE_TTL_SECONDS
        kind = "success" if report.imported and not report.failures else "error"
        self._message = Message(kind, report.summary(), self.clock() + ttl if report.imported else None)
        return report
