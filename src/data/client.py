"""REST gateway for the school results API."""

import logging
from typing import Optional

import requests

from config.settings import get_settings
from src.auth.session import Session

from .errors import (
    AuthError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from .models import ReportData, School, TestType, result_from_row

logger = logging.getLogger(__name__)

SCHOOLS = "schools"
MANAGED_USERS = "managedUsers"

_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
}


class SchoolDataClient:
    """Translates resource operations into HTTP calls and normalizes errors.

    Every method raises a ``SchoolDataError`` subclass on failure; nothing is
    retried.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SECONDS
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Lazy-loaded HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Content-Type": "application/json"})
        return self._session

    def _request(self, method: str, path: str, json=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise NetworkError(f"تعذر الاتصال بالخادم: {e}") from e

        if response.status_code == 204:
            return None
        if not response.ok:
            message = _error_message(response)
            logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
            error_cls = _STATUS_ERRORS.get(response.status_code)
            if error_cls is None:
                raise ServerError(message, status_code=response.status_code)
            raise error_cls(message)

        if not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Uniform resource operations
    # -------------------------------------------------------------------------

    def list_all(self, resource: str) -> list[dict]:
        """All rows of a resource, newest first."""
        return self._request("GET", resource) or []

    def create(self, resource: str, payload: dict) -> dict:
        return self._request("POST", resource, json=payload)

    def create_batch(self, resource: str, payloads: list[dict]) -> dict:
        """Insert many rows atomically; returns ``{"insertedCount": n}``."""
        return self._request("POST", f"{resource}/batch", json=list(payloads))

    def update(self, resource: str, item_id: int, payload: dict) -> dict:
        return self._request("PUT", f"{resource}/{item_id}", json=payload)

    def delete(self, resource: str, item_id: int) -> None:
        self._request("DELETE", f"{resource}/{item_id}")

    # -------------------------------------------------------------------------
    # Fixed endpoints
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> Session:
        row = self._request("POST", "auth/login", json={"username": username, "password": password})
        return Session.from_row(row)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> str:
        body = self._request(
            "POST",
            "users/change-password",
            json={
                "userId": user_id,
                "currentPassword": current_password,
                "newPassword": new_password,
            },
        )
        return (body or {}).get("message", "")

    def get_report_data(self) -> ReportData:
        """Schools plus all eight result collections in one round-trip."""
        body = self._request("GET", "reports/all-data") or {}
        schools = [School.from_row(r) for r in body.get(SCHOOLS, [])]
        results = {}
        for test_type in TestType:
            results[test_type] = [
                result_from_row(test_type, r) for r in body.get(test_type.value, [])
            ]
        return ReportData(schools=schools, results=results)


def _error_message(response: requests.Response) -> str:
    """Pull ``message`` (or FastAPI's ``detail``) out of an error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return response.reason or f"HTTP {response.status_code}"


# Singleton instance
_client: Optional[SchoolDataClient] = None


def get_client() -> SchoolDataClient:
    """Get or create the API client singleton."""
    global _client
    if _client is None:
        _client = SchoolDataClient()
    return _client
