"""Tests for the REST gateway: URL building, error mapping and typed decoding."""

from unittest.mock import MagicMock

import pytest
import requests

from src.auth.session import Session
from src.data.client import SchoolDataClient
from src.data.errors import (
    AuthError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from src.data.models import AloResult, Role, TestType


def _response(status=200, body=None, reason="OK", raw=None):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if raw is not None:
        response.content = raw
        response.json.side_effect = ValueError("not json")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.content = b"{...}"
        response.json.return_value = body
    return response


def _client(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return SchoolDataClient(base_url="http://api.test/api/", timeout=5, session=session), session


class TestRequests:
    def test_list_all_builds_url(self):
        client, session = _client(_response(body=[{"id": 1}]))
        assert client.list_all("schools") == [{"id": 1}]
        session.request.assert_called_once_with(
            "GET", "http://api.test/api/schools", json=None, timeout=5
        )

    def test_list_all_empty_body(self):
        client, _ = _client(_response(body=None))
        assert client.list_all("schools") == []

    def test_create_batch_posts_list(self):
        client, session = _client(_response(201, body={"insertedCount": 2}))
        assert client.create_batch("pisaResults", ({"a": 1}, {"a": 2}))["insertedCount"] == 2
        args, kwargs = session.request.call_args
        assert args == ("POST", "http://api.test/api/pisaResults/batch")
        assert kwargs["json"] == [{"a": 1}, {"a": 2}]

    def test_update_uses_put(self):
        client, session = _client(_response(body={"id": 3}))
        client.update("schools", 3, {"schoolNameAr": "أ"})
        assert session.request.call_args[0] == ("PUT", "http://api.test/api/schools/3")

    def test_delete_204(self):
        client, _ = _client(_response(204))
        assert client.delete("schools", 3) is None


class TestErrorMapping:
    @pytest.mark.parametrize("status, error_cls", [
        (400, ValidationError),
        (401, AuthError),
        (403, AuthError),
        (404, NotFoundError),
        (409, ConflictError),
    ])
    def test_status_to_error(self, status, error_cls):
        client, _ = _client(_response(status, body={"message": "رسالة"}, reason="Err"))
        with pytest.raises(error_cls) as exc:
            client.list_all("schools")
        assert exc.value.message == "رسالة"

    def test_unknown_status_is_server_error(self):
        client, _ = _client(_response(502, raw=b"<html>", reason="Bad Gateway"))
        with pytest.raises(ServerError) as exc:
            client.list_all("schools")
        assert exc.value.status_code == 502
        assert exc.value.message == "Bad Gateway"

    def test_detail_key_used(self):
        client, _ = _client(_response(404, body={"detail": "غير موجود"}))
        with pytest.raises(NotFoundError, match="غير موجود"):
            client.delete("schools", 9)

    def test_transport_failure(self):
        client, _ = _client(error=requests.ConnectionError("refused"))
        with pytest.raises(NetworkError):
            client.list_all("schools")


class TestFixedEndpoints:
    def test_login_returns_session(self):
        body = {"id": 2, "username": "مدير جديد", "role": "manager", "schoolId": "999", "isNew": True}
        client, _ = _client(_response(body=body))
        session = client.login("999", "pw")
        assert isinstance(session, Session)
        assert session.role is Role.MANAGER
        assert session.school_id == "999"
        assert session.is_new

    def test_change_password_message(self):
        client, session = _client(_response(body={"message": "تم"}))
        assert client.change_password(1, "old", "newpass") == "تم"
        assert session.request.call_args[1]["json"] == {
            "userId": 1, "currentPassword": "old", "newPassword": "newpass",
        }

    def test_report_data_decoded(self):
        body = {
            "schools": [{"nationalId": "1", "schoolNameAr": "أ"}],
            "aloResults": [{"schoolNationalId": "1", "year": 2023, "subject": "الرياضيات", "score": 60}],
        }
        client, _ = _client(_response(body=body))
        data = client.get_report_data()
        assert data.schools[0].national_id == "1"
        assert isinstance(data.results_for(TestType.ALO)[0], AloResult)
        assert data.results_for(TestType.TIMSS) == []
