from __future__ import annotations

import io

import pytest
import requests

from review_console.client import (
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
    MigrationBackendClient,
)
from review_console.models import ImportRecord, Statement

BASE_URL = "http://backend.test:5050"


class FakeResponse:
    def __init__(self, *, status_code=200, json_data=None, text: str = "", raise_on_json=False):
        self.status_code = status_code
        self._json_data = json_data if json_data is not None else {}
        self.text = text
        self.ok = status_code < 400
        self._raise_on_json = raise_on_json

    def json(self):
        if self._raise_on_json:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.calls = []
        self.responses = list(responses or [])
        self.error = error

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0) if self.responses else FakeResponse()


def _client(session):
    return MigrationBackendClient(BASE_URL + "/", timeout=7, session=session)


def test_get_import_sends_id_query_param(import_payload):
    session = FakeSession([FakeResponse(json_data=import_payload)])

    record = _client(session).get_import("dump.sql")

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", f"{BASE_URL}/get")
    assert kwargs["params"] == {"id": "dump.sql"}
    assert kwargs["timeout"] == 7
    assert record.id == "dump.sql"
    assert len(record.statements) == 4


def test_put_import_posts_whole_record(import_payload):
    record = ImportRecord.from_dict(import_payload)
    record.statements[2].deleted = True
    session = FakeSession([FakeResponse(json_data=import_payload)])

    _client(session).put_import(record)

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", f"{BASE_URL}/put")
    assert kwargs["json"]["id"] == "dump.sql"
    assert kwargs["json"]["import_metadata"]["statements"][2]["deleted"] is True


def test_fix_sequence_posts_statement_and_issue_id():
    statement = Statement(original="CREATE SEQUENCE s;", cockroach="CREATE SEQUENCE s;")
    rewritten = {"original": "CREATE SEQUENCE s;", "cockroach": "-- removed", "issues": None}
    session = FakeSession([FakeResponse(json_data=rewritten)])

    fixed = _client(session).fix_sequence(statement, "s")

    _, url, kwargs = session.calls[0]
    assert url == f"{BASE_URL}/fix_sequence"
    assert kwargs["json"] == {"statement": statement.to_dict(), "id": "s"}
    assert fixed.cockroach == "-- removed"
    assert fixed.issues == []


def test_execute_sql_decodes_result():
    session = FakeSession([FakeResponse(json_data={"columns": ["n"], "rows": [["1"]], "error": ""})])

    result = _client(session).execute_sql("defaultdb", "SELECT 1")

    assert session.calls[0][2]["json"] == {"database": "defaultdb", "sql": "SELECT 1"}
    assert result.columns == ["n"]
    assert result.rows == [["1"]]


def test_upload_sends_multipart_file_and_id(import_payload):
    session = FakeSession([FakeResponse(json_data=import_payload)])
    stream = io.BytesIO(b"CREATE TABLE t ();")

    _client(session).upload(stream, "dump.sql", content_type="application/sql")

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", f"{BASE_URL}/upload")
    assert kwargs["files"] == {"file": ("dump.sql", stream, "application/sql")}
    assert kwargs["data"] == {"id": "dump.sql"}


def test_timeout_maps_to_unavailable():
    session = FakeSession(error=requests.Timeout("slow"))

    with pytest.raises(BackendUnavailableError, match="timed out"):
        _client(session).get_import("dump.sql")


def test_connection_error_maps_to_unavailable():
    session = FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(BackendUnavailableError, match="refused"):
        _client(session).get_import("dump.sql")


def test_error_status_carries_code_and_body():
    session = FakeSession([FakeResponse(status_code=500, text="pq: relation does not exist")])

    with pytest.raises(BackendResponseError) as excinfo:
        _client(session).get_import("dump.sql")

    assert excinfo.value.status_code == 500
    assert "relation does not exist" in str(excinfo.value)


def test_long_error_body_is_truncated():
    session = FakeSession([FakeResponse(status_code=400, text="x" * 1000)])

    with pytest.raises(BackendResponseError) as excinfo:
        _client(session).get_import("dump.sql")

    assert excinfo.value.body.endswith("...")
    assert len(excinfo.value.body) < 1000


def test_non_json_body_is_payload_error():
    session = FakeSession([FakeResponse(text="<html>", raise_on_json=True)])

    with pytest.raises(BackendPayloadError):
        _client(session).get_import("dump.sql")


def test_non_object_json_is_payload_error():
    session = FakeSession([FakeResponse(json_data=["not", "an", "object"])])

    with pytest.raises(BackendPayloadError, match="expected an object"):
        _client(session).get_import("dump.sql")


def test_ping_reports_reachability():
    assert _client(FakeSession()).ping() is True
    assert _client(FakeSession(error=requests.ConnectionError("down"))).ping() is False
