# conftest.py

import copy
import os
import time

import pytest

# Set testing environment BEFORE importing app so app.py picks TestingConfig
os.environ["FLASK_ENV"] = "testing"

# Now import app and other modules after environment is set
from app import app as flask_app
from review_console.client import BACKEND_EXTENSION_KEY, BackendResponseError
from review_console.models import ImportRecord, SQLResult, Statement
from review_console.services import get_draft_store

TEST_BACKEND_URL = "http://backend.test:5050"


def make_import_payload(import_id="dump.sql", *, database="defaultdb", statements=None):
    """Build a backend-shaped import record payload"""
    if statements is None:
        statements = [
            {
                "original": "CREATE SEQUENCE public.users_id_seq;",
                "cockroach": "CREATE SEQUENCE public.users_id_seq;",
                "issues": [
                    {
                        "level": "info",
                        "text": "sequences are slow, see https://www.cockroachlabs.com/docs/stable/create-sequence",
                        "id": "users_id_seq",
                        "type": "sequence",
                    }
                ],
            },
            {
                "original": "CREATE TABLE public.users (id integer NOT NULL);",
                "cockroach": "CREATE TABLE public.users (id INT4 NOT NULL);",
                "issues": None,
            },
            {
                "original": "CREATE TRIGGER audit AFTER INSERT ON public.users;",
                "cockroach": "CREATE TRIGGER audit AFTER INSERT ON public.users;",
                "issues": [
                    {"level": "danger", "text": "triggers are not supported", "id": "", "type": "unimplemented"}
                ],
            },
            {
                "original": "ALTER TABLE public.users OWNER TO app_owner;",
                "cockroach": "ALTER TABLE public.users OWNER TO app_owner;",
                "issues": [
                    {"level": "danger", "text": "user app_owner does not exist", "id": "app_owner", "type": "missing_user"}
                ],
            },
        ]
    return {
        "id": import_id,
        "unix_nano": 1_700_000_000_000_000_000,
        "import_metadata": {
            "statements": statements,
            "status": "warning",
            "message": "Import completed with issues.",
            "database": database,
        },
    }


class FakeBackendClient:
    """In-memory stand-in for MigrationBackendClient that records every call"""

    def __init__(self, base_url=TEST_BACKEND_URL):
        self.base_url = base_url
        self.imports = {}
        self.calls = []
        self.sql_result = SQLResult(columns=["?column?"], rows=[["1"]], error="")
        self.fail_with = None
        self.reachable = True
        self.delay = 0

    def add_import(self, payload):
        self.imports[payload["id"]] = copy.deepcopy(payload)
        return payload

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def get_import(self, import_id):
        self.calls.append(("get", import_id))
        self._maybe_fail()
        if import_id not in self.imports:
            raise BackendResponseError(f"GET /get returned 404: {import_id}", status_code=404, body=import_id)
        return ImportRecord.from_dict(copy.deepcopy(self.imports[import_id]))

    def put_import(self, record):
        self.calls.append(("put", record.to_dict()))
        self._maybe_fail()
        payload = record.to_dict()
        payload["import_metadata"]["status"] = "success"
        payload["import_metadata"]["message"] = "Reimported successfully."
        payload["unix_nano"] = record.unix_nano + 1
        self.imports[record.id] = payload
        return ImportRecord.from_dict(copy.deepcopy(payload))

    def fix_sequence(self, statement, issue_id):
        self.calls.append(("fix_sequence", statement.cockroach, issue_id))
        if self.delay:
            time.sleep(self.delay)
        self._maybe_fail()
        # the backend statement payload has no deleted flag
        remaining = [issue for issue in statement.issues if issue.id != issue_id]
        return Statement(
            original=statement.original,
            cockroach=f"-- {issue_id} replaced with UUID\n" + statement.cockroach,
            issues=remaining,
        )

    def execute_sql(self, database, sql):
        self.calls.append(("sql", database, sql))
        self._maybe_fail()
        return self.sql_result

    def upload(self, stream, filename, *, content_type=None):
        self.calls.append(("upload", filename, stream.read()))
        self._maybe_fail()
        payload = make_import_payload(filename)
        self.imports[filename] = payload
        return ImportRecord.from_dict(copy.deepcopy(payload))

    def ping(self):
        return self.reachable


@pytest.fixture(scope="function")
def app():
    """Configure the shared Flask application for an isolated test"""
    flask_app.config.update(
        {
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "MIGRATION_BACKEND_URL": TEST_BACKEND_URL,
            "ENABLE_FILE_LOGGING": False,
            "ENABLE_CONSOLE_LOGGING": False,
        }
    )
    store = get_draft_store(flask_app)
    store.clear()
    saved_client = flask_app.extensions.get(BACKEND_EXTENSION_KEY)
    with flask_app.app_context():
        yield flask_app
    store.clear()
    flask_app.extensions[BACKEND_EXTENSION_KEY] = saved_client


@pytest.fixture
def client(app):
    """Create a test client for the Flask application"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask application"""
    return app.test_cli_runner()


@pytest.fixture
def fake_backend(app):
    """Install a fake migration backend seeded with one import"""
    backend = FakeBackendClient()
    backend.add_import(make_import_payload())
    app.extensions[BACKEND_EXTENSION_KEY] = backend
    return backend


@pytest.fixture
def import_payload():
    return make_import_payload()


@pytest.fixture
def payload_factory():
    """Expose the payload builder so tests can vary statements and database"""
    return make_import_payload


def pytest_configure(config):
    """Ensure testing environment and register markers"""
    os.environ["FLASK_ENV"] = "testing"
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
