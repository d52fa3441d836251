"""
HTTP client for the migration backend service.

The backend owns statement conversion, issue detection, fixes and SQL
execution. This client only serialises the console's in-memory models to the
backend's JSON endpoints and decodes the responses.
"""

from __future__ import annotations

import logging
from typing import IO, Any, Mapping

import requests

from review_console.models import ImportRecord, SQLResult, Statement

DEFAULT_TIMEOUT_SECONDS = 30
_BODY_EXCERPT_LIMIT = 300


class BackendError(RuntimeError):
    """Base error for migration backend failures."""


class BackendUnavailableError(BackendError):
    """Raised when the backend cannot be reached or times out."""


class BackendResponseError(BackendError):
    """Raised when the backend answers with a non-success status code."""

    def __init__(self, message: str, *, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BackendPayloadError(BackendError):
    """Raised when the backend response body is not the expected JSON."""


def _excerpt(text: str | None) -> str:
    text = (text or "").strip()
    if len(text) > _BODY_EXCERPT_LIMIT:
        return text[:_BODY_EXCERPT_LIMIT] + "..."
    return text


class MigrationBackendClient:
    """Thin wrapper over the backend's REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    # Public API -----------------------------------------------------------------

    def get_import(self, import_id: str) -> ImportRecord:
        """Fetch the current state of an import."""
        payload = self._request("GET", "/get", params={"id": import_id})
        return ImportRecord.from_dict(payload)

    def put_import(self, record: ImportRecord) -> ImportRecord:
        """Submit the edited statement set for re-execution."""
        payload = self._request("POST", "/put", json=record.to_dict())
        return ImportRecord.from_dict(payload)

    def fix_sequence(self, statement: Statement, issue_id: str) -> Statement:
        """Ask the backend to rewrite a sequence-backed column as a UUID."""
        payload = self._request(
            "POST",
            "/fix_sequence",
            json={"statement": statement.to_dict(), "id": issue_id},
        )
        return Statement.from_dict(payload)

    def execute_sql(self, database: str, sql: str) -> SQLResult:
        """Run ad-hoc SQL against the backend's temporary database."""
        payload = self._request("POST", "/sql", json={"database": database, "sql": sql})
        return SQLResult.from_dict(payload)

    def upload(self, stream: IO[bytes], filename: str, *, content_type: str | None = None) -> ImportRecord:
        """Upload a PostgreSQL dump; the file name doubles as the import id."""
        file_tuple: tuple[Any, ...] = (filename, stream)
        if content_type:
            file_tuple = (filename, stream, content_type)
        payload = self._request(
            "POST",
            "/upload",
            files={"file": file_tuple},
            data={"id": filename},
        )
        return ImportRecord.from_dict(payload)

    def ping(self) -> bool:
        """Return True when the backend answers any HTTP response."""
        try:
            self.session.get(self.base_url + "/", timeout=self.timeout)
        except requests.RequestException as exc:
            self.logger.warning("Migration backend ping failed: %s", exc)
            return False
        return True

    # Internal helpers -----------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> Mapping[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            self.logger.error(
                "Migration backend timed out",
                extra={"backend_url": url, "backend_method": method, "timeout": self.timeout},
            )
            raise BackendUnavailableError(f"{method} {path} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            self.logger.error(
                "Migration backend unreachable: %s",
                exc,
                extra={"backend_url": url, "backend_method": method},
            )
            raise BackendUnavailableError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            body = _excerpt(response.text)
            self.logger.warning(
                "Migration backend returned an error status",
                extra={
                    "backend_url": url,
                    "backend_method": method,
                    "status_code": response.status_code,
                    "body": body,
                },
            )
            message = f"{method} {path} returned {response.status_code}"
            if body:
                message = f"{message}: {body}"
            raise BackendResponseError(message, status_code=response.status_code, body=body)

        try:
            payload = response.json()
        except ValueError as exc:
            raise BackendPayloadError(f"{method} {path} returned a non-JSON body") from exc
        if not isinstance(payload, Mapping):
            raise BackendPayloadError(f"{method} {path} returned {type(payload).__name__}, expected an object")

        self.logger.info(
            "Migration backend call succeeded",
            extra={"backend_url": url, "backend_method": method, "status_code": response.status_code},
        )
        return payload
