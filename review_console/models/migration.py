"""
In-memory mirrors of the migration backend's JSON payloads.

These are plain dataclasses rather than database models: the console never
persists them, and every successful round trip to the backend replaces them
wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .enums import IssueLevel, IssueType

NEW_STATEMENT_PLACEHOLDER = "-- newly added statement"
IGNORED_STATEMENT_PLACEHOLDER = "-- statement ignored"


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


@dataclass
class Issue:
    """A compatibility finding attached to a single statement."""

    level: str = ""
    text: str = ""
    id: str = ""
    type: str = ""

    @property
    def is_info(self) -> bool:
        return self.level == IssueLevel.INFO.value

    @property
    def is_unimplemented(self) -> bool:
        return self.type == IssueType.UNIMPLEMENTED.value

    @property
    def is_sequence(self) -> bool:
        return self.type == IssueType.SEQUENCE.value

    @property
    def is_missing_user(self) -> bool:
        return self.type == IssueType.MISSING_USER.value

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Issue":
        payload = _as_mapping(payload)
        return cls(
            level=_as_str(payload.get("level")),
            text=_as_str(payload.get("text")),
            id=_as_str(payload.get("id")),
            type=_as_str(payload.get("type")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "text": self.text, "id": self.id, "type": self.type}


@dataclass
class Statement:
    """A source statement paired with its editable CockroachDB translation."""

    original: str = ""
    cockroach: str = ""
    deleted: bool = False
    issues: List[Issue] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Statement":
        """Return a blank operator-inserted statement."""
        return cls(original=NEW_STATEMENT_PLACEHOLDER, cockroach="", deleted=False, issues=[])

    @property
    def display_text(self) -> str:
        """Text shown in the editor; soft-deleted statements render empty."""
        return "" if self.deleted else self.cockroach

    @property
    def placeholder(self) -> str:
        return IGNORED_STATEMENT_PLACEHOLDER if self.deleted else self.cockroach

    def issues_of_type(self, issue_type: IssueType) -> List[Issue]:
        return [issue for issue in self.issues if issue.type == issue_type.value]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Statement":
        payload = _as_mapping(payload)
        raw_issues = payload.get("issues") or []
        return cls(
            original=_as_str(payload.get("original")),
            cockroach=_as_str(payload.get("cockroach")),
            deleted=bool(payload.get("deleted", False)),
            issues=[Issue.from_dict(item) for item in raw_issues if isinstance(item, Mapping)],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "cockroach": self.cockroach,
            "deleted": self.deleted,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class MigrationResult:
    """Outcome of a conversion/execution pass reported by the backend."""

    status: str = ""
    message: str = ""
    database: str = ""
    statements: List[Statement] = field(default_factory=list)

    @property
    def has_database(self) -> bool:
        return self.database != ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MigrationResult":
        payload = _as_mapping(payload)
        raw_statements = payload.get("statements") or []
        return cls(
            status=_as_str(payload.get("status")),
            message=_as_str(payload.get("message")),
            database=_as_str(payload.get("database")),
            statements=[Statement.from_dict(item) for item in raw_statements if isinstance(item, Mapping)],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "statements": [statement.to_dict() for statement in self.statements],
            "status": self.status,
            "message": self.message,
            "database": self.database,
        }


@dataclass
class ImportRecord:
    """A single uploaded migration as tracked by the backend."""

    id: str = ""
    unix_nano: int = 0
    import_metadata: MigrationResult = field(default_factory=MigrationResult)

    @property
    def statements(self) -> List[Statement]:
        return self.import_metadata.statements

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ImportRecord":
        payload = _as_mapping(payload)
        return cls(
            id=_as_str(payload.get("id")),
            unix_nano=_as_int(payload.get("unix_nano")),
            import_metadata=MigrationResult.from_dict(payload.get("import_metadata")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "unix_nano": self.unix_nano,
            "import_metadata": self.import_metadata.to_dict(),
        }


@dataclass
class SQLResult:
    """Result of an ad-hoc statement executed against the temporary database."""

    columns: Optional[List[str]] = None
    rows: List[List[str]] = field(default_factory=list)
    error: str = ""

    @property
    def failed(self) -> bool:
        return self.error != ""

    @property
    def has_rows(self) -> bool:
        return self.columns is not None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SQLResult":
        payload = _as_mapping(payload)
        columns = payload.get("columns")
        rows = payload.get("rows") or []
        return cls(
            columns=[_as_str(column) for column in columns] if columns is not None else None,
            rows=[[_as_str(cell) for cell in row] for row in rows if isinstance(row, (list, tuple))],
            error=_as_str(payload.get("error")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"columns": self.columns, "rows": self.rows, "error": self.error}
