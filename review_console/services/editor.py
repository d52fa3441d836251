"""
Editing operations applied to a draft import record.

Every operation mutates the draft in place. Operations that need the backend
take the client as an argument so they can be exercised without Flask.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from review_console.client import MigrationBackendClient
from review_console.models import ImportRecord, IssueType, Statement

logger = logging.getLogger(__name__)

ADDED_USER_ORIGINAL_PREFIX = "-- added missing user "


class EditorError(ValueError):
    """Raised when an edit refers to a statement or issue that does not exist."""


class StaleDraftError(EditorError):
    """Raised when submitted statement texts no longer line up with the draft."""


@dataclass(frozen=True)
class BulkFixResult:
    """Outcome of a bulk remediation, used for the operator notice."""

    affected: int
    message: str


def _check_index(record: ImportRecord, idx: int, *, allow_end: bool = False) -> None:
    upper = len(record.statements) if allow_end else len(record.statements) - 1
    if idx < 0 or idx > upper:
        raise EditorError(f"Statement index {idx} is out of range.")


def update_text(record: ImportRecord, idx: int, text: str) -> bool:
    """Replace the CockroachDB text of one statement. Returns False for soft-deleted statements."""
    _check_index(record, idx)
    statement = record.statements[idx]
    if statement.deleted:
        return False
    statement.cockroach = text
    return True


def apply_text_edits(record: ImportRecord, texts: Sequence[str | None]) -> int:
    """
    Apply textarea contents posted by the editor form, one per statement.

    ``None`` entries (fields that were not submitted) are skipped. Returns the
    number of statements whose text changed.
    """
    if len(texts) != len(record.statements):
        raise StaleDraftError(
            f"Form carried {len(texts)} statements but the draft has {len(record.statements)}."
        )
    changed = 0
    for idx, text in enumerate(texts):
        if text is None:
            continue
        # Browsers submit CRLF line endings from textareas
        normalized = text.replace("\r\n", "\n")
        statement = record.statements[idx]
        if statement.deleted or statement.cockroach == normalized:
            continue
        statement.cockroach = normalized
        changed += 1
    return changed


def insert_statement(record: ImportRecord, idx: int) -> Statement:
    """Insert a blank statement so that it ends up at position ``idx``."""
    _check_index(record, idx, allow_end=True)
    statement = Statement.new()
    record.statements.insert(idx, statement)
    return statement


def soft_delete(record: ImportRecord, idx: int) -> bool:
    """Mark a statement as ignored. Returns False when it already was."""
    _check_index(record, idx)
    statement = record.statements[idx]
    if statement.deleted:
        return False
    statement.deleted = True
    return True


def delete_all_unimplemented(record: ImportRecord) -> BulkFixResult:
    """Soft-delete every statement flagged with an unimplemented feature."""
    deleted = 0
    for statement in record.statements:
        if statement.deleted or not statement.issues_of_type(IssueType.UNIMPLEMENTED):
            continue
        statement.deleted = True
        deleted += 1
    return BulkFixResult(affected=deleted, message=f"{deleted} statements deleted!")


def fix_sequence(
    record: ImportRecord,
    idx: int,
    issue_id: str,
    client: MigrationBackendClient,
) -> Statement:
    """Replace a statement with the backend's UUID-converted rewrite, keeping its soft-delete flag."""
    _check_index(record, idx)
    current = record.statements[idx]
    fixed = client.fix_sequence(current, issue_id)
    # the backend payload has no deleted flag
    fixed.deleted = current.deleted
    record.statements[idx] = fixed
    return fixed


def _sequence_targets(record: ImportRecord) -> List[Tuple[int, str]]:
    targets: List[Tuple[int, str]] = []
    for idx, statement in enumerate(record.statements):
        if statement.deleted:
            continue
        for issue in statement.issues_of_type(IssueType.SEQUENCE):
            targets.append((idx, issue.id))
    return targets


def fix_all_sequences(record: ImportRecord, client: MigrationBackendClient) -> BulkFixResult:
    """
    Convert every sequence issue to a UUID.

    Targets are collected before any request is sent; fixes for the same
    statement run one after another so each request carries the previous
    rewrite. Soft-deleted statements are skipped.
    """
    targets = _sequence_targets(record)
    for idx, issue_id in targets:
        fix_sequence(record, idx, issue_id, client)
    logger.info("Fixed %d sequence issues", len(targets), extra={"import_id": record.id})
    return BulkFixResult(affected=len(targets), message=f"{len(targets)} statements affected!")


def fix_all(record: ImportRecord, client: MigrationBackendClient) -> BulkFixResult:
    """Run every automatic remediation: sequences first, then unimplemented deletes."""
    count = fix_all_sequences(record, client).affected
    count += delete_all_unimplemented(record).affected
    return BulkFixResult(affected=count, message=f"{count} total statements affected!")


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def create_user_sql(user: str) -> str:
    return f"CREATE USER IF NOT EXISTS {quote_identifier(user)};"


def add_user(record: ImportRecord, user: str) -> BulkFixResult:
    """
    Resolve a missing role by creating it ahead of every other statement.

    The CREATE USER statement is only inserted once per user; all
    ``missing_user`` issues naming that user are dropped.
    """
    if not user:
        raise EditorError("A user name is required.")
    sql = create_user_sql(user)
    if not any(statement.cockroach == sql and not statement.deleted for statement in record.statements):
        record.statements.insert(
            0,
            Statement(original=ADDED_USER_ORIGINAL_PREFIX + user, cockroach=sql),
        )

    resolved = 0
    for statement in record.statements:
        remaining = []
        for issue in statement.issues:
            if issue.type == IssueType.MISSING_USER.value and issue.id == user:
                resolved += 1
                continue
            remaining.append(issue)
        statement.issues = remaining
    return BulkFixResult(affected=resolved, message=f'User "{user}" added; {resolved} issues resolved.')
