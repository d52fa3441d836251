"""
Read-only views derived from a draft: summary counts, border colours,
the raw export text and small text helpers used by the templates.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from markupsafe import Markup, escape

from review_console.models import IGNORED_STATEMENT_PLACEHOLDER, Issue, Statement

URL_PATTERN = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)
_NEWLINES = re.compile(r"(\r\n|\n|\r)")

_TIME_UNITS = (
    (86400, "day"),
    (3600, "hour"),
    (60, "minute"),
    (1, "second"),
)


@dataclass(frozen=True)
class StatementsSummary:
    statements: int
    fixes_required: int
    optional_audits: int

    def as_dict(self) -> dict[str, int]:
        return {
            "statements": self.statements,
            "fixes_required": self.fixes_required,
            "optional_audits": self.optional_audits,
        }


def summarize(statements: Sequence[Statement]) -> StatementsSummary:
    """Count statements and split their issues into required fixes and optional audits."""
    fixes = 0
    audits = 0
    for statement in statements:
        for issue in statement.issues:
            if issue.is_info:
                audits += 1
            else:
                fixes += 1
    return StatementsSummary(statements=len(statements), fixes_required=fixes, optional_audits=audits)


def border_variant(issues: Iterable[Issue]) -> Optional[str]:
    """Bootstrap border colour for a statement row, or None when it has no issues."""
    issues = list(issues or ())
    if not issues:
        return None
    if all(issue.is_info for issue in issues):
        return "info"
    return "danger"


def render_export(statements: Sequence[Statement]) -> str:
    chunks = []
    for statement in statements:
        original = _NEWLINES.sub(" ", statement.original.strip())
        body = IGNORED_STATEMENT_PLACEHOLDER if statement.deleted else statement.cockroach.strip()
        chunks.append(f"-- postgres: {original}\n{body}\n\n")
    return "".join(chunks)


def _link_url(part: str) -> Markup:
    match = URL_PATTERN.search(part)
    if match is None:
        return escape(part)
    url = match.group(0)
    # closing bracket of surrounding prose is not part of the link
    while url.endswith(")") and url.count(")") > url.count("("):
        url = url[:-1]
    start = match.start()
    end = start + len(url)
    link = Markup('<a href="{0}" target="_blank" rel="noreferrer">{0}</a>').format(url)
    return escape(part[:start]) + link + escape(part[end:])


def hyperlink_text(text: str) -> Markup:
    """Escape issue text and turn URLs inside whitespace-separated words into links."""
    return Markup(" ").join(_link_url(part) for part in (text or "").split(" "))


def textarea_rows(statement: Statement) -> int:
    return len(statement.cockroach.split("\n")) + 1


def time_ago(unix_nano: int, *, now: float | None = None) -> str:
    """Render a nanosecond timestamp relative to now, e.g. ``5 minutes ago``."""
    if not unix_nano:
        return "never"
    now = time.time() if now is None else now
    delta = int(now - unix_nano / 1_000_000_000)
    if delta < 0:
        return "in the future"
    if delta < 10:
        return "just now"
    for seconds, unit in _TIME_UNITS:
        if delta >= seconds:
            count = delta // seconds
            suffix = "" if count == 1 else "s"
            return f"{count} {unit}{suffix} ago"
    return "just now"
