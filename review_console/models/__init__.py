# review_console/models/__init__.py
"""
Migration data models package
"""

from .enums import IssueLevel, IssueType
from .migration import (
    IGNORED_STATEMENT_PLACEHOLDER,
    NEW_STATEMENT_PLACEHOLDER,
    ImportRecord,
    Issue,
    MigrationResult,
    SQLResult,
    Statement,
)

__all__ = [
    "IssueLevel",
    "IssueType",
    "Issue",
    "Statement",
    "MigrationResult",
    "ImportRecord",
    "SQLResult",
    "NEW_STATEMENT_PLACEHOLDER",
    "IGNORED_STATEMENT_PLACEHOLDER",
]
