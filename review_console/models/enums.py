# review_console/models/enums.py
"""
Enums for migration review models.
"""

import enum


class IssueType(str, enum.Enum):
    """Issue type tags that select which remediation action is offered."""

    UNIMPLEMENTED = "unimplemented"
    SEQUENCE = "sequence"
    MISSING_USER = "missing_user"


class IssueLevel(str, enum.Enum):
    """Issue severity levels reported by the backend.

    Only ``info`` is optional; every other level requires a fix.
    """

    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
