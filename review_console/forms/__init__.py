# review_console/forms/__init__.py
"""
WTForms package
"""

from .editor import (
    ActionParseError,
    EditorAction,
    SQLExecForm,
    StatementsForm,
    UploadForm,
    parse_action,
)

__all__ = [
    "ActionParseError",
    "EditorAction",
    "SQLExecForm",
    "StatementsForm",
    "UploadForm",
    "parse_action",
]
